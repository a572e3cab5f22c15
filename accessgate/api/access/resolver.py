"""
AccessGate - Authorization Resolver

Decides whether the bearer of a credential may proceed.

A valid signature only proves who the caller was when the credential was
issued. Current standing lives in the identity store, so every call
re-reads the account and rejects revoked ones. Results are never cached
across calls.
"""

import logging
from typing import Callable, Optional

from accessgate.api.auth.jwt import CredentialClaims, verify_token
from accessgate.api.db.models import Account
from accessgate.api.db.stores import IdentityStore
from accessgate.core.exceptions import AccessRevoked, InvalidCredential, Unauthenticated


logger = logging.getLogger(__name__)

MISSING_CREDENTIAL_MESSAGE = "Not authorized to access this route. No token provided."
INVALID_CREDENTIAL_MESSAGE = "Not authorized to access this route. Invalid or expired token."
ACCESS_REVOKED_MESSAGE = "Access revoked. Please contact an administrator."


class AuthorizationResolver:
    """Credential verification plus live access status lookup."""

    def __init__(
        self,
        identity_store: IdentityStore,
        verifier: Callable[..., CredentialClaims] = verify_token,
    ):
        self.identity_store = identity_store
        self.verifier = verifier

    async def authorize(
        self,
        credential: Optional[str],
        token_type: str = "access",
    ) -> Account:
        """
        Resolve a bearer credential to an account allowed to proceed.

        Args:
            credential: Raw bearer token, or None if absent
            token_type: Expected token type

        Returns:
            The current account record

        Raises:
            Unauthenticated: No credential, an invalid or expired one,
                or its subject no longer exists
            AccessRevoked: The credential is valid but the account is revoked
        """
        if not credential:
            raise Unauthenticated(MISSING_CREDENTIAL_MESSAGE)

        try:
            claims = self.verifier(credential, token_type)
        except InvalidCredential as e:
            logger.info("Credential rejected: %s", e.message)
            raise Unauthenticated(INVALID_CREDENTIAL_MESSAGE) from e

        account = await self.identity_store.find_by_identity(claims.identity)
        if account is None:
            # Same answer as a bad signature; no account enumeration
            logger.info("Credential subject %s no longer exists", claims.identity)
            raise Unauthenticated(INVALID_CREDENTIAL_MESSAGE)

        if account.is_revoked:
            logger.info("Revoked account %s presented a valid credential", account.id)
            raise AccessRevoked(ACCESS_REVOKED_MESSAGE)

        return account
