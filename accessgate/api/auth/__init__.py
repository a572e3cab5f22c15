"""Authentication module."""

from accessgate.api.auth.jwt import CredentialClaims, create_access_token, verify_token

__all__ = ["CredentialClaims", "create_access_token", "verify_token"]
