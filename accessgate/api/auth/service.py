"""
Authentication Service

Business logic for registration, login and token refresh.
"""

import logging
from datetime import datetime, timezone
from typing import Tuple

import bcrypt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from accessgate.api.access.rbac import AccessStatus, Role
from accessgate.api.access.resolver import ACCESS_REVOKED_MESSAGE, AuthorizationResolver
from accessgate.api.auth.jwt import (
    create_access_token,
    create_refresh_token,
    get_token_expiry_seconds,
)
from accessgate.api.auth.schemas import UserRegisterRequest
from accessgate.api.config import settings
from accessgate.api.db.models import Account
from accessgate.api.db.stores import IdentityStore
from accessgate.core.exceptions import (
    AccessRevoked,
    Forbidden,
    StorageError,
    Unauthenticated,
    ValidationError,
)


logger = logging.getLogger(__name__)

# Compared against when the email is unknown so both paths cost one bcrypt check
_DUMMY_HASH = bcrypt.hashpw(b"accessgate-dummy-password", bcrypt.gensalt()).decode()

# bcrypt only accepts this many input bytes
BCRYPT_MAX_PASSWORD_BYTES = 72


class AuthService:
    """Authentication service with password and JWT management."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.identity_store = IdentityStore(db)

    async def register(self, data: UserRegisterRequest) -> Account:
        """
        Register a new account with active access.

        Args:
            data: Registration data

        Returns:
            Created account

        Raises:
            ValidationError: If the password is too short or email exists
            Forbidden: If ADMIN self-registration is disabled
        """
        if len(data.password) < settings.PASSWORD_MIN_LENGTH:
            raise ValidationError(
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
            )

        if len(data.password.encode()) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes"
            )

        if data.role == Role.ADMIN and not settings.ALLOW_ADMIN_SIGNUP:
            raise Forbidden("Admin accounts cannot be self-registered")

        existing = await self.identity_store.find_by_email(data.email)
        if existing:
            raise ValidationError("Email already registered")

        password_hash = bcrypt.hashpw(
            data.password.encode(), bcrypt.gensalt()
        ).decode()

        account = Account(
            email=data.email,
            password_hash=password_hash,
            full_name=data.full_name,
            role=data.role.value,
            access_status=AccessStatus.ACTIVE.value,
        )

        self.db.add(account)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ValidationError("Email already registered") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Registration failed")
            raise StorageError("Account could not be created") from e

        await self.db.refresh(account)
        logger.info("Registered %s account %s", account.role, account.id)
        return account

    async def authenticate(self, email: str, password: str) -> Account:
        """
        Authenticate an account with email/password.

        Raises:
            Unauthenticated: If the email is unknown or the password is wrong
            AccessRevoked: If the account's access has been revoked
        """
        account = await self.identity_store.find_by_email(email)

        candidate = password.encode()
        if len(candidate) > BCRYPT_MAX_PASSWORD_BYTES:
            # Could never have been registered; spend the same bcrypt cost anyway
            bcrypt.checkpw(candidate[:BCRYPT_MAX_PASSWORD_BYTES], _DUMMY_HASH.encode())
            raise Unauthenticated("Invalid email or password")

        password_hash = account.password_hash if account else _DUMMY_HASH
        if not bcrypt.checkpw(candidate, password_hash.encode()) or account is None:
            raise Unauthenticated("Invalid email or password")

        if account.is_revoked:
            raise AccessRevoked(ACCESS_REVOKED_MESSAGE)

        account.last_login_at = datetime.now(timezone.utc)
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Login timestamp update failed for %s", account.id)
            raise StorageError("Login could not be recorded") from e

        return account

    def create_tokens(self, account: Account) -> Tuple[str, str, int]:
        """
        Create access and refresh tokens for an account.

        Returns:
            Tuple of (access_token, refresh_token, expires_in_seconds)
        """
        access_token = create_access_token(
            user_id=account.id,
            email=account.email,
            role=account.role,
        )

        refresh_token = create_refresh_token(account.id)
        expires_in = get_token_expiry_seconds()

        return access_token, refresh_token, expires_in

    async def refresh_tokens(self, refresh_token: str) -> Tuple[str, str, int]:
        """
        Generate new tokens from a refresh token.

        The refresh token's account goes through the same live status
        check as any access token.

        Raises:
            Unauthenticated: If the refresh token is invalid or its account is gone
            AccessRevoked: If the account's access has been revoked
        """
        resolver = AuthorizationResolver(self.identity_store)
        account = await resolver.authorize(refresh_token, token_type="refresh")
        return self.create_tokens(account)
