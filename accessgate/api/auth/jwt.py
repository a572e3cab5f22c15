"""
JWT Token Handling

Create and verify bearer credentials. Verification is a pure function of
the token and the signing secret; it never touches storage.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID, uuid4

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from accessgate.api.config import settings
from accessgate.core.exceptions import InvalidCredential


@dataclass(frozen=True)
class CredentialClaims:
    """Claims extracted from a verified credential."""

    identity: UUID
    token_type: str
    issued_at: datetime
    expires_at: datetime
    email: Optional[str] = None
    role: Optional[str] = None


def create_access_token(
    user_id: UUID,
    email: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a new access token.

    Args:
        user_id: Account identity
        email: Account email
        role: Account role at issuance (informational only)
        expires_delta: Override for the configured lifetime

    Returns:
        Encoded JWT access token
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "iat": now,
        "exp": expire,
        "type": "access",
    }

    return jwt.encode(
        payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )


def create_refresh_token(user_id: UUID, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a new refresh token.

    Args:
        user_id: Account identity
        expires_delta: Override for the configured lifetime

    Returns:
        Encoded JWT refresh token
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))

    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": expire,
        "type": "refresh",
        "jti": str(uuid4()),
    }

    return jwt.encode(
        payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )


def verify_token(token: str, token_type: str = "access") -> CredentialClaims:
    """
    Verify and decode a JWT token.

    Args:
        token: JWT token string
        token_type: Expected token type ("access" or "refresh")

    Returns:
        Claims of the verified credential

    Raises:
        InvalidCredential: If the token is malformed, badly signed,
            expired, or of the wrong type
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp", "iat"]},
        )
    except ExpiredSignatureError as e:
        raise InvalidCredential("Token has expired") from e
    except InvalidTokenError as e:
        raise InvalidCredential("Token is invalid") from e

    if payload.get("type") != token_type:
        raise InvalidCredential(f"Expected a {token_type} token")

    try:
        identity = UUID(str(payload["sub"]))
    except ValueError as e:
        raise InvalidCredential("Token subject is malformed") from e

    try:
        issued_at = datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise InvalidCredential("Token timestamps are out of range") from e

    return CredentialClaims(
        identity=identity,
        token_type=token_type,
        issued_at=issued_at,
        expires_at=expires_at,
        email=payload.get("email"),
        role=payload.get("role"),
    )


def get_token_expiry_seconds() -> int:
    """Get access token expiry in seconds."""
    return settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
