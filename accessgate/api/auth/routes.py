"""
Authentication Routes

API endpoints for registration, login and token refresh.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from accessgate.api.db.session import get_db
from accessgate.api.auth.service import AuthService
from accessgate.api.auth.schemas import (
    UserRegisterRequest,
    UserLoginRequest,
    RefreshTokenRequest,
    AuthResponse,
    TokenResponse,
    UserResponse,
)


router = APIRouter()


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    """Dependency to get auth service."""
    return AuthService(db)


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    data: UserRegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """
    Register a new account. Access starts active.

    - **email**: Valid email address (must be unique)
    - **password**: Minimum length from configuration
    - **role**: USER (default) or ADMIN when admin signup is enabled
    - **full_name**: Optional display name
    """
    account = await auth_service.register(data)
    return UserResponse.model_validate(account)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login and get tokens",
)
async def login(
    data: UserLoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Authenticate with email and password.

    Returns access token, refresh token, and account data.
    Revoked accounts cannot log in.
    """
    account = await auth_service.authenticate(data.email, data.password)
    access_token, refresh_token, expires_in = auth_service.create_tokens(account)

    return AuthResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=expires_in,
        user=UserResponse.model_validate(account),
    )


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh access token",
)
async def refresh(
    data: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    Get a new token pair using a refresh token.

    The refresh token must be valid and its account must still have access.
    """
    access_token, refresh_token, expires_in = await auth_service.refresh_tokens(
        data.refresh_token
    )

    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=expires_in,
    )
