"""
User Routes

API endpoints for the current account.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from accessgate.api.access.rbac import AccessStatus, Role
from accessgate.api.auth.schemas import UserResponse
from accessgate.api.db.models import Account
from accessgate.api.dependencies import get_current_account, get_user_account


router = APIRouter()


class AccessStatusData(BaseModel):
    """Current access standing."""

    email: str
    role: Role
    access_status: AccessStatus
    message: str


class AccessStatusResponse(BaseModel):
    """Access status envelope."""

    success: bool = True
    data: AccessStatusData


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
async def get_me(
    account: Account = Depends(get_current_account),
) -> UserResponse:
    """
    Get the current authorized account.

    Requires a valid access token for an account with active access.
    """
    return UserResponse.model_validate(account)


@router.get(
    "/status",
    response_model=AccessStatusResponse,
    summary="Get current access status",
)
async def get_status(
    account: Account = Depends(get_user_account),
) -> AccessStatusResponse:
    """
    Get the current user's access status. Regular users only.

    Revoked accounts never reach this handler; they are answered with 403
    by the resolver.
    """
    return AccessStatusResponse(
        data=AccessStatusData(
            email=account.email,
            role=account.role,
            access_status=account.access_status,
            message="You have active access to the system",
        )
    )
