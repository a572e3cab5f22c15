"""
Admin Routes

API endpoints for access administration.
All endpoints require an authorized account with the ADMIN role.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from accessgate.api.db.session import get_db
from accessgate.api.db.models import Account
from accessgate.api.dependencies import get_admin_account
from accessgate.api.admin.schemas import (
    AccessChangeRequest,
    AccessChangeResponse,
    AccessHistoryResponse,
    AccountListResponse,
    AccountResponse,
)
from accessgate.api.admin.service import AccessAdminService


router = APIRouter()


def get_admin_service(db: AsyncSession = Depends(get_db)) -> AccessAdminService:
    """Dependency to get admin service."""
    return AccessAdminService(db)


@router.get(
    "/users",
    response_model=AccountListResponse,
    summary="List all users",
)
async def list_users(
    admin: Account = Depends(get_admin_account),
    service: AccessAdminService = Depends(get_admin_service),
) -> AccountListResponse:
    """Get all accounts with their access status, newest first."""
    accounts = await service.list_accounts()
    return AccountListResponse(
        count=len(accounts),
        data=[AccountResponse.model_validate(a) for a in accounts],
    )


@router.post(
    "/grant-access",
    response_model=AccessChangeResponse,
    summary="Grant access to a user",
)
async def grant_access(
    data: AccessChangeRequest,
    admin: Account = Depends(get_admin_account),
    service: AccessAdminService = Depends(get_admin_service),
) -> AccessChangeResponse:
    """
    Restore a user's access.

    - **user_id**: Target account id (required)
    - **reason**: Optional free text for the audit trail
    """
    summary = await service.grant_access(admin, data.user_id, data.reason)
    return AccessChangeResponse(
        message="Access granted successfully",
        data=summary,
    )


@router.post(
    "/revoke-access",
    response_model=AccessChangeResponse,
    summary="Revoke access from a user",
)
async def revoke_access(
    data: AccessChangeRequest,
    admin: Account = Depends(get_admin_account),
    service: AccessAdminService = Depends(get_admin_service),
) -> AccessChangeResponse:
    """
    Revoke a user's access.

    Takes effect on the user's next request, even with an unexpired token.
    Administrators cannot revoke themselves.
    """
    summary = await service.revoke_access(admin, data.user_id, data.reason)
    return AccessChangeResponse(
        message="Access revoked successfully. User will be logged out on next request.",
        data=summary,
    )


@router.get(
    "/access-history",
    response_model=AccessHistoryResponse,
    summary="Get access grant/revoke history",
)
async def access_history(
    admin: Account = Depends(get_admin_account),
    service: AccessAdminService = Depends(get_admin_service),
    limit: Optional[int] = Query(None, ge=1, description="Maximum entries (capped server-side)"),
) -> AccessHistoryResponse:
    """Get the most recent access changes, newest first."""
    entries = await service.get_access_history(limit)
    return AccessHistoryResponse(count=len(entries), data=entries)
