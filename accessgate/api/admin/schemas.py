"""
Admin Schemas

Pydantic models for access administration.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from accessgate.api.access.audit import AccessLogEntry
from accessgate.api.access.rbac import AccessStatus, Role


# ==================== Accounts ====================


class AccountResponse(BaseModel):
    """Account details for admin view. Never includes the password hash."""

    id: UUID
    email: str
    full_name: Optional[str] = None
    role: Role
    access_status: AccessStatus
    created_at: datetime
    updated_at: datetime
    last_login_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AccountListResponse(BaseModel):
    """All accounts with their access status."""

    success: bool = True
    count: int
    data: List[AccountResponse]


# ==================== Access Changes ====================


class AccessChangeRequest(BaseModel):
    """Grant or revoke request.

    ``user_id`` is optional at the schema level so a missing value is
    reported by the service as a validation error.
    """

    user_id: Optional[str] = Field(None, description="Target account id")
    reason: Optional[str] = Field(None, max_length=500)


class AccountSummary(BaseModel):
    """Outcome of an access change."""

    user_id: UUID
    email: str
    access_status: AccessStatus


class AccessChangeResponse(BaseModel):
    """Access change envelope."""

    success: bool = True
    message: str
    data: AccountSummary


# ==================== History ====================


class AccessHistoryResponse(BaseModel):
    """Recent access changes, newest first."""

    success: bool = True
    count: int
    data: List[AccessLogEntry]
