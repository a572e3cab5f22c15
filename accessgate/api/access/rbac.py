"""
AccessGate - Role Gate

Roles, access statuses and the role check layered on top of the
authorization resolver. The check is a pure comparison with no I/O.
"""

from enum import Enum
from typing import Dict

from accessgate.api.db.models import Account
from accessgate.core.exceptions import Forbidden


# ============================================================
# Roles & Statuses
# ============================================================


class Role(str, Enum):
    """Account roles. Fixed at account creation."""

    ADMIN = "ADMIN"
    USER = "USER"


class AccessStatus(str, Enum):
    """Current standing of an account."""

    ACTIVE = "active"
    REVOKED = "revoked"


ROLE_DENIAL_MESSAGES: Dict[Role, str] = {
    Role.ADMIN: "Access denied. Admin privileges required.",
    Role.USER: "Access denied. This endpoint is for regular users only.",
}


# ============================================================
# Role Checks
# ============================================================


def has_role(account: Account, role: Role) -> bool:
    """Check if an account holds a specific role."""
    return account.role == role.value


def require_role(account: Account, expected_role: Role) -> None:
    """
    Require an already-authorized account to hold a role.

    Raises:
        Forbidden: If the account's role does not match
    """
    if not has_role(account, expected_role):
        raise Forbidden(
            ROLE_DENIAL_MESSAGES[expected_role],
            details={"required_role": expected_role.value, "role": account.role},
        )
