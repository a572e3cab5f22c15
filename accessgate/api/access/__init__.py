"""
AccessGate - Access & Authority Module

Authorization resolution, role gating and the access audit ledger.

Components:
- resolver.py: Credential verification plus live access status check
- rbac.py: Roles, access statuses, role gate
- audit.py: Append-only access ledger

Usage:
    from accessgate.api.access.resolver import AuthorizationResolver
    from accessgate.api.access.rbac import Role, require_role
    from accessgate.api.access.audit import AuditLedger, AuditAction
"""

from accessgate.api.access.rbac import (
    Role,
    AccessStatus,
    ROLE_DENIAL_MESSAGES,
    has_role,
    require_role,
)

from accessgate.api.access.audit import (
    AuditLedger,
    AuditAction,
    AccessLogEntry,
    AccountRef,
)

from accessgate.api.access.resolver import AuthorizationResolver

__all__ = [
    # Roles
    "Role",
    "AccessStatus",
    "ROLE_DENIAL_MESSAGES",
    "has_role",
    "require_role",

    # Audit
    "AuditLedger",
    "AuditAction",
    "AccessLogEntry",
    "AccountRef",

    # Resolution
    "AuthorizationResolver",
]
