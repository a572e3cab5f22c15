"""
AccessGate - Centralized Exception Hierarchy
============================================

Structured exception types for the authorization decision path and the
access audit ledger.

Exception Categories:
    - Unauthenticated: No, invalid or expired credential, or unknown subject
    - AccessRevoked: Valid credential, but the live status check failed
    - Forbidden: Valid session, wrong role
    - ValidationError: Missing or malformed required input
    - NotFound: Target account does not exist
    - SelfRevocationForbidden: Actor targets itself in a revoke
    - ImmutableViolation: Attempted mutation of an audit record
    - StorageError: Operational failure underneath any step

None of these are retried automatically. The HTTP layer renders them
using ``status_code`` and ``code``.
"""

from typing import Any, Dict, Optional


class AccessControlError(Exception):
    """
    Base exception for all AccessGate errors.

    Attributes:
        message: Human-readable error description
        code: Error code for programmatic handling
        details: Optional dict with additional context
        status_code: HTTP status the surrounding layer should answer with
    """

    status_code: int = 400
    default_code: str = "access_control_error"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Render as the error envelope returned to callers."""
        return {
            "success": False,
            "code": self.code,
            "message": self.message,
        }


# =============================================================================
# AUTHENTICATION & AUTHORIZATION
# =============================================================================


class InvalidCredential(AccessControlError):
    """Bearer credential is malformed, badly signed, or expired."""

    status_code = 401
    default_code = "invalid_credential"


class Unauthenticated(AccessControlError):
    """
    Caller could not be authenticated.

    Unknown identities and bad credentials share this type and message so
    callers cannot enumerate accounts.
    """

    status_code = 401
    default_code = "unauthenticated"


class AccessRevoked(AccessControlError):
    """Credential is valid but the account's access has been revoked."""

    status_code = 403
    default_code = "access_revoked"


class Forbidden(AccessControlError):
    """Authenticated account lacks the role required for the operation."""

    status_code = 403
    default_code = "forbidden"


# =============================================================================
# ADMINISTRATION ERRORS
# =============================================================================


class ValidationError(AccessControlError):
    """Required input is missing or malformed."""

    status_code = 400
    default_code = "validation_error"


class NotFound(AccessControlError):
    """Target account does not exist."""

    status_code = 404
    default_code = "not_found"


class SelfRevocationForbidden(AccessControlError):
    """An administrator attempted to revoke their own access."""

    status_code = 400
    default_code = "self_revocation_forbidden"


class ImmutableViolation(AccessControlError):
    """An existing audit record was targeted for modification or deletion."""

    status_code = 409
    default_code = "immutable_violation"


# =============================================================================
# OPERATIONAL ERRORS
# =============================================================================


class StorageError(AccessControlError):
    """
    Identity store or audit ledger failed underneath an operation.

    Distinct from the authorization taxonomy; the message shown to callers
    stays generic.
    """

    status_code = 500
    default_code = "storage_error"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "code": self.code,
            "message": "Server error while processing the request",
        }


class AuditWriteError(StorageError):
    """The audit trail entry for an access change could not be written."""

    default_code = "audit_write_failed"
