"""
Admin Service

Privileged access administration: grant and revoke.

Each operation updates the target's access status and appends exactly one
ledger event inside a single transaction. If the ledger write fails the
status change is rolled back and the operation fails; callers never see
success without an audit trail.
"""

import logging
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from accessgate.api.access.audit import AccessLogEntry, AuditAction, AuditLedger
from accessgate.api.access.rbac import AccessStatus
from accessgate.api.admin.schemas import AccountSummary
from accessgate.api.config import settings
from accessgate.api.db.models import AccessLog, Account
from accessgate.api.db.stores import IdentityStore
from accessgate.core.exceptions import (
    AuditWriteError,
    NotFound,
    SelfRevocationForbidden,
    StorageError,
    ValidationError,
)


logger = logging.getLogger(__name__)


class AccessAdminService:
    """Service for access administration."""

    def __init__(
        self,
        db: AsyncSession,
        identity_store: Optional[IdentityStore] = None,
        ledger: Optional[AuditLedger] = None,
    ):
        """Initialize service with database session."""
        self.db = db
        self.identity_store = identity_store or IdentityStore(db)
        self.ledger = ledger or AuditLedger(db)

    # ==================== Access Changes ====================

    async def grant_access(
        self,
        acting: Account,
        target_id: Union[UUID, str, None],
        reason: Optional[str] = None,
    ) -> AccountSummary:
        """
        Restore a target account's access.

        Raises:
            ValidationError: If target_id is missing or malformed
            NotFound: If the target does not exist
            AuditWriteError: If the ledger entry could not be written
        """
        target = await self._load_target(target_id)
        return await self._change_access(
            acting,
            target,
            AccessStatus.ACTIVE,
            AuditAction.GRANTED,
            reason or settings.DEFAULT_GRANT_REASON,
        )

    async def revoke_access(
        self,
        acting: Account,
        target_id: Union[UUID, str, None],
        reason: Optional[str] = None,
    ) -> AccountSummary:
        """
        Revoke a target account's access, effective on its next request.

        Revoking an already revoked account succeeds and is logged again.

        Raises:
            ValidationError: If target_id is missing or malformed
            NotFound: If the target does not exist
            SelfRevocationForbidden: If the target is the acting account
            AuditWriteError: If the ledger entry could not be written
        """
        target = await self._load_target(target_id)

        if target.id == acting.id:
            raise SelfRevocationForbidden("You cannot revoke your own access")

        return await self._change_access(
            acting,
            target,
            AccessStatus.REVOKED,
            AuditAction.REVOKED,
            reason or settings.DEFAULT_REVOKE_REASON,
        )

    # ==================== Read Views ====================

    async def list_accounts(self) -> List[Account]:
        """Get all accounts, newest first."""
        return await self.identity_store.list_accounts()

    async def get_access_history(self, limit: Optional[int] = None) -> List[AccessLogEntry]:
        """Get recent grant/revoke events, newest first."""
        return await self.ledger.list_recent(limit)

    # ==================== Internals ====================

    async def _load_target(self, target_id: Union[UUID, str, None]) -> Account:
        if target_id is None or (isinstance(target_id, str) and not target_id.strip()):
            raise ValidationError("User ID is required")

        if not isinstance(target_id, UUID):
            try:
                target_id = UUID(target_id.strip())
            except ValueError as e:
                raise ValidationError("User ID is invalid", details={"user_id": target_id}) from e

        target = await self.identity_store.find_by_identity(target_id)
        if target is None:
            raise NotFound("User not found", details={"user_id": str(target_id)})
        return target

    async def _change_access(
        self,
        acting: Account,
        target: Account,
        new_status: AccessStatus,
        action: AuditAction,
        reason: str,
    ) -> AccountSummary:
        # Snapshots first; a rollback expires every loaded instance
        target_id, target_email = target.id, target.email
        actor_id, actor_email = acting.id, acting.email

        target.access_status = new_status.value
        try:
            await self.identity_store.save(target)
            await self.ledger.append(
                AccessLog(
                    subject_id=target_id,
                    subject_email=target_email,
                    action=action.value,
                    actor_id=actor_id,
                    actor_email=actor_email,
                    reason=reason,
                )
            )
            await self.db.commit()
        except AuditWriteError:
            await self.db.rollback()
            logger.error(
                "Access %s for %s by %s not applied: audit trail write failed",
                action.value, target_id, actor_id,
            )
            raise
        except StorageError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(
                "Access %s for %s by %s failed to commit",
                action.value, target_id, actor_id,
            )
            raise StorageError(
                "Access change could not be committed",
                details={"user_id": str(target_id), "action": action.value},
            ) from e

        logger.info(
            "Access %s for %s (%s) by %s (%s)",
            action.value, target_id, target_email, actor_id, actor_email,
        )

        return AccountSummary(
            user_id=target_id,
            email=target_email,
            access_status=new_status,
        )
