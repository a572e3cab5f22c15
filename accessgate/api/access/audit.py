"""
AccessGate - Audit Ledger

Append-only trail of every access grant and revocation.

The ledger exposes exactly two operations: ``append`` a brand-new event
and ``list_recent`` events newest first. Entries handed back to callers
are frozen snapshots; there is no update or delete path.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from sqlalchemy import desc, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from accessgate.api.config import settings
from accessgate.api.db.models import AccessLog
from accessgate.core.exceptions import AuditWriteError, ImmutableViolation, StorageError


logger = logging.getLogger(__name__)


# ============================================================
# Audit Event Types
# ============================================================


class AuditAction(str, Enum):
    """Access changes recorded in the ledger."""

    GRANTED = "granted"
    REVOKED = "revoked"


# ============================================================
# Read-only Entries
# ============================================================


class AccountRef(BaseModel):
    """Current view of an account referenced by an audit entry."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    email: str
    role: str


class AccessLogEntry(BaseModel):
    """Frozen snapshot of a ledger event."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    subject_id: UUID
    subject_email: str
    action: AuditAction
    actor_id: UUID
    actor_email: str
    reason: str
    timestamp: datetime
    subject: Optional[AccountRef] = None
    actor: Optional[AccountRef] = None


# ============================================================
# Audit Ledger
# ============================================================


class AuditLedger:
    """
    Append-only storage for access change events.

    Writes are flushed, not committed, so the caller can make the audit
    entry part of the same unit of work as the status change.
    """

    def __init__(self, db: AsyncSession, max_limit: Optional[int] = None):
        self.db = db
        self.max_limit = max_limit or settings.AUDIT_HISTORY_LIMIT

    async def append(self, event: AccessLog) -> int:
        """
        Append a new event.

        Returns:
            The new event's id

        Raises:
            ImmutableViolation: If the event has already been stored
            AuditWriteError: If the write fails
        """
        if inspect(event).has_identity or await self._is_stored(event.id):
            raise ImmutableViolation(
                "Access logs cannot be modified",
                details={"event_id": event.id},
            )

        self.db.add(event)
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.exception(
                "Audit append failed: %s %s by %s",
                event.action, event.subject_id, event.actor_id,
            )
            raise AuditWriteError(
                "Access log could not be written",
                details={
                    "subject_id": str(event.subject_id),
                    "actor_id": str(event.actor_id),
                    "action": event.action,
                },
            ) from e

        logger.info(
            "AUDIT %s subject=%s actor=%s event_id=%s",
            event.action, event.subject_id, event.actor_id, event.id,
        )
        return event.id

    async def list_recent(self, limit: Optional[int] = None) -> List[AccessLogEntry]:
        """Get the most recent events, newest first."""
        limit = self._clamp(limit)

        query = (
            select(AccessLog)
            .options(selectinload(AccessLog.subject), selectinload(AccessLog.actor))
            .order_by(desc(AccessLog.timestamp), desc(AccessLog.id))
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.exception("Audit listing failed")
            raise StorageError("Access history could not be read") from e

        return [AccessLogEntry.model_validate(row) for row in result.scalars().all()]

    async def _is_stored(self, event_id: Optional[int]) -> bool:
        if event_id is None:
            return False
        try:
            existing = await self.db.scalar(
                select(AccessLog.id).where(AccessLog.id == event_id)
            )
        except SQLAlchemyError as e:
            logger.exception("Audit lookup failed for event %s", event_id)
            raise AuditWriteError(
                "Access log could not be written",
                details={"event_id": event_id},
            ) from e
        return existing is not None

    def _clamp(self, limit: Optional[int]) -> int:
        if limit is None or limit > self.max_limit:
            return self.max_limit
        return max(limit, 1)
