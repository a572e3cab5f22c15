"""
SQLAlchemy ORM Models

Database models for accounts and the access audit ledger.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
    event,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from accessgate.core.exceptions import ImmutableViolation


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


class Account(Base):
    """Account record: identity, role and current access status."""

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("role IN ('ADMIN', 'USER')", name="ck_accounts_role"),
        CheckConstraint(
            "access_status IN ('active', 'revoked')", name="ck_accounts_access_status"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String(200))

    # Fixed at creation
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="USER")

    # Single source of truth for authorization: active, revoked
    access_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active", index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    @property
    def is_revoked(self) -> bool:
        """Check if the account's access has been revoked."""
        return self.access_status == "revoked"

    def __repr__(self) -> str:
        return f"<Account {self.email} {self.role} {self.access_status}>"


class AccessLog(Base):
    """
    Append-only record of a grant or revoke.

    Email columns are snapshots taken when the event was written and do
    not follow later changes to either account.
    """

    __tablename__ = "access_logs"
    __table_args__ = (
        CheckConstraint("action IN ('granted', 'revoked')", name="ck_access_logs_action"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    subject_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("accounts.id"), nullable=False, index=True
    )
    subject_email: Mapped[str] = mapped_column(String(255), nullable=False)

    action: Mapped[str] = mapped_column(String(20), nullable=False)  # granted, revoked

    actor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("accounts.id"), nullable=False
    )
    actor_email: Mapped[str] = mapped_column(String(255), nullable=False)

    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )

    # Lookup only
    subject: Mapped["Account"] = relationship(
        "Account", foreign_keys=[subject_id], viewonly=True, lazy="raise"
    )
    actor: Mapped["Account"] = relationship(
        "Account", foreign_keys=[actor_id], viewonly=True, lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<AccessLog {self.id} {self.action} {self.subject_email} by {self.actor_email}>"


@event.listens_for(AccessLog, "before_update")
def _reject_access_log_update(mapper, connection, target: AccessLog) -> None:
    raise ImmutableViolation(
        "Access logs cannot be modified",
        details={"event_id": target.id},
    )


@event.listens_for(AccessLog, "before_delete")
def _reject_access_log_delete(mapper, connection, target: AccessLog) -> None:
    raise ImmutableViolation(
        "Access logs cannot be deleted",
        details={"event_id": target.id},
    )
