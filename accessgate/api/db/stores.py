"""
Identity Store

Key-value access to account records over the async session. Lookups are
never served from session state; each call reads the current row.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from accessgate.api.db.models import Account
from accessgate.core.exceptions import StorageError


logger = logging.getLogger(__name__)


class IdentityStore:
    """Account lookups and field updates."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_identity(self, identity: UUID) -> Optional[Account]:
        """Get the current account record for an identity, or None."""
        query = (
            select(Account)
            .where(Account.id == identity)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.exception("Identity lookup failed for %s", identity)
            raise StorageError(
                "Identity store lookup failed",
                details={"identity": str(identity)},
            ) from e
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Optional[Account]:
        """Get an account by email address."""
        try:
            result = await self.db.execute(
                select(Account)
                .where(Account.email == email)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            logger.exception("Identity lookup by email failed")
            raise StorageError("Identity store lookup failed") from e
        return result.scalar_one_or_none()

    async def list_accounts(self) -> List[Account]:
        """Get all accounts, newest first."""
        try:
            result = await self.db.execute(
                select(Account).order_by(desc(Account.created_at))
            )
        except SQLAlchemyError as e:
            logger.exception("Account listing failed")
            raise StorageError("Identity store listing failed") from e
        return list(result.scalars().all())

    async def save(self, account: Account) -> None:
        """
        Stage an account write.

        Flushes without committing; the caller owns the unit of work.
        """
        self.db.add(account)
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.exception("Account save failed for %s", account.id)
            raise StorageError(
                "Identity store update failed",
                details={"identity": str(account.id)},
            ) from e
