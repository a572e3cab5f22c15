"""
AccessGate Test Configuration
=============================

Pytest fixtures for unit tests: an isolated in-memory database and
account factories.
"""

import uuid
from typing import AsyncGenerator

import bcrypt
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from accessgate.api.db.models import Account, Base


@pytest_asyncio.fixture
async def async_engine():
    """Create async SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests."""
    async_session = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def make_account(db_session):
    """Factory for persisted accounts."""

    async def _make(
        email: str,
        role: str = "USER",
        access_status: str = "active",
        password: str = "secret123",
    ) -> Account:
        account = Account(
            id=uuid.uuid4(),
            email=email,
            password_hash=bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=4)).decode(),
            role=role,
            access_status=access_status,
        )
        db_session.add(account)
        await db_session.commit()
        await db_session.refresh(account)
        return account

    return _make


@pytest_asyncio.fixture
async def admin_account(make_account) -> Account:
    """Active administrator."""
    return await make_account("admin@accessgate.dev", role="ADMIN")


@pytest_asyncio.fixture
async def user_account(make_account) -> Account:
    """Active regular user."""
    return await make_account("u1@accessgate.dev", role="USER")
