"""
Test Configuration and Fixtures

Shared fixtures for AccessGate API tests.
Provides isolated database, app with overridden session, accounts and tokens.
"""

import uuid
from typing import AsyncGenerator

import bcrypt
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from accessgate.api.main import create_app
from accessgate.api.db.models import Base, Account
from accessgate.api.db.session import get_db
from accessgate.api.auth.jwt import create_access_token


# ==================== Database Fixtures ====================


@pytest_asyncio.fixture(scope="function")
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


@pytest_asyncio.fixture(scope="function")
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


# ==================== Application Fixtures ====================


@pytest.fixture(scope="function")
def app(db_session) -> FastAPI:
    """Create FastAPI app with test database."""
    test_app = create_app()

    async def override_get_db():
        yield db_session

    test_app.dependency_overrides[get_db] = override_get_db
    return test_app


@pytest_asyncio.fixture(scope="function")
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ==================== Account Fixtures ====================


async def _create_account(
    db_session: AsyncSession,
    email: str,
    role: str,
    password: str,
    access_status: str = "active",
) -> Account:
    account = Account(
        id=uuid.uuid4(),
        email=email,
        password_hash=bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=4)).decode(),
        full_name=email.split("@")[0].title(),
        role=role,
        access_status=access_status,
    )
    db_session.add(account)
    await db_session.commit()
    await db_session.refresh(account)
    return account


@pytest_asyncio.fixture(scope="function")
async def test_user(db_session) -> Account:
    """Create an active regular user."""
    return await _create_account(db_session, "user@accessgate.dev", "USER", "UserPassword1")


@pytest_asyncio.fixture(scope="function")
async def admin_user(db_session) -> Account:
    """Create an active administrator."""
    return await _create_account(db_session, "admin@accessgate.dev", "ADMIN", "AdminPassword1")


@pytest_asyncio.fixture(scope="function")
async def revoked_user(db_session) -> Account:
    """Create a user whose access is already revoked."""
    return await _create_account(
        db_session, "revoked@accessgate.dev", "USER", "RevokedPassword1", access_status="revoked"
    )


@pytest.fixture(scope="function")
def user_token(test_user) -> str:
    """Create JWT token for test user."""
    return create_access_token(
        user_id=test_user.id,
        email=test_user.email,
        role=test_user.role,
    )


@pytest.fixture(scope="function")
def admin_token(admin_user) -> str:
    """Create JWT token for admin user."""
    return create_access_token(
        user_id=admin_user.id,
        email=admin_user.email,
        role=admin_user.role,
    )


@pytest.fixture(scope="function")
def auth_headers(user_token) -> dict:
    """Authorization headers for regular user."""
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture(scope="function")
def admin_headers(admin_token) -> dict:
    """Authorization headers for admin user."""
    return {"Authorization": f"Bearer {admin_token}"}
