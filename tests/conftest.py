"""
Global test fixtures and configuration.

This module provides base fixtures for all tests:
- In-memory SQLite database, recreated for every test
- Database session shared by the test and the app under test
- HTTP client with dependency overrides
- Base data fixtures (user, auth_headers)
"""

import os
import pytest
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables BEFORE importing app
os.environ["MODE"] = "test"
os.environ["DATABASE_INTERNAL_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DATABASE_EXTERNAL_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CLINIC_TIMEZONE"] = "UTC"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.pop("SENTRY_DSN", None)

from clinica.main import app
from clinica.api.dependencies import get_db
from clinica.db.base import Base

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# ==================== Database ====================

@pytest.fixture(scope="function")
async def test_engine():
    """
    Fresh in-memory database per test.

    StaticPool keeps a single connection so every session sees the same database.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False  # Set to True for SQL debugging
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Session for one test.

    Ledger mutations commit, so isolation comes from the per-test database rather
    than an outer rollback. A failed mutation rolls back and expires every loaded
    object: keep ids in local variables before exercising failures.
    """
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )
    session = session_factory()

    yield session

    await session.close()


# ==================== FastAPI Client ====================

@pytest.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client for testing FastAPI endpoints.

    Overrides get_db so the app uses the test session.
    """

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ==================== Base Data Fixtures ====================

@pytest.fixture
async def user(db_session: AsyncSession):
    """Staff user with password "Password123!"."""
    from tests.factories.user import UserFactory
    user = await UserFactory.create_async(db_session)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def auth_headers(user):
    """
    Authentication headers for the staff user.
    """
    from clinica.core.security import create_access_token

    token = create_access_token(
        data={"sub": str(user.id)},
        token_version=user.token_version
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def coordinator(db_session: AsyncSession):
    from clinica.services.coordinator import LedgerCoordinator
    return LedgerCoordinator(db_session)


@pytest.fixture
async def ledger_client(db_session: AsyncSession):
    """Client without packages."""
    from tests.factories.client import ClientFactory
    client = await ClientFactory.create_async(db_session, name="María López")
    await db_session.commit()
    return client


# ==================== Helper Fixtures ====================

@pytest.fixture
def anyio_backend():
    """
    Configure anyio backend for httpx AsyncClient.
    """
    return "asyncio"
