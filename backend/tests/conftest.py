"""
Backend — Test Configuration (conftest.py)
============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (real SQLite database, mocked DB
       session, API client, users with tokens).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── db_engine: fresh SQLite file database with all tables created
    │   └── session_factory → db_session
    │       └── superuser / normal_user (+ *_token_headers)
    ├── client: HTTPX AsyncClient with get_db_session overridden
    └── mock_db_session: AsyncMock session for pure unit tests
"""

import os

# Override settings for testing BEFORE any app imports
# Why: app.config builds the settings singleton at import time
os.environ["ENVIRONMENT"] = "local"
os.environ["DOMAIN"] = "localhost"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["FIRST_SUPERUSER"] = "admin@example.com"
os.environ["FIRST_SUPERUSER_PASSWORD"] = "admin-test-password"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
for _var in ("SMTP_HOST", "EMAILS_FROM_EMAIL", "SMTP_USER", "SMTP_PASSWORD"):
    os.environ.pop(_var, None)

from typing import Dict  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool  # noqa: E402

from app.config import settings  # noqa: E402
from app.database import Base, get_db_session  # noqa: E402
from app.models.item import Item  # noqa: E402,F401
from app.models.user import User  # noqa: E402
from app.schemas.user import UserCreate  # noqa: E402
from app.security import create_access_token  # noqa: E402
from app.services.user_service import user_service  # noqa: E402

API = settings.api_v1_str

NORMAL_USER_EMAIL = "user@example.com"
NORMAL_USER_PASSWORD = "user-test-password"


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """
    A throwaway SQLite database per test.

    A file (not :memory:) so that every session gets its own connection and
    commits behave like they do against PostgreSQL.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    What:    An AsyncMock that simulates AsyncSession behavior.
    Why:     Unit tests of error paths should not require a real database.

    Usage:
        mock_db_session.get.return_value = user
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Users and Tokens
# ══════════════════════════════════════════════════════════════════════════

async def create_test_user(
    session_factory,
    email: str,
    password: str = "test-password-123",
    **fields,
) -> User:
    """Insert and commit a user in its own session."""
    async with session_factory() as session:
        user = await user_service.create_user(
            session, UserCreate(email=email, password=password, **fields)
        )
        await session.commit()
        return user


def token_headers_for(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest_asyncio.fixture
async def superuser(session_factory) -> User:
    return await create_test_user(
        session_factory,
        settings.first_superuser,
        settings.first_superuser_password,
        is_superuser=True,
    )


@pytest_asyncio.fixture
async def normal_user(session_factory) -> User:
    return await create_test_user(session_factory, NORMAL_USER_EMAIL, NORMAL_USER_PASSWORD)


@pytest.fixture
def superuser_token_headers(superuser) -> Dict[str, str]:
    return token_headers_for(superuser)


@pytest.fixture
def normal_user_token_headers(normal_user) -> Dict[str, str]:
    return token_headers_for(normal_user)


# ══════════════════════════════════════════════════════════════════════════
# API Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def client(session_factory):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient talking to the FastAPI app in-process.
    How:     ASGITransport routes requests directly to the app; the session
             dependency is pointed at the per-test database.

    Usage:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    from app.main import app

    async def _get_test_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _get_test_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
