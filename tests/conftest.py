"""
Postpad — Test Configuration (conftest.py)
============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Store and end-to-end tests run against a fresh aiosqlite database file
       per test; service unit tests use a mocked AsyncSession.

Fixture Hierarchy:
    settings          → Settings pointing at tmp_path/test.db, bcrypt cost 4
    app               → create_app(settings) with tables created
    db_session        → a real AsyncSession on the test database
    make_client       → factory for independent HTTPX clients (one cookie jar each)
    client            → one client from make_client
    mock_db_session   → AsyncMock session for unit tests
"""

import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Environment for any code path that loads settings from the environment
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production-0123456789")
os.environ["LOG_LEVEL"] = "WARNING"

from postpad.config import Settings, load_settings  # noqa: E402
from postpad.main import create_app  # noqa: E402

TEST_SECRET = "test-secret-not-for-production-0123456789"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return load_settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(settings):
    application = create_app(settings)
    await application.state.database.create_tables()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def db_session(app):
    async with app.state.database.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def make_client(app) -> AsyncGenerator:
    """
    Returns a factory of AsyncClients bound to the same app.

    Each client keeps its own cookies, so two of them act as two users.
    """
    clients = []

    def _make() -> AsyncClient:
        c = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(c)
        return c

    yield _make

    for c in clients:
        await c.aclose()


@pytest_asyncio.fixture
async def client(make_client) -> AsyncClient:
    return make_client()


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def alice_form():
    return {"username": "alice", "email": "a@x.com", "password": "pw123", "age": "30"}


@pytest.fixture
def bob_form():
    return {"username": "bob", "email": "b@x.com", "password": "hunter2", "age": "41"}
