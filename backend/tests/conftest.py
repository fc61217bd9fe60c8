"""
Notebench Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment variables are set BEFORE any notebench import so the
       settings singleton picks up test values (SQLite, fast hashing, a
       known JWT secret, no practical rate limit).

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── database: Database context on a per-test SQLite file, tables created
    ├── test_client: HTTPX AsyncClient bound to a fresh app using `database`
    ├── make_user: registers a user through the API, returns id + auth headers
    └── alice / bob: two ready-made users
"""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="notebench_test_"), "default.db"
)
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["PASSWORD_HASH_ROUNDS"] = "1000"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from notebench.database import Database  # noqa: E402
from notebench.main import create_app  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.expunge = MagicMock()
    return session


@pytest_asyncio.fixture
async def database(tmp_path):
    """A real Database context on an isolated SQLite file."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'notebench.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient talking to a fresh app instance.

    ASGITransport does not run the lifespan, so the fixture installs the
    test Database context on app.state itself.
    """
    app = create_app()
    app.state.db = database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def make_user(test_client):
    """Factory: register `username` and return its id and Authorization headers."""

    async def _make(username: str) -> dict:
        response = await test_client.post(
            "/api/users",
            json={
                "username": username,
                "email": f"{username}@example.com",
                "password": "correct-horse-battery",
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return {
            "id": body["user"]["id"],
            "headers": {"Authorization": f"Bearer {body['token']}"},
        }

    return _make


@pytest_asyncio.fixture
async def alice(make_user):
    return await make_user("alice")


@pytest_asyncio.fixture
async def bob(make_user):
    return await make_user("bob")
