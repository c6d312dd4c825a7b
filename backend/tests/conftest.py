"""
Happy Thoughts Backend — Test Configuration (conftest.py)
==========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets a fresh in-memory SQLite database (aiosqlite) with the
       thoughts table created from the ORM metadata. The FastAPI app is built
       around that engine, so no test touches PostgreSQL.

Fixtures:
    ├── engine:           in-memory async engine with tables created
    ├── db_session:       AsyncSession bound to `engine`
    ├── mock_db_session:  AsyncMock session for storage-failure paths
    ├── app:              FastAPI app wired to `engine`
    ├── test_client:      HTTPX AsyncClient talking to `app` over ASGI
    ├── create_thought:   helper that POSTs a thought and returns its JSON
    └── parse_ts:         createdAt string → naive UTC datetime
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

# Override settings BEFORE any app imports: happy_thoughts.main builds a
# module-level app from the environment
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from happy_thoughts.config import Settings
from happy_thoughts.database import create_engine_from_settings, create_session_factory, create_tables
from happy_thoughts.main import create_app


def parse_timestamp(value: str) -> datetime:
    """
    Parse a createdAt value into a naive UTC datetime.

    SQLite hands back naive datetimes while freshly created rows still carry
    tzinfo, so comparisons normalize both.
    """
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


@pytest.fixture
def parse_ts():
    return parse_timestamp


@pytest.fixture
def test_settings():
    return Settings(database_url="sqlite+aiosqlite://", log_level="WARNING")


@pytest_asyncio.fixture
async def engine(test_settings):
    engine = create_engine_from_settings(test_settings)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.get = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def app(test_settings, engine):
    return create_app(test_settings, engine=engine)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/thoughts")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def create_thought(test_client):
    async def _create(message: str) -> dict:
        response = await test_client.post("/thoughts", json={"message": message})
        assert response.status_code == 200, response.text
        return response.json()

    return _create
