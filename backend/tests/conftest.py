# Ensure backend is at sys.path[0] when pytest runs (from repo root or from backend dir)
import sys
from pathlib import Path

_tests_dir = Path(__file__).resolve().parent
_backend = _tests_dir.parent
_str_backend = str(_backend)
if sys.path[0:1] != [_str_backend]:
    sys.path.insert(0, _str_backend)

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from core.config import Settings
from core.database import DatabaseManager

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_manager():
    """In-memory SQLite with all tables, disposed after the test."""
    manager = DatabaseManager(TEST_DATABASE_URL)
    await manager.init()
    await manager.create_schema()
    yield manager
    await manager.dispose()


@pytest_asyncio.fixture
async def session(db_manager):
    """One committed-on-exit session, for repository and service tests."""
    async with db_manager.session() as s:
        yield s


@pytest_asyncio.fixture
async def client(db_manager):
    """httpx client against a fresh app wired to the in-memory database.

    ASGITransport does not run lifespan hooks, so the manager is attached here.
    """
    from main import create_app

    app = create_app(Settings(database_url=TEST_DATABASE_URL, log_level="WARNING"))
    app.state.db_manager = db_manager
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c
