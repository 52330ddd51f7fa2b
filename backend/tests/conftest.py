"""Shared fixtures: temporary SQLite databases, stores and API clients."""

import os

# Keep test runs from writing log files into the working tree.
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("LOG_JSON", "false")

import pytest
from fastapi.testclient import TestClient

from config import Settings
from database.memory_store import InMemoryJokebookStore
from database.session import DatabaseManager
from database.store import SqlJokebookStore
from main import create_app


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'jokebook.db'}",
        LOG_TO_FILE=False,
        LOG_JSON=False,
        SEED_DEFAULT_CATEGORIES=False,
    )


@pytest.fixture
async def db_manager(test_settings):
    """Initialized database manager with the schema created."""
    manager = DatabaseManager(test_settings)
    await manager.initialize()
    await manager.create_schema()
    yield manager
    await manager.close()


@pytest.fixture
async def session(db_manager):
    async with db_manager.session() as session:
        yield session


@pytest.fixture(params=["database", "memory"])
async def store(request, test_settings, db_manager):
    """Each store backend, empty (no seeded categories)."""
    if request.param == "memory":
        memory_store = InMemoryJokebookStore(test_settings)
        await memory_store.initialize()
        yield memory_store
        await memory_store.close()
    else:
        yield SqlJokebookStore(db_manager, test_settings)


@pytest.fixture(params=["database", "memory"])
def client(request, tmp_path):
    """API client over each store backend, with the default categories seeded."""
    config = Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        STORE_BACKEND=request.param,
        LOG_TO_FILE=False,
        LOG_JSON=False,
    )
    with TestClient(create_app(config)) as test_client:
        yield test_client
