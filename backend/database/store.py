"""Jokebook stores: the persistence interface the controller talks to."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Protocol, Sequence
import logging

from sqlalchemy.exc import SQLAlchemyError

from config import Settings
from database.records import CategoryRecord, JokeRecord, category_from_row
from database.repositories import JokeRepository, RepositoryError
from database.session import DatabaseManager

logger = logging.getLogger(__name__)


class JokebookStore(Protocol):
    async def initialize(self) -> None: ...

    async def close(self) -> None: ...

    async def list_categories(self) -> List[CategoryRecord]: ...

    async def list_jokes_by_category(
        self,
        category_id: Optional[int] = None,
        name: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[JokeRecord]: ...

    async def random_joke(self) -> Optional[JokeRecord]: ...

    async def create_joke(self, category: str, setup: str, delivery: str) -> JokeRecord: ...

    async def update_joke(
        self, joke_id: int, category: str, setup: str, delivery: str
    ) -> Optional[JokeRecord]: ...

    async def delete_joke(self, joke_id: int) -> bool: ...

    async def health_check(self) -> dict: ...


class SqlJokebookStore:
    """Relational store. Every operation runs on its own pooled session."""

    def __init__(self, db: DatabaseManager, config: Settings):
        self.db = db
        self.config = config

    async def initialize(self) -> None:
        await self.db.initialize()
        if self.config.AUTO_CREATE_SCHEMA:
            await self.db.create_schema()
        if self.config.SEED_DEFAULT_CATEGORIES:
            await self.seed_categories(self.config.DEFAULT_CATEGORIES)

    async def close(self) -> None:
        await self.db.close()

    @asynccontextmanager
    async def _jokes(self) -> AsyncIterator[JokeRepository]:
        try:
            async with self.db.session() as session:
                yield JokeRepository(session)
        except RepositoryError:
            raise
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Database unavailable: {str(e)}")
            raise RepositoryError(f"Database unavailable: {str(e)}") from e

    async def seed_categories(self, names: Sequence[str]) -> None:
        """Insert any of ``names`` that are missing."""
        async with self._jokes() as repo:
            async with repo.transaction():
                for name in names:
                    await repo.categories.get_or_create(name)
        logger.info("Default categories ensured", extra={"count": len(names)})

    async def list_categories(self) -> List[CategoryRecord]:
        async with self._jokes() as repo:
            return [category_from_row(c) for c in await repo.categories.list_all()]

    async def list_jokes_by_category(
        self,
        category_id: Optional[int] = None,
        name: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[JokeRecord]:
        async with self._jokes() as repo:
            return await repo.list_by_category(category_id=category_id, name=name, limit=limit)

    async def random_joke(self) -> Optional[JokeRecord]:
        async with self._jokes() as repo:
            return await repo.get_random()

    async def create_joke(self, category: str, setup: str, delivery: str) -> JokeRecord:
        async with self._jokes() as repo:
            return await repo.create_joke(category, setup, delivery)

    async def update_joke(
        self, joke_id: int, category: str, setup: str, delivery: str
    ) -> Optional[JokeRecord]:
        async with self._jokes() as repo:
            return await repo.update_joke(joke_id, category, setup, delivery)

    async def delete_joke(self, joke_id: int) -> bool:
        async with self._jokes() as repo:
            return await repo.delete_joke(joke_id)

    async def health_check(self) -> dict:
        return {"backend": "database", **await self.db.health_check()}


def build_store(config: Settings) -> JokebookStore:
    """Pick the store implementation named by ``STORE_BACKEND``."""
    if config.STORE_BACKEND == "memory":
        from database.memory_store import InMemoryJokebookStore
        return InMemoryJokebookStore(config)
    return SqlJokebookStore(DatabaseManager(config), config)
