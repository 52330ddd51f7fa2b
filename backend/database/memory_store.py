"""In-memory Jokebook store for demos and tests. Data lives for the process lifetime."""

import asyncio
import itertools
import logging
import random
from datetime import datetime, timezone
from typing import Dict, List, Optional

from config import Settings
from database.records import CategoryRecord, JokeRecord
from database.repositories.base import NotFoundError

logger = logging.getLogger(__name__)


class InMemoryJokebookStore:
    """Same contract as the SQL store; a single lock serialises every write."""

    def __init__(self, config: Settings):
        self.config = config
        self._lock = asyncio.Lock()
        self._reset()

    def _reset(self) -> None:
        self._categories: Dict[int, CategoryRecord] = {}
        self._jokes: Dict[int, JokeRecord] = {}
        self._category_ids = itertools.count(1)
        self._joke_ids = itertools.count(1)

    async def initialize(self) -> None:
        if self.config.SEED_DEFAULT_CATEGORIES:
            async with self._lock:
                for name in self.config.DEFAULT_CATEGORIES:
                    self._get_or_create_category(name)

    async def close(self) -> None:
        async with self._lock:
            self._reset()

    def _find_category(self, name: str) -> Optional[CategoryRecord]:
        wanted = name.strip().lower()
        for category in self._categories.values():
            if category.name.lower() == wanted:
                return category
        return None

    def _get_or_create_category(self, name: str) -> CategoryRecord:
        category = self._find_category(name)
        if category is None:
            category = CategoryRecord(id=next(self._category_ids), name=name.strip())
            self._categories[category.id] = category
            logger.info("Created category", extra={"category_id": category.id, "category": category.name})
        return category

    async def list_categories(self) -> List[CategoryRecord]:
        return sorted(self._categories.values(), key=lambda c: (c.name.lower(), c.id))

    async def list_jokes_by_category(
        self,
        category_id: Optional[int] = None,
        name: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[JokeRecord]:
        if category_id is not None:
            category = self._categories.get(category_id)
        elif name is not None:
            category = self._find_category(name)
        else:
            raise ValueError("category_id or name is required")

        if category is None:
            raise NotFoundError(f"Category {category_id if category_id is not None else name!r} not found")

        jokes = sorted(
            (j for j in self._jokes.values() if j.category_id == category.id),
            key=lambda j: j.id,
        )
        return jokes[:limit] if limit is not None else jokes

    async def random_joke(self) -> Optional[JokeRecord]:
        if not self._jokes:
            return None
        return random.choice(list(self._jokes.values()))

    async def create_joke(self, category: str, setup: str, delivery: str) -> JokeRecord:
        async with self._lock:
            resolved = self._get_or_create_category(category)
            joke = JokeRecord(
                id=next(self._joke_ids),
                setup=setup,
                delivery=delivery,
                category_id=resolved.id,
                category=resolved.name,
                created_at=datetime.now(timezone.utc),
            )
            self._jokes[joke.id] = joke
        logger.info("Created joke", extra={"joke_id": joke.id, "category_id": joke.category_id})
        return joke

    async def update_joke(
        self, joke_id: int, category: str, setup: str, delivery: str
    ) -> Optional[JokeRecord]:
        async with self._lock:
            existing = self._jokes.get(joke_id)
            if existing is None:
                return None
            resolved = self._get_or_create_category(category)
            joke = JokeRecord(
                id=joke_id,
                setup=setup,
                delivery=delivery,
                category_id=resolved.id,
                category=resolved.name,
                created_at=existing.created_at,
            )
            self._jokes[joke_id] = joke
        logger.info("Updated joke", extra={"joke_id": joke_id})
        return joke

    async def delete_joke(self, joke_id: int) -> bool:
        async with self._lock:
            deleted = self._jokes.pop(joke_id, None) is not None
        if deleted:
            logger.info("Deleted joke", extra={"joke_id": joke_id})
        return deleted

    async def health_check(self) -> dict:
        return {
            "backend": "memory",
            "status": "healthy",
            "categories": len(self._categories),
            "jokes": len(self._jokes),
        }
