"""Typed records returned by the store layer.

Rows coming back from SQLAlchemy (or the in-memory lists) are mapped to
these before leaving the store, so controllers never touch ORM objects.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class CategoryRecord:
    id: int
    name: str


@dataclass(frozen=True)
class JokeRecord:
    id: int
    setup: str
    delivery: str
    category_id: int
    category: str
    created_at: Optional[datetime] = None


def category_from_row(row: Any) -> CategoryRecord:
    """Map a ``Category`` instance or a ``(id, name)`` row to a record."""
    return CategoryRecord(id=int(row.id), name=row.name)


def joke_from_row(joke: Any, category_name: str) -> JokeRecord:
    return JokeRecord(
        id=int(joke.id),
        setup=joke.setup,
        delivery=joke.delivery,
        category_id=int(joke.category_id),
        category=category_name,
        created_at=joke.created_at,
    )
