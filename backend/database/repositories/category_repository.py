"""Category repository: listing, case-insensitive lookup and upsert."""

from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
import logging

from .base import BaseRepository, RepositoryError
from ..models import Category

logger = logging.getLogger(__name__)


class CategoryRepository(BaseRepository[Category]):
    """Repository for category operations."""

    def __init__(self, session):
        super().__init__(Category, session)

    async def list_all(self) -> List[Category]:
        """All categories ordered by name, case-insensitively."""
        try:
            query = select(Category).order_by(func.lower(Category.name), Category.id)
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Error listing categories: {str(e)}")
            raise RepositoryError(f"Failed to list categories: {str(e)}") from e

    async def get_by_name(self, name: str) -> Optional[Category]:
        """Find a category by name, ignoring case and surrounding whitespace."""
        try:
            query = select(Category).where(func.lower(Category.name) == func.lower(name.strip()))
            result = await self.session.execute(query)
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Error getting category {name!r}: {str(e)}")
            raise RepositoryError(f"Failed to get category: {str(e)}") from e

    async def get_or_create(self, name: str) -> Category:
        """
        Return the category called ``name``, inserting it if absent.

        The insert runs inside a SAVEPOINT. When a concurrent transaction
        committed the same name first, the unique index rejects our row,
        the savepoint is rolled back and the winner's row is returned. The
        enclosing transaction stays usable either way.

        Args:
            name: Category name, stored case-preserved after trimming

        Returns:
            Existing or newly created category
        """
        name = name.strip()
        existing = await self.get_by_name(name)
        if existing is not None:
            return existing

        try:
            async with self.session.begin_nested():
                category = Category(name=name)
                self.session.add(category)
                await self.session.flush()
            logger.info("Created category", extra={"category_id": category.id, "category": name})
            return category
        except IntegrityError:
            logger.info("Category created concurrently, reusing it", extra={"category": name})
        except Exception as e:
            logger.error(f"Error creating category {name!r}: {str(e)}")
            raise RepositoryError(f"Failed to create category: {str(e)}") from e

        winner = await self.get_by_name(name)
        if winner is None:
            raise RepositoryError(f"Category {name!r} vanished after a conflicting insert")
        return winner
