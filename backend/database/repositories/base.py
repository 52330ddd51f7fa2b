"""Base repository class with generic CRUD operations."""

from abc import ABC
from typing import TypeVar, Generic, Optional, Any, Type
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from contextlib import asynccontextmanager
import logging

# Type variable for model types
ModelType = TypeVar('ModelType')

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Base repository exception."""
    pass


class ValidationError(RepositoryError):
    """Validation error in repository operations."""
    pass


class NotFoundError(RepositoryError):
    """Entity not found error."""
    pass


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository class providing generic lookups and deletes with async support.

    Repositories never commit on their own; callers group work with
    ``transaction()`` so that multi-step writes land (or fail) together.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """
        Initialize repository with model and session.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get(self, id: Any) -> Optional[ModelType]:
        """
        Get entity by ID.

        Args:
            id: Entity ID

        Returns:
            Entity or None
        """
        try:
            return await self.session.get(self.model, id)
        except Exception as e:
            logger.error(f"Error getting {self.model.__name__} with id {id}: {str(e)}")
            raise RepositoryError(f"Failed to get {self.model.__name__}: {str(e)}") from e

    async def count(self) -> int:
        try:
            result = await self.session.execute(select(func.count()).select_from(self.model))
            return result.scalar_one()
        except Exception as e:
            logger.error(f"Error counting {self.model.__name__}: {str(e)}")
            raise RepositoryError(f"Failed to count {self.model.__name__}: {str(e)}") from e

    async def delete(self, id: Any) -> bool:
        """
        Delete an entity.

        Args:
            id: Entity ID

        Returns:
            True if deleted, False if not found
        """
        db_obj = await self.get(id)
        if db_obj is None:
            return False

        try:
            await self.session.delete(db_obj)
            await self.session.flush()
        except Exception as e:
            logger.error(f"Error deleting {self.model.__name__}: {str(e)}")
            raise RepositoryError(f"Failed to delete {self.model.__name__}: {str(e)}") from e

        logger.debug(f"Deleted {self.model.__name__} with id: {id}")
        return True

    # Transaction Management

    @asynccontextmanager
    async def transaction(self):
        """Commit everything done inside the block, or roll all of it back."""
        try:
            yield self.session
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
