"""Joke repository with specialized joke operations."""

from typing import List, Optional, Tuple
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
import logging

from .base import BaseRepository, RepositoryError, NotFoundError, ValidationError
from .category_repository import CategoryRepository
from ..models import Joke, Category
from ..records import JokeRecord, joke_from_row

logger = logging.getLogger(__name__)


class JokeRepository(BaseRepository[Joke]):
    """Repository for joke-specific operations."""

    def __init__(self, session):
        super().__init__(Joke, session)
        self.categories = CategoryRepository(session)

    def _joined_query(self):
        return select(Joke, Category.name).join(Category, Joke.category_id == Category.id)

    # Core Joke Retrieval Methods

    async def list_by_category(
        self,
        category_id: Optional[int] = None,
        name: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[JokeRecord]:
        """
        Get jokes of one category, oldest first.

        Args:
            category_id: Category primary key
            name: Category name (case-insensitive), used when no id is given
            limit: Maximum number of jokes to return

        Returns:
            Jokes ordered by ascending id; empty if the category has none

        Raises:
            NotFoundError: If the category does not exist
        """
        if category_id is not None:
            category = await self.categories.get(category_id)
        elif name is not None:
            category = await self.categories.get_by_name(name)
        else:
            raise ValueError("category_id or name is required")

        if category is None:
            raise NotFoundError(f"Category {category_id if category_id is not None else name!r} not found")

        try:
            query = (
                self._joined_query()
                .where(Joke.category_id == category.id)
                .order_by(Joke.id)
            )
            if limit is not None:
                query = query.limit(limit)

            result = await self.session.execute(query)
            return [joke_from_row(joke, category_name) for joke, category_name in result.all()]

        except Exception as e:
            logger.error(f"Error getting jokes for category {category.id}: {str(e)}")
            raise RepositoryError(f"Failed to get jokes by category: {str(e)}") from e

    async def get_record(self, joke_id: int) -> Optional[JokeRecord]:
        try:
            result = await self.session.execute(self._joined_query().where(Joke.id == joke_id))
            row = result.first()
        except Exception as e:
            logger.error(f"Error getting joke {joke_id}: {str(e)}")
            raise RepositoryError(f"Failed to get joke: {str(e)}") from e
        return joke_from_row(*row) if row else None

    async def get_random(self) -> Optional[JokeRecord]:
        """One joke picked uniformly by the database, or None when there are none."""
        try:
            query = self._joined_query().order_by(func.random()).limit(1)
            result = await self.session.execute(query)
            row = result.first()
        except Exception as e:
            logger.error(f"Error getting random joke: {str(e)}")
            raise RepositoryError(f"Failed to get random joke: {str(e)}") from e
        return joke_from_row(*row) if row else None

    # Writes

    async def _resolve_category(self, category_name: str) -> Tuple[Category, str]:
        category = await self.categories.get_or_create(category_name)
        return category, category.name

    async def create_joke(self, category_name: str, setup: str, delivery: str) -> JokeRecord:
        """
        Find-or-create the category, then insert the joke, as one transaction.

        Args:
            category_name: Category name; created when no case-insensitive match exists
            setup: Joke setup
            delivery: Joke delivery / punchline

        Returns:
            The stored joke including its generated id

        Raises:
            ValidationError: If the store rejects the row (constraint violation)
            RepositoryError: If the transaction cannot complete
        """
        try:
            async with self.transaction():
                category, resolved_name = await self._resolve_category(category_name)
                joke = Joke(setup=setup, delivery=delivery, category_id=category.id)
                self.session.add(joke)
                await self.session.flush()
                await self.session.refresh(joke)
                record = joke_from_row(joke, resolved_name)

            logger.info("Created joke", extra={"joke_id": record.id, "category_id": record.category_id})
            return record

        except RepositoryError:
            raise
        except IntegrityError as e:
            logger.error(f"Integrity error creating joke: {str(e)}")
            raise ValidationError(f"Data integrity violation: {str(e)}") from e
        except Exception as e:
            logger.error(f"Error creating joke: {str(e)}")
            raise RepositoryError(f"Failed to create joke: {str(e)}") from e

    async def update_joke(
        self,
        joke_id: int,
        category_name: str,
        setup: str,
        delivery: str
    ) -> Optional[JokeRecord]:
        """
        Replace a joke's fields, moving it to ``category_name`` (created if absent).

        Returns:
            The updated joke, or None if no joke has that id
        """
        try:
            async with self.transaction():
                joke = await self.get(joke_id)
                if joke is None:
                    return None

                category, resolved_name = await self._resolve_category(category_name)
                joke.setup = setup
                joke.delivery = delivery
                joke.category_id = category.id
                await self.session.flush()
                record = joke_from_row(joke, resolved_name)

            logger.info("Updated joke", extra={"joke_id": joke_id})
            return record

        except RepositoryError:
            raise
        except IntegrityError as e:
            logger.error(f"Integrity error updating joke {joke_id}: {str(e)}")
            raise ValidationError(f"Data integrity violation: {str(e)}") from e
        except Exception as e:
            logger.error(f"Error updating joke {joke_id}: {str(e)}")
            raise RepositoryError(f"Failed to update joke: {str(e)}") from e

    async def delete_joke(self, joke_id: int) -> bool:
        """Delete a joke; False when it did not exist."""
        try:
            async with self.transaction():
                deleted = await self.delete(joke_id)
        except RepositoryError:
            raise
        except Exception as e:
            logger.error(f"Error deleting joke {joke_id}: {str(e)}")
            raise RepositoryError(f"Failed to delete joke: {str(e)}") from e

        if deleted:
            logger.info("Deleted joke", extra={"joke_id": joke_id})
        return deleted
