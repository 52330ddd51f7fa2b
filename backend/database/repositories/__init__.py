"""Repository layer for database operations."""

from .base import BaseRepository, RepositoryError, ValidationError, NotFoundError
from .joke_repository import JokeRepository
from .category_repository import CategoryRepository

__all__ = [
    'BaseRepository',
    'RepositoryError',
    'ValidationError',
    'NotFoundError',
    'JokeRepository',
    'CategoryRepository',
]
