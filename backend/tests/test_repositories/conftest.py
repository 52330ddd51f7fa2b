"""Fixtures for repository tests."""

import pytest

from database.repositories import CategoryRepository, JokeRepository


@pytest.fixture
async def joke_repository(session) -> JokeRepository:
    """Create joke repository for testing."""
    return JokeRepository(session)


@pytest.fixture
async def category_repository(session) -> CategoryRepository:
    """Create category repository for testing."""
    return CategoryRepository(session)


@pytest.fixture
async def sample_jokes(joke_repository):
    """Three jokes across two categories."""
    return [
        await joke_repository.create_joke('Programming', 'Why do Java developers wear glasses?', "Because they don't C#."),
        await joke_repository.create_joke('Science', "Why can't you trust an atom?", 'They make up everything.'),
        await joke_repository.create_joke('programming', 'How many programmers does it take to change a bulb?', "None, it's a hardware problem."),
    ]
