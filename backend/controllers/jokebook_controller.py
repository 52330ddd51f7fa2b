"""
Jokebook Controller

Turns raw request input into validated store calls and store results into
HTTP outcomes. Holds no state between requests other than the injected store.

Error mapping:
- malformed ids, limits or bodies -> 400 (the store is never touched)
- missing category / joke, empty results -> 404
- store failures -> 500 with a generic message; details stay in the logs
"""

import logging
import re
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status

from database.records import JokeRecord
from database.repositories.base import NotFoundError, RepositoryError
from database.store import JokebookStore
from models.jokebook import CategoryResponse, JokeIn, JokeResponse

logger = logging.getLogger(__name__)

_POSITIVE_INT = re.compile(r"^[0-9]+$")
_MAX_ID = 2**31 - 1
_REQUIRED_FIELDS = ("category", "setup", "delivery")


class BadRequest(HTTPException):
    """400 carrying a list of offending fields."""

    def __init__(self, message: str, details: Optional[List[Any]] = None):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
        self.details = details


def parse_positive_int(value: Optional[str], label: str, maximum: Optional[int] = _MAX_ID) -> int:
    """Parse an ASCII digit string into 1..maximum. ``maximum=None`` leaves it unbounded."""
    text = (value or "").strip()
    if not _POSITIVE_INT.match(text) or int(text) == 0:
        raise BadRequest(f"Invalid {label}: must be a positive integer", [label])
    number = int(text)
    if maximum is not None and number > maximum:
        raise BadRequest(f"Invalid {label}: must not exceed {maximum}", [label])
    return number


def parse_joke_body(body: Any) -> JokeIn:
    """Trim and check the create/update body. ``punchline`` is accepted for ``delivery``."""
    if not isinstance(body, dict):
        raise BadRequest("Request body must be a JSON object")

    data: Dict[str, Any] = dict(body)
    if data.get("delivery") is None and "punchline" in data:
        data["delivery"] = data["punchline"]

    missing, invalid = [], []
    for field in _REQUIRED_FIELDS:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
        elif not isinstance(value, str):
            invalid.append(field)

    if missing:
        raise BadRequest(f"Missing required fields: {', '.join(missing)}", missing)
    if invalid:
        raise BadRequest(f"Fields must be strings: {', '.join(invalid)}", invalid)

    return JokeIn(**{field: data[field].strip() for field in _REQUIRED_FIELDS})


def _store_failure(action: str, exc: Exception) -> HTTPException:
    logger.error(f"Store failure while trying to {action}: {exc}", exc_info=exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action} due to a database error.",
    )


class JokebookController:
    def __init__(self, store: JokebookStore, max_limit: int = 100):
        self.store = store
        self.max_limit = max_limit

    def _parse_limit(self, raw_limit: Optional[str]) -> Optional[int]:
        if raw_limit is None:
            return None
        return min(parse_positive_int(raw_limit, "limit", maximum=None), self.max_limit)

    async def list_categories(self) -> List[CategoryResponse]:
        try:
            categories = await self.store.list_categories()
        except RepositoryError as e:
            raise _store_failure("retrieve categories", e)
        return [CategoryResponse.model_validate(c) for c in categories]

    async def list_jokes_by_category_id(
        self, raw_id: str, raw_limit: Optional[str] = None
    ) -> List[JokeResponse]:
        category_id = parse_positive_int(raw_id, "category id")
        limit = self._parse_limit(raw_limit)
        return await self._list_jokes(category_id=category_id, limit=limit)

    async def list_jokes_by_category_name(
        self, name: str, raw_limit: Optional[str] = None
    ) -> List[JokeResponse]:
        if not name or not name.strip():
            raise BadRequest("Category name must not be empty", ["category"])
        limit = self._parse_limit(raw_limit)
        return await self._list_jokes(name=name.strip(), limit=limit)

    async def _list_jokes(self, **query) -> List[JokeResponse]:
        try:
            jokes = await self.store.list_jokes_by_category(**query)
        except NotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
        except RepositoryError as e:
            raise _store_failure("retrieve jokes", e)

        if not jokes:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No jokes found for this category",
            )
        return [_to_response(j) for j in jokes]

    async def random_joke(self) -> JokeResponse:
        try:
            joke = await self.store.random_joke()
        except RepositoryError as e:
            raise _store_failure("retrieve a random joke", e)

        if joke is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No jokes available in the database",
            )
        return _to_response(joke)

    async def add_joke(self, body: Any) -> JokeResponse:
        joke_in = parse_joke_body(body)
        try:
            joke = await self.store.create_joke(joke_in.category, joke_in.setup, joke_in.delivery)
        except RepositoryError as e:
            raise _store_failure("add joke", e)
        return _to_response(joke)

    async def update_joke(self, raw_id: str, body: Any) -> JokeResponse:
        joke_id = parse_positive_int(raw_id, "joke id")
        joke_in = parse_joke_body(body)
        try:
            joke = await self.store.update_joke(
                joke_id, joke_in.category, joke_in.setup, joke_in.delivery
            )
        except RepositoryError as e:
            raise _store_failure("update joke", e)

        if joke is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Joke not found")
        return _to_response(joke)

    async def delete_joke(self, raw_id: str) -> None:
        joke_id = parse_positive_int(raw_id, "joke id")
        try:
            deleted = await self.store.delete_joke(joke_id)
        except RepositoryError as e:
            raise _store_failure("delete joke", e)

        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Joke not found")


def _to_response(joke: JokeRecord) -> JokeResponse:
    return JokeResponse.model_validate(joke)
