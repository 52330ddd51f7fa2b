from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional
from datetime import datetime


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class JokeIn(BaseModel):
    """Validated, trimmed body of a create/update request"""
    category: str = Field(..., min_length=1, description="Category name; created if it does not exist")
    setup: str = Field(..., min_length=1)
    delivery: str = Field(..., min_length=1, description="Punchline")


class JokeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    setup: str
    delivery: str
    category_id: int
    category: str
    created_at: Optional[datetime] = None


class ErrorResponse(BaseModel):
    error: str
    message: str
    status_code: int
    details: Optional[List[Any]] = None
