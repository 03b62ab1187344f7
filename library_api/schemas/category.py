"""
Category Pydantic Schemas

Schemas for category-related API operations.
Follows the same pattern as Author schemas.
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from library_api.schemas.common import CatalogModel


class CategoryCreate(BaseModel):
    """Schema for creating a new category. Names are unique."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category name",
        examples=["Science Fiction", "Mystery", "Romance"],
    )

    @field_validator("name", mode="before")
    @classmethod
    def name_must_not_be_empty(cls, v: Any) -> Any:
        """Validate and normalize category name before the length check."""
        if not isinstance(v, str):
            return v
        if not v.strip():
            raise ValueError("Category name cannot be empty or whitespace")
        return v.strip()


class CategoryUpdate(CategoryCreate):
    """Schema for renaming a category. The name is still required."""


class CategorySummary(CatalogModel):
    """Category projection embedded in book responses."""

    id: uuid.UUID
    name: str


class CategoryResponse(CatalogModel):
    """Schema for category responses; books are listed as bare ids."""

    id: uuid.UUID = Field(..., description="Unique identifier")
    name: str
    books: list[uuid.UUID] = Field(default_factory=list)
    created_at: datetime = Field(..., description="When the category was created")
    updated_at: datetime = Field(..., description="When the category was last updated")

    @field_validator("books", mode="before")
    @classmethod
    def books_as_ids(cls, v: Any) -> Any:
        """Collapse ORM Book objects to their ids."""
        return [getattr(book, "id", book) for book in v or []]
