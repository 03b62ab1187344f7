"""
Book Pydantic Schemas

Book writes arrive as form data (multipart or urlencoded) or JSON, so
the create/update schemas are command objects built by the form
dependency in dependencies.py after the categories field has been
normalized and the ids parsed. The cover file travels next to the
command, not inside it.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from library_api.schemas.author import AuthorSummary
from library_api.schemas.category import CategorySummary
from library_api.schemas.common import CatalogModel


def _unique(ids: list[uuid.UUID]) -> list[uuid.UUID]:
    # Set semantics, first occurrence wins
    return list(dict.fromkeys(ids))


class BookCreate(BaseModel):
    """
    Command for creating a new book.

    Example (JSON body):
    {
        "title": "Dune",
        "author": "0b5c...",
        "categories": ["5f1e...", "9a7d..."]
    }
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["Dune", "The Left Hand of Darkness"],
    )

    author: uuid.UUID = Field(..., description="Id of an existing author")

    categories: list[uuid.UUID] = Field(
        default_factory=list,
        description="Ids of existing categories",
    )

    @field_validator("title", mode="before")
    @classmethod
    def title_must_not_be_empty(cls, v: Any) -> Any:
        """Validate and normalize title before the length check."""
        if not isinstance(v, str):
            return v
        if not v.strip():
            raise ValueError("Title cannot be empty or whitespace")
        return v.strip()

    @field_validator("categories")
    @classmethod
    def categories_are_a_set(cls, v: list[uuid.UUID]) -> list[uuid.UUID]:
        return _unique(v)


class BookUpdate(BaseModel):
    """
    Command for updating an existing book.

    Only the fields present in model_fields_set are applied. A present
    categories list replaces the previous one entirely, so an empty list
    removes the book from all categories.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    author: Optional[uuid.UUID] = None
    categories: Optional[list[uuid.UUID]] = None

    @field_validator("title", mode="before")
    @classmethod
    def title_must_not_be_empty(cls, v: Any) -> Any:
        """Validate title if provided."""
        if not isinstance(v, str):
            return v
        if not v.strip():
            raise ValueError("Title cannot be empty or whitespace")
        return v.strip()

    @field_validator("categories")
    @classmethod
    def categories_are_a_set(
        cls, v: Optional[list[uuid.UUID]]
    ) -> Optional[list[uuid.UUID]]:
        return _unique(v) if v is not None else v


class BookResponse(CatalogModel):
    """
    Schema for book responses.

    author and categories are expanded to {id, name, country} and
    {id, name}. author is omitted once the book's author has been deleted.
    """

    id: uuid.UUID = Field(..., description="Unique identifier")
    title: str
    author: Optional[AuthorSummary] = None
    categories: list[CategorySummary] = Field(default_factory=list)
    cover_image: Optional[str] = Field(
        default=None,
        description="Filename of the cover image, served under /uploads",
    )
    deleted: bool = False
    created_at: datetime
    updated_at: datetime
