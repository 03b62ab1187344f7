"""
Author Pydantic Schemas

These schemas define the shape of data for Author-related API operations.

Pydantic v2 Features Used:
- Field(): Define constraints and metadata
- field_validator: Validate and transform field values
- ConfigDict: Type-safe configuration
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from library_api.schemas.common import CatalogModel


def _required_text(v: Any, label: str) -> Any:
    # runs before the length checks; non-strings are left to type validation
    if not isinstance(v, str):
        return v
    if not v.strip():
        raise ValueError(f"{label} cannot be empty or whitespace")
    return v.strip()


class AuthorCreate(BaseModel):
    """
    Schema for creating a new author.

    Both fields are required and stored trimmed.

    Example request body:
        {"name": "Frank Herbert", "country": "USA"}
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author's full name",
        examples=["Frank Herbert", "Ursula K. Le Guin"],
    )

    country: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Author's country",
        examples=["USA", "United Kingdom"],
    )

    @field_validator("name", mode="before")
    @classmethod
    def name_must_not_be_empty(cls, v: Any) -> Any:
        """Reject whitespace-only names and normalize by stripping."""
        return _required_text(v, "Author name")

    @field_validator("country", mode="before")
    @classmethod
    def country_must_not_be_empty(cls, v: Any) -> Any:
        """Reject whitespace-only countries and normalize by stripping."""
        return _required_text(v, "Author country")


class AuthorUpdate(BaseModel):
    """
    Schema for updating an existing author.

    All fields are optional; only the fields present in the request body
    are changed.
    """

    name: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="Author's full name",
    )

    country: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=100,
        description="Author's country",
    )

    @field_validator("name", mode="before")
    @classmethod
    def name_must_not_be_empty(cls, v: Any) -> Any:
        """Validate name if provided."""
        return _required_text(v, "Author name")

    @field_validator("country", mode="before")
    @classmethod
    def country_must_not_be_empty(cls, v: Any) -> Any:
        """Validate country if provided."""
        return _required_text(v, "Author country")


class AuthorSummary(CatalogModel):
    """Author projection embedded in book responses."""

    id: uuid.UUID
    name: str
    country: str


class AuthorBookSummary(CatalogModel):
    """Book projection embedded in author responses."""

    id: uuid.UUID
    title: str
    cover_image: Optional[str] = None


class AuthorResponse(CatalogModel):
    """
    Schema for author responses.

    books lists the author's live (not soft-deleted) books, expanded to
    {id, title, coverImage}.
    """

    id: uuid.UUID = Field(..., description="Unique identifier")
    name: str
    country: str
    books: list[AuthorBookSummary] = Field(default_factory=list)
    created_at: datetime = Field(..., description="When the author was created")
    updated_at: datetime = Field(..., description="When the author was last updated")
