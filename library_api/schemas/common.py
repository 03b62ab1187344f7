"""
Shared Schema Building Blocks

- CatalogModel: base for response schemas. Fields are read from ORM
  attributes by their Python names and serialized in camelCase
  (cover_image -> coverImage, created_at -> createdAt).
- ApiResponse: the success envelope every endpoint returns.
- ErrorResponse: the failure envelope produced by the exception handlers.
"""

from typing import Generic, Optional, TypeVar

from pydantic import AliasChoices, AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def _name_or_camel(name: str) -> AliasChoices:
    # ORM attributes use the Python name; FastAPI re-validates the dumped
    # (camelCase) response, so both spellings must be accepted
    return AliasChoices(name, to_camel(name))


class CatalogModel(BaseModel):
    """Base for schemas built from ORM objects and rendered in camelCase."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(
            validation_alias=_name_or_camel,
            serialization_alias=to_camel,
        ),
    )


class ApiResponse(BaseModel, Generic[T]):
    """
    Success envelope.

    Routes declare response_model_exclude_none=True, so count and
    message only appear when they are set.

    Example:
        {"success": true, "count": 2, "data": [...]}
    """

    success: bool = Field(default=True, description="Always true for successful calls")
    data: Optional[T] = Field(default=None, description="Response payload")
    count: Optional[int] = Field(default=None, description="Number of items in list responses")
    message: Optional[str] = Field(default=None, description="Human-readable status message")


class ErrorResponse(BaseModel):
    """Failure envelope (documented for OpenAPI; built by main.py handlers)."""

    success: bool = False
    error: str = Field(..., description="Human-readable error message")
    stack: Optional[str] = Field(default=None, description="Traceback, debug mode only")
