"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

This module is the parse boundary of the API: raw path, query and form
values are turned into typed values and command objects here, before
any business logic runs.

Common Dependency Patterns:
- Database sessions (per-request)
- Cover storage configured from settings
- Id parsing (malformed ids -> InvalidReference, 400)
- Book list filters
- Book write forms (multipart, urlencoded or JSON)
"""

import uuid
from dataclasses import dataclass
from typing import Annotated, Any, TypeVar

import pydantic
from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from library_api.database import get_db
from library_api.exceptions import InvalidReference, ValidationError
from library_api.schemas import BookCreate, BookUpdate
from library_api.services.catalog import BookQuery
from library_api.services.normalizer import normalize_categories
from library_api.services.uploads import CoverStorage, get_cover_storage

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
DbSession = Annotated[Session, Depends(get_db)]
Covers = Annotated[CoverStorage, Depends(get_cover_storage)]


# =============================================================================
# Identifiers
# =============================================================================
def parse_id(raw: Any, label: str) -> uuid.UUID:
    """
    Parse an entity id.

    Args:
        raw: Value from the path, query string or body
        label: Entity name used in the error message ("author", "book", ...)

    Raises:
        InvalidReference: raw is not a valid id
    """
    try:
        return uuid.UUID(str(raw).strip())
    except (TypeError, ValueError, AttributeError):
        raise InvalidReference(f"Invalid {label} ID")


def parse_ids(raw_ids: list[str], label: str) -> list[uuid.UUID]:
    """Parse several ids; one bad id rejects the whole list."""
    try:
        return [uuid.UUID(value) for value in raw_ids]
    except ValueError:
        raise InvalidReference(f"Invalid {label} ID(s)")


def build_command(model: type[ModelT], **values: Any) -> ModelT:
    """
    Build a command object, reporting pydantic errors as ValidationError.

    Only the given keyword arguments are passed, so model_fields_set
    reflects exactly the fields the client sent.
    """
    try:
        return model(**values)
    except pydantic.ValidationError as exc:
        messages = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        raise ValidationError("; ".join(messages))


# =============================================================================
# Query Parameters
# =============================================================================
def get_include_deleted(
    include_deleted: str | None = Query(
        default=None,
        alias="includeDeleted",
        description='Pass "true" to include soft-deleted books',
        examples=["true"],
    ),
) -> bool:
    return include_deleted == "true"


IncludeDeleted = Annotated[bool, Depends(get_include_deleted)]


class BookListParams:
    """
    Filter parameters for GET /books.

    All parameters are optional and combine with AND.

    Usage:
        GET /api/books?title=dune
        GET /api/books?author=<id>&categories=<id>,<id>
        GET /api/books?includeDeleted=true
    """

    def __init__(
        self,
        author: str | None = Query(
            default=None,
            description="Only books by this author id",
        ),
        categories: str | None = Query(
            default=None,
            description="Comma-separated category ids; books in any of them",
        ),
        title: str | None = Query(
            default=None,
            max_length=200,
            description="Filter by title (partial match, case-insensitive)",
            examples=["dune"],
        ),
        include_deleted: bool = Depends(get_include_deleted),
    ) -> None:
        self.author = author
        self.categories = categories
        self.title = title
        self.include_deleted = include_deleted

    def to_query(self) -> BookQuery:
        """
        Parse the raw values into a BookQuery.

        Raises:
            InvalidReference: malformed author or category id
        """
        author_id = parse_id(self.author, "author") if self.author else None

        category_ids: list[uuid.UUID] = []
        if self.categories:
            parts = [part.strip() for part in self.categories.split(",") if part.strip()]
            category_ids = parse_ids(parts, "category")

        return BookQuery(
            author_id=author_id,
            category_ids=category_ids,
            title=self.title or None,
            include_deleted=self.include_deleted,
        )


BookFilters = Annotated[BookListParams, Depends()]


# =============================================================================
# Book Write Forms
# =============================================================================
@dataclass
class BookCreateForm:
    command: BookCreate
    cover: UploadFile | None = None


@dataclass
class BookUpdateForm:
    command: BookUpdate
    cover: UploadFile | None = None


async def read_book_payload(request: Request) -> tuple[dict[str, Any], UploadFile | None]:
    """
    Read the fields of a book write and its cover file.

    Multipart and urlencoded forms are read with request.form(); the first
    non-empty file part is the cover, whatever its field name. A field
    sent several times is returned as a list. JSON bodies are returned
    as-is and carry no file.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise ValidationError("Malformed JSON body")
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return body, None

    form = await request.form()
    fields: dict[str, Any] = {}
    cover: UploadFile | None = None

    for key in dict.fromkeys(form.keys()):
        texts = []
        for value in form.getlist(key):
            if isinstance(value, UploadFile):
                if cover is None and value.filename:
                    cover = value
            else:
                texts.append(value)
        if texts:
            fields[key] = texts[0] if len(texts) == 1 else texts

    return fields, cover


def _text(value: Any) -> str:
    if isinstance(value, list):
        value = value[0] if value else None
    if value is None:
        return ""
    return str(value).strip()


async def get_book_create_form(request: Request) -> BookCreateForm:
    """
    Parse a POST /books request.

    Validation order: title and author present -> author id well-formed
    -> category ids well-formed. Existence checks happen in the store.
    """
    fields, cover = await read_book_payload(request)

    title = _text(fields.get("title"))
    author = _text(fields.get("author"))
    if not title or not author:
        raise ValidationError("Title and author are required")

    command = build_command(
        BookCreate,
        title=title,
        author=parse_id(author, "author"),
        categories=parse_ids(normalize_categories(fields.get("categories")), "category"),
    )
    return BookCreateForm(command=command, cover=cover)


async def get_book_update_form(request: Request) -> BookUpdateForm:
    """
    Parse a PUT /books/{id} request.

    Blank title/author values count as not provided. A categories field
    that is present always replaces the book's categories, so an empty
    value clears them.
    """
    fields, cover = await read_book_payload(request)
    values: dict[str, Any] = {}

    title = _text(fields.get("title"))
    if title:
        values["title"] = title

    author = _text(fields.get("author"))
    if author:
        values["author"] = parse_id(author, "author")

    if "categories" in fields:
        values["categories"] = parse_ids(
            normalize_categories(fields["categories"]), "category"
        )

    return BookUpdateForm(command=build_command(BookUpdate, **values), cover=cover)


BookCreateData = Annotated[BookCreateForm, Depends(get_book_create_form)]
BookUpdateData = Annotated[BookUpdateForm, Depends(get_book_update_form)]
