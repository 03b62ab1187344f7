"""
Books Router

CRUD endpoints for books.

Demonstrates:
- Filtering by author, categories, title and soft-delete state
- Form-encoded writes with an optional cover image (any file field name)
- Relationship maintenance with authors and categories
- Soft deletion
"""

from fastapi import APIRouter, Request, status

from library_api.config import get_settings
from library_api.dependencies import (
    BookCreateData,
    BookFilters,
    BookUpdateData,
    Covers,
    DbSession,
    IncludeDeleted,
    parse_id,
)
from library_api.schemas import ApiResponse, BookResponse, ErrorResponse
from library_api.services import catalog
from library_api.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request, ID, reference or file"},
        404: {"model": ErrorResponse, "description": "Book not found"},
    },
)

# Book writes parse the body by hand (any file field name is accepted),
# so the form is described for OpenAPI here
_BOOK_FORM_FIELDS = {
    "title": {"type": "string"},
    "author": {"type": "string", "format": "uuid"},
    "categories": {
        "type": "string",
        "description": 'JSON array ("[\\"id1\\",\\"id2\\"]"), comma-separated ids, or one id',
    },
    "coverImage": {"type": "string", "format": "binary"},
}


def _book_form_openapi(required: list[str]) -> dict:
    schema = {"type": "object", "properties": _BOOK_FORM_FIELDS}
    if required:
        schema["required"] = required
    return {
        "requestBody": {
            "required": bool(required),
            "content": {
                "multipart/form-data": {"schema": schema},
                "application/json": {"schema": schema},
            },
        }
    }


@router.get(
    "",
    response_model=ApiResponse[list[BookResponse]],
    response_model_exclude_none=True,
    summary="List books",
    description=(
        "List books newest first, with author and categories expanded. "
        "Soft-deleted books are excluded unless includeDeleted=true."
    ),
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    db: DbSession,
    filters: BookFilters,
) -> ApiResponse[list[BookResponse]]:
    """
    List books with optional filtering.

    Examples:
        GET /api/books?title=dune
        GET /api/books?categories=<id>,<id>
        GET /api/books?author=<id>&includeDeleted=true
    """
    books = catalog.list_books(db, filters.to_query())
    return ApiResponse(
        count=len(books),
        data=[BookResponse.model_validate(book) for book in books],
    )


@router.get(
    "/{book_id}",
    response_model=ApiResponse[BookResponse],
    response_model_exclude_none=True,
    summary="Get a book by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_book(
    request: Request,
    book_id: str,
    db: DbSession,
    include_deleted: IncludeDeleted,
) -> ApiResponse[BookResponse]:
    """Get a single book; soft-deleted books need includeDeleted=true."""
    book = catalog.get_book(db, parse_id(book_id, "book"), include_deleted=include_deleted)
    return ApiResponse(data=BookResponse.model_validate(book))


@router.post(
    "",
    response_model=ApiResponse[BookResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    description=(
        "Create a book from multipart/urlencoded form data or JSON. "
        "The author and every listed category must exist. One file field "
        "of any name is stored as the cover image."
    ),
    openapi_extra=_book_form_openapi(["title", "author"]),
)
@limiter.limit(settings.rate_limit_write)
def create_book(
    request: Request,
    form: BookCreateData,
    db: DbSession,
    storage: Covers,
) -> ApiResponse[BookResponse]:
    """
    Create a new book.

    Raises:
        ValidationError: title or author missing
        InvalidReference: malformed author or category id
        NotFound (400): author or a category does not exist
        FileUploadError / FileTooLarge: cover rejected
    """
    book = catalog.create_book(db, form.command, storage, form.cover)
    return ApiResponse(data=BookResponse.model_validate(book))


@router.put(
    "/{book_id}",
    response_model=ApiResponse[BookResponse],
    response_model_exclude_none=True,
    summary="Update a book",
    description=(
        "Update the provided fields only. A categories field replaces the "
        "book's categories; a file replaces the cover image."
    ),
    openapi_extra=_book_form_openapi([]),
)
@limiter.limit(settings.rate_limit_write)
def update_book(
    request: Request,
    book_id: str,
    form: BookUpdateData,
    db: DbSession,
    storage: Covers,
) -> ApiResponse[BookResponse]:
    """Update an existing book."""
    book = catalog.update_book(
        db, parse_id(book_id, "book"), form.command, storage, form.cover
    )
    return ApiResponse(data=BookResponse.model_validate(book))


@router.delete(
    "/{book_id}",
    response_model=ApiResponse[BookResponse],
    response_model_exclude_none=True,
    summary="Delete a book",
    description=(
        "Soft delete: the book is flagged deleted and removed from its "
        "author's and categories' book lists, but keeps its own fields."
    ),
)
@limiter.limit(settings.rate_limit_write)
def delete_book(
    request: Request,
    book_id: str,
    db: DbSession,
) -> ApiResponse[BookResponse]:
    """Soft-delete a book."""
    book = catalog.soft_delete_book(db, parse_id(book_id, "book"))
    return ApiResponse(
        message="Book deleted successfully",
        data=BookResponse.model_validate(book),
    )
