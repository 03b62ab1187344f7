"""
Authors Router

CRUD endpoints for authors.
Follows the same patterns as the books router.
"""

from fastapi import APIRouter, Request, status

from library_api.config import get_settings
from library_api.dependencies import DbSession, parse_id
from library_api.schemas import (
    ApiResponse,
    AuthorCreate,
    AuthorResponse,
    AuthorUpdate,
    ErrorResponse,
)
from library_api.services import catalog
from library_api.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/authors",
    tags=["Authors"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request or author ID"},
        404: {"model": ErrorResponse, "description": "Author not found"},
    },
)


@router.get(
    "",
    response_model=ApiResponse[list[AuthorResponse]],
    response_model_exclude_none=True,
    summary="List all authors",
    description="Get all authors with their books expanded to title and cover image.",
)
@limiter.limit(settings.rate_limit_default)
def list_authors(request: Request, db: DbSession) -> ApiResponse[list[AuthorResponse]]:
    """List all authors."""
    authors = catalog.list_authors(db)
    return ApiResponse(
        count=len(authors),
        data=[AuthorResponse.model_validate(a) for a in authors],
    )


@router.get(
    "/{author_id}",
    response_model=ApiResponse[AuthorResponse],
    response_model_exclude_none=True,
    summary="Get an author by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_author(
    request: Request,
    author_id: str,
    db: DbSession,
) -> ApiResponse[AuthorResponse]:
    """Get a single author by ID."""
    author = catalog.get_author(db, parse_id(author_id, "author"))
    return ApiResponse(data=AuthorResponse.model_validate(author))


@router.post(
    "",
    response_model=ApiResponse[AuthorResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new author",
    description="Create an author. Both name and country are required.",
)
@limiter.limit(settings.rate_limit_write)
def create_author(
    request: Request,
    author_data: AuthorCreate,
    db: DbSession,
) -> ApiResponse[AuthorResponse]:
    """Create a new author; the new author has no books."""
    author = catalog.create_author(db, author_data)
    return ApiResponse(data=AuthorResponse.model_validate(author))


@router.put(
    "/{author_id}",
    response_model=ApiResponse[AuthorResponse],
    response_model_exclude_none=True,
    summary="Update an author",
    description="Partial update: only the fields present in the body change.",
)
@limiter.limit(settings.rate_limit_write)
def update_author(
    request: Request,
    author_id: str,
    author_data: AuthorUpdate,
    db: DbSession,
) -> ApiResponse[AuthorResponse]:
    """Update an existing author."""
    author = catalog.update_author(db, parse_id(author_id, "author"), author_data)
    return ApiResponse(data=AuthorResponse.model_validate(author))


@router.delete(
    "/{author_id}",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    summary="Delete an author",
    description=(
        "Permanently delete an author. Books by the author are kept "
        "and lose their author reference."
    ),
)
@limiter.limit(settings.rate_limit_write)
def delete_author(
    request: Request,
    author_id: str,
    db: DbSession,
) -> ApiResponse:
    """Delete an author."""
    catalog.delete_author(db, parse_id(author_id, "author"))
    return ApiResponse(message="Author deleted successfully")
