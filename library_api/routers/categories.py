"""
Categories Router

CRUD endpoints for categories.
Category names are unique; duplicates are rejected with 400.
"""

from fastapi import APIRouter, Request, status

from library_api.config import get_settings
from library_api.dependencies import DbSession, parse_id
from library_api.schemas import (
    ApiResponse,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ErrorResponse,
)
from library_api.services import catalog
from library_api.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request, ID or duplicate name"},
        404: {"model": ErrorResponse, "description": "Category not found"},
    },
)


@router.get(
    "",
    response_model=ApiResponse[list[CategoryResponse]],
    response_model_exclude_none=True,
    summary="List all categories",
)
@limiter.limit(settings.rate_limit_default)
def list_categories(request: Request, db: DbSession) -> ApiResponse[list[CategoryResponse]]:
    """List all categories."""
    categories = catalog.list_categories(db)
    return ApiResponse(
        count=len(categories),
        data=[CategoryResponse.model_validate(c) for c in categories],
    )


@router.get(
    "/{category_id}",
    response_model=ApiResponse[CategoryResponse],
    response_model_exclude_none=True,
    summary="Get a category by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_category(
    request: Request,
    category_id: str,
    db: DbSession,
) -> ApiResponse[CategoryResponse]:
    """Get a single category by ID."""
    category = catalog.get_category(db, parse_id(category_id, "category"))
    return ApiResponse(data=CategoryResponse.model_validate(category))


@router.post(
    "",
    response_model=ApiResponse[CategoryResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new category",
)
@limiter.limit(settings.rate_limit_write)
def create_category(
    request: Request,
    category_data: CategoryCreate,
    db: DbSession,
) -> ApiResponse[CategoryResponse]:
    """
    Create a new category.

    If a category with the same name exists, a 400 error is returned.
    """
    category = catalog.create_category(db, category_data)
    return ApiResponse(data=CategoryResponse.model_validate(category))


@router.put(
    "/{category_id}",
    response_model=ApiResponse[CategoryResponse],
    response_model_exclude_none=True,
    summary="Rename a category",
)
@limiter.limit(settings.rate_limit_write)
def update_category(
    request: Request,
    category_id: str,
    category_data: CategoryUpdate,
    db: DbSession,
) -> ApiResponse[CategoryResponse]:
    """Update an existing category's name."""
    category = catalog.update_category(
        db, parse_id(category_id, "category"), category_data
    )
    return ApiResponse(data=CategoryResponse.model_validate(category))


@router.delete(
    "/{category_id}",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    summary="Delete a category",
    description=(
        "Permanently delete a category. It is removed from the categories "
        "of every book that listed it; the books are kept."
    ),
)
@limiter.limit(settings.rate_limit_write)
def delete_category(
    request: Request,
    category_id: str,
    db: DbSession,
) -> ApiResponse:
    """Delete a category."""
    catalog.delete_category(db, parse_id(category_id, "category"))
    return ApiResponse(message="Category deleted successfully")
