"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

WHY Separate Schemas from SQLAlchemy Models?
============================================
1. Security: Control exactly what data is exposed in API responses
2. Validation: Different rules for create vs update vs response
3. Decoupling: Database schema can evolve independently of API
4. Documentation: Schemas generate OpenAPI documentation

Schema Naming Convention:
- XxxCreate: Command for creating a record
- XxxUpdate: Command for updating a record (fields optional)
- XxxResponse: Fields returned in API responses
- XxxSummary: Projection embedded in another entity's response
"""

from library_api.schemas.author import (
    AuthorBookSummary,
    AuthorCreate,
    AuthorResponse,
    AuthorSummary,
    AuthorUpdate,
)
from library_api.schemas.book import (
    BookCreate,
    BookResponse,
    BookUpdate,
)
from library_api.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategorySummary,
    CategoryUpdate,
)
from library_api.schemas.common import ApiResponse, ErrorResponse

__all__ = [
    # Envelopes
    "ApiResponse",
    "ErrorResponse",
    # Author schemas
    "AuthorCreate",
    "AuthorUpdate",
    "AuthorResponse",
    "AuthorSummary",
    "AuthorBookSummary",
    # Category schemas
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategorySummary",
    # Book schemas
    "BookCreate",
    "BookUpdate",
    "BookResponse",
]
