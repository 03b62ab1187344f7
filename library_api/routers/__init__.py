"""
API Routers Package

This package contains FastAPI routers that handle API endpoints.

Router Structure:
- authors.py: /api/authors/* endpoints
- categories.py: /api/categories/* endpoints
- books.py: /api/books/* endpoints

Each router is imported and registered in main.py.
"""

from library_api.routers.authors import router as authors_router
from library_api.routers.books import router as books_router
from library_api.routers.categories import router as categories_router

__all__ = [
    "authors_router",
    "books_router",
    "categories_router",
]
