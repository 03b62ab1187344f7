"""
SQLAlchemy Models Package

Model Relationships:
- Author <-> Book: One-to-Many (a book has one author; Author.books is a
                   read-only view of live books)
- Category <-> Book: Many-to-Many through book_categories
                     (Category.books is a read-only view of live books)

Import all models here so that:
1. They are available as: from library_api.models import Book, Author, Category
2. Alembic discovers them for migrations
"""

# The order matters for SQLAlchemy to resolve relationships
from library_api.models.author import Author
from library_api.models.category import Category
from library_api.models.book import Book, book_categories

__all__ = [
    "Author",
    "Category",
    "Book",
    "book_categories",
]
