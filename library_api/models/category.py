"""
Category Model

Represents a book category in the catalog.

Categories allow books to be grouped for browsing and filtering.
A book can belong to multiple categories.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.book import Book


class Category(Base):
    """
    Category model representing book categories.

    Table: categories

    Relationships:
    - books: Live books listing this category, read through the
      book_categories association table

    Indexes:
    - name: Unique index preventing duplicate categories
    """

    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)

    # unique=True creates a UNIQUE constraint; concurrent duplicate inserts
    # are rejected by the database
    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
        comment="Category name (e.g., 'Science Fiction', 'Mystery')"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    books: Mapped[List["Book"]] = relationship(
        "Book",
        secondary="book_categories",
        primaryjoin="Category.id == book_categories.c.category_id",
        secondaryjoin="and_(Book.id == book_categories.c.book_id, Book.deleted.is_(False))",
        viewonly=True,
        order_by="Book.created_at",
    )

    @property
    def book_ids(self) -> list[uuid.UUID]:
        """Ids of the live books in this category."""
        return [book.id for book in self.books]

    def __repr__(self) -> str:
        return f"Category(id={self.id}, name='{self.name}')"
