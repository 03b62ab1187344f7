"""
Book Model

The central model of the catalog.

This file also contains the book_categories association table.

Source of truth:
================
A book's author is stored once, in books.author_id, and its categories
once, in book_categories. Author.books and Category.books are read-only
views over those rows that skip soft-deleted books, so the reverse
indexes are always consistent with the books they list.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    String,
    Table,
    Uuid,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.author import Author
    from library_api.models.category import Category


# =============================================================================
# Association Table
# =============================================================================
book_categories = Table(
    "book_categories",
    Base.metadata,
    Column(
        "book_id",
        Uuid,
        ForeignKey("books.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "category_id",
        Uuid,
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
    comment="Association table linking books to their categories",
)


class Book(Base):
    """
    Book model representing books in the catalog.

    Table: books

    Fields:
    - title: Book title (required, indexed)
    - author_id: The book's author; cleared when the author is deleted
    - cover_image: Generated filename of the uploaded cover, if any
    - deleted: Soft-delete marker

    Relationships:
    - author: Many-to-One
    - categories: Many-to-Many through book_categories

    Example:
        book = Book(title="Dune", author=author, categories=[scifi])
    """

    __tablename__ = "books"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    # Required when a book is written; NULL only after its author was deleted
    author_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("authors.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
        comment="Author of the book"
    )

    cover_image: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Filename of the uploaded cover image"
    )

    deleted: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=false(),
        index=True,
        nullable=False,
        comment="Soft-delete marker"
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

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    author: Mapped[Optional["Author"]] = relationship("Author")

    categories: Mapped[list["Category"]] = relationship(
        "Category",
        secondary=book_categories,
        order_by="Category.name",
    )

    @property
    def category_ids(self) -> list[uuid.UUID]:
        return [category.id for category in self.categories]

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}')"
