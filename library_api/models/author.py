"""
Author Model

An author owns no stored list of books: Author.books is read from
books.author_id, so it only ever shows live books that point here.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

# Book imports Base too; import it for annotations only
if TYPE_CHECKING:
    from library_api.models.book import Book


class Author(Base):
    """
    Author model representing writers in the catalog.

    Table: authors

    Relationships:
    - books: Live (not soft-deleted) books whose author is this author.
      Read-only view derived from books.author_id, so it can never
      disagree with the books themselves.

    Example:
        author = Author(name="Frank Herbert", country="USA")
        db.add(author)
        db.commit()
    """

    __tablename__ = "authors"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    # UUIDs are generated client-side so ids are known before flush
    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    name: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Author's full name"
    )

    country: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Author's country"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    # server_default=func.now() lets the database be the source of truth
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the author record was created"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="When the author record was last updated"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    # viewonly: writes go through Book.author_id only
    books: Mapped[list["Book"]] = relationship(
        "Book",
        primaryjoin="and_(Author.id == foreign(Book.author_id), Book.deleted.is_(False))",
        viewonly=True,
        order_by="Book.created_at",
    )

    @property
    def book_ids(self) -> list[uuid.UUID]:
        """Ids of the author's live books."""
        return [book.id for book in self.books]

    def __repr__(self) -> str:
        return f"Author(id={self.id}, name='{self.name}')"
