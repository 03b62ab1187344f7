"""
Catalog Store

Create / read / update / delete operations for authors, categories and
books. Routers stay thin: they parse the request into a command object,
call one function here and wrap the result in the response envelope.

Every write function commits exactly once, after the row changes and
their reference maintenance (services/references.py) are staged, so a
request either applies completely or not at all.

Errors raised (see exceptions.py):
- NotFound (404): direct lookup of a missing entity
- NotFound (400): write referencing a missing author or category
- DuplicateKey (400): category name already taken
- FileUploadError / FileTooLarge (400): rejected cover image
"""

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from starlette.datastructures import UploadFile

from library_api.exceptions import DuplicateKey, NotFound
from library_api.models import Author, Book, Category, book_categories
from library_api.schemas import (
    AuthorCreate,
    AuthorUpdate,
    BookCreate,
    BookUpdate,
    CategoryCreate,
    CategoryUpdate,
)
from library_api.services import references
from library_api.services.uploads import CoverStorage

logger = logging.getLogger(__name__)

# Expansion used by every book read
BOOK_EXPANSION = (selectinload(Book.author), selectinload(Book.categories))


# =============================================================================
# Authors
# =============================================================================
def list_authors(db: Session) -> Sequence[Author]:
    """All authors with their live books, ordered by name."""
    stmt = select(Author).options(selectinload(Author.books)).order_by(Author.name)
    return db.execute(stmt).scalars().all()


def get_author(db: Session, author_id: uuid.UUID) -> Author:
    """
    Get an author by id.

    Raises:
        NotFound: 404 if the author does not exist
    """
    stmt = (
        select(Author)
        .options(selectinload(Author.books))
        .where(Author.id == author_id)
    )
    author = db.execute(stmt).scalar_one_or_none()
    if author is None:
        raise NotFound("Author not found")
    return author


def create_author(db: Session, data: AuthorCreate) -> Author:
    author = Author(name=data.name, country=data.country)
    db.add(author)
    db.commit()
    logger.info(f"Created author {author.id} '{author.name}'")
    return get_author(db, author.id)


def update_author(db: Session, author_id: uuid.UUID, data: AuthorUpdate) -> Author:
    """Apply the fields present in the request body."""
    author = get_author(db, author_id)

    for name, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(author, name, value)

    db.commit()
    return get_author(db, author_id)


def delete_author(db: Session, author_id: uuid.UUID) -> None:
    """
    Hard-delete an author.

    Books written by the author are kept; their author reference is
    cleared.
    """
    author = get_author(db, author_id)
    references.release_author(db, author)
    db.delete(author)
    db.commit()
    logger.info(f"Deleted author {author_id}")


# =============================================================================
# Categories
# =============================================================================
def list_categories(db: Session) -> Sequence[Category]:
    stmt = (
        select(Category)
        .options(selectinload(Category.books))
        .order_by(Category.name)
    )
    return db.execute(stmt).scalars().all()


def get_category(db: Session, category_id: uuid.UUID) -> Category:
    """
    Get a category by id.

    Raises:
        NotFound: 404 if the category does not exist
    """
    stmt = (
        select(Category)
        .options(selectinload(Category.books))
        .where(Category.id == category_id)
    )
    category = db.execute(stmt).scalar_one_or_none()
    if category is None:
        raise NotFound("Category not found")
    return category


def _commit_category(db: Session, name: str) -> None:
    # The unique index is the only arbiter for concurrent writers
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"Duplicate category name '{name}'")
        raise DuplicateKey("Category name already exists") from exc


def create_category(db: Session, data: CategoryCreate) -> Category:
    """
    Create a category.

    Raises:
        DuplicateKey: a category with the same name exists
    """
    category = Category(name=data.name)
    db.add(category)
    _commit_category(db, data.name)
    logger.info(f"Created category {category.id} '{category.name}'")
    return get_category(db, category.id)


def update_category(
    db: Session,
    category_id: uuid.UUID,
    data: CategoryUpdate,
) -> Category:
    category = get_category(db, category_id)
    category.name = data.name
    _commit_category(db, data.name)
    return get_category(db, category_id)


def delete_category(db: Session, category_id: uuid.UUID) -> None:
    """
    Hard-delete a category.

    The category is pulled from every book that listed it; the books
    themselves are kept.
    """
    category = get_category(db, category_id)
    references.release_category(db, category)
    db.delete(category)
    db.commit()
    logger.info(f"Deleted category {category_id}")


# =============================================================================
# Books
# =============================================================================
@dataclass
class BookQuery:
    """Filters for list_books(). Empty fields are ignored."""

    author_id: uuid.UUID | None = None
    category_ids: list[uuid.UUID] = field(default_factory=list)
    title: str | None = None
    include_deleted: bool = False


def list_books(db: Session, query: BookQuery) -> Sequence[Book]:
    """
    List books, newest first.

    Filters combine with AND:
    - author_id: books written by that author
    - category_ids: books in at least one of the categories
    - title: case-insensitive substring match
    - include_deleted: also return soft-deleted books
    """
    stmt = select(Book).options(*BOOK_EXPANSION)

    if not query.include_deleted:
        stmt = stmt.where(Book.deleted.is_(False))

    if query.author_id is not None:
        stmt = stmt.where(Book.author_id == query.author_id)

    if query.category_ids:
        in_categories = select(book_categories.c.book_id).where(
            book_categories.c.category_id.in_(query.category_ids)
        )
        stmt = stmt.where(Book.id.in_(in_categories))

    if query.title:
        stmt = stmt.where(Book.title.icontains(query.title, autoescape=True))

    stmt = stmt.order_by(Book.created_at.desc())
    return db.execute(stmt).scalars().all()


def get_book(
    db: Session,
    book_id: uuid.UUID,
    include_deleted: bool = False,
) -> Book:
    """
    Get a book by id with author and categories expanded.

    Soft-deleted books are only returned when include_deleted is True.

    Raises:
        NotFound: 404 if absent or excluded
    """
    stmt = select(Book).options(*BOOK_EXPANSION).where(Book.id == book_id)
    if not include_deleted:
        stmt = stmt.where(Book.deleted.is_(False))

    book = db.execute(stmt).scalar_one_or_none()
    if book is None:
        raise NotFound("Book not found")
    return book


def require_author(db: Session, author_id: uuid.UUID) -> Author:
    """Resolve the author a book write refers to (400 when missing)."""
    author = db.get(Author, author_id)
    if author is None:
        raise NotFound("Author not found", status_code=status.HTTP_400_BAD_REQUEST)
    return author


def require_categories(db: Session, category_ids: list[uuid.UUID]) -> list[Category]:
    """Resolve every category a book write refers to (400 if any is missing)."""
    if not category_ids:
        return []

    wanted = set(category_ids)
    found = db.execute(
        select(Category).where(Category.id.in_(wanted))
    ).scalars().all()

    if len(found) != len(wanted):
        missing = wanted - {category.id for category in found}
        logger.info(f"Rejected book write, unknown categories: {sorted(map(str, missing))}")
        raise NotFound(
            "One or more categories not found",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    by_id = {category.id: category for category in found}
    return [by_id[category_id] for category_id in category_ids]


def _store_cover(
    storage: CoverStorage,
    cover: UploadFile | None,
) -> str | None:
    return storage.save(cover) if cover is not None else None


def _commit_book(db: Session, storage: CoverStorage, filename: str | None) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        if filename:
            storage.discard(filename)
        raise


def create_book(
    db: Session,
    data: BookCreate,
    storage: CoverStorage,
    cover: UploadFile | None = None,
) -> Book:
    """
    Create a book.

    Order: author exists -> categories exist -> cover stored -> book row
    and references written in one commit -> re-fetched with expansions.
    Nothing is written if any step fails.
    """
    author = require_author(db, data.author)
    categories = require_categories(db, data.categories)
    filename = _store_cover(storage, cover)

    book = Book(title=data.title, cover_image=filename, deleted=False)
    references.link_new_book(book, author, categories)
    db.add(book)
    _commit_book(db, storage, filename)

    logger.info(
        f"Created book {book.id} '{book.title}' "
        f"(author={author.id}, categories={len(categories)})"
    )
    return get_book(db, book.id, include_deleted=True)


def update_book(
    db: Session,
    book_id: uuid.UUID,
    data: BookUpdate,
    storage: CoverStorage,
    cover: UploadFile | None = None,
) -> Book:
    """
    Update the fields present in data (and the cover, if a file was sent).

    The book is addressed directly, so soft-deleted books can be updated
    too.
    """
    book = get_book(db, book_id, include_deleted=True)
    provided = data.model_fields_set

    author = None
    if "author" in provided and data.author is not None:
        author = require_author(db, data.author)

    categories = None
    if "categories" in provided and data.categories is not None:
        categories = require_categories(db, data.categories)

    filename = _store_cover(storage, cover)

    if "title" in provided and data.title:
        book.title = data.title
    if author is not None:
        references.move_to_author(book, author)
    if categories is not None:
        references.replace_categories(book, categories)
    if filename:
        book.cover_image = filename

    _commit_book(db, storage, filename)
    return get_book(db, book_id, include_deleted=True)


def soft_delete_book(db: Session, book_id: uuid.UUID) -> Book:
    """Mark a book deleted; it drops out of its author's and categories' books."""
    book = get_book(db, book_id, include_deleted=True)
    references.detach_soft_deleted(book)
    db.commit()
    logger.info(f"Soft-deleted book {book_id}")
    return get_book(db, book_id, include_deleted=True)
