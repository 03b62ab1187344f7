"""
Book Reference Maintenance

Keeps the Author <-> Book and Category <-> Book relationships consistent
across the mutating flows.

HOW THE REVERSE INDEXES STAY CONSISTENT
=======================================
Author.books and Category.books are not stored lists. They are read-only
relationships over books.author_id and the book_categories table that
skip soft-deleted books. Maintaining them therefore means writing the
book side correctly:

    Flow                 | Book-side write              | Effect on reverse view
    ---------------------|------------------------------|------------------------------
    book created         | author + categories set      | book appears under both
    author changed       | author_id replaced           | moves from old to new author
    categories changed   | association rows replaced    | leaves old, joins new
    book soft-deleted    | deleted = True               | disappears from both
    author deleted       | author_id cleared on books   | (author row removed)
    category deleted     | association rows removed     | (category row removed)

Adds are set unions and removes are set differences, so repeating an
operation is a no-op. None of these functions commit; the catalog store
commits once per request so each flow is all-or-nothing.
"""

import logging
from collections.abc import Iterable

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from library_api.models import Author, Book, Category, book_categories

logger = logging.getLogger(__name__)


def _as_set(categories: Iterable[Category]) -> list[Category]:
    unique: dict = {}
    for category in categories:
        unique.setdefault(category.id, category)
    return list(unique.values())


def link_new_book(
    book: Book,
    author: Author,
    categories: Iterable[Category] = (),
) -> None:
    """Attach a freshly created book to its author and categories."""
    book.author = author
    book.categories = _as_set(categories)


def move_to_author(book: Book, author: Author) -> bool:
    """
    Point the book at a new author.

    Returns:
        True if the author actually changed
    """
    if book.author_id == author.id:
        return False
    logger.info(f"Moving book {book.id} from author {book.author_id} to {author.id}")
    book.author = author
    return True


def replace_categories(book: Book, categories: Iterable[Category]) -> None:
    """Full replace: the book leaves every previous category and joins the new ones."""
    book.categories = _as_set(categories)
    # association rows alone never touch the books row
    book.updated_at = func.now()


def detach_soft_deleted(book: Book) -> None:
    """
    Soft-delete the book.

    The book keeps its own author and categories so the relationship can
    be inspected or restored; it only drops out of Author.books and
    Category.books, which filter on deleted = false.
    """
    book.deleted = True


def release_author(db: Session, author: Author) -> int:
    """
    Clear the author reference on every book that points at author.

    Returns:
        Number of books updated
    """
    result = db.execute(
        update(Book)
        .where(Book.author_id == author.id)
        .values(author_id=None)
        .execution_options(synchronize_session="fetch")
    )
    logger.info(f"Cleared author {author.id} from {result.rowcount} book(s)")
    return result.rowcount


def release_category(db: Session, category: Category) -> int:
    """
    Pull category from the categories of every book listing it.

    Returns:
        Number of books updated
    """
    listed = select(book_categories.c.book_id).where(
        book_categories.c.category_id == category.id
    )
    db.execute(
        update(Book)
        .where(Book.id.in_(listed))
        .values(updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    result = db.execute(
        delete(book_categories).where(book_categories.c.category_id == category.id)
    )
    logger.info(f"Removed category {category.id} from {result.rowcount} book(s)")
    return result.rowcount
