#!/usr/bin/env python3
"""
Database Seed Script

Populates the catalog with sample authors, categories and books for
development.

USAGE:
    # From the project root with the virtualenv activated
    python scripts/seed_data.py

This script:
1. Connects to the database using library_api settings
2. Clears existing catalog data (optional)
3. Creates sample authors and categories
4. Creates books through the same reference helpers the API uses
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from library_api.database import SessionLocal, create_tables
from library_api.models import Author, Book, Category, book_categories
from library_api.services import references


AUTHORS = [
    {"name": "George Orwell", "country": "United Kingdom"},
    {"name": "Jane Austen", "country": "United Kingdom"},
    {"name": "Gabriel García Márquez", "country": "Colombia"},
    {"name": "Chimamanda Ngozi Adichie", "country": "Nigeria"},
    {"name": "Isaac Asimov", "country": "United States"},
    {"name": "Haruki Murakami", "country": "Japan"},
]

CATEGORIES = [
    "Science Fiction",
    "Dystopian",
    "Classic Literature",
    "Romance",
    "Magical Realism",
    "Contemporary Fiction",
]

BOOKS = [
    ("1984", "George Orwell", ["Science Fiction", "Dystopian", "Classic Literature"]),
    ("Animal Farm", "George Orwell", ["Classic Literature"]),
    ("Pride and Prejudice", "Jane Austen", ["Romance", "Classic Literature"]),
    ("One Hundred Years of Solitude", "Gabriel García Márquez", ["Magical Realism"]),
    ("Half of a Yellow Sun", "Chimamanda Ngozi Adichie", ["Contemporary Fiction"]),
    ("Foundation", "Isaac Asimov", ["Science Fiction"]),
    ("I, Robot", "Isaac Asimov", ["Science Fiction"]),
    ("Kafka on the Shore", "Haruki Murakami", ["Magical Realism", "Contemporary Fiction"]),
]


def clear_data(db: Session) -> None:
    """Remove every book, author and category."""
    print("Clearing existing data...")
    db.execute(delete(book_categories))
    db.execute(delete(Book))
    db.execute(delete(Author))
    db.execute(delete(Category))
    db.commit()
    print("Data cleared.")


def create_authors(db: Session) -> dict[str, Author]:
    print("Creating authors...")
    authors = {data["name"]: Author(**data) for data in AUTHORS}
    db.add_all(authors.values())
    db.commit()
    print(f"Created {len(authors)} authors.")
    return authors


def create_categories(db: Session) -> dict[str, Category]:
    print("Creating categories...")
    categories = {name: Category(name=name) for name in CATEGORIES}
    db.add_all(categories.values())
    db.commit()
    print(f"Created {len(categories)} categories.")
    return categories


def create_books(
    db: Session,
    authors: dict[str, Author],
    categories: dict[str, Category],
) -> list[Book]:
    """Create sample books linked to their author and categories."""
    print("Creating books...")
    books = []
    for title, author_name, category_names in BOOKS:
        book = Book(title=title, deleted=False)
        references.link_new_book(
            book,
            authors[author_name],
            [categories[name] for name in category_names],
        )
        db.add(book)
        books.append(book)

    db.commit()
    print(f"Created {len(books)} books.")
    return books


def seed_database(clear_existing: bool = True) -> None:
    """
    Seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    create_tables()
    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        authors = create_authors(db)
        categories = create_categories(db)
        books = create_books(db, authors, categories)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Authors: {len(authors)}")
        print(f"  - Categories: {len(categories)}")
        print(f"  - Books: {len(books)}")
        print("\nAPI documentation at http://localhost:3000/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
