"""
pytest Fixtures for Library Catalog Tests

Shared fixtures used across all test files.

For database tests, every test gets its own in-memory SQLite engine:
- Tables are created fresh for each test
- Services commit (and roll back on IntegrityError) exactly as they do
  in production, with no outer transaction to interfere
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os
import shutil
import tempfile

UPLOAD_DIR = tempfile.mkdtemp(prefix="library-covers-")

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["UPLOAD_DIR"] = UPLOAD_DIR
os.environ["DEBUG"] = "false"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from library_api.config import get_settings
from library_api.database import create_tables, drop_tables, get_db
from library_api.main import app
from library_api.models import Author, Book, Category
from library_api.services import references
from library_api.services.uploads import CoverStorage, get_cover_storage

# Small limit so oversized uploads are cheap to build
TEST_MAX_UPLOAD = 100 * 1024


@pytest.fixture(scope="session", autouse=True)
def upload_dir() -> Generator[str, None, None]:
    """Temporary upload directory shared by the whole test run."""
    yield UPLOAD_DIR
    shutil.rmtree(UPLOAD_DIR, ignore_errors=True)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture
def engine():
    """
    SQLite in-memory engine with the full schema.

    StaticPool keeps the single connection alive; without it the
    in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)

    yield engine

    drop_tables(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Session on the test engine, shared by fixtures and the client."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture
def cover_storage() -> CoverStorage:
    """Cover storage on the upload directory served under /uploads."""
    settings = get_settings()
    return CoverStorage(
        directory=settings.upload_dir,
        max_bytes=TEST_MAX_UPLOAD,
        allowed_types=settings.allowed_image_types_list,
    )


@pytest.fixture
def client(
    db_session: Session,
    cover_storage: CoverStorage,
) -> Generator[TestClient, None, None]:
    """
    Test client wired to the test database and cover storage.

    get_db and get_cover_storage are overridden through
    app.dependency_overrides.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cover_storage] = lambda: cover_storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_author(db_session: Session) -> Author:
    author = Author(name="Frank Herbert", country="USA")
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def second_author(db_session: Session) -> Author:
    author = Author(name="Ursula K. Le Guin", country="USA")
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def sample_category(db_session: Session) -> Category:
    category = Category(name="Science Fiction")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def second_category(db_session: Session) -> Category:
    category = Category(name="Classics")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def sample_book(
    db_session: Session,
    sample_author: Author,
    sample_category: Category,
) -> Book:
    """A live book by sample_author in sample_category."""
    book = Book(title="Dune", deleted=False)
    references.link_new_book(book, sample_author, [sample_category])
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


# =============================================================================
# HELPERS
# =============================================================================
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x02\x00\x00\x00\x90wS\xde\x00\x00\x00\x0cIDATx\x9cc\xf8\x0f\x00"
    b"\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture
def png_bytes() -> bytes:
    """A tiny valid PNG image."""
    return PNG_BYTES
