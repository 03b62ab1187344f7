"""
Database Configuration Module

This module sets up SQLAlchemy for database operations:
1. Engine: Connection pool to the database
2. SessionLocal: Factory for database sessions
3. Base: Parent class for all ORM models
4. get_db: FastAPI dependency for request-scoped sessions

Session Lifecycle:
- Open session at request start
- Use session for all database operations in the request
- Close session when request ends

Every write in the catalog (including its reference maintenance) is
committed once, at the end of the service call, so a request either
applies all of its row changes or none of them.
"""

from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from library_api.config import get_settings

settings = get_settings()


# =============================================================================
# Database Engine
# =============================================================================
# Key parameters:
# - pool_size / max_overflow: only meaningful for server databases
# - pool_pre_ping: Test connection health before using
# - echo: Log all SQL statements in debug mode

def engine_options(database_url: str) -> dict[str, Any]:
    """
    Build create_engine() keyword arguments for the given URL.

    SQLite uses its own pool classes, which reject the sizing arguments
    used for PostgreSQL, and needs check_same_thread disabled because
    FastAPI runs sync handlers in a thread pool.
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return {
            "connect_args": {"check_same_thread": False},
            "echo": settings.debug,
        }
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
        "echo": settings.debug,
    }


def build_engine(database_url: str | None = None) -> Engine:
    """Create an engine for database_url (defaults to settings.database_url)."""
    url = database_url or settings.database_url
    return create_engine(url, **engine_options(url))


engine = build_engine()


# =============================================================================
# Session Factory
# =============================================================================
# - autocommit=False: services decide when to commit
# - autoflush=False: no implicit flush before queries

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover tables for migrations.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Creates a session, yields it to the route handler and closes it when
    the request ends, even if the handler raised.

    Usage in Routes:
        @router.get("/books")
        def list_books(db: DbSession):
            ...

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables(bind: Engine | None = None) -> None:
    """
    Create all database tables.

    Useful for development and tests. In production, use Alembic
    migrations instead.
    """
    # Import models so every table is registered on Base.metadata
    import library_api.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def drop_tables(bind: Engine | None = None) -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Only use in development and tests.
    """
    Base.metadata.drop_all(bind=bind or engine)
