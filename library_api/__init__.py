"""
Library Catalog API Package

REST backend for a library catalog of books, authors and categories.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine, session factory and declarative base
- exceptions.py: Domain error taxonomy mapped to HTTP responses
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection (sessions, ids, book forms, filters)
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Catalog store, reference maintenance, input normalization,
  cover storage and rate limiting
"""

__version__ = "0.1.0"
