"""
Test Suite for the Library Catalog API

Test Organization:
- conftest.py: Shared fixtures (test database, client, cover storage, sample data)
- test_authors.py: /api/authors endpoints
- test_categories.py: /api/categories endpoints
- test_books.py: /api/books endpoints, filters, soft delete and covers
- test_references.py: author/category <-> book consistency
- test_normalizer.py: categories field normalization
- test_uploads.py: cover image storage
- test_errors.py: error envelope, health and rate limiter helpers

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_books.py

    # Run with verbose output
    pytest -v
"""
