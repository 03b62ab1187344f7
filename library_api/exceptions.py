"""
Catalog Error Taxonomy

Services raise these exceptions; the handlers registered in main.py turn
them into the error envelope:

    {"success": false, "error": "<message>"}

Each exception carries the HTTP status it maps to. NotFound defaults to
404 for direct lookups; write paths that reference a missing Author or
Category raise it with status 400 instead.
"""

from fastapi import status


class LibraryError(Exception):
    """Base class for errors that map to a client-facing response."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(LibraryError):
    """Missing or malformed field in a request."""


class InvalidReference(LibraryError):
    """Identifier that is not a syntactically valid id."""


class NotFound(LibraryError):
    """Referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class DuplicateKey(LibraryError):
    """Uniqueness constraint violated (category name)."""


class FileUploadError(LibraryError):
    """Uploaded file could not be accepted or stored."""


class FileTooLarge(FileUploadError):
    """Uploaded file exceeds the configured size limit."""
