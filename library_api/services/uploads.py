"""
Cover Image Storage

Stores uploaded book covers on the local filesystem. Only the generated
filename is kept on the Book; the file itself is served back by the
static mount in main.py under settings.uploads_url_path.

CoverStorage is constructed from Settings (directory, size limit,
accepted MIME types) and injected with get_cover_storage(), so tests can
point it at a temporary directory through dependency_overrides.
"""

import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO, Iterable

from starlette.datastructures import UploadFile

from library_api.config import get_settings
from library_api.exceptions import FileTooLarge, FileUploadError

logger = logging.getLogger(__name__)

# Extension used when the client filename carries none
DEFAULT_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def _stream_size(stream: BinaryIO) -> int:
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


class CoverStorage:
    """
    Filesystem store for cover images.

    Usage:
        storage = CoverStorage(Path("uploads"), max_bytes=5 * 1024 * 1024)
        filename = storage.save(upload)   # "cover-3f2a...c1.png"
        storage.discard(filename)
    """

    def __init__(
        self,
        directory: Path,
        max_bytes: int,
        allowed_types: Iterable[str] = tuple(DEFAULT_EXTENSIONS),
    ) -> None:
        self.directory = Path(directory)
        self.max_bytes = max_bytes
        self.allowed_types = {mime.lower() for mime in allowed_types}

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def validate(self, upload: UploadFile) -> None:
        """
        Check type and size of an upload without storing it.

        Raises:
            FileUploadError: empty upload or unsupported content type
            FileTooLarge: upload exceeds max_bytes
        """
        content_type = (upload.content_type or "").split(";")[0].strip().lower()
        if content_type not in self.allowed_types:
            raise FileUploadError(
                f"Unsupported file type '{content_type or 'unknown'}'. "
                f"Allowed types: {', '.join(sorted(self.allowed_types))}"
            )

        size = _stream_size(upload.file)
        if size == 0:
            raise FileUploadError("Uploaded file is empty")
        if size > self.max_bytes:
            raise FileTooLarge(
                f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB"
            )

    def build_filename(self, upload: UploadFile) -> str:
        content_type = (upload.content_type or "").split(";")[0].strip().lower()
        extension = Path(upload.filename or "").suffix.lower()
        if not extension or len(extension) > 10:
            extension = DEFAULT_EXTENSIONS.get(content_type, "")
        return f"cover-{uuid.uuid4().hex}{extension}"

    def save(self, upload: UploadFile) -> str:
        """
        Validate and store an upload.

        Returns:
            The generated filename (relative to the storage directory)
        """
        self.validate(upload)
        self.ensure_directory()
        filename = self.build_filename(upload)
        target = self.directory / filename
        try:
            with target.open("wb") as out:
                shutil.copyfileobj(upload.file, out)
        except OSError as exc:
            logger.error(f"Failed to store cover {filename}: {exc}")
            target.unlink(missing_ok=True)
            raise FileUploadError("Failed to store uploaded file") from exc

        logger.info(f"Stored cover image {filename} ({upload.filename})")
        return filename

    def discard(self, filename: str) -> None:
        """Remove a stored cover (used when the database write fails)."""
        (self.directory / filename).unlink(missing_ok=True)

    def path_for(self, filename: str) -> Path:
        return self.directory / filename


def get_cover_storage() -> CoverStorage:
    """FastAPI dependency returning storage configured from settings."""
    settings = get_settings()
    return CoverStorage(
        directory=settings.upload_dir,
        max_bytes=settings.max_upload_size,
        allowed_types=settings.allowed_image_types_list,
    )
