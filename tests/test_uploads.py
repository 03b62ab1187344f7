"""
Tests for cover image storage.
"""

import io
import re

import pytest
from starlette.datastructures import Headers, UploadFile

from library_api.exceptions import FileTooLarge, FileUploadError
from library_api.services.uploads import CoverStorage


def make_upload(content: bytes, filename: str = "cover.png", content_type: str = "image/png") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def storage(tmp_path) -> CoverStorage:
    return CoverStorage(tmp_path / "covers", max_bytes=1024)


class TestCoverStorage:
    def test_save_writes_file(self, storage, png_bytes):
        filename = storage.save(make_upload(png_bytes))

        assert re.fullmatch(r"cover-[0-9a-f]{32}\.png", filename)
        assert storage.path_for(filename).read_bytes() == png_bytes

    def test_save_creates_directory(self, storage, png_bytes):
        assert not storage.directory.exists()

        storage.save(make_upload(png_bytes))

        assert storage.directory.is_dir()

    def test_filenames_are_unique(self, storage, png_bytes):
        first = storage.save(make_upload(png_bytes))
        second = storage.save(make_upload(png_bytes))

        assert first != second

    def test_extension_from_content_type(self, storage, png_bytes):
        filename = storage.save(make_upload(png_bytes, filename="cover", content_type="image/jpeg"))

        assert filename.endswith(".jpg")

    def test_content_type_parameters_ignored(self, storage, png_bytes):
        filename = storage.save(make_upload(png_bytes, content_type="image/PNG; charset=binary"))

        assert filename.endswith(".png")

    def test_rejects_non_image(self, storage):
        with pytest.raises(FileUploadError, match="Unsupported file type 'application/pdf'"):
            storage.save(make_upload(b"%PDF-1.4", filename="doc.pdf", content_type="application/pdf"))

    def test_rejects_empty_file(self, storage):
        with pytest.raises(FileUploadError, match="empty"):
            storage.save(make_upload(b""))

    def test_rejects_oversized_file(self, storage):
        with pytest.raises(FileTooLarge):
            storage.save(make_upload(b"\0" * 1025))

        assert not storage.directory.exists() or list(storage.directory.iterdir()) == []

    def test_file_too_large_is_upload_error(self):
        assert issubclass(FileTooLarge, FileUploadError)

    def test_discard(self, storage, png_bytes):
        filename = storage.save(make_upload(png_bytes))

        storage.discard(filename)
        storage.discard(filename)

        assert not storage.path_for(filename).exists()

    def test_custom_allowed_types(self, tmp_path, png_bytes):
        storage = CoverStorage(tmp_path, max_bytes=1024, allowed_types=["image/webp"])

        with pytest.raises(FileUploadError):
            storage.validate(make_upload(png_bytes))
