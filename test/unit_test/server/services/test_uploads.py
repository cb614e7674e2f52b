"""
Unit tests for image upload storage.

Files are written under the per-test uploads directory set up by the
``storage_dirs`` fixture.
"""

from io import BytesIO
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from farmops.core.errors import BadRequestError
from farmops.server.services.uploads import image_extension, path_for_url, remove_upload, save_image


def _upload(filename: str, content_type: str, data: bytes = b"image-bytes") -> UploadFile:
    return UploadFile(file=BytesIO(data), filename=filename, headers=Headers({"content-type": content_type}))


class TestImageExtension:
    """Test the stored extension of uploaded images."""

    @pytest.mark.parametrize(
        "filename,content_type,expected",
        [
            ("logo.PNG", "image/png", ".png"),
            ("photo.jpeg", "image/jpeg", ".jpeg"),
            ("photo", "image/jpeg", ".jpg"),
            ("shot.bin", "image/webp", ".webp"),
        ],
    )
    def test_allowed_types(self, filename, content_type, expected):
        upload = Mock(spec=UploadFile)
        upload.filename = filename
        upload.content_type = content_type
        assert image_extension(upload) == expected

    def test_rejects_other_types(self):
        upload = Mock(spec=UploadFile)
        upload.filename = "notes.png"
        upload.content_type = "text/plain"
        with pytest.raises(BadRequestError) as exc_info:
            image_extension(upload)
        assert exc_info.value.code == "INVALID_FILE_TYPE"


class TestPaths:
    def test_path_for_stored_url(self, storage_dirs):
        assert path_for_url("/uploads/skus/abc.png") == Path(storage_dirs / "uploads" / "skus" / "abc.png")

    @pytest.mark.parametrize("url", [None, "", "https://cdn.example.com/logo.png"])
    def test_foreign_urls(self, url):
        assert path_for_url(url) is None

    def test_remove_missing_file_is_noop(self):
        remove_upload("/uploads/skus/missing.png")


class TestSaveImage:
    """Test storing uploaded images."""

    @pytest.mark.asyncio
    async def test_saves_and_returns_public_url(self, storage_dirs):
        url = await save_image(_upload("logo.png", "image/png", b"png-data"), "farms", "farm-1")

        assert url == "/uploads/farms/farm-1.png"
        assert (storage_dirs / "uploads" / "farms" / "farm-1.png").read_bytes() == b"png-data"

    @pytest.mark.asyncio
    async def test_replaces_previous_file(self, storage_dirs):
        first = await save_image(_upload("a.png", "image/png"), "skus", "sku-1")
        second = await save_image(_upload("b.webp", "image/webp"), "skus", "sku-1", previous_url=first)

        assert second == "/uploads/skus/sku-1.webp"
        assert not (storage_dirs / "uploads" / "skus" / "sku-1.png").exists()
        assert (storage_dirs / "uploads" / "skus" / "sku-1.webp").exists()

    @pytest.mark.asyncio
    async def test_same_name_replacement_keeps_file(self, storage_dirs):
        first = await save_image(_upload("a.png", "image/png", b"old"), "skus", "sku-1")
        second = await save_image(_upload("b.png", "image/png", b"new"), "skus", "sku-1", previous_url=first)

        assert second == first
        assert (storage_dirs / "uploads" / "skus" / "sku-1.png").read_bytes() == b"new"

    @pytest.mark.asyncio
    async def test_failed_write_keeps_previous_file(self, storage_dirs):
        first = await save_image(_upload("a.png", "image/png", b"old"), "skus", "sku-1")

        with patch.object(Path, "write_bytes", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                await save_image(_upload("b.webp", "image/webp"), "skus", "sku-1", previous_url=first)

        assert (storage_dirs / "uploads" / "skus" / "sku-1.png").read_bytes() == b"old"
