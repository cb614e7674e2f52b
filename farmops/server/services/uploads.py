"""
Image uploads stored on the local filesystem.

Files live under ``{uploads_dir}/{folder}`` and are served read-only at
``/uploads``; the stored URL is the public path of the file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from farmops.core.errors import BadRequestError
from farmops.core.logging_config import get_logger
from farmops.server.core.config import settings

logger = get_logger(__name__)

ALLOWED_IMAGE_TYPES: dict[str, str] = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/webp": ".webp",
}
ALLOWED_IMAGE_EXTENSIONS = {".png", ".jpeg", ".jpg", ".webp"}

PUBLIC_PREFIX = "/uploads/"


def uploads_root() -> Path:
    return Path(settings.storage.uploads_dir)


def image_extension(upload: UploadFile) -> str:
    """Extension to store an uploaded image with.

    Raises:
        BadRequestError: when the file is not a png, jpeg or webp image
    """
    suffix = Path(upload.filename or "").suffix.lower()
    if upload.content_type in ALLOWED_IMAGE_TYPES:
        return suffix if suffix in ALLOWED_IMAGE_EXTENSIONS else ALLOWED_IMAGE_TYPES[upload.content_type]
    raise BadRequestError("Invalid file type. Allowed: png, jpeg, jpg, webp", code="INVALID_FILE_TYPE")


def path_for_url(url: Optional[str]) -> Optional[Path]:
    """Filesystem path of a stored upload URL, or None for foreign URLs."""
    if not url or not url.startswith(PUBLIC_PREFIX):
        return None
    return uploads_root() / url[len(PUBLIC_PREFIX):]


def remove_upload(url: Optional[str]) -> None:
    path = path_for_url(url)
    if path is not None and path.exists():
        path.unlink()
        logger.debug(f"Removed upload {path}")


async def save_image(upload: UploadFile, folder: str, stem: str, previous_url: Optional[str] = None) -> str:
    """Store an uploaded image as ``{folder}/{stem}{ext}`` and return its public URL.

    The previous file of the record is removed once the new one is written,
    unless both share the same path.
    """
    extension = image_extension(upload)

    directory = uploads_root() / folder
    directory.mkdir(parents=True, exist_ok=True)
    file_name = f"{stem}{extension}"
    contents = await upload.read()
    (directory / file_name).write_bytes(contents)
    logger.info(f"Stored upload {folder}/{file_name} ({len(contents)} bytes)")

    url = f"{PUBLIC_PREFIX}{folder}/{file_name}"
    if previous_url != url:
        remove_upload(previous_url)
    return url
