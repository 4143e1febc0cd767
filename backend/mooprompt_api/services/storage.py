"""
File storage under ``settings.upload_dir``.

- restaurant/: menu and logo images, served publicly at /uploads/restaurant/...
- attachments/: FlowTrak comment files, served to signed-in users through
  /api/flow/uploads/{name}
"""

from __future__ import annotations

import secrets
import string
import time
from pathlib import Path
from typing import BinaryIO

from fastapi import UploadFile

from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.utils.exceptions import NotFoundError, ValidationError
from shared.utils.validators import safe_filename

logger = get_logger(__name__)

IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

CONTENT_TYPES = {
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "txt": "text/plain",
    "zip": "application/zip",
    "rar": "application/x-rar-compressed",
}

RESTAURANT_DIR = "restaurant"
ATTACHMENT_DIR = "attachments"
ATTACHMENT_URL_PREFIX = "/api/flow/uploads/"

_CHUNK_SIZE = 64 * 1024
_ALPHABET = string.ascii_lowercase + string.digits


def upload_root() -> Path:
    return Path(settings.upload_dir)


def _read_limited(stream: BinaryIO, max_bytes: int) -> bytes:
    """Read the whole stream, raising ValidationError past max_bytes."""
    chunks = []
    total = 0
    while True:
        chunk = stream.read(_CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise ValidationError("upload.too_large", max_mb=max_bytes // (1024 * 1024))
        chunks.append(chunk)
    return b"".join(chunks)


def _write(directory: Path, filename: str, data: bytes) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_bytes(data)
    return path


def content_type_for(filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return CONTENT_TYPES.get(ext, "application/octet-stream")


def save_restaurant_image(file: UploadFile | None) -> str:
    """
    Store an uploaded JPEG, PNG or WebP image.

    Returns:
        Public URL path (``/uploads/restaurant/{ms}-{rand}.{ext}``).
    """
    if file is None or not file.filename:
        raise ValidationError("upload.no_file")

    ext = IMAGE_TYPES.get((file.content_type or "").lower())
    if ext is None:
        raise ValidationError("upload.invalid_type")

    data = _read_limited(file.file, settings.max_image_upload_bytes)
    if not data:
        raise ValidationError("upload.no_file")

    random_part = "".join(secrets.choice(_ALPHABET) for _ in range(13))
    filename = f"{int(time.time() * 1000)}-{random_part}.{ext}"
    _write(upload_root() / RESTAURANT_DIR, filename, data)
    logger.info("Stored restaurant image", filename=filename, size=len(data))
    return f"/uploads/{RESTAURANT_DIR}/{filename}"


def save_attachment(file: UploadFile) -> tuple[str, str]:
    """
    Store a comment attachment.

    Returns:
        (url, original file name)
    """
    original = file.filename or "file"
    data = _read_limited(file.file, settings.max_attachment_upload_bytes)
    filename = f"{int(time.time() * 1000)}-{safe_filename(original)}"
    _write(upload_root() / ATTACHMENT_DIR, filename, data)
    logger.info("Stored attachment", filename=filename, size=len(data))
    return f"{ATTACHMENT_URL_PREFIX}{filename}", original


def attachment_path(name: str) -> Path:
    """
    Resolve a stored attachment by name.

    Raises:
        ValidationError: For names that try to leave the attachment directory.
        NotFoundError: When no such file exists.
    """
    if not name or ".." in name or name.startswith("/") or "\\" in name:
        raise ValidationError("upload.invalid_path")

    base = (upload_root() / ATTACHMENT_DIR).resolve()
    path = (base / name).resolve()
    if base not in path.parents:
        raise ValidationError("upload.invalid_path")
    if not path.is_file():
        raise NotFoundError("file", name)
    return path
