"""
Local-disk storage for listing images.

Files live under app.config["UPLOAD_FOLDER"] and are served at /uploads/<filename>.
Stored names are random tokens (plus the original extension), so user-supplied
filenames never reach the filesystem.
"""

from __future__ import annotations

import logging
import secrets
from pathlib import Path
from typing import NamedTuple, Optional

from flask import current_app, url_for
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


class UploadError(ValueError):
    """Upload rejected (bad extension, empty name...)."""


class StoredImage(NamedTuple):
    url: str
    filename: str


def upload_root() -> Path:
    return Path(current_app.config["UPLOAD_FOLDER"])


def _extension(filename: str) -> str:
    safe = secure_filename(filename or "")
    if "." not in safe:
        return ""
    return safe.rsplit(".", 1)[1].lower()


def save_image(file: Optional[FileStorage]) -> Optional[StoredImage]:
    """
    Persist an uploaded image.

    Returns None when no file was chosen (browsers still send an empty part).
    Raises UploadError when the extension is not an allowed image type.
    """
    if file is None or not file.filename:
        return None

    ext = _extension(file.filename)
    allowed = current_app.config["ALLOWED_IMAGE_EXTENSIONS"]
    if ext not in allowed:
        raise UploadError(
            f"Unsupported image type. Allowed: {', '.join(sorted(allowed))}."
        )

    filename = f"{secrets.token_hex(16)}.{ext}"
    root = upload_root()
    root.mkdir(parents=True, exist_ok=True)
    file.save(root / filename)

    logger.info("Stored upload %s (original name %r)", filename, file.filename)
    return StoredImage(url=url_for("uploads.serve", filename=filename), filename=filename)


def delete_image(filename: Optional[str]) -> None:
    """Remove a stored image. Missing files are logged and ignored."""
    if not filename:
        return

    path = upload_root() / secure_filename(filename)
    try:
        path.unlink()
        logger.info("Deleted upload %s", filename)
    except FileNotFoundError:
        logger.warning("Upload %s already missing from %s", filename, path.parent)
