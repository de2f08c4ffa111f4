"""
Local storage for uploaded certificate images.

Uploads are written to ``settings.upload_dir`` under a name prefixed
with the upload time in milliseconds, so two uploads of the same file
never overwrite each other.  The returned reference
(``uploads/<name>``) is what gets stored in a record's ``imageUrl`` and
matches the path under which ``main`` serves the folder.
"""

import logging
import re
import time
from pathlib import Path

from .config import settings
from .exceptions import StorageError

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "uploads"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def get_upload_dir() -> Path:
    """Return the upload folder, creating it if necessary."""
    path = Path(settings.upload_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def sanitize_filename(filename: str) -> str:
    """Strip directory components and unsafe characters from a client filename."""
    name = Path(filename.replace("\\", "/")).name
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "upload"


def save_upload(filename: str, data: bytes) -> str:
    """Persist an uploaded file and return its public reference."""
    stored_name = f"{int(time.time() * 1000)}-{sanitize_filename(filename)}"
    try:
        target = get_upload_dir() / stored_name
        target.write_bytes(data)
    except OSError as exc:
        logger.error("Could not store upload %s: %s", stored_name, exc)
        raise StorageError("Could not store uploaded image") from exc
    logger.info("Stored upload %s (%d bytes)", stored_name, len(data))
    return f"{UPLOAD_URL_PREFIX}/{stored_name}"


def remove_upload(reference: str) -> None:
    """Delete a file previously returned by ``save_upload``.

    Used to undo an upload whose record could not be saved.  A missing
    file is ignored; other failures are logged and the file is left in
    place.
    """
    name = reference.split("/", 1)[-1]
    target = get_upload_dir() / sanitize_filename(name)
    try:
        target.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove orphaned upload %s: %s", target.name, exc)
        return
    logger.info("Removed orphaned upload %s", target.name)
