"""
Local disk storage for uploaded images.
"""
import logging
import os
import time
from typing import Tuple

from aiface.core import config

logger = logging.getLogger(__name__)


def save_upload(original_name: str, data: bytes) -> Tuple[str, str]:
    """
    Write uploaded bytes under UPLOAD_DIR.

    Returns:
        Tuple of (stored filename, storage path)
    """
    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    safe_name = os.path.basename(original_name) or "upload"
    filename = f"{int(time.time() * 1000)}-{safe_name}"
    path = os.path.join(config.UPLOAD_DIR, filename)
    with open(path, "wb") as f:
        f.write(data)
    logger.debug(f"Stored upload: path={path}, size={len(data)}")
    return filename, path


def read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def delete_file(path: str) -> bool:
    """Remove a stored file. Returns False if it was already gone."""
    if not os.path.exists(path):
        logger.warning(f"Stored file already missing: path={path}")
        return False
    os.remove(path)
    return True
