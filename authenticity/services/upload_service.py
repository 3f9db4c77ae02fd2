"""
Upload helpers: base64 data-URI decoding, MIME type resolution, and memory
usage logging.
"""

import base64
import binascii
import logging
import mimetypes
import os

import psutil
from fastapi import HTTPException

from authenticity.config import settings

logger = logging.getLogger(__name__)

MIME_SUFFIXES = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
    "image/heic": ".heic",
    "image/heif": ".heif",
    "image/tiff": ".tiff",
    "image/bmp": ".bmp",
}


def log_memory(stage: str) -> None:
    """Log current process and system memory usage. Only runs when DEBUG logging is active."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    process = psutil.Process(os.getpid())
    mem_info = process.memory_info()
    sys_mem = psutil.virtual_memory()
    logger.debug(
        f"[MEMORY] {stage} | "
        f"PID: {os.getpid()} | "
        f"Process RSS: {mem_info.rss / 1024 / 1024:.2f} MB | "
        f"System Available: {sys_mem.available / 1024 / 1024:.2f} MB / {sys_mem.total / 1024 / 1024:.2f} MB"
    )


def guess_mime_type(filename: str, declared: str = None) -> str:
    """Prefer a declared image/* type, else guess from the extension."""
    if declared and declared.startswith("image/"):
        return declared
    guessed, _ = mimetypes.guess_type(filename)
    if guessed:
        return guessed
    # mimetypes has no entry for .heic / .heif on most platforms
    suffix = os.path.splitext(filename)[1].lower()
    for mime_type, known_suffix in MIME_SUFFIXES.items():
        if known_suffix == suffix:
            return mime_type
    return "application/octet-stream"


def decode_data_uri(uri: str, max_size: int = None) -> tuple[bytes, str, str]:
    """
    Decode a base64 `data:` URI, as posted by the chat widget.

    Returns (content, mime_type, default_filename).
    """
    if max_size is None:
        max_size = settings.max_image_upload_bytes

    if not uri.startswith("data:") or "," not in uri:
        raise HTTPException(status_code=400, detail="Expected a base64 data URI")

    header, data_str = uri.split(",", 1)
    if ";base64" not in header:
        raise HTTPException(status_code=400, detail="Only base64 data URIs are supported")

    try:
        content = base64.b64decode(data_str, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.error(f"Error decoding data URI: {e}")
        raise HTTPException(status_code=400, detail="Invalid data URI")

    if len(content) > max_size:
        raise HTTPException(status_code=413, detail=f"Image too large (max {max_size // (1024*1024)}MB)")

    mime_type = header[len("data:"):].split(";")[0] or "application/octet-stream"
    suffix = MIME_SUFFIXES.get(mime_type, ".jpg")
    return content, mime_type, f"pasted_image{suffix}"
