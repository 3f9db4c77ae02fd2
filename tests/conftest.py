"""
Shared pytest fixtures for all test modules.

GEMINI_API_KEY is cleared before the app is imported so a developer's real key
in `.env` can never reach the network. Real API calls never happen in tests:
every Gemini call is mocked.
"""

import io
import os

os.environ["GEMINI_API_KEY"] = ""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from PIL import Image

# App import happens AFTER os.environ["GEMINI_API_KEY"] is cleared above.
from authenticity.main import app  # noqa: E402


# ---------------------------------------------------------------------------
# Core infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clean_state():
    """Empty the in-memory scan store and activity log around every test."""
    from authenticity.detection import scan_store
    from authenticity.services import activity_service

    scan_store.scans.clear()
    activity_service.activity_log.clear()
    yield
    scan_store.scans.clear()
    activity_service.activity_log.clear()


@pytest.fixture
def client():
    """
    FastAPI TestClient.

    Gemini initialize() is patched to a no-op so the lifespan startup cannot
    create a real client.
    """
    with patch("authenticity.integrations.gemini.client.initialize"):
        with TestClient(app, raise_server_exceptions=False) as c:
            yield c


# ---------------------------------------------------------------------------
# Shared test-data helpers
# ---------------------------------------------------------------------------

# Base-IFD EXIF tag ids
MAKE = 0x010F
MODEL = 0x0110
SOFTWARE = 0x0131
DATETIME = 0x0132
HOST_COMPUTER = 0x013C


def make_tiny_jpeg(exif_tags: dict = None) -> bytes:
    """Create a minimal 10×10 JPEG in memory, optionally carrying base-IFD EXIF tags."""
    buf = io.BytesIO()
    img = Image.new("RGB", (10, 10), color=(128, 128, 128))
    if exif_tags:
        exif = Image.Exif()
        for tag, value in exif_tags.items():
            exif[tag] = value
        img.save(buf, format="JPEG", exif=exif)
    else:
        img.save(buf, format="JPEG")
    return buf.getvalue()


def make_tiny_heic(exif_tags: dict = None) -> bytes:
    """Create a small HEIC in memory (via the pillow-heif plugin), optionally with base-IFD EXIF tags."""
    buf = io.BytesIO()
    img = Image.new("RGB", (64, 64), color=(128, 128, 128))
    if exif_tags:
        exif = Image.Exif()
        for tag, value in exif_tags.items():
            exif[tag] = value
        img.save(buf, format="HEIF", exif=exif.tobytes())
    else:
        img.save(buf, format="HEIF")
    return buf.getvalue()


# Scenario A bag: complete, consistent camera metadata
CAMERA_ORIGINAL = {
    "Make": "Canon",
    "Model": "EOS 5D",
    "ISO": 400,
    "FNumber": 2.8,
    "ExposureTime": "1/200",
    "DateTimeOriginal": "2024-01-01T10:00:00",
    "ModifyDate": "2024-01-01T10:00:00",
}
