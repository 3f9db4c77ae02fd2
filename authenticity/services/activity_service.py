"""
Scan activity log.

Every metadata scan appends one entry; a completed AI step appends a second
entry for the same file carrying both timings. Only the most recent
`activity_log_max_entries` entries are kept, in memory.
"""

import logging
from datetime import datetime, timezone
from typing import Union

from authenticity.config import settings

logger = logging.getLogger(__name__)

activity_log: list[dict] = []


def log_activity(filename: str, exif_time_ms: float, gemini_time_ms: Union[float, str] = "N/A") -> dict:
    """
    Record one scan.

    Args:
        filename: Name of the uploaded file.
        exif_time_ms: Duration of the metadata step.
        gemini_time_ms: Duration of the AI step, or "N/A" when it has not run.
    """
    entry = {
        "filename": filename,
        "scan_date": datetime.now(timezone.utc).isoformat(),
        "exif_scan_time_ms": round(exif_time_ms),
        "gemini_scan_time_ms": gemini_time_ms if gemini_time_ms == "N/A" else round(gemini_time_ms),
    }
    activity_log.append(entry)

    overflow = len(activity_log) - settings.activity_log_max_entries
    if overflow > 0:
        del activity_log[:overflow]

    logger.info(f"[ACTIVITY] {entry}")
    return entry


def get_activity() -> list[dict]:
    """Oldest first."""
    return list(activity_log)
