"""
Two-step analysis pipeline: public entry points for the /analyze routes.

`analyze_upload` runs step 1:
  1. Metadata extraction (Pillow, in a worker thread)
  2. EXIF authenticity classification (pure, synchronous)
  3. Activity logging + hand-off of the image to the scan store

`continue_scan` runs step 2, the Gemini second opinion, for a stored scan.
It is only reachable after step 1 and only when the metadata verdict allows it.
"""

import asyncio
import logging
import time
from dataclasses import dataclass

from authenticity.config import settings
from authenticity.core.errors import EscalationNotAllowedError, ScanNotFoundError
from authenticity.detection.exif_classifier import AuthenticityVerdict, classify
from authenticity.detection.metadata_extractor import extract_metadata, log_metadata_debug
from authenticity.detection.scan_store import ScanRecord, get_scan, new_scan_id, put_scan
from authenticity.integrations.gemini.client import analyze_image_with_gemini
from authenticity.schemas.analysis import AIAnalysisResult
from authenticity.services.activity_service import log_activity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanOutcome:
    scan_id: str
    file_name: str
    verdict: AuthenticityVerdict
    exif_time_ms: int
    can_escalate: bool


@dataclass(frozen=True)
class EscalationOutcome:
    scan_id: str
    result: AIAnalysisResult
    exif_time_ms: int
    gemini_time_ms: int


def can_escalate(verdict: AuthenticityVerdict) -> bool:
    """The AI step runs on images the metadata could not already flag."""
    return verdict.is_original or settings.escalate_flagged_images


async def analyze_upload(data: bytes, filename: str, mime_type: str) -> ScanOutcome:
    start = time.perf_counter()
    metadata = await asyncio.to_thread(extract_metadata, data)
    log_metadata_debug(metadata, filename)
    verdict = classify(metadata)
    exif_time_ms = round((time.perf_counter() - start) * 1000)

    logger.info(
        f"[PIPELINE] {filename}: original={verdict.is_original}, "
        f"reasons={len(verdict.reasons)}, exif={verdict.has_exif}, gps={verdict.has_gps} ({exif_time_ms}ms)"
    )

    log_activity(filename, exif_time_ms)

    scan_id = new_scan_id()
    put_scan(ScanRecord(
        scan_id=scan_id,
        file_name=filename,
        mime_type=mime_type,
        image_bytes=data,
        verdict=verdict,
        exif_time_ms=exif_time_ms,
    ))

    return ScanOutcome(
        scan_id=scan_id,
        file_name=filename,
        verdict=verdict,
        exif_time_ms=exif_time_ms,
        can_escalate=can_escalate(verdict),
    )


async def continue_scan(scan_id: str) -> EscalationOutcome:
    record = get_scan(scan_id)
    if record is None:
        raise ScanNotFoundError(f"Scan '{scan_id}' not found or expired.")

    if not can_escalate(record.verdict):
        logger.info(f"[PIPELINE] Escalation refused for {record.file_name}: metadata already flagged it")
        raise EscalationNotAllowedError("Metadata already shows signs of editing; AI analysis not needed.")

    logger.info(f"[PIPELINE] Escalating {record.file_name} to Gemini")
    start = time.perf_counter()
    result = await asyncio.to_thread(analyze_image_with_gemini, record.image_bytes, record.mime_type)
    gemini_time_ms = round((time.perf_counter() - start) * 1000)

    log_activity(record.file_name, record.exif_time_ms, gemini_time_ms)

    return EscalationOutcome(
        scan_id=scan_id,
        result=result,
        exif_time_ms=record.exif_time_ms,
        gemini_time_ms=gemini_time_ms,
    )
