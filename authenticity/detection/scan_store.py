"""
In-memory scan store: keeps each uploaded image between the metadata step
and the optional AI step.

Entries expire after `scan_store_ttl_sec` (pruned on every insert) and the least
recently used entry is evicted once `scan_store_max_size` is exceeded.
"""

import logging
import secrets
import string
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional

from authenticity.config import settings
from authenticity.detection.exif_classifier import AuthenticityVerdict

logger = logging.getLogger(__name__)

SCAN_ID_LENGTH = 12


@dataclass(frozen=True)
class ScanRecord:
    scan_id: str
    file_name: str
    mime_type: str
    image_bytes: bytes
    verdict: AuthenticityVerdict
    exif_time_ms: int


scans: OrderedDict = OrderedDict()


def new_scan_id(length: int = SCAN_ID_LENGTH) -> str:
    alphabet = string.ascii_letters + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def get_scan(scan_id: str) -> Optional[ScanRecord]:
    entry = scans.get(scan_id)
    if entry is None:
        logger.info(f"[SCANS] MISS for scan: {scan_id}")
        return None

    record, timestamp = entry
    if time.time() - timestamp >= settings.scan_store_ttl_sec:
        logger.info(f"[SCANS] EXPIRED scan: {scan_id}")
        del scans[scan_id]
        return None

    scans.move_to_end(scan_id)
    return record


def prune_expired(now: float = None) -> int:
    """Drop every expired scan and return how many were removed."""
    now = time.time() if now is None else now
    expired = [
        scan_id for scan_id, (_, timestamp) in scans.items()
        if now - timestamp >= settings.scan_store_ttl_sec
    ]
    for scan_id in expired:
        del scans[scan_id]
    if expired:
        logger.info(f"[SCANS] Pruned {len(expired)} expired scan(s)")
    return len(expired)


def put_scan(record: ScanRecord) -> None:
    prune_expired()
    if record.scan_id in scans:
        scans.move_to_end(record.scan_id)
    scans[record.scan_id] = (record, time.time())
    if len(scans) > settings.scan_store_max_size:
        evicted, _ = scans.popitem(last=False)
        logger.info(f"[SCANS] Evicted oldest scan: {evicted}")
