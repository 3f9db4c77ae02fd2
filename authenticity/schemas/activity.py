from typing import Union

from pydantic import BaseModel


class ActivityEntry(BaseModel):
    filename: str
    scan_date: str                           # UTC, ISO-8601
    exif_scan_time_ms: int
    gemini_scan_time_ms: Union[int, str]     # "N/A" until the AI step has run
