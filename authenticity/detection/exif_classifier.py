"""
Metadata-based authenticity classifier.

`classify` inspects a metadata bag and returns an AuthenticityVerdict: whether
the image looks like an untouched camera original, plus the ordered list of
reasons behind that call.

Every rule in RULES is evaluated on every call; a rule never hides another
rule's reason. The verdict is original only when no rule fired.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from authenticity.detection.constants import (
    AI_GENERATION_HINTS,
    EDITING_SOFTWARE_HINTS,
    NO_EDIT_SIGNS_REASON,
    NO_METADATA_REASON,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeuristicOutcome:
    triggered: bool
    reason: Optional[str] = None


NOT_TRIGGERED = HeuristicOutcome(False)


@dataclass(frozen=True)
class ExtractedFields:
    """The subset of a metadata bag the rules look at, normalized once."""
    make: str = ""
    model: str = ""
    software: str = ""
    creator: str = ""
    has_gps: bool = False
    date_original: str = ""
    date_modified: str = ""
    create_date: str = ""
    metadata_date: str = ""
    history: str = ""
    derived_from: str = ""
    document_id: str = ""
    original_document_id: str = ""
    host_computer: str = ""
    iso: Any = None
    exposure_time: Any = None
    f_number: Any = None
    focal_length: Any = None
    flash: Any = None
    lens_make: str = ""
    lens_model: str = ""


@dataclass(frozen=True)
class AuthenticityVerdict:
    is_original: bool
    reasons: tuple
    has_exif: bool
    has_gps: bool
    camera_make: Optional[str] = None
    camera_model: Optional[str] = None
    software: Optional[str] = None
    raw_metadata: Optional[Mapping[str, Any]] = None


def _is_populated(value: Any) -> bool:
    """None, blank strings and empty containers are absent; numeric zero is present."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict)):
        return bool(value)
    return True


def _text(value: Any) -> str:
    return str(value).strip() if _is_populated(value) else ""


def _contains_hint(text: str, hints: tuple) -> bool:
    lowered = text.lower()
    return any(hint in lowered for hint in hints)


def extract_fields(metadata: Mapping[str, Any]) -> ExtractedFields:
    software = next(
        (
            _text(metadata.get(key))
            for key in ("Software", "ProcessingSoftware", "CreatorTool")
            if _text(metadata.get(key))
        ),
        "",
    )
    return ExtractedFields(
        make=_text(metadata.get("Make")),
        model=_text(metadata.get("Model")),
        software=software,
        creator=_text(metadata.get("Creator")),
        has_gps=_is_populated(metadata.get("GPSLatitude")) and _is_populated(metadata.get("GPSLongitude")),
        date_original=_text(metadata.get("DateTimeOriginal")),
        date_modified=_text(metadata.get("ModifyDate")),
        create_date=_text(metadata.get("CreateDate")),
        metadata_date=_text(metadata.get("MetadataDate")),
        history=_text(metadata.get("History")),
        derived_from=_text(metadata.get("DerivedFrom")),
        document_id=_text(metadata.get("DocumentID")),
        original_document_id=_text(metadata.get("OriginalDocumentID")),
        host_computer=_text(metadata.get("HostComputer")),
        iso=metadata.get("ISO"),
        exposure_time=metadata.get("ExposureTime"),
        f_number=metadata.get("FNumber"),
        focal_length=metadata.get("FocalLength"),
        flash=metadata.get("Flash"),
        lens_make=_text(metadata.get("LensMake")),
        lens_model=_text(metadata.get("LensModel")),
    )


# --------------------------------------------------------------------------- #
# Rules                                                                       #
# --------------------------------------------------------------------------- #


def check_software_signature(f: ExtractedFields) -> HeuristicOutcome:
    if not f.software:
        return NOT_TRIGGERED
    # Editing tools win over AI tools when a name matches both lists
    if _contains_hint(f.software, EDITING_SOFTWARE_HINTS):
        return HeuristicOutcome(True, f'Editing software detected: "{f.software}"')
    if _contains_hint(f.software, AI_GENERATION_HINTS):
        return HeuristicOutcome(True, f'AI generation tool detected: "{f.software}"')
    return NOT_TRIGGERED


def check_creator_field(f: ExtractedFields) -> HeuristicOutcome:
    if f.creator and _contains_hint(f.creator, AI_GENERATION_HINTS):
        return HeuristicOutcome(True, f'AI generation detected in creator field: "{f.creator}"')
    return NOT_TRIGGERED


def check_camera_identity(f: ExtractedFields) -> HeuristicOutcome:
    if not f.make and not f.model:
        return HeuristicOutcome(True, "Camera make/model missing in EXIF.")
    return NOT_TRIGGERED


def check_timestamps(f: ExtractedFields) -> HeuristicOutcome:
    if f.date_original and f.date_modified and f.date_original != f.date_modified:
        return HeuristicOutcome(
            True,
            f"Image modified after capture. Original: {f.date_original}, Modified: {f.date_modified}",
        )
    return NOT_TRIGGERED


def check_edit_history(f: ExtractedFields) -> HeuristicOutcome:
    if f.history:
        return HeuristicOutcome(True, "Edit history detected in metadata.")
    return NOT_TRIGGERED


def check_derived_from(f: ExtractedFields) -> HeuristicOutcome:
    if f.derived_from:
        return HeuristicOutcome(True, "Image derived from another document.")
    return NOT_TRIGGERED


def check_document_ids(f: ExtractedFields) -> HeuristicOutcome:
    if f.document_id and f.original_document_id and f.document_id != f.original_document_id:
        return HeuristicOutcome(True, "Document ID differs from original, indicating editing.")
    return NOT_TRIGGERED


def check_camera_settings(f: ExtractedFields) -> HeuristicOutcome:
    if (
        f.make and f.model
        and not _is_populated(f.iso)
        and not _is_populated(f.exposure_time)
        and not _is_populated(f.f_number)
    ):
        return HeuristicOutcome(
            True,
            "Camera info present but missing typical camera settings (ISO, exposure, aperture).",
        )
    return NOT_TRIGGERED


def check_host_computer(f: ExtractedFields) -> HeuristicOutcome:
    if f.host_computer and _contains_hint(f.host_computer, AI_GENERATION_HINTS):
        return HeuristicOutcome(True, f'AI generation detected in host computer: "{f.host_computer}"')
    return NOT_TRIGGERED


RULES: tuple[tuple[str, Callable[[ExtractedFields], HeuristicOutcome]], ...] = (
    ("software_signature", check_software_signature),
    ("creator_field", check_creator_field),
    ("camera_identity", check_camera_identity),
    ("timestamps", check_timestamps),
    ("edit_history", check_edit_history),
    ("derived_from", check_derived_from),
    ("document_ids", check_document_ids),
    ("camera_settings", check_camera_settings),
    ("host_computer", check_host_computer),
)


def classify(metadata: Optional[Mapping[str, Any]]) -> AuthenticityVerdict:
    """
    Classify an image as original or not from its metadata bag alone.

    A missing bag (nothing extracted, or extraction failed) is treated as
    suspicious: absence of evidence is never proof of originality.
    """
    if metadata is None:
        return AuthenticityVerdict(
            is_original=False,
            reasons=(NO_METADATA_REASON,),
            has_exif=False,
            has_gps=False,
        )

    fields = extract_fields(metadata)

    reasons = []
    for name, rule in RULES:
        outcome = rule(fields)
        if outcome.triggered:
            logger.debug(f"[EXIF] Rule '{name}' triggered: {outcome.reason}")
            reasons.append(outcome.reason)

    is_original = not reasons
    if is_original:
        reasons = [NO_EDIT_SIGNS_REASON]

    return AuthenticityVerdict(
        is_original=is_original,
        reasons=tuple(reasons),
        has_exif=True,
        has_gps=fields.has_gps,
        camera_make=fields.make or None,
        camera_model=fields.model or None,
        software=fields.software or None,
        raw_metadata=metadata,
    )
