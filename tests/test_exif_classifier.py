"""
Unit tests for authenticity/detection/exif_classifier.py: classify() and its rules.

Pure functions over plain dicts; no I/O.
"""

from types import MappingProxyType

import pytest

from authenticity.detection.constants import NO_EDIT_SIGNS_REASON, NO_METADATA_REASON
from authenticity.detection.exif_classifier import (
    RULES,
    ExtractedFields,
    check_camera_settings,
    check_software_signature,
    classify,
    extract_fields,
)
from tests.conftest import CAMERA_ORIGINAL

CAMERA_MISSING = "Camera make/model missing in EXIF."
SETTINGS_MISSING = "Camera info present but missing typical camera settings (ISO, exposure, aperture)."


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


def test_complete_camera_metadata_is_original():
    verdict = classify(CAMERA_ORIGINAL)

    assert verdict.is_original is True
    assert verdict.reasons == (NO_EDIT_SIGNS_REASON,)
    assert verdict.has_exif is True
    assert verdict.camera_make == "Canon"
    assert verdict.camera_model == "EOS 5D"


def test_photoshop_software_without_camera():
    verdict = classify({"Software": "Adobe Photoshop 2024"})

    assert verdict.is_original is False
    assert verdict.reasons == (
        'Editing software detected: "Adobe Photoshop 2024"',
        CAMERA_MISSING,
    )
    assert verdict.software == "Adobe Photoshop 2024"


def test_camera_without_settings_triggers_only_settings_rule():
    verdict = classify({"Make": "Canon", "Model": "EOS 5D"})

    assert verdict.is_original is False
    assert verdict.reasons == (SETTINGS_MISSING,)


def test_document_id_mismatch_without_camera():
    verdict = classify({"DocumentID": "A", "OriginalDocumentID": "B"})

    assert verdict.is_original is False
    assert verdict.reasons == (
        CAMERA_MISSING,
        "Document ID differs from original, indicating editing.",
    )


def test_no_metadata_fails_closed():
    verdict = classify(None)

    assert verdict.is_original is False
    assert verdict.reasons == (NO_METADATA_REASON,)
    assert verdict.has_exif is False
    assert verdict.has_gps is False
    assert verdict.raw_metadata is None


def test_empty_bag_is_metadata_not_absence():
    verdict = classify({})

    assert verdict.has_exif is True
    assert verdict.reasons == (CAMERA_MISSING,)


# ---------------------------------------------------------------------------
# Software signature (rule 1 / 1b)
# ---------------------------------------------------------------------------


def test_ai_tool_in_software_field():
    verdict = classify({**CAMERA_ORIGINAL, "Software": "Midjourney v6"})

    assert verdict.reasons == ('AI generation tool detected: "Midjourney v6"',)


def test_editing_hint_takes_priority_over_ai_hint():
    outcome = check_software_signature(ExtractedFields(software="Photoshop Firefly beta"))

    assert outcome.triggered is True
    assert outcome.reason == 'Editing software detected: "Photoshop Firefly beta"'


def test_neutral_software_does_not_trigger():
    verdict = classify({**CAMERA_ORIGINAL, "Software": "iOS 17.2"})

    assert verdict.is_original is True


def test_software_falls_back_to_processing_software_then_creator_tool():
    assert extract_fields({"ProcessingSoftware": "GIMP 2.10"}).software == "GIMP 2.10"
    assert extract_fields({"Software": "  ", "CreatorTool": "Canva"}).software == "Canva"
    assert extract_fields({"Software": "Lightroom", "CreatorTool": "Canva"}).software == "Lightroom"


def test_hint_matching_is_case_insensitive():
    verdict = classify({**CAMERA_ORIGINAL, "Software": "STABLE DIFFUSION XL"})

    assert verdict.reasons == ('AI generation tool detected: "STABLE DIFFUSION XL"',)


# ---------------------------------------------------------------------------
# Remaining rules
# ---------------------------------------------------------------------------


def test_ai_creator_field():
    verdict = classify({**CAMERA_ORIGINAL, "Creator": "DALL-E 3"})

    assert verdict.reasons == ('AI generation detected in creator field: "DALL-E 3"',)


def test_modified_after_capture():
    verdict = classify({**CAMERA_ORIGINAL, "ModifyDate": "2024-02-01T09:00:00"})

    assert verdict.reasons == (
        "Image modified after capture. Original: 2024-01-01T10:00:00, Modified: 2024-02-01T09:00:00",
    )


def test_single_timestamp_is_not_a_mismatch():
    bag = {k: v for k, v in CAMERA_ORIGINAL.items() if k != "ModifyDate"}

    assert classify(bag).is_original is True


def test_edit_history_and_derived_from():
    verdict = classify({**CAMERA_ORIGINAL, "History": "saved, converted", "DerivedFrom": "xmp.did:123"})

    assert verdict.reasons == (
        "Edit history detected in metadata.",
        "Image derived from another document.",
    )


def test_matching_document_ids_do_not_trigger():
    verdict = classify({**CAMERA_ORIGINAL, "DocumentID": "X", "OriginalDocumentID": "X"})

    assert verdict.is_original is True


def test_ai_host_computer():
    verdict = classify({**CAMERA_ORIGINAL, "HostComputer": "leonardo-render-07"})

    assert verdict.reasons == ('AI generation detected in host computer: "leonardo-render-07"',)


def test_numeric_zero_setting_counts_as_present():
    outcome = check_camera_settings(ExtractedFields(make="Canon", model="EOS 5D", iso=0))

    assert outcome.triggered is False


def test_blank_and_none_settings_count_as_absent():
    verdict = classify({"Make": "Canon", "Model": "EOS 5D", "ISO": None, "FNumber": "", "ExposureTime": " "})

    assert verdict.reasons == (SETTINGS_MISSING,)


def test_only_make_present_skips_both_camera_rules():
    verdict = classify({"Make": "Canon"})

    assert verdict.is_original is True


# ---------------------------------------------------------------------------
# Aggregation properties
# ---------------------------------------------------------------------------


def test_every_rule_reports_in_battery_order():
    bag = {
        "Software": "Adobe Photoshop",
        "Creator": "Midjourney",
        "DateTimeOriginal": "2024:01:01 10:00:00",
        "ModifyDate": "2024:01:02 10:00:00",
        "History": "edited",
        "DerivedFrom": "xmp.did:1",
        "DocumentID": "A",
        "OriginalDocumentID": "B",
        "HostComputer": "NightCafe cluster",
    }
    verdict = classify(bag)

    assert verdict.is_original is False
    assert [r.split(" ")[0] for r in verdict.reasons] == [
        "Editing", "AI", "Camera", "Image", "Edit", "Image", "Document", "AI",
    ]
    assert len(verdict.reasons) == 8


def test_rule_battery_order_is_fixed():
    assert [name for name, _ in RULES] == [
        "software_signature",
        "creator_field",
        "camera_identity",
        "timestamps",
        "edit_history",
        "derived_from",
        "document_ids",
        "camera_settings",
        "host_computer",
    ]


@pytest.mark.parametrize("bag", [None, {}, CAMERA_ORIGINAL, {"Software": "GIMP"}])
def test_classify_is_idempotent(bag):
    assert classify(bag) == classify(bag)


def test_gps_requires_both_coordinates():
    assert classify({**CAMERA_ORIGINAL, "GPSLatitude": [52.0, 22.0, 0.0]}).has_gps is False
    assert classify({
        **CAMERA_ORIGINAL,
        "GPSLatitude": [52.0, 22.0, 0.0],
        "GPSLongitude": [4.0, 53.0, 0.0],
    }).has_gps is True


def test_gps_does_not_affect_originality():
    verdict = classify({**CAMERA_ORIGINAL, "GPSLatitude": [1.0], "GPSLongitude": [2.0]})

    assert verdict.is_original is True


def test_read_only_bag_is_passed_through():
    bag = MappingProxyType(dict(CAMERA_ORIGINAL))
    verdict = classify(bag)

    assert verdict.raw_metadata is bag
