"""
Analysis routes: /analyze and /analyze/{scan_id}/continue

/analyze accepts multipart/form-data with a 'file' field, or a JSON payload
{ "image": "data:image/...;base64,...", "file_name": "..." } as posted by the
chat widget. It runs the metadata step only.

/analyze/{scan_id}/continue runs the AI second opinion on the stored image.
"""

import json
import logging

from fastapi import APIRouter, HTTPException, Request
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from authenticity.core.errors import (
    EscalationNotAllowedError,
    ScanNotFoundError,
    VisionAnalysisError,
)
from authenticity.core.file_validator import validate_image
from authenticity.detection.exif_classifier import AuthenticityVerdict
from authenticity.detection.pipeline import analyze_upload, continue_scan
from authenticity.schemas.analysis import (
    AnalyzeRequest,
    AnalyzeResponse,
    ContinueResponse,
    ExifAnalysis,
)
from authenticity.services.upload_service import decode_data_uri, guess_mime_type, log_memory

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analysis"])


def to_exif_analysis(verdict: AuthenticityVerdict) -> ExifAnalysis:
    return ExifAnalysis(
        is_original=verdict.is_original,
        reasons=list(verdict.reasons),
        has_exif=verdict.has_exif,
        has_gps=verdict.has_gps,
        camera_make=verdict.camera_make,
        camera_model=verdict.camera_model,
        software=verdict.software,
        raw_metadata=dict(verdict.raw_metadata) if verdict.raw_metadata is not None else None,
    )


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(request: Request):
    """
    Inspect an image's embedded metadata for signs of editing or AI generation.
    """
    content_type = request.headers.get("content-type", "")

    if "application/json" in content_type:
        try:
            payload = AnalyzeRequest.model_validate(await request.json())
        except (json.JSONDecodeError, ValidationError):
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        file_content, mime_type, filename = decode_data_uri(payload.image)
        filename = payload.file_name or filename

    elif "multipart/form-data" in content_type:
        form = await request.form()
        file_obj = form.get("file")
        if file_obj is None:
            raise HTTPException(status_code=400, detail="Must provide 'file' in form data")
        if not isinstance(file_obj, UploadFile):
            raise HTTPException(status_code=400, detail="Invalid file upload format")
        file_content = await file_obj.read()
        filename = file_obj.filename or "uploaded_file"
        mime_type = guess_mime_type(filename, file_obj.content_type)

    else:
        raise HTTPException(
            status_code=415,
            detail="Unsupported Media Type. Use multipart/form-data or application/json"
        )

    validate_image(filename, file_content)

    log_memory(f"Pre-Analyze: {filename}")
    outcome = await analyze_upload(file_content, filename, mime_type)
    log_memory(f"Post-Analyze: {filename}")

    return AnalyzeResponse(
        scan_id=outcome.scan_id,
        file_name=outcome.file_name,
        exif=to_exif_analysis(outcome.verdict),
        exif_time_ms=outcome.exif_time_ms,
        can_escalate=outcome.can_escalate,
    )


@router.post("/analyze/{scan_id}/continue", response_model=ContinueResponse)
async def continue_analysis(scan_id: str):
    """
    Escalate a scanned image to the AI second opinion.
    """
    try:
        outcome = await continue_scan(scan_id)
    except ScanNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EscalationNotAllowedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except VisionAnalysisError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return ContinueResponse(
        scan_id=outcome.scan_id,
        result=outcome.result,
        exif_time_ms=outcome.exif_time_ms,
        gemini_time_ms=outcome.gemini_time_ms,
    )
