from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class DetectionVerdict(str, Enum):
    YES = "Yes"
    NO = "No"
    NOT_SURE = "Not sure"


class AIAnalysisResult(BaseModel):
    """Gemini structured output schema: the second-opinion verdict."""
    verdict: DetectionVerdict = Field(description="Whether the image is AI-generated: Yes, No or Not sure")
    confidence: int = Field(ge=0, le=100, description="Confidence in the verdict, 0 to 100")
    reasoning: str = Field(description="Short explanation of the visual evidence")


class ExifAnalysis(BaseModel):
    is_original: bool
    reasons: List[str]
    has_exif: bool
    has_gps: bool
    camera_make: Optional[str] = None
    camera_model: Optional[str] = None
    software: Optional[str] = None   # first of Software / ProcessingSoftware / CreatorTool
    raw_metadata: Optional[Dict[str, Any]] = None


class AnalyzeRequest(BaseModel):
    image: str                        # data:<mime>;base64,<payload>
    file_name: Optional[str] = None


class AnalyzeResponse(BaseModel):
    scan_id: str
    file_name: str
    exif: ExifAnalysis
    exif_time_ms: int
    can_escalate: bool                # whether /analyze/{scan_id}/continue will run


class ContinueResponse(BaseModel):
    scan_id: str
    result: AIAnalysisResult
    exif_time_ms: int
    gemini_time_ms: int
