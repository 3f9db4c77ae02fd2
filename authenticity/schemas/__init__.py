from authenticity.schemas.analysis import (
    AIAnalysisResult,
    AnalyzeRequest,
    AnalyzeResponse,
    ContinueResponse,
    DetectionVerdict,
    ExifAnalysis,
)
from authenticity.schemas.activity import ActivityEntry

__all__ = [
    "AIAnalysisResult",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "ContinueResponse",
    "DetectionVerdict",
    "ExifAnalysis",
    "ActivityEntry",
]
