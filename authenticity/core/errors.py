"""
Domain exceptions raised by the analysis service layer.

Route handlers translate these into HTTP responses; nothing below the API
layer raises HTTPException except file validation.
"""


class AnalysisError(Exception):
    """Base class for analysis failures surfaced to the caller."""


class ScanNotFoundError(AnalysisError):
    """The scan id is unknown or its stored image has expired."""


class EscalationNotAllowedError(AnalysisError):
    """The metadata verdict does not permit the AI second opinion."""


class VisionAnalysisError(AnalysisError):
    """The Gemini second-opinion call failed or returned an unusable answer."""
