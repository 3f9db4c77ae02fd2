"""
Central application configuration.

Every tunable value lives here as a typed, documented field.
Any field can be overridden at runtime via an environment variable of the
same name (case-insensitive), e.g.:

    GEMINI_MODEL=gemini-2.5-pro uvicorn authenticity.main:app
    export ESCALATE_FLAGGED_IMAGES=true          # demo override

A `.env` file at the project root is loaded automatically.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,   # GEMINI_MODEL == gemini_model
        extra="ignore",         # silently drop unknown env vars
    )

    # ------------------------------------------------------------------ #
    # File Size Limits                                                    #
    # ------------------------------------------------------------------ #
    max_image_upload_mb: int = Field(
        20, description="Max MB for multipart / data-URI image uploads"
    )
    pil_max_image_pixels: int = Field(
        40_000_000, description="PIL decompression-bomb guard (pixels)"
    )

    # ------------------------------------------------------------------ #
    # Scan Store (metadata step → AI step hand-off)                       #
    # ------------------------------------------------------------------ #
    scan_store_max_size: int = Field(
        20, description="Max scans (raw image bytes included) kept in memory awaiting the AI step"
    )
    scan_store_ttl_sec: int = Field(
        3_600, description="1 h, scan lifetime before it can no longer be continued"
    )

    # ------------------------------------------------------------------ #
    # Activity Log                                                        #
    # ------------------------------------------------------------------ #
    activity_log_max_entries: int = Field(
        50, description="Oldest entries are dropped beyond this many"
    )

    # ------------------------------------------------------------------ #
    # Escalation Policy                                                   #
    # ------------------------------------------------------------------ #
    escalate_flagged_images: bool = Field(
        False, description="Allow the AI step even when metadata already flagged the image"
    )

    # ------------------------------------------------------------------ #
    # Gemini Client                                                       #
    # ------------------------------------------------------------------ #
    gemini_api_key: str = Field(
        "", description="API key for the Gemini Developer API"
    )
    gemini_model: str = Field(
        "gemini-2.5-flash", description="Vision model used for the second opinion"
    )
    gemini_http_timeout_ms: int = Field(
        30_000, description="HTTP client total timeout (ms)"
    )
    gemini_max_retries: int = Field(
        1, description="Transport attempts; 1 means a single best-effort request"
    )
    gemini_retry_initial_delay: float = Field(
        1.0, description="First retry delay (seconds)"
    )
    gemini_retry_max_delay: float = Field(
        5.0, description="Max retry back-off delay (seconds)"
    )
    gemini_retry_exp_base: float = Field(
        2.0, description="Exponential back-off multiplier"
    )
    gemini_max_pixels: int = Field(
        4_194_304, description="2048x2048 resize cap before upload"
    )
    gemini_jpeg_quality: int = Field(
        95, description="JPEG quality when a resized image is re-encoded for upload"
    )
    gemini_temperature: float = Field(
        0.2, description="Sampling temperature for Gemini model"
    )

    # ------------------------------------------------------------------ #
    # Derived byte-level properties (computed from MB fields)             #
    # ------------------------------------------------------------------ #
    @property
    def max_image_upload_bytes(self) -> int:
        return self.max_image_upload_mb * 1024 * 1024


# Single shared instance, import this everywhere.
settings = Settings()
