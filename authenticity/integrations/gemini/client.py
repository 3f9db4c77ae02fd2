"""
Gemini API client: the second-opinion vision call.

`client` starts as None. Call `initialize()` inside the FastAPI lifespan
context manager. `analyze_image_with_gemini` is the public entry point used by
the analysis pipeline; it makes a single best-effort request and raises
VisionAnalysisError on any failure.
"""

import io
import json
import logging
import time

from google import genai
from google.genai import types
from PIL import Image

from authenticity.config import settings
from authenticity.core.errors import VisionAnalysisError
from authenticity.integrations.gemini.prompts import ANALYSIS_QUERY, get_system_instruction
from authenticity.schemas.analysis import AIAnalysisResult

logger = logging.getLogger(__name__)

# Set by initialize(). None when no API key is configured or init fails.
client = None  # genai.Client | None


def initialize() -> None:
    """Create the Gemini client and bind it to the module-level `client`."""
    global client

    if not settings.gemini_api_key:
        logger.warning("[STARTUP] GEMINI_API_KEY not set. The AI second opinion is disabled.")
        return

    try:
        client = genai.Client(
            api_key=settings.gemini_api_key,
            http_options=types.HttpOptions(
                timeout=settings.gemini_http_timeout_ms,
                retry_options=types.HttpRetryOptions(
                    attempts=settings.gemini_max_retries,
                    initial_delay=settings.gemini_retry_initial_delay,
                    max_delay=settings.gemini_retry_max_delay,
                    exp_base=settings.gemini_retry_exp_base,
                    http_status_codes=[408, 429, 500, 502, 503, 504]
                )
            )
        )
        logger.info(f"[STARTUP] Gemini client initialized (model={settings.gemini_model})")
    except Exception as e:
        logger.error(f"[STARTUP] Failed to initialize Gemini client: {e}")


def _prepare_image(image_bytes: bytes, mime_type: str) -> tuple[bytes, str]:
    """
    Downscale images above the pixel cap (~2048x2048) to limit token usage and
    avoid payload errors. Smaller images are sent untouched in their own format.
    """
    with Image.open(io.BytesIO(image_bytes)) as img:
        w, h = img.size
        pixels = w * h
        if pixels <= settings.gemini_max_pixels:
            return image_bytes, mime_type

        scale = (settings.gemini_max_pixels / pixels) ** 0.5
        resized = img.resize((max(1, int(w * scale)), max(1, int(h * scale))), Image.Resampling.LANCZOS)

    if resized.mode != "RGB":
        resized = resized.convert("RGB")

    buf = io.BytesIO()
    resized.save(buf, format="JPEG", quality=settings.gemini_jpeg_quality)
    resized.close()
    logger.info(f"[GEMINI] Resized {w}x{h} upload to fit {settings.gemini_max_pixels} pixels")
    return buf.getvalue(), "image/jpeg"


def analyze_image_with_gemini(image_bytes: bytes, mime_type: str) -> AIAnalysisResult:
    """Ask Gemini whether the image is AI-generated. Blocking; run it in a thread."""
    if client is None:
        raise VisionAnalysisError("AI second opinion is not configured.")

    try:
        payload, payload_mime = _prepare_image(image_bytes, mime_type)

        config = types.GenerateContentConfig(
            system_instruction=get_system_instruction(),
            temperature=settings.gemini_temperature,
            response_mime_type="application/json",
            response_schema=AIAnalysisResult,
        )

        start = time.perf_counter()
        response = client.models.generate_content(
            model=settings.gemini_model,
            contents=[
                types.Part.from_bytes(data=payload, mime_type=payload_mime),
                ANALYSIS_QUERY,
            ],
            config=config
        )
        latency_ms = (time.perf_counter() - start) * 1000

        result = response.parsed
        if not isinstance(result, AIAnalysisResult):
            result = AIAnalysisResult.model_validate_json(response.text or "")

        usage = getattr(response, "usage_metadata", None)
        if usage is not None:
            logger.info(
                f"[GEMINI] {latency_ms:.0f}ms | tokens: prompt={usage.prompt_token_count}, "
                f"completion={usage.candidates_token_count}, total={usage.total_token_count}"
            )
        logger.info(f"[GEMINI] Result: {json.dumps(result.model_dump(mode='json'))}")
        return result

    except Exception as e:
        logger.error(f"[GEMINI] analyze_image_with_gemini error: {e}")
        raise VisionAnalysisError("Failed to analyze image with AI.") from e
