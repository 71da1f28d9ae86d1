"""Validation and normalization for calculator settings and extracted metadata.

Settings arrive as enums or as loose strings (CLI flags, environment values).
Everything is normalized here before it reaches the estimators, which assume
their inputs are already valid.

Official Documentation:
- Media resolution: https://ai.google.dev/gemini-api/docs/media-resolution
- Document Processing (PDF): https://ai.google.dev/gemini-api/docs/document-processing
- Video Understanding: https://ai.google.dev/gemini-api/docs/video-understanding
"""

import logging
import math
from typing import Union

from calculator.shared import ModelVersion, ResolutionTier

logger = logging.getLogger(__name__)

# ==============================================================================
# Gemini API Limits (Official Documentation)
# ==============================================================================

# PDF limits
# Reference: https://ai.google.dev/gemini-api/docs/document-processing
# Both AI Studio and Vertex AI: 1000 pages per file
MAX_PDF_PAGES_PER_FILE = 1000

# Frame sampling above this rate is accepted but unusual
# Reference: https://ai.google.dev/gemini-api/docs/video-understanding (default sampling is 1 FPS)
MAX_RECOMMENDED_VIDEO_FPS = 60.0

# ==============================================================================
# Setting Aliases
# ==============================================================================

_MODEL_VERSION_ALIASES: dict[str, ModelVersion] = {
    "gemini-2.5": ModelVersion.GEMINI_2_5,
    "gemini-2.5-flash": ModelVersion.GEMINI_2_5,
    "gemini-2.5-pro": ModelVersion.GEMINI_2_5,
    "2.5": ModelVersion.GEMINI_2_5,
    "a": ModelVersion.GEMINI_2_5,
    "gemini-3.0": ModelVersion.GEMINI_3_0,
    "gemini-3": ModelVersion.GEMINI_3_0,
    "gemini-3-flash": ModelVersion.GEMINI_3_0,
    "gemini-3-pro": ModelVersion.GEMINI_3_0,
    "3.0": ModelVersion.GEMINI_3_0,
    "3": ModelVersion.GEMINI_3_0,
    "b": ModelVersion.GEMINI_3_0,
}


# ==============================================================================
# Validation Functions
# ==============================================================================


class GeminiValidationError(ValueError):
    """Raised when a calculator setting or extracted value is out of range."""

    pass


def parse_model_version(value: Union[ModelVersion, str]) -> ModelVersion:
    """Resolve a model version from an enum member or a case-insensitive alias.

    Raises:
        GeminiValidationError: If the value names no known model generation
    """
    if isinstance(value, ModelVersion):
        return value
    if isinstance(value, str):
        version = _MODEL_VERSION_ALIASES.get(value.strip().lower())
        if version is not None:
            return version

    supported = ", ".join(v.value for v in ModelVersion)
    raise GeminiValidationError(f"Unknown model version '{value}'. Supported versions: {supported}")


def parse_resolution_tier(value: Union[ResolutionTier, str]) -> ResolutionTier:
    """Resolve a resolution tier from an enum member or a case-insensitive name.

    Accepts the API spelling too (MEDIA_RESOLUTION_HIGH).

    Raises:
        GeminiValidationError: If the value names no known tier
    """
    if isinstance(value, ResolutionTier):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized.startswith("media_resolution_"):
            normalized = normalized[len("media_resolution_") :]
        try:
            return ResolutionTier(normalized)
        except ValueError:
            pass

    supported = ", ".join(t.value for t in ResolutionTier)
    raise GeminiValidationError(f"Unknown resolution tier '{value}'. Supported tiers: {supported}")


def validate_video_fps(fps: Union[float, int, str]) -> float:
    """Validate a video frame sampling rate.

    Reference: https://ai.google.dev/gemini-api/docs/video-understanding

    Args:
        fps: Frames sampled per second; numeric strings are accepted

    Returns:
        The rate as a float

    Raises:
        GeminiValidationError: If the rate is not a finite number greater than zero
    """
    if isinstance(fps, bool):
        raise GeminiValidationError(f"Video FPS must be a number, got {fps!r}")
    try:
        value = float(fps)
    except (TypeError, ValueError) as e:
        raise GeminiValidationError(f"Video FPS must be a number, got {fps!r}") from e

    if not math.isfinite(value) or value <= 0:
        raise GeminiValidationError(f"Video FPS must be greater than 0, got {fps!r}")

    if value > MAX_RECOMMENDED_VIDEO_FPS:
        logger.warning(f"Video FPS {value} is unusually high; token cost grows linearly with sampling rate.")

    return value


def validate_pdf_pages(num_pages: int, file_name: str = "PDF") -> int:
    """Validate PDF page count.

    Reference: https://ai.google.dev/gemini-api/docs/document-processing
    Each PDF file can have up to 1,000 pages (both AI Studio and Vertex AI);
    larger documents are still estimated but logged.

    Raises:
        GeminiValidationError: If the PDF has no pages
    """
    if isinstance(num_pages, bool) or not isinstance(num_pages, int) or num_pages < 1:
        raise GeminiValidationError(f"PDF '{file_name}' has invalid page count: {num_pages!r}")

    if num_pages > MAX_PDF_PAGES_PER_FILE:
        logger.warning(
            f"PDF '{file_name}' has {num_pages} pages, "
            f"exceeds maximum of {MAX_PDF_PAGES_PER_FILE} pages per file accepted by the API."
        )
    return num_pages


def validate_image_dimensions(width: int, height: int, file_name: str = "image") -> tuple[int, int]:
    """Validate pixel dimensions reported for an image.

    Raises:
        GeminiValidationError: If either dimension is not a positive integer
    """
    for dimension in (width, height):
        if isinstance(dimension, bool) or not isinstance(dimension, int) or dimension <= 0:
            raise GeminiValidationError(f"Image '{file_name}' has invalid dimensions: {width}x{height}")
    return width, height


def validate_media_duration(duration_seconds: float, file_name: str = "media") -> float:
    """Validate an audio or video duration.

    Raises:
        GeminiValidationError: If the duration is missing, non-finite or not positive
    """
    if duration_seconds is None or isinstance(duration_seconds, bool):
        raise GeminiValidationError(f"Media file '{file_name}' has no duration metadata")
    duration = float(duration_seconds)
    if not math.isfinite(duration) or duration <= 0:
        raise GeminiValidationError(f"Media file '{file_name}' has invalid duration: {duration_seconds}s")
    return duration
