"""Enumerations describing the Gemini cost regimes a calculation runs under."""

from enum import Enum

__all__ = ["ModelVersion", "ResolutionTier"]


class ModelVersion(str, Enum):
    """Gemini model generations with distinct input cost models.

    GEMINI_2_5 bills images and PDF pages with fixed 258-token tiles and video
    at a continuous per-second rate. GEMINI_3_0 bills images and PDF pages by
    an explicit resolution tier and video by sampled frame count.
    """

    GEMINI_2_5 = "gemini-2.5"
    GEMINI_3_0 = "gemini-3.0"

    @property
    def uses_resolution_tiers(self) -> bool:
        return self is ModelVersion.GEMINI_3_0

    @property
    def samples_video_frames(self) -> bool:
        return self is ModelVersion.GEMINI_3_0


class ResolutionTier(str, Enum):
    """Media resolution tiers for images and PDF pages (Gemini 3.0 only)."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
