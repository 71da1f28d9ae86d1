"""
Calculator configuration.

A configuration is an immutable snapshot of the settings every estimate
depends on: model version, default resolution tier and video sampling rate.
Sessions replace the whole snapshot on each change, so a value that fails
validation never reaches the estimators.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any

from calculator.shared import ModelVersion, ResolutionTier
from utils.gemini_validators import parse_model_version, parse_resolution_tier, validate_video_fps

logger = logging.getLogger(__name__)

__all__ = ["CalculatorConfiguration"]


@dataclass(frozen=True)
class CalculatorConfiguration:
    """Settings shared by every item of a calculator session.

    Fields accept enum members or their string spellings ("gemini-2.5",
    "HIGH", "0.5") and are normalized on construction.

    Raises:
        GeminiValidationError: On an unknown version or tier, or fps <= 0
    """

    model_version: ModelVersion = ModelVersion.GEMINI_3_0
    default_resolution_tier: ResolutionTier = ResolutionTier.MEDIUM
    video_fps: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "model_version", parse_model_version(self.model_version))
        object.__setattr__(self, "default_resolution_tier", parse_resolution_tier(self.default_resolution_tier))
        object.__setattr__(self, "video_fps", validate_video_fps(self.video_fps))

    @classmethod
    def from_env(cls) -> "CalculatorConfiguration":
        """Build the default configuration from environment settings (see config.py)."""
        from config import DEFAULT_MODEL_VERSION, DEFAULT_VIDEO_FPS, GEMINI_MEDIA_RESOLUTION

        configuration = cls(
            model_version=DEFAULT_MODEL_VERSION,
            default_resolution_tier=GEMINI_MEDIA_RESOLUTION,
            video_fps=DEFAULT_VIDEO_FPS,
        )
        logger.debug(f"Configuration from environment: {configuration.to_dict()}")
        return configuration

    def with_changes(self, **changes: Any) -> "CalculatorConfiguration":
        """Return a validated copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "model_version": self.model_version.value,
            "default_resolution_tier": self.default_resolution_tier.value,
            "video_fps": self.video_fps,
        }
