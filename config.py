"""
Configuration and constants for the Gemini token calculator.

Defaults for a calculator session, read once at import from the environment
(or the project's .env file). CalculatorConfiguration.from_env() validates
them; nothing here is validated beyond basic parsing.
"""

import logging

from utils.env import get_env

logger = logging.getLogger(__name__)


def _int_from_env(env_var: str, default: int) -> int:
    raw_value = get_env(env_var)
    if not raw_value:
        return default
    try:
        return int(raw_value)
    except (TypeError, ValueError):
        logger.warning("Invalid %s value '%s'; ignoring.", env_var, raw_value)
        return default


# Model generation used when none is selected: "gemini-2.5" or "gemini-3.0"
DEFAULT_MODEL_VERSION = (get_env("GEMINI_MODEL_VERSION", "gemini-3.0") or "gemini-3.0").strip()

# Default image / PDF page resolution tier for Gemini 3.0: low, medium or high
GEMINI_MEDIA_RESOLUTION = (get_env("GEMINI_MEDIA_RESOLUTION", "medium") or "medium").strip()

# Frames sampled per second of video for Gemini 3.0 (standard is 1 FPS)
DEFAULT_VIDEO_FPS = (get_env("GEMINI_VIDEO_FPS", "1") or "1").strip()

# Context window the usage percentage is reported against
CONTEXT_WINDOW_TOKENS = _int_from_env("GEMINI_CONTEXT_WINDOW", 128000)

# Log level for the command line entry point
LOG_LEVEL = (get_env("TOKEN_CALCULATOR_LOG_LEVEL", "WARNING") or "WARNING").upper()
