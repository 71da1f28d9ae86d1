"""Environment variable access backed by an optional .env file.

Values come from the process environment first and from the project's .env
file second. Setting TOKEN_CALCULATOR_FORCE_ENV_OVERRIDE=true in the .env
file flips that order so the file wins.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_ENV_PATH = _PROJECT_ROOT / ".env"

_DOTENV_VALUES: dict[str, Optional[str]] = {}
_FORCE_ENV_OVERRIDE = False


def _read_dotenv_values(env_path: Path) -> dict[str, Optional[str]]:
    if not env_path.exists():
        return {}
    return dict(dotenv_values(env_path))


def reload_env(dotenv_mapping: Optional[Mapping[str, Optional[str]]] = None) -> None:
    """Reload .env values, or replace them with an explicit mapping (used by tests)."""
    global _DOTENV_VALUES, _FORCE_ENV_OVERRIDE

    if dotenv_mapping is None:
        _DOTENV_VALUES = _read_dotenv_values(_ENV_PATH)
    else:
        _DOTENV_VALUES = dict(dotenv_mapping)

    raw_override = _DOTENV_VALUES.get("TOKEN_CALCULATOR_FORCE_ENV_OVERRIDE") or "false"
    _FORCE_ENV_OVERRIDE = raw_override.strip().lower() == "true"

    if _DOTENV_VALUES:
        logger.debug(f"Loaded {len(_DOTENV_VALUES)} values from .env (force override: {_FORCE_ENV_OVERRIDE})")


def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Return the configured value for key, or default when unset."""
    if _FORCE_ENV_OVERRIDE and key in _DOTENV_VALUES:
        value = _DOTENV_VALUES[key]
        return value if value is not None else default

    value = os.environ.get(key)
    if value is not None:
        return value

    value = _DOTENV_VALUES.get(key)
    return value if value is not None else default


reload_env()
