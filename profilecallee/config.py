"""Configuration helpers for loading environment variables.

This module ensures that variables defined in a project-level ``.env`` file
are loaded before attempting to access them.  Consumers should rely on the
``get_env`` helper instead of using :func:`os.getenv` directly so that the
configuration is loaded in a single, well-defined place.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .model import SERVICE_SPECIFIC_ERROR

LOG_LEVEL_KEY = "PROFILECALLEE_LOG_LEVEL"
ERROR_OUTPUT_KEY = "PROFILECALLEE_ERROR_OUTPUT"


@lru_cache(maxsize=1)
def _load_environment() -> None:
    """Load environment variables from the project's ``.env`` file.

    Falls back to :func:`load_dotenv`'s own discovery when the project root
    has no ``.env``. Subsequent calls are cached so the file is only read once
    per process.
    """

    project_root = Path(__file__).resolve().parents[1]
    env_path = project_root / ".env"

    if env_path.exists():
        load_dotenv(env_path, override=False)
    else:
        load_dotenv(override=False)


def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Return the value for ``key`` from the environment.

    Parameters
    ----------
    key:
        The name of the environment variable to look up.
    default:
        The value to return when ``key`` is not present.
    """

    _load_environment()
    return os.environ.get(key, default)


@dataclass(frozen=True)
class CalleeSettings:
    """Runtime knobs for a :class:`~profilecallee.api.ServiceCallee`."""

    log_level: Optional[str] = None
    error_output: str = SERVICE_SPECIFIC_ERROR


def load_settings() -> CalleeSettings:
    """Build :class:`CalleeSettings` from the environment."""

    log_level = get_env(LOG_LEVEL_KEY)
    error_output = get_env(ERROR_OUTPUT_KEY) or SERVICE_SPECIFIC_ERROR
    return CalleeSettings(
        log_level=log_level.strip().upper() if log_level else None,
        error_output=error_output,
    )


__all__ = ["CalleeSettings", "get_env", "load_settings"]
