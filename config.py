"""
Settings sourced from environment variables.

Malformed values fail fast with ValueError instead of being silently ignored.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}
_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class WatchmanSettings:
    """Runtime knobs for the shell and for new Watchman instances."""

    log_level: str = "WARNING"
    structured_logs: bool = False
    thread_safe: bool = False

    def __post_init__(self) -> None:
        if self.log_level not in _LEVELS:
            raise ValueError(f"Invalid log level '{self.log_level}'. Allowed: {', '.join(_LEVELS)}")


def load_settings(env: Optional[Mapping[str, str]] = None) -> WatchmanSettings:
    """
    Parse settings from environment variables.

    Args:
        env: Optional mapping for testability. Defaults to os.environ.
    """
    source = os.environ if env is None else env

    log_level = (_clean_str(source.get("WATCHMAN_LOG_LEVEL")) or "WARNING").upper()
    structured = _parse_bool(source.get("WATCHMAN_STRUCTURED_LOGS"), "WATCHMAN_STRUCTURED_LOGS")
    thread_safe = _parse_bool(source.get("WATCHMAN_THREAD_SAFE"), "WATCHMAN_THREAD_SAFE")

    settings = WatchmanSettings(log_level=log_level, structured_logs=structured, thread_safe=thread_safe)
    logging.getLogger(__name__).debug("Loaded settings: %s", settings)
    return settings


def _clean_str(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _parse_bool(value: Optional[str], name: str) -> bool:
    cleaned = _clean_str(value)
    if cleaned is None:
        return False
    lowered = cleaned.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag (1/0, true/false, yes/no, on/off), got '{value}'.")
