"""Runtime settings, read from ``FUSION_INDEX_*`` environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

DEFAULT_PATTERN = "**/*.fusion"
DEFAULT_DEBOUNCE_MS = 200
DEFAULT_LOG_LEVEL = "WARNING"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True)
class Settings:
    root: Path = field(default_factory=Path.cwd)
    pattern: str = DEFAULT_PATTERN
    # blank strings, comments and EEL bodies before scanning for structure
    neutralize: bool = False
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {name}: {value!r}")


def _parse_int(name: str, value: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise ValueError(f"Invalid integer for {name}: {value!r}") from None
    if parsed < 0:
        raise ValueError(f"{name} must not be negative, got {parsed}")
    return parsed


def _parse_log_level(name: str, value: str) -> str:
    level = value.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Invalid log level for {name}: {value!r}")
    return level


def load_settings(**overrides: Any) -> Settings:
    """Build settings from the environment; keyword overrides that are not None win."""
    settings = Settings()

    if root := os.getenv("FUSION_INDEX_ROOT"):
        settings = replace(settings, root=Path(root))
    if pattern := os.getenv("FUSION_INDEX_PATTERN"):
        settings = replace(settings, pattern=pattern)
    if (neutralize := os.getenv("FUSION_INDEX_NEUTRALIZE")) is not None:
        settings = replace(settings, neutralize=_parse_bool("FUSION_INDEX_NEUTRALIZE", neutralize))
    if debounce := os.getenv("FUSION_INDEX_DEBOUNCE_MS"):
        settings = replace(settings, debounce_ms=_parse_int("FUSION_INDEX_DEBOUNCE_MS", debounce))
    if log_level := os.getenv("FUSION_INDEX_LOG_LEVEL"):
        settings = replace(settings, log_level=_parse_log_level("FUSION_INDEX_LOG_LEVEL", log_level))

    explicit = {key: value for key, value in overrides.items() if value is not None}
    if "root" in explicit:
        explicit["root"] = Path(explicit["root"])
    if "log_level" in explicit:
        explicit["log_level"] = _parse_log_level("log_level", explicit["log_level"])
    return replace(settings, **explicit)
