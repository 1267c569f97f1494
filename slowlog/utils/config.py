"""Helpers for loading YAML configuration and the timer defaults derived from it."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from threading import RLock
from typing import Any, Mapping

import yaml

from slowlog.timing.duration import Duration

__all__ = [
    "CONFIG_ENV",
    "TimerSettings",
    "get_settings",
    "load_config",
    "load_settings",
    "reset_settings",
]

CONFIG_ENV = "SLOWLOG_CONFIG"
_CLOCK_NAMES = ("auto", "monotonic", "realtime")


def load_config(path: str | Path) -> Any:
    """Return the parsed YAML document located at ``path``.

    An empty document yields ``{}``; anything other than a mapping at the root
    raises :class:`ValueError`.
    """

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"configuration file not found: {config_path}")
    raw_text = config_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(raw_text)
    except yaml.YAMLError as exc:
        raise ValueError(f"failed to parse configuration: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("configuration root must be a mapping")
    return data


@dataclass(frozen=True)
class TimerSettings:
    clock: str = "auto"
    threshold: Duration = field(default_factory=lambda: Duration(0, 100_000_000))
    logger_name: str = "slowlog.timing"
    log_level: int = logging.WARNING


def _default_path() -> Path:
    override = os.environ.get(CONFIG_ENV, "").strip()
    if override:
        return Path(override)
    return Path(__file__).resolve().parents[2] / "configs" / "slowlog.yaml"


def load_settings(path: str | Path | None = None) -> TimerSettings:
    """Build :class:`TimerSettings` from YAML and ``SLOWLOG_*`` overrides.

    Unknown or malformed values fall back to the defaults rather than failing,
    so a bad override only disables itself.
    """

    config_path = Path(path) if path is not None else _default_path()
    data: Mapping[str, Any] = {}
    if path is not None or config_path.exists():
        data = load_config(config_path)

    section = data.get("timer", {})
    if not isinstance(section, Mapping):
        section = {}
    defaults = TimerSettings()

    clock = _coerce_clock(section.get("clock"), defaults.clock)
    threshold = _coerce_threshold_ms(section.get("threshold_ms"), defaults.threshold)
    logger_name = section.get("logger")
    if not isinstance(logger_name, str) or not logger_name:
        logger_name = defaults.logger_name
    log_level = _coerce_level(section.get("log_level"), defaults.log_level)

    clock = _coerce_clock(os.environ.get("SLOWLOG_CLOCK"), clock)
    threshold = _coerce_threshold_ms(os.environ.get("SLOWLOG_THRESHOLD_MS"), threshold)
    log_level = _coerce_level(os.environ.get("SLOWLOG_LOG_LEVEL"), log_level)

    return TimerSettings(
        clock=clock,
        threshold=threshold,
        logger_name=logger_name,
        log_level=log_level,
    )


_SETTINGS_LOCK = RLock()
_SETTINGS: TimerSettings | None = None


def get_settings() -> TimerSettings:
    """Return the cached process-wide settings, loading them on first use."""

    global _SETTINGS
    with _SETTINGS_LOCK:
        if _SETTINGS is None:
            _SETTINGS = load_settings()
        return _SETTINGS


def reset_settings() -> None:
    global _SETTINGS
    with _SETTINGS_LOCK:
        _SETTINGS = None


def _coerce_clock(value: Any, fallback: str) -> str:
    if not isinstance(value, str):
        return fallback
    key = value.strip().lower()
    return key if key in _CLOCK_NAMES else fallback


def _coerce_threshold_ms(value: Any, fallback: Duration) -> Duration:
    if value is None or isinstance(value, bool):
        return fallback
    try:
        millis = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(millis) or millis < 0:
        return fallback
    return Duration.from_milliseconds(millis)


def _coerce_level(value: Any, fallback: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if not isinstance(value, str) or not value.strip():
        return fallback
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else fallback
