"""Logging setup shared by the timing and telemetry modules."""

from __future__ import annotations

import logging
import logging.config
import os
from pathlib import Path
from threading import RLock
from typing import Any, Mapping

import yaml

_CONFIG_LOCK = RLock()
_CONFIGURED = False

LOGGING_CONFIG_ENV = "SLOWLOG_LOGGING_CONFIG"

_DEFAULT_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": "standard",
        }
    },
    "loggers": {
        "slowlog": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        }
    },
}

_SECTIONS = ("version", "disable_existing_loggers", "formatters", "handlers", "root", "loggers")


def _config_path() -> Path:
    override = os.environ.get(LOGGING_CONFIG_ENV, "").strip()
    if override:
        return Path(override)
    return Path(__file__).resolve().parents[2] / "configs" / "logging.yaml"


def _load_config() -> dict[str, Any]:
    config_path = _config_path()
    if not config_path.exists():
        return dict(_DEFAULT_CONFIG)
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:  # pragma: no cover - guard rails for broken configs
        logging.basicConfig(level=logging.INFO)
        logging.getLogger("slowlog.telemetry").warning("failed to parse %s: %s", config_path, exc)
        return dict(_DEFAULT_CONFIG)
    if not isinstance(data, Mapping):
        return dict(_DEFAULT_CONFIG)
    merged = dict(_DEFAULT_CONFIG)
    merged.update({k: v for k, v in data.items() if k in _SECTIONS})
    return merged


def configure() -> None:
    """Ensure the logging subsystem is configured exactly once."""

    global _CONFIGURED
    with _CONFIG_LOCK:
        if _CONFIGURED:
            return
        logging.config.dictConfig(_load_config())
        _CONFIGURED = True


def is_configured() -> bool:
    with _CONFIG_LOCK:
        return _CONFIGURED


def get_logger(name: str) -> logging.Logger:
    """Return a logger configured via ``configs/logging.yaml``."""

    if not isinstance(name, str) or not name:
        raise ValueError("logger name must be a non-empty string")
    configure()
    return logging.getLogger(name)


__all__ = ["LOGGING_CONFIG_ENV", "configure", "get_logger", "is_configured"]
