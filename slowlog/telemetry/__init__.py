"""Convenience exports for slowlog telemetry utilities."""

from . import analyzers, exporters, hooks, logger, metrics

__all__ = [
    "analyzers",
    "exporters",
    "hooks",
    "logger",
    "metrics",
]
