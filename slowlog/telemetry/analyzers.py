"""Roll-ups over the slow-operation metrics recorded by the registry."""

from __future__ import annotations

from typing import Any, Dict

import numpy as np

from . import metrics as metric_module


def analyze(registry: metric_module.MetricsRegistry | None = None) -> Dict[str, Any]:
    """Return metric summaries plus a ``slow_operations`` section.

    The derived section reports how many slow operations were seen and the
    p50/p95/max of their elapsed milliseconds, grouped by the ``operation`` tag
    when one was supplied.
    """

    registry = registry or metric_module.get_registry()
    if not isinstance(registry, metric_module.MetricsRegistry):
        raise TypeError("registry must be a MetricsRegistry instance")

    summaries = registry.summaries()
    series = registry.get_series(metric_module.ELAPSED_MS)
    derived: Dict[str, Any] = {}
    if series is not None and series.samples:
        derived["slow_operations"] = _latency_section(series.values())
        grouped: Dict[str, list[float]] = {}
        for sample in series.samples:
            operation = sample.tags.get("operation")
            if operation:
                grouped.setdefault(operation, []).append(sample.value)
        if grouped:
            derived["by_operation"] = {
                name: _latency_section(values) for name, values in sorted(grouped.items())
            }
    return {"summaries": summaries, "derived": derived}


def _latency_section(values: list[float]) -> Dict[str, Any]:
    data = np.asarray(values, dtype=float)
    p50, p95 = np.percentile(data, [50, 95])
    return {
        "count": int(data.size),
        "p50_ms": round(float(p50), 3),
        "p95_ms": round(float(p95), 3),
        "max_ms": round(float(data.max()), 3),
    }


__all__ = ["analyze"]
