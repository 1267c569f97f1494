"""In-memory metric registry fed by slow-operation actions.

Each series keeps only its most recent ``max_samples`` observations so a
long-running process that keeps hitting slow paths does not grow without
bound; counts and totals are tracked separately and never drop.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Mapping

from . import exporters

ELAPSED_MS = "slowlog.elapsed_ms"
EXPIRED = "slowlog.expired"

DEFAULT_MAX_SAMPLES = 1024

_CATALOG: Dict[str, Dict[str, str]] = {
    ELAPSED_MS: {
        "kind": "gauge",
        "description": "Elapsed time of an operation that exceeded its threshold",
        "unit": "milliseconds",
    },
    EXPIRED: {
        "kind": "counter",
        "description": "Number of guarded dispatches that found their timer expired",
        "unit": "count",
    },
}


@dataclass(frozen=True)
class MetricSample:
    name: str
    value: float
    timestamp: float
    kind: str
    tags: Mapping[str, str] = field(default_factory=dict)
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "value": self.value,
            "timestamp": self.timestamp,
            "kind": self.kind,
        }
        if self.tags:
            payload["tags"] = dict(self.tags)
        if self.extra:
            payload["extra"] = dict(self.extra)
        return payload


class MetricSeries:
    """Recent samples of one metric plus lifetime count and total."""

    def __init__(self, name: str, kind: str, *, max_samples: int = DEFAULT_MAX_SAMPLES) -> None:
        self.name = name
        self.kind = kind
        self.samples: Deque[MetricSample] = deque(maxlen=max_samples)
        self.count = 0
        self.total = 0.0

    def add(self, sample: MetricSample) -> None:
        self.samples.append(sample)
        self.count += 1
        self.total += sample.value

    def values(self) -> list[float]:
        return [sample.value for sample in self.samples]

    def copy(self) -> "MetricSeries":
        clone = MetricSeries(self.name, self.kind, max_samples=self.samples.maxlen or DEFAULT_MAX_SAMPLES)
        clone.samples.extend(self.samples)
        clone.count = self.count
        clone.total = self.total
        return clone

    def summary(self) -> Dict[str, Any]:
        summary: Dict[str, Any] = {
            "name": self.name,
            "kind": self.kind,
            "count": self.count,
            "total": self.total,
        }
        if self.samples:
            values = self.values()
            summary["avg"] = self.total / self.count
            summary["min"] = min(values)
            summary["max"] = max(values)
            summary["last"] = self.samples[-1].to_dict()
        summary.update(_CATALOG.get(self.name, {}))
        return summary


class MetricsRegistry:
    def __init__(self, *, max_samples: int = DEFAULT_MAX_SAMPLES) -> None:
        if max_samples <= 0:
            raise ValueError("max_samples must be positive")
        self._lock = threading.RLock()
        self._max_samples = max_samples
        self._series: Dict[str, MetricSeries] = {}

    def emit(
        self,
        name: str,
        value: Any,
        *,
        kind: str | None = None,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> MetricSample:
        """Record ``value`` under ``name`` and forward the sample to the exporter."""

        if not isinstance(name, str) or not name:
            raise ValueError("metric name must be a non-empty string")
        catalog = _CATALOG.get(name, {})
        metadata = {key: catalog[key] for key in ("description", "unit") if key in catalog}
        metadata.update(extra or {})
        sample = MetricSample(
            name=name,
            value=_coerce_value(value),
            timestamp=time.time(),
            kind=kind or catalog.get("kind", "gauge"),
            tags={str(k): str(v) for k, v in (tags or {}).items()},
            extra=metadata,
        )
        with self._lock:
            series = self._series.get(name)
            if series is None:
                series = MetricSeries(name, sample.kind, max_samples=self._max_samples)
                self._series[name] = series
            series.add(sample)
        exporters.export(sample)
        return sample

    def get_series(self, name: str) -> MetricSeries | None:
        """Return a detached copy of the series, or ``None`` if nothing was recorded."""

        with self._lock:
            series = self._series.get(name)
            return series.copy() if series is not None else None

    def snapshot(self) -> Dict[str, list[Dict[str, Any]]]:
        with self._lock:
            return {
                name: [sample.to_dict() for sample in series.samples]
                for name, series in self._series.items()
            }

    def summaries(self) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            return {name: series.summary() for name, series in self._series.items()}

    def reset(self) -> None:
        with self._lock:
            self._series.clear()


_REGISTRY = MetricsRegistry()


def emit(
    metric: str,
    value: Any,
    *,
    kind: str | None = None,
    tags: Mapping[str, str] | None = None,
    extra: Mapping[str, Any] | None = None,
) -> MetricSample:
    return _REGISTRY.emit(metric, value, kind=kind, tags=tags, extra=extra)


def get_registry() -> MetricsRegistry:
    return _REGISTRY


def _coerce_value(value: Any) -> float:
    # Durations are recorded in milliseconds.
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    to_ms = getattr(value, "to_milliseconds", None)
    if callable(to_ms):
        return float(to_ms())
    raise TypeError(f"metric value {value!r} must be numeric or a Duration")


__all__ = [
    "DEFAULT_MAX_SAMPLES",
    "ELAPSED_MS",
    "EXPIRED",
    "MetricSample",
    "MetricSeries",
    "MetricsRegistry",
    "emit",
    "get_registry",
]
