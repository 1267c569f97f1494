"""Sinks that receive every metric sample recorded by the registry."""

from __future__ import annotations

import json
from pathlib import Path
from threading import RLock
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:  # pragma: no cover - imported only for typing
    from .metrics import MetricSample


class Exporter(Protocol):
    def export(self, sample: "MetricSample") -> None:  # pragma: no cover - interface definition
        ...


class JsonlExporter:
    """Append metric samples to a JSONL file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = RLock()

    @property
    def path(self) -> Path:
        return self._path

    def export(self, sample: "MetricSample") -> None:
        record = sample.to_dict()
        with self._lock:
            with self._path.open("a", encoding="utf-8") as handle:
                json.dump(record, handle, ensure_ascii=False, sort_keys=True)
                handle.write("\n")


class PrometheusExporter:
    """Keep the latest sample per metric and render the text exposition format."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._latest: dict[str, "MetricSample"] = {}

    def export(self, sample: "MetricSample") -> None:
        with self._lock:
            self._latest[_metric_name(sample.name)] = sample

    def render(self) -> str:
        with self._lock:
            lines: list[str] = []
            for name in sorted(self._latest):
                sample = self._latest[name]
                if sample.extra.get("description"):
                    lines.append(f"# HELP {name} {sample.extra['description']}")
                lines.append(f"# TYPE {name} {sample.kind}")
                lines.append(f"{name}{_render_labels(sample)} {sample.value} {int(sample.timestamp * 1000)}")
            return "\n".join(lines) + ("\n" if lines else "")


_LOCK = RLock()
_EXPORTER: Exporter | None = None


def configure(exporter: Exporter | None) -> None:
    """Install ``exporter`` as the process-wide exporter (``None`` disables export)."""

    global _EXPORTER
    if exporter is not None and not callable(getattr(exporter, "export", None)):
        raise TypeError("exporter must provide an export(sample) method")
    with _LOCK:
        _EXPORTER = exporter


def get_exporter() -> Exporter | None:
    with _LOCK:
        return _EXPORTER


def export(sample: "MetricSample") -> None:
    exporter = get_exporter()
    if exporter is None:
        return
    exporter.export(sample)


def _metric_name(name: str) -> str:
    # Prometheus names cannot contain dots.
    return name.replace(".", "_")


def _render_labels(sample: "MetricSample") -> str:
    if not sample.tags:
        return ""
    pairs = ",".join(f"{key}={_quote_label(value)}" for key, value in sorted(sample.tags.items()))
    return f"{{{pairs}}}"


def _quote_label(value: object) -> str:
    text = str(value)
    escaped = text.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')
    return f'"{escaped}"'


__all__ = [
    "Exporter",
    "JsonlExporter",
    "PrometheusExporter",
    "configure",
    "export",
    "get_exporter",
]
