"""Ready-made actions for :meth:`Timer.run_if_expired <slowlog.timing.timer.Timer.run_if_expired>`.

Each factory returns a closure taking the elapsed :class:`Duration`.  The
closures consume the value while they run and keep no reference to it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from slowlog.telemetry import hooks, metrics

from .duration import Duration
from .sinks import Sink, StreamSink, format_message

Action = Callable[[Duration], Any]

__all__ = [
    "Action",
    "chain",
    "hook_action",
    "log_action",
    "metric_action",
    "print_action",
]


def print_action(template: str, *args: object, sink: Sink | None = None) -> Callable[[Duration], int]:
    target = sink if sink is not None else StreamSink()

    def _print(elapsed: Duration) -> int:
        return target.write(format_message(elapsed, template, *args))

    return _print


def log_action(
    logger: logging.Logger,
    message: str,
    *args: object,
    level: int = logging.WARNING,
) -> Callable[[Duration], None]:
    def _log(elapsed: Duration) -> None:
        logger.log(level, format_message(elapsed, message, *args), extra={"elapsed": elapsed})

    return _log


def metric_action(
    metric: str = metrics.ELAPSED_MS,
    *,
    tags: Mapping[str, str] | None = None,
    registry: metrics.MetricsRegistry | None = None,
) -> Callable[[Duration], metrics.MetricSample]:
    """Record the elapsed milliseconds and bump the expired counter."""

    target = registry or metrics.get_registry()
    frozen_tags = dict(tags or {})

    def _emit(elapsed: Duration) -> metrics.MetricSample:
        target.emit(metrics.EXPIRED, 1, tags=frozen_tags)
        return target.emit(metric, elapsed.to_milliseconds(), tags=frozen_tags)

    return _emit


def hook_action(
    event: str = hooks.SLOW_OPERATION,
    payload: Mapping[str, Any] | None = None,
) -> Callable[[Duration], int]:
    """Dispatch ``event`` with the elapsed time merged into ``payload``."""

    base = dict(payload or {})

    def _dispatch(elapsed: Duration) -> int:
        data = dict(base)
        data.update(
            {
                "elapsed_seconds": elapsed.seconds,
                "elapsed_nanoseconds": elapsed.nanoseconds,
                "elapsed_ms": elapsed.to_milliseconds(),
            }
        )
        return hooks.dispatch(event, data)

    return _dispatch


def chain(*actions: Action) -> Callable[[Duration], list[Any]]:
    """Combine actions so each one receives the same elapsed value, in order."""

    for action in actions:
        if not callable(action):
            raise TypeError("chained actions must be callable")

    def _run(elapsed: Duration) -> list[Any]:
        return [action(elapsed) for action in actions]

    return _run
