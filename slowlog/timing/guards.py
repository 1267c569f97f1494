"""Context manager and decorator that report blocks running past a threshold."""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, TypeVar

from slowlog.telemetry import logger as telemetry_logger
from slowlog.utils import config

from .actions import Action, log_action
from .clock import ClockSource
from .duration import Duration
from .timer import Timer

F = TypeVar("F", bound=Callable[..., Any])

_LOGGER = telemetry_logger.get_logger("slowlog.timing.guards")

__all__ = ["slow_call", "watch"]


@contextmanager
def watch(
    message: str,
    *args: object,
    threshold: Duration | None = None,
    logger: logging.Logger | None = None,
    clock: ClockSource | None = None,
    action: Action | None = None,
) -> Iterator[Timer]:
    """Time the enclosed block and run ``action`` on exit if it ran too long.

    Without an explicit ``action`` the elapsed time and ``message % args`` are
    logged at the configured level.  Exceptions raised by the block propagate
    unchanged; if the check itself fails while the block is unwinding, that
    failure is logged instead of replacing the original exception.
    """

    settings = config.get_settings()
    timer = Timer(threshold if threshold is not None else settings.threshold, clock)
    if action is None:
        target = logger or telemetry_logger.get_logger(settings.logger_name)
        action = log_action(target, message, *args, level=settings.log_level)
    try:
        yield timer
    except BaseException:
        try:
            timer.run_if_expired(action)
        except Exception:
            _LOGGER.exception("slow-operation check for %r failed while unwinding", message)
        raise
    timer.run_if_expired(action)


def slow_call(
    threshold: Duration | None = None,
    *,
    logger: logging.Logger | None = None,
    clock: ClockSource | None = None,
) -> Callable[[F], F]:
    """Decorate a function so slow calls are logged under its qualified name."""

    def decorator(fn: F) -> F:
        name = getattr(fn, "__qualname__", repr(fn))

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with watch("%s", name, threshold=threshold, logger=logger, clock=clock):
                return fn(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
