"""Clock sources a :class:`~slowlog.timing.timer.Timer` can be bound to."""

from __future__ import annotations

import errno
import time
from typing import Callable, Protocol

from slowlog.telemetry import logger

from .duration import Instant

__all__ = [
    "CLOCK_NAMES",
    "CallableClock",
    "ClockError",
    "ClockSource",
    "PosixClock",
    "default_clock",
    "monotonic_clock",
    "realtime_clock",
    "resolve_clock",
]

CLOCK_NAMES = ("auto", "monotonic", "realtime")

_LOGGER = logger.get_logger("slowlog.timing.clock")


class ClockError(RuntimeError):
    """Raised when the underlying clock primitive cannot be read.

    ``code`` carries the platform error number reported by the failed call.
    """

    def __init__(self, code: int, *, clock: str = "unknown") -> None:
        super().__init__(f"clock error reading {clock!r} (code {code})")
        self.code = code
        self.clock = clock


class ClockSource(Protocol):
    """Anything able to report the current :class:`Instant`."""

    name: str

    def now(self) -> Instant:  # pragma: no cover - interface definition
        ...


class PosixClock:
    """Clock backed by ``clock_gettime(2)`` for a specific clock id."""

    def __init__(self, clock_id: int, name: str) -> None:
        self.clock_id = clock_id
        self.name = name

    def now(self) -> Instant:
        try:
            total = time.clock_gettime_ns(self.clock_id)
        except OSError as exc:
            code = exc.errno if exc.errno is not None else errno.EINVAL
            _LOGGER.debug("clock_gettime failed for %s: %s", self.name, exc)
            raise ClockError(code, clock=self.name) from exc
        return Instant.from_nanoseconds(total)

    def __repr__(self) -> str:
        return f"PosixClock(clock_id={self.clock_id}, name={self.name!r})"


class CallableClock:
    """Clock backed by a nanosecond counter such as :func:`time.monotonic_ns`."""

    def __init__(self, fn: Callable[[], int], name: str) -> None:
        if not callable(fn):
            raise TypeError("clock function must be callable")
        self._fn = fn
        self.name = name

    def now(self) -> Instant:
        try:
            total = self._fn()
        except OSError as exc:
            code = exc.errno if exc.errno is not None else errno.EINVAL
            _LOGGER.debug("clock read failed for %s: %s", self.name, exc)
            raise ClockError(code, clock=self.name) from exc
        return Instant.from_nanoseconds(total)

    def __repr__(self) -> str:
        return f"CallableClock(name={self.name!r})"


def _has_posix_clock(attr: str) -> bool:
    return hasattr(time, "clock_gettime_ns") and hasattr(time, attr)


def monotonic_clock() -> ClockSource:
    """Return a monotonic clock, immune to wall-clock adjustments."""

    if _has_posix_clock("CLOCK_MONOTONIC"):
        return PosixClock(time.CLOCK_MONOTONIC, "monotonic")
    return CallableClock(time.monotonic_ns, "monotonic")


def realtime_clock() -> ClockSource:
    """Return the wall clock."""

    if _has_posix_clock("CLOCK_REALTIME"):
        return PosixClock(time.CLOCK_REALTIME, "realtime")
    return CallableClock(time.time_ns, "realtime")


def default_clock() -> ClockSource:
    """Prefer the monotonic clock and fall back to the wall clock."""

    if _has_posix_clock("CLOCK_MONOTONIC") or hasattr(time, "monotonic_ns"):
        return monotonic_clock()
    return realtime_clock()


def resolve_clock(name: str) -> ClockSource:
    """Map a configuration name (``auto``, ``monotonic``, ``realtime``) to a clock."""

    if not isinstance(name, str):
        raise TypeError("clock name must be a string")
    key = name.strip().lower()
    if key == "auto":
        return default_clock()
    if key == "monotonic":
        return monotonic_clock()
    if key == "realtime":
        return realtime_clock()
    raise ValueError(f"unknown clock {name!r}; expected one of {', '.join(CLOCK_NAMES)}")
