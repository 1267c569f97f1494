"""One-shot timer that reports only once a threshold has been crossed."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from slowlog.utils import config

from .clock import ClockSource, resolve_clock
from .duration import Duration, Instant, Ordering, compare, difference
from .sinks import NullSink, Sink, StreamSink, format_message

T = TypeVar("T")

__all__ = ["Timer"]


class Timer:
    """Measure a single interval against a threshold.

    The timer is immutable: ``start``, ``threshold`` and ``clock`` are fixed at
    construction, and to measure a new interval a new timer is created.  It keeps
    no "already fired" state, so every query made after the deadline reports
    the timer as expired again and every guarded call runs its action again.

    Every method that reads the clock raises
    :class:`~slowlog.timing.clock.ClockError` when the read fails, before doing
    any other work.
    """

    __slots__ = ("_clock", "_start", "_threshold")

    def __init__(self, threshold: Duration, clock: ClockSource | None = None) -> None:
        if not isinstance(threshold, Duration):
            raise TypeError("threshold must be a Duration")
        if clock is None:
            clock = resolve_clock(config.get_settings().clock)
        self._clock = clock
        self._threshold = threshold
        self._start = clock.now()

    @classmethod
    def start(cls, threshold: Duration, clock: ClockSource | None = None) -> "Timer":
        return cls(threshold, clock)

    @property
    def started_at(self) -> Instant:
        return self._start

    @property
    def threshold(self) -> Duration:
        return self._threshold

    @property
    def clock(self) -> ClockSource:
        return self._clock

    def elapsed(self) -> Duration:
        """Time since the timer started, read from the timer's own clock."""

        return difference(self._clock.now(), self._start)

    def is_expired(self) -> bool:
        """``True`` once elapsed time is strictly greater than the threshold."""

        return self._exceeds(self.elapsed())

    def run_if_expired(self, action: Callable[[Duration], T]) -> T | None:
        """Call ``action(elapsed)`` once if the timer has expired.

        The clock is read exactly once; the same elapsed value decides expiry and
        is handed to ``action``.  Returns the action's result, or ``None`` when
        the timer has not expired and ``action`` was not called.
        """

        elapsed = self.elapsed()
        if not self._exceeds(elapsed):
            return None
        return action(elapsed)

    def printf(self, template: str, *args: object, sink: Sink | None = None) -> int:
        """Write ``"<elapsed> elapsed; " + template % args`` if expired.

        Returns the number of characters written, 0 when the timer has not
        expired.
        """

        target = sink if sink is not None else StreamSink()

        def _write(elapsed: Duration) -> int:
            return target.write(format_message(elapsed, template, *args))

        written = self.run_if_expired(_write)
        return 0 if written is None else written

    def stream(self, sink: Sink | None = None) -> Sink:
        """Return ``sink`` when expired, otherwise a sink that discards writes."""

        if self.is_expired():
            return sink if sink is not None else StreamSink()
        return NullSink()

    def log(
        self,
        logger: logging.Logger,
        message: str,
        *args: object,
        level: int = logging.WARNING,
    ) -> bool:
        """Log ``message`` with the elapsed prefix if expired; return whether it logged."""

        def _emit(elapsed: Duration) -> bool:
            logger.log(level, format_message(elapsed, message, *args), extra={"elapsed": elapsed})
            return True

        return bool(self.run_if_expired(_emit))

    def _exceeds(self, elapsed: Duration) -> bool:
        return compare(elapsed, self._threshold) is Ordering.GREATER

    def __repr__(self) -> str:
        return (
            f"Timer(started_at={self._start}, threshold={self._threshold}, "
            f"clock={getattr(self._clock, 'name', self._clock)!r})"
        )
