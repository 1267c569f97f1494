"""Second/nanosecond value types and the arithmetic shared by every timer."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Union

NSEC_PER_SEC = 1_000_000_000

__all__ = [
    "NSEC_PER_SEC",
    "Duration",
    "Instant",
    "Ordering",
    "compare",
    "difference",
]


class Ordering(enum.IntEnum):
    """Result of :func:`compare`."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


def _check_fields(owner: str, seconds: object, nanoseconds: object) -> None:
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise TypeError(f"{owner}.seconds must be an integer")
    if isinstance(nanoseconds, bool) or not isinstance(nanoseconds, int):
        raise TypeError(f"{owner}.nanoseconds must be an integer")
    if not 0 <= nanoseconds < NSEC_PER_SEC:
        raise ValueError(f"{owner}.nanoseconds must be in [0, {NSEC_PER_SEC})")


@dataclass(frozen=True)
class Instant:
    """A point in time read from a clock source.

    ``seconds`` is an unbounded Python integer, so unlike a C ``time_t`` it can
    never wrap; it is assumed not to wrap on the underlying clock within the
    lifetime of a process either.
    """

    seconds: int
    nanoseconds: int = 0

    def __post_init__(self) -> None:
        _check_fields("Instant", self.seconds, self.nanoseconds)

    @classmethod
    def normalize(cls, seconds: int, nanoseconds: int) -> "Instant":
        """Build an instant, carrying excess or negative nanoseconds into seconds."""

        carry, remainder = divmod(nanoseconds, NSEC_PER_SEC)
        return cls(seconds + carry, remainder)

    @classmethod
    def from_nanoseconds(cls, total: int) -> "Instant":
        return cls.normalize(0, total)

    def total_nanoseconds(self) -> int:
        return self.seconds * NSEC_PER_SEC + self.nanoseconds

    def __str__(self) -> str:
        return f"{self.seconds}.{self.nanoseconds:09d}"


@dataclass(frozen=True)
class Duration:
    """A non-negative span of time, used for elapsed values and thresholds."""

    seconds: int
    nanoseconds: int = 0

    def __post_init__(self) -> None:
        _check_fields("Duration", self.seconds, self.nanoseconds)
        if self.seconds < 0:
            raise ValueError("Duration.seconds must be non-negative")

    @classmethod
    def normalize(cls, seconds: int, nanoseconds: int) -> "Duration":
        carry, remainder = divmod(nanoseconds, NSEC_PER_SEC)
        return cls(seconds + carry, remainder)

    @classmethod
    def from_nanoseconds(cls, total: int) -> "Duration":
        if isinstance(total, bool) or not isinstance(total, int):
            raise TypeError("duration nanoseconds must be an integer")
        return cls.normalize(0, total)

    @classmethod
    def from_seconds(cls, value: Union[int, float]) -> "Duration":
        """Convert a (possibly fractional) number of seconds, rounding to the nanosecond."""

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError("duration seconds must be numeric")
        if isinstance(value, int):
            return cls(value)
        if not math.isfinite(value):
            raise ValueError("duration seconds must be finite")
        return cls.from_nanoseconds(round(value * NSEC_PER_SEC))

    @classmethod
    def from_milliseconds(cls, value: Union[int, float]) -> "Duration":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError("duration milliseconds must be numeric")
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError("duration milliseconds must be finite")
        return cls.from_nanoseconds(round(value * 1_000_000))

    def total_nanoseconds(self) -> int:
        return self.seconds * NSEC_PER_SEC + self.nanoseconds

    def to_seconds(self) -> float:
        return self.seconds + self.nanoseconds / NSEC_PER_SEC

    def to_milliseconds(self) -> float:
        return self.seconds * 1000.0 + self.nanoseconds / 1_000_000

    def __str__(self) -> str:
        return f"{self.seconds}.{self.nanoseconds:09d}"


_Timespec = Union[Instant, Duration]


def compare(a: _Timespec, b: _Timespec) -> Ordering:
    """Order two values by ``seconds`` and then by ``nanoseconds``."""

    if a.seconds != b.seconds:
        return Ordering.GREATER if a.seconds > b.seconds else Ordering.LESS
    if a.nanoseconds != b.nanoseconds:
        return Ordering.GREATER if a.nanoseconds > b.nanoseconds else Ordering.LESS
    return Ordering.EQUAL


def difference(x: Instant, y: Instant) -> Duration:
    """Return the magnitude of the time between ``x`` and ``y``.

    Argument order does not matter: the later instant is used as the minuend,
    deciding ties on ``seconds`` by ``nanoseconds``, so the result never has a
    negative ``seconds`` field.  A negative nanosecond delta borrows one second.
    """

    later, earlier = (x, y) if compare(x, y) is not Ordering.LESS else (y, x)
    seconds = later.seconds - earlier.seconds
    nanoseconds = later.nanoseconds - earlier.nanoseconds
    if nanoseconds < 0:
        seconds -= 1
        nanoseconds += NSEC_PER_SEC
    return Duration(seconds, nanoseconds)
