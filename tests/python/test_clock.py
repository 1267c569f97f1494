"""Tests for clock sources and clock failure reporting."""

from __future__ import annotations

import errno
import time

import pytest

from slowlog.timing import clock as clock_module
from slowlog.timing.clock import CallableClock, ClockError, PosixClock, resolve_clock
from slowlog.timing.duration import Instant


def test_callable_clock_splits_nanoseconds() -> None:
    source = CallableClock(lambda: 3_000_000_042, "fixed")
    assert source.now() == Instant(3, 42)
    assert source.name == "fixed"


def test_callable_clock_wraps_os_errors() -> None:
    def broken() -> int:
        raise OSError(errno.EPERM, "not permitted")

    source = CallableClock(broken, "broken")
    with pytest.raises(ClockError) as excinfo:
        source.now()

    assert excinfo.value.code == errno.EPERM
    assert excinfo.value.clock == "broken"
    assert isinstance(excinfo.value.__cause__, OSError)


def test_callable_clock_requires_callable() -> None:
    with pytest.raises(TypeError):
        CallableClock(42, "nope")  # type: ignore[arg-type]


@pytest.mark.skipif(not hasattr(time, "clock_gettime_ns"), reason="POSIX clocks only")
def test_posix_clock_reports_invalid_clock_id() -> None:
    source = PosixClock(4096, "bogus")
    with pytest.raises(ClockError) as excinfo:
        source.now()
    assert excinfo.value.code == errno.EINVAL


def test_monotonic_clock_does_not_go_backwards() -> None:
    source = clock_module.monotonic_clock()
    first = source.now()
    second = source.now()
    assert (second.seconds, second.nanoseconds) >= (first.seconds, first.nanoseconds)
    assert source.name == "monotonic"


def test_realtime_clock_is_close_to_wall_time() -> None:
    source = clock_module.realtime_clock()
    assert abs(source.now().seconds - int(time.time())) <= 2
    assert source.name == "realtime"


def test_default_clock_prefers_monotonic() -> None:
    assert clock_module.default_clock().name == "monotonic"


@pytest.mark.parametrize(
    ("name", "expected"),
    [("auto", "monotonic"), ("monotonic", "monotonic"), (" Realtime ", "realtime")],
)
def test_resolve_clock_names(name: str, expected: str) -> None:
    assert resolve_clock(name).name == expected


def test_resolve_clock_rejects_unknown_names() -> None:
    with pytest.raises(ValueError):
        resolve_clock("sundial")
    with pytest.raises(TypeError):
        resolve_clock(None)  # type: ignore[arg-type]


def test_clock_error_message_includes_code() -> None:
    error = ClockError(22, clock="monotonic")
    assert "22" in str(error)
    assert isinstance(error, RuntimeError)
