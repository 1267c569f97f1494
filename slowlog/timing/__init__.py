"""Threshold timers for reporting operations that take too long."""

from .actions import chain, hook_action, log_action, metric_action, print_action
from .clock import (
    CallableClock,
    ClockError,
    ClockSource,
    PosixClock,
    default_clock,
    monotonic_clock,
    realtime_clock,
    resolve_clock,
)
from .duration import NSEC_PER_SEC, Duration, Instant, Ordering, compare, difference
from .guards import slow_call, watch
from .sinks import CollectingSink, LoggerSink, NullSink, Sink, StreamSink, format_elapsed, format_message
from .timer import Timer

__all__ = [
    "NSEC_PER_SEC",
    "CallableClock",
    "ClockError",
    "ClockSource",
    "CollectingSink",
    "Duration",
    "Instant",
    "LoggerSink",
    "NullSink",
    "Ordering",
    "PosixClock",
    "Sink",
    "StreamSink",
    "Timer",
    "chain",
    "compare",
    "default_clock",
    "difference",
    "format_elapsed",
    "format_message",
    "hook_action",
    "log_action",
    "metric_action",
    "monotonic_clock",
    "print_action",
    "realtime_clock",
    "resolve_clock",
    "slow_call",
    "watch",
]
