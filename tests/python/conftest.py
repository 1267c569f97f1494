"""Shared fixtures: scripted clocks and isolation of process-wide state."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from slowlog.telemetry import exporters, hooks, metrics
from slowlog.timing.clock import ClockError
from slowlog.timing.duration import Duration, Instant
from slowlog.utils import config


class ScriptedClock:
    """Clock whose current instant only moves when a test advances it."""

    name = "scripted"

    def __init__(self, start: Instant | None = None) -> None:
        self.current = start if start is not None else Instant(1_000, 0)
        self.reads = 0
        self.fail_with: int | None = None

    def now(self) -> Instant:
        self.reads += 1
        if self.fail_with is not None:
            raise ClockError(self.fail_with, clock=self.name)
        return self.current

    def advance(self, duration: Duration) -> None:
        self.current = Instant.normalize(
            self.current.seconds + duration.seconds,
            self.current.nanoseconds + duration.nanoseconds,
        )


@pytest.fixture
def clock() -> ScriptedClock:
    return ScriptedClock()


@pytest.fixture(autouse=True)
def isolated_state(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv(config.CONFIG_ENV, str(tmp_path / "missing.yaml"))
    for name in ("SLOWLOG_CLOCK", "SLOWLOG_THRESHOLD_MS", "SLOWLOG_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config.reset_settings()
    hooks.clear_hooks()
    metrics.get_registry().reset()
    exporters.configure(None)
    yield
    config.reset_settings()
    hooks.clear_hooks()
    metrics.get_registry().reset()
    exporters.configure(None)


@pytest.fixture(autouse=True)
def capture_slowlog_records(caplog: pytest.LogCaptureFixture):
    # The ``slowlog`` logger does not propagate to root, where caplog listens.
    package_logger = logging.getLogger("slowlog")
    package_logger.addHandler(caplog.handler)
    yield
    package_logger.removeHandler(caplog.handler)
