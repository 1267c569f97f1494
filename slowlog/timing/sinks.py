"""Writable sinks for slow-operation messages."""

from __future__ import annotations

import logging
import sys
from typing import Protocol, TextIO

from .duration import Duration

__all__ = [
    "CollectingSink",
    "LoggerSink",
    "NullSink",
    "Sink",
    "StreamSink",
    "format_elapsed",
    "format_message",
]


def format_elapsed(elapsed: Duration) -> str:
    """Render the ``SECONDS.NNNNNNNNN elapsed; `` prefix."""

    return f"{elapsed.seconds}.{elapsed.nanoseconds:09d} elapsed; "


def format_message(elapsed: Duration, template: str, *args: object) -> str:
    """Prefix ``template % args`` (or ``template`` alone) with the elapsed time.

    Formatting errors propagate before anything reaches a sink.
    """

    message = template % args if args else template
    return format_elapsed(elapsed) + message


class Sink(Protocol):
    def write(self, text: str) -> int:  # pragma: no cover - interface definition
        ...


class StreamSink:
    """Write to a text stream; with no stream, ``sys.stdout`` is looked up per write."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str) -> int:
        written = self.stream.write(text)
        return len(text) if written is None else written

    def flush(self) -> None:
        self.stream.flush()


class NullSink:
    """Discard everything written to it."""

    def write(self, text: str) -> int:
        return 0

    def flush(self) -> None:
        return None


class LoggerSink:
    """Forward writes to a :mod:`logging` logger, one record per write."""

    def __init__(self, logger: logging.Logger, level: int = logging.WARNING) -> None:
        self.logger = logger
        self.level = level

    def write(self, text: str) -> int:
        message = text.rstrip("\n")
        if message:
            self.logger.log(self.level, message)
        return len(text)


class CollectingSink:
    """Keep written chunks in memory."""

    def __init__(self) -> None:
        self.chunks: list[str] = []

    def write(self, text: str) -> int:
        self.chunks.append(text)
        return len(text)

    def getvalue(self) -> str:
        return "".join(self.chunks)
