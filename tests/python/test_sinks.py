"""Tests for output sinks and elapsed-prefix rendering."""

from __future__ import annotations

import io
import logging

import pytest

from slowlog.timing.duration import Duration
from slowlog.timing.sinks import (
    CollectingSink,
    LoggerSink,
    NullSink,
    StreamSink,
    format_elapsed,
    format_message,
)


@pytest.mark.parametrize(
    ("elapsed", "expected"),
    [
        (Duration(2, 5), "2.000000005 elapsed; "),
        (Duration(0, 0), "0.000000000 elapsed; "),
        (Duration(13, 999_999_999), "13.999999999 elapsed; "),
        (Duration(0, 120_000_000), "0.120000000 elapsed; "),
    ],
)
def test_format_elapsed_pads_nanoseconds(elapsed: Duration, expected: str) -> None:
    assert format_elapsed(elapsed) == expected


def test_format_message_applies_arguments() -> None:
    assert format_message(Duration(1, 0), "%s took %d tries", "fetch", 3) == (
        "1.000000000 elapsed; fetch took 3 tries"
    )


def test_stream_sink_writes_to_given_stream() -> None:
    buffer = io.StringIO()
    sink = StreamSink(buffer)
    assert sink.write("abc") == 3
    assert buffer.getvalue() == "abc"
    assert sink.stream is buffer


def test_stream_sink_follows_current_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    sink = StreamSink()
    sink.write("to stdout")
    sink.flush()
    assert capsys.readouterr().out == "to stdout"


def test_null_sink_discards() -> None:
    sink = NullSink()
    assert sink.write("anything") == 0
    assert sink.flush() is None


def test_logger_sink_emits_one_record_per_write(caplog: pytest.LogCaptureFixture) -> None:
    sink = LoggerSink(logging.getLogger("slowlog.tests.sink"), level=logging.ERROR)
    with caplog.at_level(logging.ERROR, logger="slowlog.tests.sink"):
        assert sink.write("first line\n") == len("first line\n")
        sink.write("\n")
    assert [record.getMessage() for record in caplog.records] == ["first line"]


def test_collecting_sink_keeps_chunks() -> None:
    sink = CollectingSink()
    sink.write("a")
    sink.write("b")
    assert sink.chunks == ["a", "b"]
    assert sink.getvalue() == "ab"
