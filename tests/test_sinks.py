from __future__ import annotations

import io

import pytest
from rich.console import Console

from logfollow.core.typedefs import LifecycleEvent
from logfollow.sinks import ConsoleSink
from logfollow.tailing.signals import TailSignals


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def sink(output: io.StringIO) -> ConsoleSink:
    return ConsoleSink(Console(file=output, width=40))


def test_lines_printed_verbatim(sink, output):
    line = "[bold]not markup[/bold] :smile: " + "x" * 60
    sink.emit_line("a.log", line)

    assert output.getvalue() == f"a.log: {line}\n"


def test_lifecycle_printed_with_marker(sink, output):
    sink.emit_lifecycle("a.log", LifecycleEvent.CREATED, "created.")

    assert output.getvalue() == "a.log:# created.\n"


def test_connect_and_disconnect(sink, output):
    signals = TailSignals()
    sink.connect(signals)

    signals.line_emitted.emit("a.log", "x")
    signals.lifecycle.emit("a.log", LifecycleEvent.STOPPED, "stopped watching.")
    sink.disconnect()
    signals.line_emitted.emit("a.log", "ignored")

    assert output.getvalue().splitlines() == ["a.log: x", "a.log:# stopped watching."]
