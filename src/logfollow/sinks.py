"""Output sinks for tailed lines."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console


if TYPE_CHECKING:
    from logfollow.core.typedefs import LifecycleEvent
    from logfollow.tailing.signals import TailSignals


class ConsoleSink:
    """Print tailed lines and lifecycle messages to a console.

    Lines are written verbatim, prefixed with the file name. Pass a console
    created over any file object to write somewhere other than stdout.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(soft_wrap=True)
        self._connected: list[TailSignals] = []

    def connect(self, signals: TailSignals) -> None:
        signals.line_emitted.connect(self.emit_line)
        signals.lifecycle.connect(self.emit_lifecycle)
        self._connected.append(signals)

    def disconnect(self) -> None:
        for signals in self._connected:
            signals.line_emitted.disconnect(self.emit_line)
            signals.lifecycle.disconnect(self.emit_lifecycle)
        self._connected.clear()

    def emit_line(self, name: str, line: str) -> None:
        self._print(f"{name}: {line}")

    def emit_lifecycle(self, name: str, event: LifecycleEvent, description: str) -> None:
        self._print(f"{name}:# {description}")

    def _print(self, text: str) -> None:
        self.console.print(
            text,
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )
