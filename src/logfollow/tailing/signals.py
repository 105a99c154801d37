"""Signals carrying tailed output and lifecycle diagnostics."""

from __future__ import annotations

import psygnal

from logfollow.core.typedefs import LifecycleEvent


class TailSignals(psygnal.SignalGroup):
    """Outbound channel of the tailing engine."""

    line_emitted = psygnal.Signal(str, str)  # file name, line
    lifecycle = psygnal.Signal(str, LifecycleEvent, str)  # file name, event, description
