"""Common type definitions for logfollow."""

from __future__ import annotations

import enum
from typing import Protocol


class LifecycleEvent(enum.StrEnum):
    """State transitions reported for a watched file."""

    CREATED = "created"
    STOPPED = "stopped"
    ERRORED = "errored"


class WorkerState(enum.StrEnum):
    """States of a tail worker's read loop."""

    STARTING = "starting"
    READING = "reading"
    IDLE = "idle"
    STOPPED = "stopped"
    ERRORED = "errored"


class RemovalRequester(Protocol):
    """Something a worker can ask to tear it down."""

    def request_removal(self, path: str) -> None: ...
