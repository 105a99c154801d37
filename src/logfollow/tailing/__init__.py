"""File tailing engine: registry, workers and the notification service."""

from __future__ import annotations

from logfollow.tailing.models import WatchedFile
from logfollow.tailing.registry import WatchRegistry
from logfollow.tailing.service import TailService
from logfollow.tailing.signals import TailSignals
from logfollow.tailing.worker import TailWorker


__all__ = [
    "TailService",
    "TailSignals",
    "TailWorker",
    "WatchRegistry",
    "WatchedFile",
]
