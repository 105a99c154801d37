"""File system event sources for logfollow."""

from __future__ import annotations

from logfollow.monitors.watcher import DirectoryWatcher, DirectoryWatcherSignals


__all__ = [
    "DirectoryWatcher",
    "DirectoryWatcherSignals",
]
