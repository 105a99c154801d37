"""logfollow: tail every log file below a directory."""

from __future__ import annotations

from logfollow.config import WatchConfig, load_config
from logfollow.core.exceptions import ConfigError, LogFollowError, WatchError
from logfollow.core.typedefs import LifecycleEvent, WorkerState
from logfollow.follower import LogFollower
from logfollow.monitors import DirectoryWatcher
from logfollow.sinks import ConsoleSink
from logfollow.tailing import TailService, TailSignals, TailWorker, WatchedFile, WatchRegistry


__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ConsoleSink",
    "DirectoryWatcher",
    "LifecycleEvent",
    "LogFollowError",
    "LogFollower",
    "TailService",
    "TailSignals",
    "TailWorker",
    "WatchConfig",
    "WatchError",
    "WatchRegistry",
    "WatchedFile",
    "WorkerState",
    "load_config",
]
