"""Exception hierarchy for logfollow."""

from __future__ import annotations


class LogFollowError(Exception):
    """Base exception for all logfollow errors."""


class ConfigError(LogFollowError):
    """Configuration is missing or invalid."""


class WatchError(LogFollowError):
    """Base for errors raised while watching files."""


class AlreadyWatchedError(WatchError):
    """A watch was requested for a path that is already registered."""


class NotWatchedError(WatchError):
    """A removal was requested for a path that is not registered."""


class FileVanishedError(WatchError):
    """A watched file no longer exists."""
