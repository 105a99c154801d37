"""Registry of actively watched files."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from logfollow.core import exceptions
from logfollow.core.log import get_logger


if TYPE_CHECKING:
    from collections.abc import Iterator

    from logfollow.tailing.models import WatchedFile


logger = get_logger(__name__)


class WatchRegistry:
    """Lock-guarded mapping of absolute path to watched file.

    Every structural operation holds the lock only for the dictionary access
    itself; callers do their file I/O and awaiting outside of it.
    """

    def __init__(self) -> None:
        self._items: dict[str, WatchedFile] = {}
        self._lock = threading.Lock()

    def insert(self, watched: WatchedFile) -> WatchedFile:
        """Register a watched file.

        Raises:
            AlreadyWatchedError: If the path is already registered
        """
        with self._lock:
            if watched.path in self._items:
                msg = f"File {watched.path} already being watched"
                raise exceptions.AlreadyWatchedError(msg)
            self._items[watched.path] = watched
        logger.debug("Registered %s", watched.path)
        return watched

    def remove(self, path: str, *, entry: WatchedFile | None = None) -> WatchedFile:
        """Remove and return the entry for a path.

        Args:
            path: Absolute path of the watched file
            entry: If given, only remove the registered entry if it is this
                   exact record

        Raises:
            NotWatchedError: If there is no (matching) entry for the path
        """
        with self._lock:
            current = self._items.get(path)
            if current is None or (entry is not None and current is not entry):
                msg = f"File {path} is not being watched"
                raise exceptions.NotWatchedError(msg)
            del self._items[path]
        logger.debug("Unregistered %s", path)
        return current

    def lookup(self, path: str) -> WatchedFile | None:
        with self._lock:
            return self._items.get(path)

    def paths(self) -> list[str]:
        """Snapshot of the registered paths."""
        with self._lock:
            return list(self._items)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths())
