"""Directory monitoring using signals."""

from __future__ import annotations

import asyncio
from collections import defaultdict
import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING

import psygnal
from watchfiles import Change, awatch

from logfollow.core.log import get_logger


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    import os

    from logfollow.tailing.service import TailService


logger = get_logger(__name__)

_CHANGE_ORDER = {Change.added: 0, Change.modified: 1, Change.deleted: 2}
# a path deleted and added in one batch was recreated
_RECREATE_ORDER = {Change.deleted: 0, Change.added: 1, Change.modified: 2}


class DirectoryWatcherSignals(psygnal.SignalGroup):
    """Signals for file system changes."""

    file_added = psygnal.Signal(str)  # path
    file_modified = psygnal.Signal(str)  # path
    file_deleted = psygnal.Signal(str)  # path
    watch_error = psygnal.Signal(str, Exception)  # path, error


class DirectoryWatcher:
    """Watch a directory tree and emit signals for matching files."""

    def __init__(
        self,
        root: str | os.PathLike[str],
        patterns: list[str] | None = None,
        *,
        recursive: bool = True,
        debounce_ms: int = 100,
        step_ms: int = 50,
        polling: bool | None = None,
        poll_delay_ms: int = 300,
    ) -> None:
        """Initialize watcher.

        Args:
            root: Directory to watch
            patterns: Filename patterns to report (default: all files)
            recursive: Whether to watch subdirectories
            debounce_ms: Time to wait for collecting changes (milliseconds)
            step_ms: Time between checks (milliseconds)
            polling: Whether to force polling mode (None = auto)
            poll_delay_ms: Delay between polls if polling is used
        """
        self.root = Path(root).absolute()
        self.patterns = patterns or ["*"]
        self._recursive = recursive
        self._debounce_ms = debounce_ms
        self._step_ms = step_ms
        self._polling = polling
        self._poll_delay_ms = poll_delay_ms
        self._running = False
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self.signals = DirectoryWatcherSignals()

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._stop_event.clear()
        self._task = asyncio.create_task(self._watch(), name=f"watch-{self.root}")
        logger.info("Started file system watcher on %s %s", self.root, self.patterns)

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._stop_event.set()
        if self._task is not None:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
        logger.info("Stopped file system watcher.")

    def connect(self, service: TailService) -> None:
        """Route change signals to a tail service."""
        self.signals.file_added.connect(_guarded(service.notify_created, "create"))
        self.signals.file_modified.connect(_guarded(service.notify_changed, "change"))
        self.signals.file_deleted.connect(_guarded(service.notify_deleted, "delete"))
        self.signals.watch_error.connect(lambda _path, exc: service.notify_error(exc))

    def matches(self, path: str) -> bool:
        """Check whether a path's file name matches one of the patterns."""
        name = Path(path).name
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.patterns)

    def dispatch(self, changes: Iterable[tuple[Change, str]]) -> None:
        """Emit signals for a batch of changes, grouped per path.

        Per path the order is added, modified, deleted, unless the path was
        both deleted and added: then the old file is dropped first.
        """
        by_path: defaultdict[str, set[Change]] = defaultdict(set)
        for change_type, changed_path in changes:
            by_path[changed_path].add(change_type)
        ordered = []
        for changed_path, kinds in sorted(by_path.items()):
            recreated = {Change.added, Change.deleted} <= kinds
            order = _RECREATE_ORDER if recreated else _CHANGE_ORDER
            ordered.extend((kind, changed_path) for kind in sorted(kinds, key=order.__getitem__))
        for change_type, changed_path in ordered:
            logger.debug("Detected change: %s -> %s", change_type, changed_path)
            match change_type:
                case Change.added:
                    self.signals.file_added.emit(changed_path)
                case Change.modified:
                    self.signals.file_modified.emit(changed_path)
                case Change.deleted:
                    self.signals.file_deleted.emit(changed_path)

    async def _watch(self) -> None:
        """Watch the root and emit signals for changes."""
        path = str(self.root)
        try:
            async for changes in awatch(
                path,
                watch_filter=lambda _, p: self.matches(p),
                debounce=self._debounce_ms,
                step=self._step_ms,
                stop_event=self._stop_event,
                force_polling=self._polling,
                poll_delay_ms=self._poll_delay_ms,
                recursive=self._recursive,
            ):
                if not self._running:
                    break
                self.dispatch(changes)
        except asyncio.CancelledError:
            logger.debug("Watch cancelled for: %s", path)
        except Exception as exc:
            logger.exception("Watch error for: %s", path)
            self.signals.watch_error.emit(path, exc)


def _guarded(handler: Callable[[str], None], kind: str) -> Callable[[str], None]:
    def _handle(path: str) -> None:
        try:
            handler(path)
        except Exception:
            logger.exception("Error processing %s event for file: %s", kind, path)

    return _handle
