"""Translate filesystem notifications into tail worker operations."""

from __future__ import annotations

import asyncio
import os
from typing import TYPE_CHECKING, Any, Self

from logfollow.core import exceptions
from logfollow.core.log import get_logger
from logfollow.core.typedefs import LifecycleEvent
from logfollow.tailing.models import WatchedFile
from logfollow.tailing.registry import WatchRegistry
from logfollow.tailing.signals import TailSignals
from logfollow.tailing.worker import DEFAULT_WAKE_TIMEOUT, TailWorker


if TYPE_CHECKING:
    from collections.abc import Coroutine
    from types import TracebackType


logger = get_logger(__name__)


class TailService:
    """Owns the registry of watched files and the lifecycle of their workers.

    Entry points are plain methods so any event source can drive them:

    - ``notify_created`` starts tailing a file
    - ``notify_changed`` wakes the file's worker (or starts one)
    - ``notify_deleted`` tears the worker down asynchronously

    Workers that hit a fatal error post a removal request instead of calling
    back into the service, and a background task performs the teardown.
    """

    def __init__(
        self,
        *,
        wake_timeout: float = DEFAULT_WAKE_TIMEOUT,
        encoding: str = "utf-8",
        signals: TailSignals | None = None,
    ) -> None:
        """Initialize service.

        Args:
            wake_timeout: Upper bound for a worker's idle wait in seconds
            encoding: Encoding used to decode emitted lines
            signals: Optional signal group to emit on (created if omitted)
        """
        self.registry = WatchRegistry()
        self.signals = signals or TailSignals()
        self._wake_timeout = wake_timeout
        self._encoding = encoding
        self._removals: asyncio.Queue[str] = asyncio.Queue()
        self._tasks: set[asyncio.Task[Any]] = set()
        self._reaper: asyncio.Task[None] | None = None
        self._rewatch: dict[str, bool] = {}  # path -> ignore_until_end
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._reaper = asyncio.create_task(self._process_removals(), name="tail-reaper")
        logger.debug("Tail service started")

    async def stop(self) -> None:
        """Stop every worker, then the removal machinery."""
        if not self._running:
            return
        self._running = False
        await asyncio.gather(
            *(self.remove_file(path) for path in self.registry.paths()),
            return_exceptions=True,
        )
        pending = [t for t in (self._reaper, *self._tasks) if t is not None]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._tasks.clear()
        self._rewatch.clear()
        self._reaper = None
        logger.debug("Tail service stopped")

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.stop()

    def watch_file(
        self,
        path: str | os.PathLike[str],
        *,
        ignore_until_end: bool = False,
    ) -> WatchedFile | None:
        """Start tailing a file.

        If the path is still registered to a worker that is being torn down,
        the file is watched again as soon as that worker is gone.

        Args:
            path: File to tail
            ignore_until_end: Skip the content already in the file

        Returns:
            The new watched file, or None if the path was already watched
        """
        if not self._running:
            msg = "Tail service not started"
            raise RuntimeError(msg)

        full_path = os.path.abspath(path)
        watched = WatchedFile(full_path, ignore_until_end=ignore_until_end)
        try:
            self.registry.insert(watched)
        except exceptions.AlreadyWatchedError:
            existing = self.registry.lookup(full_path)
            if existing is not None and existing.cancelled:
                logger.info("Watching %s again once its previous worker stopped", full_path)
                self._rewatch[full_path] = ignore_until_end
            else:
                logger.warning("File %s already being watched.", full_path)
            return None

        worker = TailWorker(
            watched,
            self.signals,
            self,
            wake_timeout=self._wake_timeout,
            encoding=self._encoding,
        )
        watched.task = asyncio.create_task(worker.run(), name=f"tail-{full_path}")
        logger.info("Started watching %s", full_path)
        self._report(watched, LifecycleEvent.CREATED, "created.")
        return watched

    def file_changed(self, path: str | os.PathLike[str]) -> None:
        """Wake the worker of a changed file, starting one if needed."""
        full_path = os.path.abspath(path)
        watched = self.registry.lookup(full_path)
        if watched is None or watched.cancelled:
            # the change can arrive before the corresponding create event,
            # or belong to a file recreated while its old worker shuts down
            self.watch_file(full_path)
            return
        watched.wake_up()

    async def remove_file(self, path: str | os.PathLike[str]) -> bool:
        """Stop tailing a file and wait for its worker to finish.

        Returns:
            True if this call removed the file, False if it was not watched
        """
        full_path = os.path.abspath(path)
        watched = self.registry.lookup(full_path)
        if watched is None:
            return False

        watched.cancel()
        if watched.task is not None:
            # errors raised while shutting down are expected
            await asyncio.gather(watched.task, return_exceptions=True)

        try:
            self.registry.remove(full_path, entry=watched)
        except exceptions.NotWatchedError:
            return False

        logger.info("Stopped watching %s", full_path)
        self._report(watched, LifecycleEvent.STOPPED, "stopped watching.")

        ignore_until_end = self._rewatch.pop(full_path, None)
        if ignore_until_end is not None and self._running:
            self.watch_file(full_path, ignore_until_end=ignore_until_end)
        return True

    def request_removal(self, path: str | os.PathLike[str]) -> None:
        """Queue a file for asynchronous teardown without waiting for it.

        The worker is told to stop right away, so a watch request arriving
        before the teardown ran is deferred instead of dropped.
        """
        full_path = os.path.abspath(path)
        if (watched := self.registry.lookup(full_path)) is not None:
            watched.cancel()
        self._removals.put_nowait(full_path)

    def notify_created(self, path: str) -> None:
        logger.debug("File created: %s", path)
        self.watch_file(path)

    def notify_changed(self, path: str) -> None:
        logger.debug("File changed: %s", path)
        self.file_changed(path)

    def notify_deleted(self, path: str) -> None:
        logger.debug("File deleted: %s", path)
        self.request_removal(path)

    def notify_renamed(self, path: str, old_path: str | None = None) -> None:
        # renames do not move or restart workers
        logger.info("File renamed: %s (from %s)", path, old_path)

    def notify_error(self, error: BaseException) -> None:
        logger.error("Error happened during file watching: %s", error)

    async def _process_removals(self) -> None:
        while True:
            path = await self._removals.get()
            self._create_task(self.remove_file(path), name=f"remove-{path}")
            self._removals.task_done()

    def _create_task(self, coro: Coroutine[None, None, Any], name: str) -> asyncio.Task[Any]:
        """Create and track an asyncio task."""
        task: asyncio.Task[Any] = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _report(self, watched: WatchedFile, event: LifecycleEvent, description: str) -> None:
        try:
            self.signals.lifecycle.emit(watched.name, event, description)
        except Exception:
            logger.exception("Failed to report %s for %s", event, watched.path)
