"""Application wiring: directory watcher, tail service and console output."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Self

from logfollow.core.log import get_logger
from logfollow.monitors.watcher import DirectoryWatcher
from logfollow.sinks import ConsoleSink
from logfollow.tailing.service import TailService


if TYPE_CHECKING:
    from types import TracebackType

    from rich.console import Console

    from logfollow.config import WatchConfig


logger = get_logger(__name__)


class LogFollower:
    """Follow every matching file below a directory.

    Example:
        ```python
        config = load_config(root="/var/log", pattern="*.log")
        async with LogFollower(config) as follower:
            await follower.run()
        ```
    """

    def __init__(self, config: WatchConfig, *, console: Console | None = None) -> None:
        self.config = config
        self.service = TailService(
            wake_timeout=config.wake_timeout,
            encoding=config.encoding,
        )
        self.sink = ConsoleSink(console)
        self.watcher = DirectoryWatcher(
            config.root,
            [config.pattern],
            recursive=config.recursive,
            debounce_ms=config.debounce_ms,
            step_ms=config.step_ms,
            polling=config.force_polling,
            poll_delay_ms=config.poll_delay_ms,
        )

    async def start(self) -> None:
        self.sink.connect(self.service.signals)
        await self.service.start()
        self.watcher.connect(self.service)
        await self.watcher.start()
        if self.config.watch_existing:
            self.watch_existing()

    async def stop(self) -> None:
        await self.watcher.stop()
        await self.service.stop()
        self.sink.disconnect()

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

    def watch_existing(self) -> int:
        """Start tailing the files already present, from their current end.

        Returns:
            Number of files that were newly watched
        """
        root = self.config.root
        candidates = (
            root.rglob(self.config.pattern)
            if self.config.recursive
            else root.glob(self.config.pattern)
        )
        count = 0
        for path in sorted(candidates):
            if not path.is_file():
                continue
            if self.service.watch_file(path, ignore_until_end=True) is not None:
                count += 1
        logger.info("Watching %d existing file(s) below %s", count, root)
        return count

    async def run(self) -> None:
        """Block until cancelled."""
        await asyncio.Event().wait()
