"""Per-file state shared between the service and a tail worker."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass, field
import os


@dataclass(eq=False)
class WatchedFile:
    """A file whose appended content is being tailed."""

    path: str
    ignore_until_end: bool = False
    name: str = field(init=False)
    wake: asyncio.Semaphore = field(init=False, repr=False)
    stop_event: asyncio.Event = field(init=False, repr=False)
    task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.name = os.path.basename(self.path)
        self.wake = asyncio.Semaphore(0)
        self.stop_event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self.stop_event.is_set()

    def wake_up(self) -> None:
        """Signal that more data may be available.

        Pending wake-ups coalesce: the semaphore never holds more than one
        permit, which is all a blocked read cycle needs.
        """
        if self.wake.locked():
            self.wake.release()

    def cancel(self) -> None:
        """Ask the worker to stop and wake it if it is idle."""
        self.stop_event.set()
        self.wake_up()

    async def wait_for_data(self, timeout: float) -> bool:
        """Wait for a wake-up for at most ``timeout`` seconds.

        Returns:
            True if woken by a signal, False if the wait timed out
        """
        with contextlib.suppress(TimeoutError):
            async with asyncio.timeout(timeout):
                await self.wake.acquire()
                return True
        return False
