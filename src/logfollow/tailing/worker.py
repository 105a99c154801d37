"""Per-file read loop."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import anyio

from logfollow.core import exceptions
from logfollow.core.log import get_logger
from logfollow.core.typedefs import LifecycleEvent, WorkerState


if TYPE_CHECKING:
    from anyio import AsyncFile

    from logfollow.core.typedefs import RemovalRequester
    from logfollow.tailing.models import WatchedFile
    from logfollow.tailing.signals import TailSignals


logger = get_logger(__name__)

DEFAULT_WAKE_TIMEOUT = 1.0


class TailWorker:
    """Follow a single file and emit every complete line appended to it.

    The worker alternates between reading and idling. While idle it compares
    its offset with the file size to detect truncation, then blocks on the
    file's wake signal for at most ``wake_timeout`` seconds, so a missed or
    coalesced change notification only delays output, never stalls it.
    """

    def __init__(
        self,
        watched: WatchedFile,
        signals: TailSignals,
        owner: RemovalRequester,
        *,
        wake_timeout: float = DEFAULT_WAKE_TIMEOUT,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize worker.

        Args:
            watched: State of the file to follow
            signals: Signals to emit lines and lifecycle events on
            owner: Receives the removal request when the worker fails
            wake_timeout: Upper bound for an idle wait in seconds
            encoding: Encoding used to decode emitted lines
        """
        self.watched = watched
        self.state = WorkerState.STARTING
        self.offset = 0
        self._signals = signals
        self._owner = owner
        self._wake_timeout = wake_timeout
        self._encoding = encoding

    async def run(self) -> None:
        """Run the read loop until cancelled or a fatal error occurs."""
        try:
            await self._follow()
        except Exception as exc:
            if self.watched.cancelled:
                logger.debug("Ignoring error during teardown of %s: %s", self.watched.path, exc)
                self.state = WorkerState.STOPPED
                return
            self.state = WorkerState.ERRORED
            description = f"exception: {type(exc).__module__}.{type(exc).__qualname__} {exc}"
            logger.warning("Stopped tailing %s: %s", self.watched.path, exc)
            try:
                self._signals.lifecycle.emit(self.watched.name, LifecycleEvent.ERRORED, description)
            except Exception:
                logger.exception("Failed to report error for %s", self.watched.path)
            self._owner.request_removal(self.watched.path)
        else:
            self.state = WorkerState.STOPPED

    async def _follow(self) -> None:
        async with await anyio.open_file(self.watched.path, "rb") as stream:
            if self.watched.ignore_until_end:
                self.offset = await stream.seek(0, os.SEEK_END)
            logger.debug("Tailing %s from offset %d", self.watched.path, self.offset)
            self.state = WorkerState.READING

            while not self.watched.cancelled:
                raw = await stream.readline()
                if raw.endswith(b"\n"):
                    self.offset += len(raw)
                    self._emit(raw)
                    continue

                if raw:
                    # incomplete last line, pick it up again once it is finished
                    await stream.seek(self.offset)
                self.state = WorkerState.IDLE
                await self._idle(stream)

    async def _idle(self, stream: AsyncFile[bytes]) -> None:
        if self.watched.cancelled:
            return
        path = anyio.Path(self.watched.path)
        size = (await path.stat()).st_size
        if self.offset > size:
            logger.info(
                "%s shrank from %d to %d bytes, reading from start",
                self.watched.path,
                self.offset,
                size,
            )
            self.offset = await stream.seek(0)
            self.state = WorkerState.READING
            return

        await self.watched.wait_for_data(self._wake_timeout)
        if self.watched.cancelled:
            return
        if not await path.exists():
            msg = f"Watched file {self.watched.path} has been deleted."
            raise exceptions.FileVanishedError(msg)
        self.state = WorkerState.READING

    def _emit(self, raw: bytes) -> None:
        line = raw.decode(self._encoding, errors="replace")
        line = line.removesuffix("\n").removesuffix("\r")
        self._signals.line_emitted.emit(self.watched.name, line)
