from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

import pytest

from logfollow.core.log import ROOT_LOGGER
from logfollow.tailing.service import TailService


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable
    from pathlib import Path

    from logfollow.core.typedefs import LifecycleEvent


WAKE_TIMEOUT = 0.05


class Recorder:
    """Collects everything a tail service emits."""

    def __init__(self) -> None:
        self.lines: list[tuple[str, str]] = []
        self.events: list[tuple[str, LifecycleEvent, str]] = []

    def on_line(self, name: str, line: str) -> None:
        self.lines.append((name, line))

    def on_lifecycle(self, name: str, event: LifecycleEvent, description: str) -> None:
        self.events.append((name, event, description))

    def event_types(self, name: str) -> list[LifecycleEvent]:
        return [event for file_name, event, _ in self.events if file_name == name]


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging changes made by CLI invocations."""
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
async def service(recorder: Recorder) -> AsyncGenerator[TailService, None]:
    """Create a started tail service wired to the recorder."""
    service = TailService(wake_timeout=WAKE_TIMEOUT)
    service.signals.line_emitted.connect(recorder.on_line)
    service.signals.lifecycle.connect(recorder.on_lifecycle)
    await service.start()
    try:
        yield service
    finally:
        await service.stop()


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    """Create an empty log file."""
    path = tmp_path / "a.log"
    path.write_text("")
    return path


@pytest.fixture
def wait_until() -> Callable[..., Awaitable[None]]:
    """Poll a predicate until it holds or fail after a timeout."""

    async def _wait(predicate: Callable[[], bool], timeout: float = 5.0) -> None:
        deadline = time.monotonic() + timeout
        while not predicate():
            if time.monotonic() > deadline:
                msg = f"Condition not met within {timeout} seconds"
                raise AssertionError(msg)
            await asyncio.sleep(0.01)

    return _wait


def append(path: Path, text: str) -> None:
    with path.open("a", encoding="utf-8", newline="") as f:
        f.write(text)


@pytest.fixture
def write() -> Callable[[Path, str], None]:
    """Append text to a file."""
    return append
