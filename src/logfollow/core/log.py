"""Logging helpers for logfollow."""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler


LOG_ENV_VAR = "LOGFOLLOW_LOGGING"
ROOT_LOGGER = "logfollow"


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name."""
    return logging.getLogger(name)


def logging_requested() -> bool:
    """Return True if diagnostics were switched on through the environment."""
    return os.environ.get(LOG_ENV_VAR) == "1"


def setup_logging(
    level: int | str = logging.INFO,
    *,
    console: Console | None = None,
) -> None:
    """Send logfollow diagnostics to stderr.

    Args:
        level: Log level for the logfollow logger
        console: Optional console to render to (defaults to stderr)
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def disable_logging() -> None:
    """Silence diagnostics so only tailed output reaches the terminal."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
