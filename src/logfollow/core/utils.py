from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from logfollow.core.exceptions import LogFollowError


@contextmanager
def error_handler(
    error_class: type[LogFollowError],
    message: str,
) -> Generator[None, None, None]:
    """Handle exceptions and wrap them with custom error.

    Args:
        error_class: The error class to raise
        message: The error message format

    Example:
        with error_handler(ConfigError, "Failed to load config"):
            config = load_config()
    """
    try:
        yield
    except LogFollowError:
        raise
    except Exception as exc:
        msg = f"{message}: {exc}"
        raise error_class(msg) from exc
