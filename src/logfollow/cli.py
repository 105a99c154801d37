"""Command line interface for logfollow."""

from __future__ import annotations

import asyncio
import contextlib
import enum
import logging

from rich.console import Console
import typer as t

from logfollow.config import WatchConfig, load_config
from logfollow.core import exceptions
from logfollow.core.log import disable_logging, logging_requested, setup_logging
from logfollow.follower import LogFollower


HELP = """
Tail every file below ROOT whose name matches PATTERN and print new lines as
they are appended. Set LOGFOLLOW_LOGGING=1 (or pass --verbose) for diagnostics.
"""
ROOT_HELP = "Directory to watch"
PATTERN_HELP = "Filename filter, e.g. '*.log'"
CONFIG_HELP = "YAML file with additional settings"
EXISTING_HELP = "Also tail files that already exist, starting at their end"
TIMEOUT_HELP = "Seconds an idle file waits before re-checking for data"
POLLING_HELP = "Force polling instead of native file system events"
VERBOSE_HELP = "Enable debug logging"


class ExitCode(enum.IntEnum):
    """Standard exit codes for the CLI."""

    SUCCESS = 0
    ERROR = 1  # Configuration invalid, root missing, etc
    USAGE = 2  # CLI usage errors (missing args, invalid options, etc)


error_console = Console(stderr=True)

cli = t.Typer(name="logfollow", help=HELP, no_args_is_help=True)


@cli.command()
def follow(
    root: str | None = t.Argument(None, help=ROOT_HELP, show_default=False),
    pattern: str | None = t.Argument(None, help=PATTERN_HELP, show_default=False),
    config_path: str | None = t.Option(None, "-c", "--config", help=CONFIG_HELP),
    watch_existing: bool | None = t.Option(
        None, "--watch-existing/--no-watch-existing", help=EXISTING_HELP
    ),
    wake_timeout: float | None = t.Option(None, "--wake-timeout", help=TIMEOUT_HELP),
    polling: bool | None = t.Option(None, "--polling/--no-polling", help=POLLING_HELP),
    verbose: bool = t.Option(False, "-v", "--verbose", help=VERBOSE_HELP),
) -> None:
    """Follow log files below a directory."""
    if verbose or logging_requested():
        setup_logging(level=logging.DEBUG if verbose else logging.INFO)
    else:
        disable_logging()

    if root is None and config_path is None:
        error_console.print("[red]Usage Error:[/red] ROOT or --config is required")
        raise t.Exit(ExitCode.USAGE)

    try:
        config = load_config(
            config_path,
            root=root,
            pattern=pattern,
            watch_existing=watch_existing,
            wake_timeout=wake_timeout,
            force_polling=polling,
        )
    except exceptions.ConfigError as exc:
        error_console.print(
            f"[red]Configuration Error:[/red] {exc}", soft_wrap=True, highlight=False
        )
        raise t.Exit(ExitCode.ERROR) from exc

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run_follower(config))


async def run_follower(config: WatchConfig) -> None:
    """Follow files until cancelled."""
    async with LogFollower(config) as follower:
        await follower.run()
