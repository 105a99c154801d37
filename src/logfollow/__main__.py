"""logfollow CLI interface."""

from __future__ import annotations

from logfollow.cli import cli


if __name__ == "__main__":
    cli()
