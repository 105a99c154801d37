"""Configuration models for logfollow."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field
from upath import UPath
import yamling

from logfollow.core import exceptions
from logfollow.core.log import get_logger
from logfollow.core.utils import error_handler


if TYPE_CHECKING:
    import os


logger = get_logger(__name__)

ROOT_MISSING_ERROR = "Path does not exist: {path}"
ROOT_NOT_DIR_ERROR = "Path is not a directory: {path}"


class WatchConfig(BaseModel):
    """Settings for following the files below a directory."""

    root: Path
    """Directory to watch."""

    pattern: str = "*"
    """Filename filter in fnmatch syntax."""

    recursive: bool = True
    watch_existing: bool = False
    """Tail files that already exist at startup, starting from their end."""

    wake_timeout: float = Field(default=1.0, gt=0)
    """Upper bound in seconds for an idle worker's wait."""

    encoding: str = "utf-8"
    debounce_ms: int = Field(default=100, ge=0)
    step_ms: int = Field(default=50, gt=0)
    force_polling: bool | None = None
    poll_delay_ms: int = Field(default=300, gt=0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @pydantic.field_validator("root")
    @classmethod
    def validate_root(cls, value: Path) -> Path:
        """Make sure the root is an existing directory and store it absolute."""
        path = value.expanduser().absolute()
        if not path.exists():
            msg = ROOT_MISSING_ERROR.format(path=value)
            raise ValueError(msg)
        if not path.is_dir():
            msg = ROOT_NOT_DIR_ERROR.format(path=value)
            raise ValueError(msg)
        return path


def load_config(
    path: str | os.PathLike[str] | None = None,
    **overrides: Any,
) -> WatchConfig:
    """Load and validate configuration.

    Args:
        path: Optional YAML file with settings
        overrides: Values taking precedence over the file (None values are ignored)

    Raises:
        ConfigError: If the file cannot be read or the settings are invalid
    """
    content: dict[str, Any] = {}
    if path is not None:
        with error_handler(exceptions.ConfigError, f"Failed to load configuration from {path}"):
            text = UPath(path).read_text()
            content = yamling.load_yaml(text) or {}
        if not isinstance(content, dict):
            msg = f"Configuration in {path} must be a mapping"
            raise exceptions.ConfigError(msg)
        logger.debug("Loaded configuration from %s", path)

    content.update({k: v for k, v in overrides.items() if v is not None})
    with error_handler(exceptions.ConfigError, "Invalid configuration"):
        return WatchConfig.model_validate(content)
