"""User configuration file.

This module provides the Pydantic model for ``config.toml`` and the
functions to load, save and merge it with command-line options.

Example config.toml:

    exclude = ["archive", "*/vendor/*"]
    default_older_than = "30d"
    default_path = "~/projects"
    default_depth = 6
    parallel = 4
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from node_janitor.core.paths import get_config_path
from node_janitor.utils.units import parse_duration


class ConfigError(Exception):
    """Base exception for config-related errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


class ConfigValidationError(ConfigError):
    """Raised when config content is invalid."""


class JanitorConfig(BaseModel):
    """Settings read from config.toml.

    Attributes:
        exclude: Exclude patterns added to every scan.
        default_older_than: Age filter used by clean when none is given.
        default_path: Root path used when none is given.
        default_depth: Depth limit used when none is given.
        parallel: Default number of concurrent deletions.
    """

    model_config = ConfigDict(extra="forbid")

    exclude: Annotated[list[str], Field(default_factory=list, description="Exclude patterns")]
    default_older_than: Annotated[str | None, Field(description="Default age filter, e.g. '30d'")] = None
    default_path: Annotated[str | None, Field(description="Default scan root")] = None
    default_depth: Annotated[int | None, Field(ge=0, description="Default depth limit")] = None
    parallel: Annotated[int, Field(ge=1, description="Default concurrent deletions")] = 1

    @field_validator("default_older_than")
    @classmethod
    def validate_duration(cls, v: str | None) -> str | None:
        """Reject malformed durations at load time rather than at clean time."""
        if v is not None:
            parse_duration(v)
        return v


def load_config(path: Path | None = None) -> JanitorConfig:
    """Load and validate the config file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated JanitorConfig; defaults if the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
        ConfigError: If the file exists but cannot be read.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        return JanitorConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return JanitorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config content in {config_path}: {e}") from e


def _config_to_dict(config: JanitorConfig) -> dict[str, Any]:
    """Convert a config to a TOML-serializable dict (TOML has no null)."""
    return config.model_dump(exclude_none=True)


def save_config(config: JanitorConfig, path: Path | None = None) -> Path:
    """Save a config to a TOML file.

    The file is written atomically through a temporary file in the same
    directory followed by os.replace().

    Args:
        config: The config to save.
        path: Target path. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(_config_to_dict(config), f)
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def merge_excludes(cli_patterns: list[str] | None, config: JanitorConfig) -> tuple[str, ...]:
    """Combine CLI and config exclude patterns.

    CLI patterns come first; order is preserved and duplicates dropped.
    """
    merged: list[str] = []
    for pattern in [*(cli_patterns or []), *config.exclude]:
        if pattern and pattern not in merged:
            merged.append(pattern)
    return tuple(merged)
