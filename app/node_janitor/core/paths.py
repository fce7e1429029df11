"""XDG-compliant path management for node-janitor.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and data storage.

XDG defaults:
- Config: ~/.config/node-janitor/
- Data: ~/.local/share/node-janitor/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "node-janitor"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/node-janitor/ (or XDG_CONFIG_HOME/node-janitor/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_data_dir() -> Path:
    """Get the data directory path.

    Data includes backup manifests written before deletions.

    Returns:
        Path to ~/.local/share/node-janitor/ (or XDG_DATA_HOME/node-janitor/).
    """
    return _get_xdg_dir("XDG_DATA_HOME", ".local/share")


def get_config_path() -> Path:
    """Get the default config file path.

    Returns:
        Path to ~/.config/node-janitor/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_theme_path() -> Path:
    """Get the user theme file path.

    Returns:
        Path to ~/.config/node-janitor/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_backups_dir() -> Path:
    """Get the backup manifest directory path.

    Returns:
        Path to ~/.local/share/node-janitor/backups/.
    """
    return get_data_dir() / "backups"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_backups_dir(path: Path | None = None) -> Path:
    """Create the backups directory if it doesn't exist.

    Args:
        path: Optional override for the backups directory.

    Returns:
        Path to the backups directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(path if path is not None else get_backups_dir(), "backups")
