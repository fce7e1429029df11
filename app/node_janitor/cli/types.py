"""Shared types and utilities for CLI commands.

This module provides the option types and helpers used across several
command modules: loading the config file named by the global
``--config`` option, resolving path/depth defaults, and running a
discovery with errors mapped to CLI exits.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer

from node_janitor.core.config import ConfigError, JanitorConfig, load_config, merge_excludes
from node_janitor.janitor.discovery import DiscoveryOptions, InvalidRootError, discover
from node_janitor.janitor.models import FolderRecord
from node_janitor.utils.formatting import print_error

logger = logging.getLogger(__name__)

PathArgument = Annotated[
    str | None,
    typer.Argument(help="Directory to search (default: config default_path or current directory)."),
]
DepthOption = Annotated[
    int | None,
    typer.Option("--depth", "-d", min=0, help="Maximum directory depth to search."),
]
ExcludeOption = Annotated[
    list[str] | None,
    typer.Option("--exclude", "-x", help="Skip paths matching this pattern (repeatable, '*' wildcard)."),
]
IncludeOption = Annotated[
    list[str] | None,
    typer.Option("--include", "-i", help="Only keep paths matching this pattern (repeatable)."),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output results as JSON."),
]


def get_config(ctx: typer.Context) -> JanitorConfig:
    """Load the config file selected by the global options.

    Exits with code 1 and a readable message if the file is invalid.
    """
    obj = ctx.find_root().obj or {}
    config_path: Path | None = obj.get("config_path")
    try:
        return load_config(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def resolve_path(path: str | None, config: JanitorConfig) -> str:
    """CLI path, then config default_path, then the current directory."""
    return path or config.default_path or "."


def resolve_depth(depth: int | None, config: JanitorConfig) -> int | None:
    """CLI depth, then config default_depth, then unlimited."""
    return depth if depth is not None else config.default_depth


def build_discovery_options(
    config: JanitorConfig,
    path: str | None,
    depth: int | None,
    exclude: list[str] | None = None,
    include: list[str] | None = None,
    *,
    quick: bool = False,
    collect_git: bool = False,
) -> DiscoveryOptions:
    """Build discovery options from CLI values with config fallbacks."""
    return DiscoveryOptions(
        path=resolve_path(path, config),
        depth=resolve_depth(depth, config),
        quick=quick,
        collect_git=collect_git,
        exclude_patterns=merge_excludes(exclude, config),
        include_patterns=tuple(include or ()),
    )


def run_discovery(options: DiscoveryOptions) -> list[FolderRecord]:
    """Run discovery to completion, exiting with code 1 on an invalid root."""
    try:
        return asyncio.run(discover(options))
    except InvalidRootError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
