"""Config commands.

Provides commands to create and inspect the node-janitor config file.
"""

from pathlib import Path
from typing import Annotated

import typer

from node_janitor.cli.display import print_json
from node_janitor.core.config import ConfigError, JanitorConfig, load_config, save_config
from node_janitor.core.paths import get_config_path
from node_janitor.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Create and inspect the config file.",
    no_args_is_help=True,
)


def _selected_path(ctx: typer.Context) -> Path:
    obj = ctx.find_root().obj or {}
    return obj.get("config_path") or get_config_path()


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = _selected_path(ctx)

    if path.exists() and not force:
        print_info(f"Config already exists: {path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        written = save_config(JanitorConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {written}")


@app.command()
def show(
    ctx: typer.Context,
) -> None:
    """Show the effective configuration."""
    path = _selected_path(ctx)
    try:
        config = load_config(path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    source = str(path) if path.exists() else f"{path} (not found, using defaults)"
    console.print(f"[dim]Config file: {source}[/dim]")
    print_json(config.model_dump())
