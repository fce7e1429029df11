"""Main CLI application entry point.

Defines the Typer application, global options and logging setup.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from node_janitor import __version__
from node_janitor.cli.commands import backups, clean, config, deep_clean, report, scan
from node_janitor.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="node-janitor",
    help="Find, report on, and clean up node_modules folders.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"node-janitor version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool = False, debug: bool = False) -> None:
    """Route library log records to stderr through Rich.

    WARNING by default, INFO with --verbose, DEBUG with --debug.
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=debug, rich_tracebacks=debug)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Enable debug logging.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: ~/.config/node-janitor/config.toml).",
            dir_okay=False,
        ),
    ] = None,
) -> None:
    """node-janitor - find, report on, and clean up node_modules folders.

    Scan a directory tree for node_modules, filter by age, size,
    lockfile and git state, and reclaim disk space safely.
    """
    configure_logging(verbose=verbose, debug=debug)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = config_path


# Register commands
app.command(name="scan")(scan.scan)
app.command(name="clean")(clean.clean_command)
app.command(name="deep-clean")(deep_clean.deep_clean_command)
app.command(name="report")(report.report)
app.command(name="backups")(backups.backups)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
