"""CLI package for node-janitor.

This package contains the Typer application and all subcommands.
"""

from node_janitor.cli.main import app

__all__ = ["app"]
