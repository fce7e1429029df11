"""CLI commands for node-janitor.

This package contains all subcommand implementations.
"""

from node_janitor.cli.commands import backups, clean, config, deep_clean, report, scan

__all__ = ["backups", "clean", "config", "deep_clean", "report", "scan"]
