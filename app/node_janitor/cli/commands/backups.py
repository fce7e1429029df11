"""Backups command implementation.

Lists the backup manifests written by ``clean --backup``.
"""

import typer

from node_janitor.cli.display import print_backups, print_json
from node_janitor.cli.types import JsonOption
from node_janitor.core.paths import get_backups_dir
from node_janitor.janitor.backup import list_backups


def backups(
    output_json: JsonOption = False,
) -> None:
    """List backup manifests, newest first."""
    infos = list_backups()

    if output_json:
        print_json([info.model_dump(mode="json") for info in infos])
        return

    print_backups(infos)
    if infos:
        typer.echo(f"\nBackups directory: {get_backups_dir()}")
