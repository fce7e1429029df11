"""Scan command implementation.

Lists node_modules folders under a directory without deleting anything.
"""

from typing import Annotated

import typer

from node_janitor.cli.display import print_folders, print_json, print_totals
from node_janitor.cli.types import (
    DepthOption,
    ExcludeOption,
    IncludeOption,
    JsonOption,
    PathArgument,
    build_discovery_options,
    get_config,
    run_discovery,
)
from node_janitor.janitor.filters import calculate_totals, filter_by_age
from node_janitor.utils.formatting import print_error
from node_janitor.utils.units import InvalidFormatError, parse_duration


def scan(
    ctx: typer.Context,
    path: PathArgument = None,
    depth: DepthOption = None,
    quick: Annotated[
        bool,
        typer.Option("--quick", "-q", help="Skip size calculation."),
    ] = False,
    git: Annotated[
        bool,
        typer.Option("--git", help="Also collect git status for each project."),
    ] = False,
    exclude: ExcludeOption = None,
    include: IncludeOption = None,
    older_than: Annotated[
        str | None,
        typer.Option("--older-than", help="Only show folders at least this old (e.g. 30d, 2w, 6m, 1y)."),
    ] = None,
    output_json: JsonOption = False,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Limit number of folders displayed."),
    ] = None,
) -> None:
    """Find node_modules folders and show their size and age.

    Examples:
        node-janitor scan                       # Scan the current directory
        node-janitor scan ~/projects -d 3       # Limit depth
        node-janitor scan --older-than 30d      # Only folders 30+ days old
        node-janitor scan --quick --json        # Fast JSON listing, no sizes
    """
    config = get_config(ctx)

    min_days: int | None = None
    if older_than:
        try:
            min_days = parse_duration(older_than)
        except InvalidFormatError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

    options = build_discovery_options(config, path, depth, exclude, include, quick=quick, collect_git=git)
    records = run_discovery(options)
    if min_days is not None:
        records = filter_by_age(records, min_days=min_days)

    if output_json:
        shown = records[:limit] if limit else records
        print_json([record.to_dict() for record in shown])
        return

    if records:
        print_folders(records, title="node_modules Folders", limit=limit)
    print_totals(calculate_totals(records))
