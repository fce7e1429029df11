"""Report command implementation.

Summarizes node_modules usage by age band with cleanup hints.
"""

from typing import Annotated

import typer

from node_janitor.cli.display import print_json, print_report
from node_janitor.cli.types import (
    DepthOption,
    ExcludeOption,
    JsonOption,
    PathArgument,
    build_discovery_options,
    get_config,
    run_discovery,
)
from node_janitor.janitor.report import build_report


def report(
    ctx: typer.Context,
    path: PathArgument = None,
    depth: DepthOption = None,
    detailed: Annotated[
        bool,
        typer.Option("--detailed", help="Also list the largest and oldest folders."),
    ] = False,
    exclude: ExcludeOption = None,
    output_json: JsonOption = False,
) -> None:
    """Show a summary of node_modules disk usage."""
    config = get_config(ctx)
    records = run_discovery(build_discovery_options(config, path, depth, exclude))
    result = build_report(records)

    if output_json:
        print_json(result.to_dict())
        return

    print_report(result, detailed=detailed)
