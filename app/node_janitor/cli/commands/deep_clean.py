"""Deep-clean command implementation.

Strips documentation, tests, source maps and tooling config from the
packages inside every node_modules folder under a directory.
"""

import asyncio
from typing import Annotated

import typer

from node_janitor.cli.display import print_deep_clean_outcome, print_json
from node_janitor.cli.types import DepthOption, PathArgument, build_discovery_options, get_config, run_discovery
from node_janitor.janitor.deep_cleaner import deep_clean
from node_janitor.janitor.models import DeepCleanOutcome, FolderRecord
from node_janitor.utils.formatting import format_bytes, print_info, print_success


async def _deep_clean_all(
    records: list[FolderRecord],
    dry_run: bool,
    verbose: bool,
) -> list[tuple[FolderRecord, DeepCleanOutcome]]:
    """Deep-clean each folder in turn."""
    results: list[tuple[FolderRecord, DeepCleanOutcome]] = []
    for record in records:
        outcome = await deep_clean(record.path, dry_run=dry_run, verbose=verbose)
        results.append((record, outcome))
    return results


def deep_clean_command(
    ctx: typer.Context,
    path: PathArgument = None,
    depth: DepthOption = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be removed."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    output_json: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON."),
    ] = False,
) -> None:
    """Remove unneeded files from packages inside node_modules folders.

    Keeps every package installed but deletes READMEs, changelogs,
    licenses, source maps, test and example directories, and tool
    configuration files.

    Examples:
        node-janitor deep-clean --dry-run
        node-janitor deep-clean ~/projects/app --yes
    """
    config = get_config(ctx)
    verbose = bool((ctx.find_root().obj or {}).get("verbose"))

    options = build_discovery_options(config, path, depth, quick=True)
    records = run_discovery(options)

    if not records:
        print_info("No node_modules folders found.")
        return

    if not dry_run and not yes:
        confirmed = typer.confirm(
            f"\nDeep-clean {len(records)} node_modules folder(s)? Packages stay installed.",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    results = asyncio.run(_deep_clean_all(records, dry_run, verbose))

    total_items = sum(outcome.deleted_file_count for _, outcome in results)
    total_bytes = sum(outcome.freed_bytes for _, outcome in results)

    if output_json:
        print_json(
            {
                "dry_run": dry_run,
                "deleted_file_count": total_items,
                "freed_bytes": total_bytes,
                "folders": [
                    {
                        "path": record.path,
                        "deleted_file_count": outcome.deleted_file_count,
                        "processed_folders": outcome.processed_folders,
                        "freed_bytes": outcome.freed_bytes,
                    }
                    for record, outcome in results
                ],
            }
        )
        return

    for record, outcome in results:
        print_deep_clean_outcome(record.project_path, outcome, dry_run=dry_run)

    if dry_run:
        print_info(f"Dry run: {total_items} item(s) would be removed, freeing {format_bytes(total_bytes)}.")
    else:
        print_success(f"Removed {total_items} item(s), freed {format_bytes(total_bytes)}.")
