"""Clean command implementation.

Deletes node_modules folders selected by age, size, lockfile and git
filters, with optional dry-run and backup manifest.
"""

import asyncio
from typing import Annotated

import typer

from node_janitor.cli.display import print_deletion_outcome, print_folders, print_json, print_totals
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
from node_janitor.janitor.backup import BackupWriteError
from node_janitor.janitor.cleaner import CleanOptions, apply_filters, clean
from node_janitor.janitor.filters import calculate_totals
from node_janitor.utils.formatting import print_error, print_info
from node_janitor.utils.units import parse_duration, parse_duration_range, parse_size


def _validate_formats(options: CleanOptions) -> None:
    """Parse every filter string once so bad input fails before scanning.

    Raises:
        InvalidFormatError: If any duration, range or size is malformed.
    """
    if options.older_than:
        parse_duration(options.older_than)
    if options.between:
        parse_duration_range(options.between)
    if options.min_size:
        parse_size(options.min_size)
    if options.max_size:
        parse_size(options.max_size)


def clean_command(
    ctx: typer.Context,
    path: PathArgument = None,
    depth: DepthOption = None,
    older_than: Annotated[
        str | None,
        typer.Option("--older-than", help="Only delete folders at least this old (e.g. 30d, 2w, 6m, 1y)."),
    ] = None,
    between: Annotated[
        str | None,
        typer.Option("--between", help="Only delete folders within an age range (e.g. 30d-90d)."),
    ] = None,
    min_size: Annotated[
        str | None,
        typer.Option("--min-size", help="Only delete folders at least this large (e.g. 100MB)."),
    ] = None,
    max_size: Annotated[
        str | None,
        typer.Option("--max-size", help="Only delete folders at most this large (e.g. 1GB)."),
    ] = None,
    lock_check: Annotated[
        bool,
        typer.Option("--lock-check", help="Only delete folders whose project has a lockfile."),
    ] = False,
    skip_dirty_git: Annotated[
        bool,
        typer.Option("--skip-dirty-git", help="Keep folders of projects with uncommitted changes."),
    ] = False,
    only_git_repos: Annotated[
        bool,
        typer.Option("--only-git-repos", help="Only delete folders of projects under git."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
    backup: Annotated[
        bool,
        typer.Option("--backup", help="Write a backup manifest before deleting."),
    ] = False,
    fast: Annotated[
        bool,
        typer.Option("--fast", help="Delete with the native rm -rf."),
    ] = False,
    parallel: Annotated[
        int | None,
        typer.Option("--parallel", "-p", min=1, help="Number of concurrent deletions."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    exclude: ExcludeOption = None,
    include: IncludeOption = None,
    output_json: JsonOption = False,
) -> None:
    """Delete node_modules folders matching the given filters.

    Examples:
        node-janitor clean --older-than 90d --dry-run
        node-janitor clean ~/projects --min-size 500MB --backup
        node-janitor clean --between 30d-90d --lock-check --yes
        node-janitor clean --skip-dirty-git --fast --parallel 4
    """
    config = get_config(ctx)

    if older_than is None and between is None:
        older_than = config.default_older_than

    try:
        options = CleanOptions(
            older_than=older_than,
            between=between,
            min_size=min_size,
            max_size=max_size,
            lock_check=lock_check,
            skip_dirty_git=skip_dirty_git,
            only_git_repos=only_git_repos,
            dry_run=dry_run,
            backup=backup,
            fast=fast,
            parallel=parallel if parallel is not None else config.parallel,
        )
        _validate_formats(options)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    discovery_options = build_discovery_options(
        config,
        path,
        depth,
        exclude,
        include,
        collect_git=skip_dirty_git or only_git_repos,
    )
    records = run_discovery(discovery_options)
    targets = apply_filters(records, options)

    if not targets:
        if output_json:
            print_json({"deleted_count": 0, "freed_bytes": 0, "deleted_paths": [], "errors": []})
        else:
            print_info("No node_modules folders match the filters.")
        return

    if not output_json:
        title = "Folders To Delete (dry-run)" if dry_run else "Folders To Delete"
        print_folders(targets, title=title)
        print_totals(calculate_totals(targets), label="Selected")

    if not dry_run and not yes:
        confirmed = typer.confirm(f"\nDelete {len(targets)} node_modules folder(s)?", default=False)
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    try:
        outcome = asyncio.run(clean(targets, options))
    except BackupWriteError as e:
        print_error(f"{e}. Nothing was deleted.")
        raise typer.Exit(code=1) from e

    if output_json:
        print_json(
            {
                "deleted_count": outcome.deleted_count,
                "freed_bytes": outcome.freed_bytes,
                "deleted_paths": list(outcome.deleted_paths),
                "errors": [{"path": f.path, "error": f.error_message} for f in outcome.errors],
                "backup_path": outcome.backup_path,
                "dry_run": dry_run,
            }
        )
    else:
        print_deletion_outcome(outcome, dry_run=dry_run)

    if outcome.errors:
        raise typer.Exit(code=1)
