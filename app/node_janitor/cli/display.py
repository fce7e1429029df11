"""Shared Rich display functions for scan, clean and report results.

Provides reusable table builders and summary printers used across
CLI commands. Nothing here touches the filesystem.
"""

import json
from typing import Any

from rich.table import Table

from node_janitor.janitor.backup import BackupInfo
from node_janitor.janitor.models import DeepCleanOutcome, DeletionOutcome, FolderRecord, Totals
from node_janitor.janitor.report import AgeBucket, Report
from node_janitor.utils.formatting import (
    console,
    create_folders_table,
    format_bytes,
    print_info,
    print_success,
    print_warning,
)


def print_json(data: Any) -> None:
    """Print data as JSON on stdout."""
    console.print_json(json.dumps(data))


def print_totals(totals: Totals, label: str = "Found") -> None:
    """Print a one-line summary of a record list."""
    if totals.count == 0:
        print_info("No node_modules folders found.")
        return
    console.print(
        f"\n[dim]{label} {totals.count} node_modules folder(s), "
        f"{format_bytes(totals.total_size_bytes)} total "
        f"(ages {totals.newest_age_days}-{totals.oldest_age_days} days)[/dim]"
    )


def print_folders(records: list[FolderRecord], title: str, limit: int | None = None) -> None:
    """Print a folders table, optionally limited to the first entries."""
    shown = records[:limit] if limit else records
    console.print(create_folders_table(shown, title=title))
    if limit and len(shown) < len(records):
        console.print(f"[dim](showing {len(shown)} of {len(records)}, limited to {limit})[/dim]")


def create_deletion_results_table(outcome: DeletionOutcome) -> Table:
    """Create a Rich table with one row per deletion attempt.

    Args:
        outcome: Outcome of a clean run.

    Returns:
        Rich Table with Status, Path and Message columns.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=6, justify="center")
    table.add_column("Path", no_wrap=True)
    table.add_column("Message", style="muted")

    for path in outcome.deleted_paths:
        table.add_row("[success]OK[/]", f"[path]{path}[/]", "")
    for failure in outcome.errors:
        table.add_row("[error]FAIL[/]", f"[path]{failure.path}[/]", failure.error_message)

    return table


def print_deletion_outcome(outcome: DeletionOutcome, dry_run: bool = False) -> None:
    """Print the results table and summary of a clean run."""
    if dry_run:
        print_info(
            f"Dry run: {outcome.deleted_count} folder(s) would be deleted, "
            f"freeing {format_bytes(outcome.freed_bytes)}."
        )
        return

    console.print(create_deletion_results_table(outcome))
    if outcome.backup_path:
        print_info(f"Backup manifest written to {outcome.backup_path}")
    if outcome.deleted_count:
        print_success(f"Deleted {outcome.deleted_count} folder(s), freed {format_bytes(outcome.freed_bytes)}.")
    if outcome.errors:
        print_warning(f"{len(outcome.errors)} folder(s) could not be deleted.")


def print_deep_clean_outcome(project_path: str, outcome: DeepCleanOutcome, dry_run: bool = False) -> None:
    """Print the summary of one deep-clean run."""
    verb = "Would remove" if dry_run else "Removed"
    console.print(
        f"[path]{project_path}[/]: {verb} {outcome.deleted_file_count} item(s) "
        f"from {outcome.processed_folders} package(s), "
        f"[size]{format_bytes(outcome.freed_bytes)}[/]"
    )
    for path in outcome.deleted_files or ():
        console.print(f"  [muted]{path}[/]")


def _bucket_row(table: Table, label: str, bucket: AgeBucket, style: str) -> None:
    table.add_row(f"[{style}]{label}[/]", str(bucket.count), format_bytes(bucket.size_bytes))


def print_report(report: Report, detailed: bool = False) -> None:
    """Print a scan report.

    Args:
        report: Report to print.
        detailed: Also print the top lists by size and by age.
    """
    totals = report.totals
    console.print("[bold_header]node_modules Report[/]")
    console.print(f"Folders: {totals.count}")
    console.print(f"Total size: [size]{format_bytes(totals.total_size_bytes)}[/]")
    if totals.count:
        console.print(f"Oldest: {totals.oldest_age_days} days, newest: {totals.newest_age_days} days")

    table = Table(
        title="Age Breakdown",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Age")
    table.add_column("Folders", justify="right")
    table.add_column("Size", justify="right")
    _bucket_row(table, "< 30 days", report.recent, "age_recent")
    _bucket_row(table, "30-89 days", report.medium, "age_medium")
    _bucket_row(table, ">= 90 days", report.old, "age_old")
    console.print(table)

    if detailed and report.top_by_size:
        console.print(create_folders_table(list(report.top_by_size), title="Largest Folders"))
        console.print(create_folders_table(list(report.top_by_age), title="Oldest Folders"))

    if report.suggest_older_than:
        print_info(f"{report.old.count} folder(s) are 90+ days old ({format_bytes(report.old.size_bytes)}).")
        print_info("Hint: node-janitor clean --older-than 90d")
    if report.suggest_deep_clean:
        print_info("Total size exceeds 1 GB.")
        print_info("Hint: node-janitor deep-clean --dry-run")


def print_backups(backups: list[BackupInfo]) -> None:
    """Print a table of backup manifests."""
    if not backups:
        print_info("No backups found.")
        return

    table = Table(
        title="Backups",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("File", no_wrap=True)
    table.add_column("Created")
    table.add_column("Folders", justify="right")
    table.add_column("Size", justify="right")

    for info in backups:
        table.add_row(
            info.filename,
            info.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
            str(info.folder_count),
            format_bytes(info.total_size_bytes),
        )

    console.print(table)
