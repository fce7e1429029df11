"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from node_janitor.core.theme import get_theme

if TYPE_CHECKING:
    from node_janitor.janitor.models import FolderRecord

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def format_bytes(size_bytes: int) -> str:
    """Format a byte count as a human-readable string.

    Uses base 1024 and at most two decimals, dropping trailing zeros
    (e.g. 1536 -> "1.5 KB", 0 -> "0 B").

    Args:
        size_bytes: Number of bytes.

    Returns:
        Human-readable size string.
    """
    if size_bytes <= 0:
        return "0 B"

    size = float(size_bytes)
    index = 0
    while size >= 1024 and index < len(_SIZE_UNITS) - 1:
        size /= 1024
        index += 1

    text = f"{size:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[index]}"


def age_style(age_days: int) -> str:
    """Pick the theme style for an age in days."""
    if age_days >= 90:
        return "age_old"
    if age_days >= 30:
        return "age_medium"
    return "age_recent"


def create_folders_table(records: list[FolderRecord], title: str = "node_modules Folders") -> Table:
    """Create a table listing discovered node_modules folders.

    Args:
        records: Folder records to display.
        title: Table title.

    Returns:
        Rich Table with project, size, age, package and lockfile columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Project", no_wrap=True)
    table.add_column("Size", justify="right")
    table.add_column("Age", justify="right")
    table.add_column("Packages", justify="right", style="muted")
    table.add_column("Lock", style="muted")

    for record in records:
        style = age_style(record.age_days)
        lockfile = record.lockfile_type.value if record.lockfile_type else "-"
        table.add_row(
            f"[path]{record.project_path}[/]",
            f"[size]{format_bytes(record.size_bytes)}[/]",
            f"[{style}]{record.age_days}d[/]",
            str(record.package_count),
            lockfile,
        )

    return table


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
