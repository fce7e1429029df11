"""Deletion of node_modules directories.

Applies the requested filters, optionally writes a backup manifest,
then removes the surviving directories with bounded parallelism. A
failure to remove one directory is recorded in the outcome and never
stops the others.
"""

import asyncio
import logging
import shutil
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from node_janitor.janitor.backup import write_backup
from node_janitor.janitor.filters import (
    filter_by_age,
    filter_by_git_cleanliness,
    filter_by_lockfile_presence,
    filter_by_size,
)
from node_janitor.janitor.models import DeletionFailure, DeletionOutcome, FolderRecord
from node_janitor.utils.shell import run_command
from node_janitor.utils.units import parse_duration, parse_duration_range, parse_size

logger = logging.getLogger(__name__)

_RM_TIMEOUT = 60.0

Remover = Callable[[str], Awaitable[None]]
ProgressCallback = Callable[[int, int, str], None]  # (completed, total, path)


class DeletionError(OSError):
    """Raised when a native remove command exits unsuccessfully."""


@dataclass(frozen=True, slots=True)
class CleanOptions:
    """Options for one cleanup run.

    Attributes:
        older_than: Keep only folders at least this old (duration string, e.g. "30d").
        between: Keep only folders within this age range (e.g. "30d-90d").
        min_size: Keep only folders at least this large (e.g. "100MB").
        max_size: Keep only folders at most this large.
        lock_check: Keep only folders whose project has a lockfile.
        skip_dirty_git: Drop folders whose project has uncommitted changes.
        only_git_repos: Keep only folders whose project is under git.
        dry_run: Report what would be deleted without touching the filesystem.
        backup: Write a backup manifest before deleting.
        fast: Use the native ``rm -rf`` instead of shutil.rmtree.
        parallel: Maximum concurrent deletions (at least 1).
        backups_dir: Override for the backup manifest directory.
    """

    older_than: str | None = None
    between: str | None = None
    min_size: str | None = None
    max_size: str | None = None
    lock_check: bool = False
    skip_dirty_git: bool = False
    only_git_repos: bool = False
    dry_run: bool = False
    backup: bool = False
    fast: bool = False
    parallel: int = 1
    backups_dir: Path | None = None

    def __post_init__(self) -> None:
        """Validate options after initialization."""
        if self.parallel < 1:
            msg = f"Parallelism must be at least 1, got {self.parallel}"
            raise ValueError(msg)


async def delete_folder(path: str) -> None:
    """Remove a directory tree with shutil.rmtree in a worker thread.

    Raises:
        OSError: If the tree cannot be removed (including when it is missing).
    """
    await asyncio.to_thread(shutil.rmtree, path)


async def delete_folder_fast(path: str) -> None:
    """Remove a directory tree with the native ``rm -rf``.

    Raises:
        DeletionError: If rm exits with a non-zero code.
        TimeoutError: If rm does not finish in time.
        OSError: If rm cannot be started.
    """
    result = await run_command(["rm", "-rf", "--", path], timeout=_RM_TIMEOUT)
    if not result.success:
        raise DeletionError(result.stderr.strip() or f"rm exited with code {result.returncode}")


def apply_filters(records: list[FolderRecord], options: CleanOptions) -> list[FolderRecord]:
    """Apply the age, size, lockfile and git filters requested by the options.

    Args:
        records: Candidate records.
        options: Clean options naming the filters.

    Returns:
        Records that pass every requested filter.

    Raises:
        InvalidFormatError: If a duration, range, or size string is malformed.
    """
    filtered = list(records)

    if options.older_than:
        filtered = filter_by_age(filtered, min_days=parse_duration(options.older_than))
        logger.debug("After older-than filter: %d folders", len(filtered))

    if options.between:
        age_range = parse_duration_range(options.between)
        filtered = filter_by_age(filtered, min_days=age_range.min, max_days=age_range.max)
        logger.debug("After between filter: %d folders", len(filtered))

    if options.min_size:
        filtered = filter_by_size(filtered, min_bytes=parse_size(options.min_size))
        logger.debug("After min-size filter: %d folders", len(filtered))

    if options.max_size:
        filtered = filter_by_size(filtered, max_bytes=parse_size(options.max_size))
        logger.debug("After max-size filter: %d folders", len(filtered))

    if options.lock_check:
        filtered = filter_by_lockfile_presence(filtered)
        logger.debug("After lockfile filter: %d folders", len(filtered))

    if options.skip_dirty_git or options.only_git_repos:
        filtered = filter_by_git_cleanliness(
            filtered,
            skip_dirty=options.skip_dirty_git,
            only_in_git_repo=options.only_git_repos,
        )
        logger.debug("After git filter: %d folders", len(filtered))

    return filtered


async def clean(
    records: list[FolderRecord],
    options: CleanOptions,
    *,
    remover: Remover | None = None,
    on_progress: ProgressCallback | None = None,
) -> DeletionOutcome:
    """Delete the node_modules directories selected by the options.

    Args:
        records: Candidate records (usually from discovery).
        options: Filters and deletion settings.
        remover: Coroutine used to delete one path. Defaults to
            :func:`delete_folder_fast` when ``options.fast`` is set,
            :func:`delete_folder` otherwise.
        on_progress: Optional callback fired after each deletion attempt.

    Returns:
        DeletionOutcome where ``deleted_count + len(errors)`` equals the
        number of filtered records.

    Raises:
        InvalidFormatError: If a filter string is malformed.
        BackupWriteError: If a requested backup cannot be written.
    """
    targets = apply_filters(records, options)

    if options.dry_run:
        logger.info("Dry-run: %d folders would be deleted", len(targets))
        return DeletionOutcome(
            deleted_count=len(targets),
            freed_bytes=sum(record.size_bytes for record in targets),
            deleted_paths=tuple(record.path for record in targets),
        )

    backup_path: str | None = None
    if options.backup:
        written = await asyncio.to_thread(write_backup, targets, options.backups_dir)
        backup_path = str(written)

    delete = remover or (delete_folder_fast if options.fast else delete_folder)
    semaphore = asyncio.Semaphore(options.parallel)
    deleted: list[FolderRecord] = []
    failures: list[DeletionFailure] = []

    async def _delete_one(record: FolderRecord) -> None:
        async with semaphore:
            try:
                await delete(record.path)
            except Exception as e:
                message = str(e) or type(e).__name__
                logger.warning("Failed to delete %s: %s", record.path, message)
                failures.append(DeletionFailure(path=record.path, error_message=message))
            else:
                logger.debug("Deleted %s", record.path)
                deleted.append(record)
        if on_progress:
            on_progress(len(deleted) + len(failures), len(targets), record.path)

    await asyncio.gather(*(_delete_one(record) for record in targets))

    return DeletionOutcome(
        deleted_count=len(deleted),
        freed_bytes=sum(record.size_bytes for record in deleted),
        deleted_paths=tuple(record.path for record in deleted),
        errors=tuple(failures),
        backup_path=backup_path,
    )
