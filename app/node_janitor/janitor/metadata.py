"""Metadata collection for discovered node_modules directories.

Gathers size, age, package count, lockfile presence and optionally git
status for one node_modules directory. Collection never raises: any I/O
failure degrades to a zero/false/now value so that discovery can carry
on over directories it cannot fully read.
"""

import asyncio
import logging
import os
from datetime import UTC, datetime

import aiofiles.os

from node_janitor.janitor.git import get_git_status
from node_janitor.janitor.models import LOCKFILE_NAMES, FolderRecord, LockfileType
from node_janitor.utils.shell import run_command

logger = logging.getLogger(__name__)

_DU_TIMEOUT = 30.0
_SECONDS_PER_DAY = 86400


def get_age_days(last_modified: datetime, now: datetime | None = None) -> int:
    """Whole days elapsed since a timestamp, floor-truncated and never negative.

    Args:
        last_modified: Timezone-aware timestamp.
        now: Reference time. Defaults to the current UTC time.

    Returns:
        Number of full days between last_modified and now.
    """
    reference = now or datetime.now(UTC)
    elapsed = (reference - last_modified).total_seconds()
    return max(0, int(elapsed // _SECONDS_PER_DAY))


async def get_last_modified(path: str) -> datetime:
    """Get the modification time of a directory entry itself.

    Args:
        path: Path to stat.

    Returns:
        Modification time in UTC, or the current time if it cannot be read.
    """
    try:
        stat = await aiofiles.os.stat(path)
    except OSError as e:
        logger.debug("Cannot stat %s: %s", path, e)
        return datetime.now(UTC)
    return datetime.fromtimestamp(stat.st_mtime, tz=UTC)


def _scan_level(directory: str) -> tuple[int, list[str]]:
    """List one directory: total size of its non-directory entries and its subdirectories.

    Symlinks are not followed; a symlink contributes its own size.
    """
    file_bytes = 0
    subdirs: list[str] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        subdirs.append(entry.path)
                    else:
                        file_bytes += entry.stat(follow_symlinks=False).st_size
                except OSError:
                    continue
    except OSError as e:
        logger.debug("Cannot read %s: %s", directory, e)
    return file_bytes, subdirs


async def get_folder_size(path: str) -> int:
    """Compute the recursive size of a directory by walking it.

    Uses an explicit work stack rather than recursion so that deeply
    nested trees cannot exhaust the call stack. Unreadable entries
    contribute 0.

    Args:
        path: Directory to measure.

    Returns:
        Sum of file sizes in bytes.
    """
    total = 0
    stack = [path]
    while stack:
        directory = stack.pop()
        file_bytes, subdirs = await asyncio.to_thread(_scan_level, directory)
        total += file_bytes
        stack.extend(subdirs)
    return total


async def get_folder_size_fast(path: str) -> int:
    """Compute the recursive size of a directory using ``du``.

    Falls back to :func:`get_folder_size` when ``du`` is unavailable,
    fails, times out, or prints something unparseable. An empty directory
    always measures 0 bytes.

    Args:
        path: Directory to measure.

    Returns:
        Size in bytes.
    """
    try:
        if not await aiofiles.os.listdir(path):
            return 0
    except OSError as e:
        logger.debug("Cannot list %s: %s", path, e)
        return 0

    try:
        result = await run_command(["du", "-sk", path], timeout=_DU_TIMEOUT)
        if result.success:
            return int(result.stdout.split()[0]) * 1024
        logger.debug("du failed for %s: %s", path, result.stderr.strip())
    except (OSError, TimeoutError) as e:
        logger.debug("du unavailable for %s: %s", path, e)
    except (IndexError, ValueError):
        logger.debug("Unexpected du output for %s", path)

    return await get_folder_size(path)


async def _list_visible_dirs(path: str) -> list[str]:
    """List non-hidden subdirectories (symlinks followed) of a directory."""
    names = sorted(await aiofiles.os.listdir(path))
    result: list[str] = []
    for name in names:
        if name.startswith("."):
            continue
        child = os.path.join(path, name)
        if await aiofiles.os.path.isdir(child):
            result.append(child)
    return result


async def list_package_dirs(node_modules_path: str) -> list[str]:
    """List the package directories inside a node_modules directory.

    Scope directories (``@scope``) are expanded one level and replaced
    by their children. Hidden entries are skipped at both levels.

    Args:
        node_modules_path: node_modules directory to inspect.

    Returns:
        Package directory paths, sorted by name within each level.
    """
    try:
        top_level = await _list_visible_dirs(node_modules_path)
    except OSError as e:
        logger.debug("Cannot read %s: %s", node_modules_path, e)
        return []

    packages: list[str] = []
    for entry in top_level:
        if not os.path.basename(entry).startswith("@"):
            packages.append(entry)
            continue
        try:
            packages.extend(await _list_visible_dirs(entry))
        except OSError as e:
            logger.debug("Cannot read scope %s: %s", entry, e)
    return packages


async def count_packages(node_modules_path: str) -> int:
    """Count installed packages in a node_modules directory."""
    return len(await list_package_dirs(node_modules_path))


async def file_exists(path: str) -> bool:
    """Check if a file exists, treating any error as absent."""
    try:
        return await aiofiles.os.path.exists(path)
    except OSError:
        return False


async def collect_metadata(
    node_modules_path: str,
    project_path: str,
    *,
    quick: bool = False,
    with_git: bool = False,
) -> FolderRecord:
    """Build a FolderRecord for a discovered node_modules directory.

    Args:
        node_modules_path: Absolute path of the node_modules directory.
        project_path: Absolute path of its parent project.
        quick: Skip the recursive size computation (size is reported as 0).
        with_git: Also probe git status. Ignored in quick mode.

    Returns:
        Populated FolderRecord.
    """
    last_modified = await get_last_modified(node_modules_path)
    size = 0 if quick else await get_folder_size_fast(node_modules_path)
    package_count = await count_packages(node_modules_path)

    has_npm, has_yarn, has_pnpm = await asyncio.gather(
        *(
            file_exists(os.path.join(project_path, LOCKFILE_NAMES[kind]))
            for kind in (LockfileType.NPM, LockfileType.YARN, LockfileType.PNPM)
        )
    )

    git_status = None
    if with_git and not quick:
        git_status = await get_git_status(project_path)

    return FolderRecord(
        path=node_modules_path,
        project_path=project_path,
        size_bytes=size,
        last_modified=last_modified,
        age_days=get_age_days(last_modified),
        package_count=package_count,
        has_npm_lock=has_npm,
        has_yarn_lock=has_yarn,
        has_pnpm_lock=has_pnpm,
        git_status=git_status,
    )
