"""Deep clean of a node_modules directory.

Strips files and directories that installed packages do not need at
runtime (documentation, tests, source maps, tooling config) from every
package inside one node_modules directory. Sizes are measured before
removal so that a dry run reports exactly what a real run would free.
"""

import asyncio
import logging
import os
import shutil
import stat
from collections.abc import Callable
from dataclasses import dataclass, field

import aiofiles.os

from node_janitor.janitor.metadata import get_folder_size, list_package_dirs
from node_janitor.janitor.models import DeepCleanOutcome

logger = logging.getLogger(__name__)

# Exact file names removed from each package
DEEP_CLEAN_FILES: frozenset[str] = frozenset(
    {
        "README.md",
        "README.markdown",
        "README.txt",
        "readme.md",
        "readme.txt",
        "CHANGELOG.md",
        "CHANGELOG.txt",
        "CHANGES.md",
        "HISTORY.md",
        "LICENSE",
        "LICENSE.md",
        "LICENSE.txt",
        "license",
        "LICENCE",
        "LICENCE.md",
        "COPYING",
        "AUTHORS",
        "CONTRIBUTORS",
        ".npmignore",
        ".gitignore",
        ".eslintrc",
        ".eslintrc.js",
        ".eslintrc.json",
        ".prettierrc",
        ".prettierrc.js",
        ".prettierrc.json",
        ".babelrc",
        ".editorconfig",
        "tsconfig.json",
        "tslint.json",
        ".travis.yml",
        "appveyor.yml",
        "Makefile",
        "Gulpfile.js",
        "Gruntfile.js",
        "rollup.config.js",
        "webpack.config.js",
    }
)

# File name endings removed from each package
DEEP_CLEAN_EXTENSIONS: tuple[str, ...] = (
    ".md",
    ".markdown",
    ".map",
    ".ts.map",
    ".js.map",
    ".min.map",
)

# Directory names removed from each package
DEEP_CLEAN_DIRECTORIES: frozenset[str] = frozenset(
    {
        "test",
        "tests",
        "__tests__",
        "spec",
        "specs",
        "example",
        "examples",
        "doc",
        "docs",
        "documentation",
        "coverage",
        ".nyc_output",
        ".github",
        ".vscode",
        ".idea",
        "benchmark",
        "benchmarks",
        "fixtures",
        "__fixtures__",
        "__mocks__",
    }
)

ProgressCallback = Callable[[str], None]  # package name


@dataclass(slots=True)
class _Accumulator:
    """Mutable counters for one deep-clean call."""

    verbose: bool
    deleted_file_count: int = 0
    processed_folders: int = 0
    freed_bytes: int = 0
    deleted_files: list[str] = field(default_factory=list)

    def record(self, path: str, size: int) -> None:
        self.deleted_file_count += 1
        self.freed_bytes += size
        if self.verbose:
            self.deleted_files.append(path)

    def outcome(self) -> DeepCleanOutcome:
        return DeepCleanOutcome(
            deleted_file_count=self.deleted_file_count,
            processed_folders=self.processed_folders,
            freed_bytes=self.freed_bytes,
            deleted_files=tuple(self.deleted_files) if self.verbose else None,
        )


def is_removable_file(name: str) -> bool:
    """Check if a file name is on the deep-clean file or extension lists."""
    return name in DEEP_CLEAN_FILES or name.endswith(DEEP_CLEAN_EXTENSIONS)


def is_removable_directory(name: str) -> bool:
    """Check if a directory name is on the deep-clean directory list."""
    return name in DEEP_CLEAN_DIRECTORIES


async def _remove_file(path: str, dry_run: bool) -> int | None:
    """Measure and remove one regular file.

    Returns:
        Size in bytes, or None if the file is missing, not a regular
        file, or could not be removed.
    """
    try:
        info = await aiofiles.os.stat(path, follow_symlinks=False)
    except OSError:
        return None
    if not stat.S_ISREG(info.st_mode):
        return None

    if not dry_run:
        try:
            await aiofiles.os.remove(path)
        except OSError as e:
            logger.debug("Cannot remove %s: %s", path, e)
            return None
    return info.st_size


async def _remove_directory(path: str, dry_run: bool) -> int | None:
    """Measure and remove one directory tree.

    Returns:
        Recursive size in bytes, or None if the directory is missing,
        is a symlink, or could not be removed.
    """
    try:
        info = await aiofiles.os.stat(path, follow_symlinks=False)
    except OSError:
        return None
    if not stat.S_ISDIR(info.st_mode):
        return None

    size = await get_folder_size(path)
    if not dry_run:
        try:
            await asyncio.to_thread(shutil.rmtree, path)
        except OSError as e:
            logger.debug("Cannot remove %s: %s", path, e)
            return None
    return size


async def _clean_package(package_path: str, dry_run: bool, acc: _Accumulator) -> None:
    """Remove denylisted files and directories from one package directory."""
    try:
        names = sorted(await aiofiles.os.listdir(package_path))
    except OSError as e:
        logger.debug("Cannot read package %s: %s", package_path, e)
        return

    files = [name for name in names if is_removable_file(name)]
    directories = [name for name in names if is_removable_directory(name)]

    for name in files:
        path = os.path.join(package_path, name)
        size = await _remove_file(path, dry_run)
        if size is not None:
            acc.record(path, size)

    for name in directories:
        path = os.path.join(package_path, name)
        size = await _remove_directory(path, dry_run)
        if size is not None:
            acc.record(path, size)


async def deep_clean(
    node_modules_path: str,
    *,
    dry_run: bool = False,
    verbose: bool = False,
    on_progress: ProgressCallback | None = None,
) -> DeepCleanOutcome:
    """Strip unnecessary files from every package in a node_modules directory.

    Each package directory is visited once; every matching file counts
    once even if it matches both the name and the extension list, and a
    removed directory counts as a single unit.

    Args:
        node_modules_path: node_modules directory to clean.
        dry_run: Measure and count without removing anything.
        verbose: Collect the list of removed paths in the outcome.
        on_progress: Optional callback fired with each package name.

    Returns:
        DeepCleanOutcome with identical counts for dry and real runs.
    """
    acc = _Accumulator(verbose=verbose)

    for package_path in await list_package_dirs(node_modules_path):
        if on_progress:
            on_progress(os.path.basename(package_path))
        acc.processed_folders += 1
        await _clean_package(package_path, dry_run, acc)

    logger.debug(
        "Deep clean of %s: %d items, %d bytes%s",
        node_modules_path,
        acc.deleted_file_count,
        acc.freed_bytes,
        " (dry-run)" if dry_run else "",
    )
    return acc.outcome()
