"""Discovery of node_modules directories under a root path.

Two interchangeable strategies implement the same contract:

- TreeWalkDiscovery lists each directory level itself and asks the
  classifier what to do with every entry.
- NativeFindDiscovery issues one ``find`` call, post-filters its output
  through the same classifier, and hands over to a TreeWalkDiscovery
  whenever ``find`` fails or times out.

Both share depth semantics (the root is depth 0, its children are
examined at depth 0, and recursion stops once depth exceeds the limit),
never descend into a matched node_modules, and finish with the same
include-pattern whitelist and size-descending stable sort.
"""

import asyncio
import logging
import os
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

import aiofiles.os

from node_janitor.janitor.classifier import EntryAction, classify_entry, is_path_allowed, matches_pattern
from node_janitor.janitor.metadata import collect_metadata
from node_janitor.janitor.models import NODE_MODULES, FolderRecord
from node_janitor.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

# Concurrent metadata collections for the native strategy
METADATA_CONCURRENCY = 10

_FIND_TIMEOUT = 60.0

ProgressCallback = Callable[[int, str], None]  # (found_count, project_path)


class InvalidRootError(ValueError):
    """Raised when the discovery root does not exist or is not a directory."""


class NativeStrategyError(RuntimeError):
    """Raised when the native search fails and a fallback is needed."""


@dataclass(frozen=True, slots=True)
class DiscoveryOptions:
    """Options for one discovery run.

    Attributes:
        path: Root directory to search.
        depth: Maximum traversal depth (None for unlimited).
        quick: Skip recursive size computation.
        collect_git: Also probe git status for each project (ignored when quick).
        exclude_patterns: Paths matching any pattern are pruned.
        include_patterns: If non-empty, keep only records whose path or
            project path matches at least one pattern.
    """

    path: str
    depth: int | None = None
    quick: bool = False
    collect_git: bool = False
    exclude_patterns: tuple[str, ...] = ()
    include_patterns: tuple[str, ...] = ()


def _resolve_root(path: str) -> str:
    """Resolve and validate the discovery root.

    Raises:
        InvalidRootError: If the root is missing or not a directory.
    """
    root = os.path.abspath(os.path.expanduser(path))
    if not os.path.exists(root):
        msg = f"Scan path does not exist: {root}"
        raise InvalidRootError(msg)
    if not os.path.isdir(root):
        msg = f"Scan path is not a directory: {root}"
        raise InvalidRootError(msg)
    return root


def finalize_records(
    records: list[FolderRecord],
    include_patterns: tuple[str, ...] = (),
) -> list[FolderRecord]:
    """Apply the include whitelist and sort by size, largest first.

    The sort is stable, so records of equal size keep discovery order.

    Args:
        records: Records in discovery order.
        include_patterns: Whitelist patterns (ignored when empty).

    Returns:
        Filtered and sorted records.
    """
    if include_patterns:
        records = [
            record
            for record in records
            if any(
                matches_pattern(record.path, pattern) or matches_pattern(record.project_path, pattern)
                for pattern in include_patterns
            )
        ]
    return sorted(records, key=lambda record: record.size_bytes, reverse=True)


class DiscoveryStrategy(ABC):
    """Abstract base class for node_modules discovery strategies."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short strategy identifier used in logs."""

    @abstractmethod
    async def discover(
        self,
        options: DiscoveryOptions,
        on_progress: ProgressCallback | None = None,
    ) -> list[FolderRecord]:
        """Find all node_modules directories described by the options.

        Args:
            options: Discovery options.
            on_progress: Optional callback fired per record collected.

        Returns:
            Records filtered by include patterns and sorted by size descending.

        Raises:
            InvalidRootError: If the root path is invalid.
        """


class TreeWalkDiscovery(DiscoveryStrategy):
    """Discover node_modules by listing each directory level.

    Unreadable directories are skipped silently. Symlinked directories
    are not followed.
    """

    @property
    def name(self) -> str:
        return "tree-walk"

    async def discover(
        self,
        options: DiscoveryOptions,
        on_progress: ProgressCallback | None = None,
    ) -> list[FolderRecord]:
        root = _resolve_root(options.path)
        logger.debug("Tree-walk discovery starting from %s", root)

        records: list[FolderRecord] = []
        await self._walk(root, 0, options, records, on_progress)
        return finalize_records(records, options.include_patterns)

    async def _walk(
        self,
        directory: str,
        depth: int,
        options: DiscoveryOptions,
        records: list[FolderRecord],
        on_progress: ProgressCallback | None,
    ) -> None:
        """Examine the children of one directory and recurse."""
        if options.depth is not None and depth > options.depth:
            return

        try:
            entries = await aiofiles.os.scandir(directory)
            with entries:
                children = sorted(
                    (entry.name, entry.path) for entry in entries if entry.is_dir(follow_symlinks=False)
                )
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", directory, e)
            return

        for name, path in children:
            action = classify_entry(name, path, options.exclude_patterns)
            if action == EntryAction.SKIP:
                continue
            if action == EntryAction.MATCH:
                record = await collect_metadata(
                    path,
                    directory,
                    quick=options.quick,
                    with_git=options.collect_git,
                )
                records.append(record)
                if on_progress:
                    on_progress(len(records), directory)
                continue
            await self._walk(path, depth + 1, options, records, on_progress)


class NativeFindDiscovery(DiscoveryStrategy):
    """Discover node_modules with a single ``find`` invocation.

    Falls back to the wrapped strategy when ``find`` cannot be started,
    exits non-zero without output, or times out.

    Args:
        fallback: Strategy used when the native search fails.
        concurrency: Maximum concurrent metadata collections.
    """

    def __init__(
        self,
        fallback: DiscoveryStrategy | None = None,
        concurrency: int = METADATA_CONCURRENCY,
    ) -> None:
        self._fallback = fallback if fallback is not None else TreeWalkDiscovery()
        self._concurrency = concurrency

    @property
    def name(self) -> str:
        return "native-find"

    @property
    def fallback(self) -> DiscoveryStrategy:
        """Strategy used when the native search fails."""
        return self._fallback

    async def discover(
        self,
        options: DiscoveryOptions,
        on_progress: ProgressCallback | None = None,
    ) -> list[FolderRecord]:
        root = _resolve_root(options.path)
        logger.debug("Native discovery starting from %s", root)

        try:
            found = await self._find(root, options.depth)
        except NativeStrategyError as e:
            logger.info("Native search failed, using %s: %s", self._fallback.name, e)
            return await self._fallback.discover(options, on_progress)

        paths = [path for path in found if is_path_allowed(path, root, options.exclude_patterns)]
        logger.debug("Native search found %d node_modules, %d after filtering", len(found), len(paths))

        semaphore = asyncio.Semaphore(self._concurrency)
        completed = 0

        async def _collect(path: str) -> FolderRecord:
            nonlocal completed
            async with semaphore:
                record = await collect_metadata(
                    path,
                    os.path.dirname(path),
                    quick=options.quick,
                    with_git=options.collect_git,
                )
            completed += 1
            if on_progress:
                on_progress(completed, record.project_path)
            return record

        records = await asyncio.gather(*(_collect(path) for path in paths))
        return finalize_records(list(records), options.include_patterns)

    async def _find(self, root: str, depth: int | None) -> list[str]:
        """Run ``find`` and return the node_modules paths it prints, sorted.

        Raises:
            NativeStrategyError: If find cannot run, times out, or fails
                without producing any output.
        """
        # -H follows a symlinked root but no symlink below it
        args = ["find", "-H", root]
        if depth is not None:
            args += ["-maxdepth", str(depth + 1)]
        args += ["-type", "d", "-name", NODE_MODULES, "-prune"]

        try:
            result = await run_command(args, timeout=_FIND_TIMEOUT, paths_output=True)
        except TimeoutError as e:
            msg = f"find timed out after {_FIND_TIMEOUT:.0f}s"
            raise NativeStrategyError(msg) from e
        except OSError as e:
            msg = f"find could not be started: {e}"
            raise NativeStrategyError(msg) from e

        lines = [line for line in result.stdout.splitlines() if line]
        if not result.success:
            if not lines:
                msg = f"find exited with code {result.returncode}: {result.stderr.strip()}"
                raise NativeStrategyError(msg)
            # Permission errors on some subtrees still leave a usable listing
            logger.debug("find exited with code %d, using partial output", result.returncode)

        return sorted(os.path.normpath(line) for line in lines)


def default_strategy() -> DiscoveryStrategy:
    """Pick the discovery strategy for this platform.

    Returns:
        NativeFindDiscovery on POSIX systems with ``find`` available,
        TreeWalkDiscovery otherwise.
    """
    if sys.platform != "win32" and command_exists("find"):
        return NativeFindDiscovery(fallback=TreeWalkDiscovery())
    return TreeWalkDiscovery()


async def discover(
    options: DiscoveryOptions,
    strategy: DiscoveryStrategy | None = None,
    on_progress: ProgressCallback | None = None,
) -> list[FolderRecord]:
    """Find node_modules directories under ``options.path``.

    Ordinary filesystem access problems never raise; unreadable
    directories are skipped.

    Args:
        options: Discovery options.
        strategy: Strategy to use. Defaults to :func:`default_strategy`.
        on_progress: Optional callback fired per record collected.

    Returns:
        Records sorted by size descending.

    Raises:
        InvalidRootError: If the root path is missing or not a directory.
    """
    chosen = strategy if strategy is not None else default_strategy()
    return await chosen.discover(options, on_progress)
