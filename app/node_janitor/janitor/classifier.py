"""Traversal classification for directory entries.

Decides, for every directory met while walking a tree, whether it is a
node_modules match, a directory worth descending into, or something to
prune. Both discovery strategies go through this module so that their
pruning rules stay identical.
"""

import os
import re
from enum import Enum
from functools import lru_cache

from node_janitor.janitor.models import NODE_MODULES

# Directories never worth descending into: VCS metadata, package manager
# caches, and OS folders that hold no projects.
SYSTEM_FOLDERS: frozenset[str] = frozenset(
    {
        ".git",
        ".svn",
        ".hg",
        ".cache",
        ".npm",
        ".yarn",
        ".pnpm-store",
        ".Trash",
        "Trash",
        "$RECYCLE.BIN",
        "System Volume Information",
        "Library",
        "Applications",
    }
)


class EntryAction(str, Enum):
    """What discovery should do with a directory entry.

    Attributes:
        SKIP: Prune the entry; do not descend.
        DESCEND: Recurse into the entry.
        MATCH: The entry is a node_modules directory.
    """

    SKIP = "skip"
    DESCEND = "descend"
    MATCH = "match"


@lru_cache(maxsize=256)
def _glob_regex(pattern: str) -> re.Pattern[str]:
    """Compile a ``*`` glob into an unanchored regex."""
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")))


def matches_pattern(path: str, pattern: str) -> bool:
    """Check a path against a user exclude/include pattern.

    Patterns containing ``*`` are treated as globs where ``*`` matches
    any run of characters, searched anywhere in the path. Other patterns
    match as plain substrings.

    Args:
        path: Absolute path to test.
        pattern: User-supplied pattern.

    Returns:
        True if the pattern matches the path.
    """
    if "*" in pattern:
        return _glob_regex(pattern).search(path) is not None
    return pattern in path


def is_skipped_name(name: str) -> bool:
    """Check if a directory name is hidden or a known system folder."""
    return name.startswith(".") or name in SYSTEM_FOLDERS


def classify_entry(name: str, path: str, exclude_patterns: tuple[str, ...] = ()) -> EntryAction:
    """Classify a directory entry met during traversal.

    Args:
        name: Entry basename.
        path: Full path of the entry.
        exclude_patterns: User exclude patterns applied to the full path.

    Returns:
        EntryAction for the entry.
    """
    if is_skipped_name(name):
        return EntryAction.SKIP
    if any(matches_pattern(path, pattern) for pattern in exclude_patterns):
        return EntryAction.SKIP
    if name == NODE_MODULES:
        return EntryAction.MATCH
    return EntryAction.DESCEND


def is_path_allowed(path: str, root: str, exclude_patterns: tuple[str, ...] = ()) -> bool:
    """Apply the classifier to every segment of a path below ``root``.

    Used to post-filter paths returned by a native search, which does not
    prune hidden, system or excluded directories while traversing. A path
    is allowed only if no intermediate segment would have been skipped and
    the final segment classifies as a match.

    Args:
        path: Absolute path returned by the search.
        root: Root the search started from.
        exclude_patterns: User exclude patterns.

    Returns:
        True if a tree walk from ``root`` would have reported this path.
    """
    relative = os.path.relpath(path, root)
    if relative.startswith(os.pardir):
        return False

    current = root
    segments = relative.split(os.sep)
    for index, segment in enumerate(segments):
        current = os.path.join(current, segment)
        action = classify_entry(segment, current, exclude_patterns)
        is_last = index == len(segments) - 1
        if action == EntryAction.SKIP:
            return False
        if action == EntryAction.MATCH and not is_last:
            return False
        if is_last and action != EntryAction.MATCH:
            return False
    return True
