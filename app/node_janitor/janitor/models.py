"""Domain models for node_modules discovery and cleanup.

This module defines the immutable records produced by discovery and
the outcome objects returned by the deletion and deep-clean engines.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

NODE_MODULES = "node_modules"


class LockfileType(str, Enum):
    """Package manager lockfile kinds.

    Attributes:
        NPM: package-lock.json
        YARN: yarn.lock
        PNPM: pnpm-lock.yaml
    """

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"


LOCKFILE_NAMES: dict[LockfileType, str] = {
    LockfileType.NPM: "package-lock.json",
    LockfileType.YARN: "yarn.lock",
    LockfileType.PNPM: "pnpm-lock.yaml",
}


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Version-control state of a project directory.

    Attributes:
        is_git_repo: Whether the project is inside a git working tree.
        is_dirty: Whether the working tree has uncommitted changes.
        branch: Checked-out branch name, if it could be determined.
    """

    is_git_repo: bool
    is_dirty: bool
    branch: str | None = None


@dataclass(frozen=True, slots=True)
class FolderRecord:
    """A single discovered node_modules directory.

    Records are created once per scan and never mutated.

    Attributes:
        path: Absolute path of the node_modules directory.
        project_path: Absolute path of its parent (the project).
        size_bytes: Recursive size in bytes (0 in quick mode).
        last_modified: Modification time of the node_modules entry itself.
        age_days: Whole days between now and last_modified.
        package_count: Number of installed packages (scoped packages expanded).
        has_npm_lock: package-lock.json exists in the project.
        has_yarn_lock: yarn.lock exists in the project.
        has_pnpm_lock: pnpm-lock.yaml exists in the project.
        git_status: Git state of the project, if collected.
    """

    path: str
    project_path: str
    size_bytes: int
    last_modified: datetime
    age_days: int
    package_count: int
    has_npm_lock: bool = False
    has_yarn_lock: bool = False
    has_pnpm_lock: bool = False
    git_status: GitStatus | None = None

    def __post_init__(self) -> None:
        """Validate record invariants after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)
        if os.path.dirname(self.path) != self.project_path:
            msg = f"Project path must be the parent of {self.path}, got {self.project_path}"
            raise ValueError(msg)
        if self.age_days < 0:
            msg = f"Age must not be negative, got {self.age_days}"
            raise ValueError(msg)

    @property
    def has_lockfile(self) -> bool:
        """Check if any of the three lockfiles is present."""
        return self.has_npm_lock or self.has_yarn_lock or self.has_pnpm_lock

    @property
    def lockfile_type(self) -> LockfileType | None:
        """First present lockfile, checked in npm, yarn, pnpm order."""
        if self.has_npm_lock:
            return LockfileType.NPM
        if self.has_yarn_lock:
            return LockfileType.YARN
        if self.has_pnpm_lock:
            return LockfileType.PNPM
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-ready dictionary.

        Returns:
            Dictionary representation of the record.
        """
        result: dict[str, Any] = {
            "path": self.path,
            "project_path": self.project_path,
            "size_bytes": self.size_bytes,
            "last_modified": self.last_modified.isoformat(),
            "age_days": self.age_days,
            "package_count": self.package_count,
            "has_npm_lock": self.has_npm_lock,
            "has_yarn_lock": self.has_yarn_lock,
            "has_pnpm_lock": self.has_pnpm_lock,
        }
        if self.git_status is not None:
            result["git_status"] = {
                "is_git_repo": self.git_status.is_git_repo,
                "is_dirty": self.git_status.is_dirty,
                "branch": self.git_status.branch,
            }
        return result


@dataclass(frozen=True, slots=True)
class Totals:
    """Aggregate figures over a list of records.

    Attributes:
        count: Number of records.
        total_size_bytes: Sum of record sizes.
        oldest_age_days: Largest age in days (0 when empty).
        newest_age_days: Smallest age in days (0 when empty).
    """

    count: int
    total_size_bytes: int
    oldest_age_days: int
    newest_age_days: int


@dataclass(frozen=True, slots=True)
class DeletionFailure:
    """A node_modules directory that could not be removed.

    Attributes:
        path: Path that failed to delete.
        error_message: Underlying OS or command error text.
    """

    path: str
    error_message: str


@dataclass(frozen=True, slots=True)
class DeletionOutcome:
    """Result of one cleanup invocation.

    Every filtered record ends up in exactly one of ``deleted_paths``
    or ``errors``.

    Attributes:
        deleted_count: Number of directories deleted (or that would be, in dry-run).
        freed_bytes: Sum of sizes of deleted directories.
        deleted_paths: Paths deleted, in completion order.
        errors: Per-item failures.
        backup_path: Backup manifest written before deletion, if requested.
    """

    deleted_count: int = 0
    freed_bytes: int = 0
    deleted_paths: tuple[str, ...] = ()
    errors: tuple[DeletionFailure, ...] = ()
    backup_path: str | None = None


@dataclass(frozen=True, slots=True)
class DeepCleanOutcome:
    """Result of one deep-clean invocation.

    Attributes:
        deleted_file_count: Files or directories removed; a directory counts once.
        processed_folders: Package directories visited.
        freed_bytes: Total bytes removed.
        deleted_files: Removed paths, only populated in verbose mode.
    """

    deleted_file_count: int = 0
    processed_folders: int = 0
    freed_bytes: int = 0
    deleted_files: tuple[str, ...] | None = field(default=None)
