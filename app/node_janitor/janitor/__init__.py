"""node_modules discovery, filtering and cleanup.

This module provides the discovery strategies, metadata collection,
filters, report builder, backup manifests, and the deletion and
deep-clean engines.
"""

from node_janitor.janitor.backup import BackupManifest, BackupWriteError, list_backups, write_backup
from node_janitor.janitor.cleaner import CleanOptions, DeletionError, apply_filters, clean
from node_janitor.janitor.deep_cleaner import deep_clean
from node_janitor.janitor.discovery import (
    DiscoveryOptions,
    InvalidRootError,
    NativeFindDiscovery,
    NativeStrategyError,
    TreeWalkDiscovery,
    discover,
)
from node_janitor.janitor.filters import (
    calculate_totals,
    filter_by_age,
    filter_by_git_cleanliness,
    filter_by_lockfile_presence,
    filter_by_size,
)
from node_janitor.janitor.models import (
    NODE_MODULES,
    DeepCleanOutcome,
    DeletionFailure,
    DeletionOutcome,
    FolderRecord,
    GitStatus,
    LockfileType,
    Totals,
)
from node_janitor.janitor.report import Report, build_report

__all__ = [
    "NODE_MODULES",
    "BackupManifest",
    "BackupWriteError",
    "CleanOptions",
    "DeepCleanOutcome",
    "DeletionError",
    "DeletionFailure",
    "DeletionOutcome",
    "DiscoveryOptions",
    "FolderRecord",
    "GitStatus",
    "InvalidRootError",
    "LockfileType",
    "NativeFindDiscovery",
    "NativeStrategyError",
    "Report",
    "Totals",
    "TreeWalkDiscovery",
    "apply_filters",
    "build_report",
    "calculate_totals",
    "clean",
    "deep_clean",
    "discover",
    "filter_by_age",
    "filter_by_git_cleanliness",
    "filter_by_lockfile_presence",
    "filter_by_size",
    "list_backups",
    "write_backup",
]
