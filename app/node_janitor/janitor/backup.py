"""Backup manifests written before destructive cleanups.

A backup manifest is an audit record: it identifies which node_modules
directories were about to be deleted (path, size, package.json and
lockfile) so they can be reinstalled later. It does not contain any
file contents.
"""

import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from node_janitor import __version__
from node_janitor.core.paths import ensure_backups_dir, get_backups_dir
from node_janitor.janitor.models import FolderRecord, LockfileType

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "backup_"
BACKUP_TIMESTAMP_FORMAT = "%Y_%m_%d_%H%M%S"


class BackupWriteError(RuntimeError):
    """Raised when a requested backup manifest cannot be written."""


class BackupEntry(BaseModel):
    """One node_modules directory recorded in a backup manifest."""

    model_config = ConfigDict(extra="forbid")

    path: Annotated[str, Field(description="Path of the node_modules directory")]
    size_bytes: Annotated[int, Field(ge=0, description="Size at the time of backup")]
    package_json_path: Annotated[str, Field(description="package.json of the project")]
    lockfile_type: Annotated[LockfileType | None, Field(description="Lockfile kind, if any")] = None


class BackupManifest(BaseModel):
    """Snapshot of the folders selected for deletion."""

    model_config = ConfigDict(extra="forbid")

    timestamp: Annotated[datetime, Field(description="When the manifest was written")]
    tool_version: Annotated[str, Field(description="node-janitor version")]
    total_folders: Annotated[int, Field(ge=0)]
    total_size_bytes: Annotated[int, Field(ge=0)]
    folders: Annotated[list[BackupEntry], Field(default_factory=list)]

    @classmethod
    def from_records(cls, records: list[FolderRecord], timestamp: datetime | None = None) -> "BackupManifest":
        """Build a manifest from the records about to be deleted."""
        return cls(
            timestamp=timestamp or datetime.now(UTC),
            tool_version=__version__,
            total_folders=len(records),
            total_size_bytes=sum(record.size_bytes for record in records),
            folders=[
                BackupEntry(
                    path=record.path,
                    size_bytes=record.size_bytes,
                    package_json_path=os.path.join(record.project_path, "package.json"),
                    lockfile_type=record.lockfile_type,
                )
                for record in records
            ],
        )


class BackupInfo(BaseModel):
    """Summary of a backup manifest found on disk."""

    filename: str
    path: str
    timestamp: datetime
    folder_count: int
    total_size_bytes: int


def backup_filename(timestamp: datetime) -> str:
    """File name for a manifest written at the given time (second resolution)."""
    return f"{BACKUP_PREFIX}{timestamp.strftime(BACKUP_TIMESTAMP_FORMAT)}.json"


def write_backup(
    records: list[FolderRecord],
    backups_dir: Path | None = None,
    timestamp: datetime | None = None,
) -> Path:
    """Write a backup manifest for the given records.

    The file is written atomically through a temporary file in the same
    directory followed by os.replace().

    Args:
        records: Records about to be deleted.
        backups_dir: Target directory. Defaults to the per-user backups directory.
        timestamp: Manifest time. Defaults to now.

    Returns:
        Path of the written manifest.

    Raises:
        BackupWriteError: If the directory or file cannot be written.
    """
    manifest = BackupManifest.from_records(records, timestamp=timestamp)

    try:
        target_dir = ensure_backups_dir(backups_dir)
    except RuntimeError as e:
        raise BackupWriteError(str(e)) from e

    target = target_dir / backup_filename(manifest.timestamp.astimezone())

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=target_dir,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            f.write(manifest.model_dump_json(indent=2))
        os.replace(tmp_path, target)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        msg = f"Failed to write backup manifest {target}: {e}"
        raise BackupWriteError(msg) from e

    logger.info("Backup manifest written to %s", target)
    return target


def load_backup(path: Path) -> BackupManifest:
    """Load and validate a backup manifest.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the content is not a valid manifest.
    """
    return BackupManifest.model_validate_json(path.read_text(encoding="utf-8"))


def list_backups(backups_dir: Path | None = None) -> list[BackupInfo]:
    """List backup manifests, newest first.

    Unreadable or invalid files are skipped with a warning.

    Args:
        backups_dir: Directory to read. Defaults to the per-user backups directory.

    Returns:
        BackupInfo for each valid manifest.
    """
    directory = backups_dir if backups_dir is not None else get_backups_dir()
    if not directory.is_dir():
        return []

    infos: list[BackupInfo] = []
    for path in directory.glob(f"{BACKUP_PREFIX}*.json"):
        try:
            manifest = load_backup(path)
        except (OSError, ValidationError) as e:
            logger.warning("Skipping invalid backup %s: %s", path, e)
            continue
        infos.append(
            BackupInfo(
                filename=path.name,
                path=str(path),
                timestamp=manifest.timestamp,
                folder_count=manifest.total_folders,
                total_size_bytes=manifest.total_size_bytes,
            )
        )

    infos.sort(key=lambda info: info.timestamp, reverse=True)
    return infos
