"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from node_janitor.janitor.models import FolderRecord, GitStatus

RecordFactory = Callable[..., FolderRecord]
ProjectFactory = Callable[..., Path]


@pytest.fixture
def make_record() -> RecordFactory:
    """Factory for FolderRecord instances with sensible defaults."""

    def _make(
        project: str = "/work/app",
        size: int = 1024,
        age: int = 0,
        packages: int = 1,
        npm: bool = False,
        yarn: bool = False,
        pnpm: bool = False,
        git: GitStatus | None = None,
    ) -> FolderRecord:
        return FolderRecord(
            path=os.path.join(project, "node_modules"),
            project_path=project,
            size_bytes=size,
            last_modified=datetime.now(UTC) - timedelta(days=age),
            age_days=age,
            package_count=packages,
            has_npm_lock=npm,
            has_yarn_lock=yarn,
            has_pnpm_lock=pnpm,
            git_status=git,
        )

    return _make


@pytest.fixture
def make_project(tmp_path: Path) -> ProjectFactory:
    """Factory creating a project with a node_modules folder under tmp_path.

    ``packages`` maps a package name (``@scope/name`` allowed) to a
    mapping of relative file path to file size in bytes.
    """

    def _make(
        relative: str,
        packages: dict[str, dict[str, int]] | None = None,
        lockfile: str | None = None,
        age_days: int | None = None,
    ) -> Path:
        project = tmp_path / relative
        node_modules = project / "node_modules"
        node_modules.mkdir(parents=True)
        for name, files in (packages or {}).items():
            package_dir = node_modules / name
            package_dir.mkdir(parents=True)
            for file_name, size in files.items():
                target = package_dir / file_name
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(b"x" * size)
        if lockfile:
            (project / lockfile).write_text("{}")
        if age_days is not None:
            stamp = (datetime.now() - timedelta(days=age_days, hours=1)).timestamp()
            os.utime(node_modules, (stamp, stamp))
        return node_modules

    return _make
