"""Unit tests for metadata collection."""

import os
from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from node_janitor.janitor.metadata import (
    collect_metadata,
    count_packages,
    get_age_days,
    get_folder_size,
    get_folder_size_fast,
    list_package_dirs,
)
from node_janitor.janitor.models import GitStatus, LockfileType
from node_janitor.utils.shell import CommandResult


class TestGetAgeDays:
    """Tests for get_age_days."""

    def test_floor_days(self) -> None:
        """Partial days are truncated."""
        now = datetime(2024, 6, 10, 12, tzinfo=UTC)
        assert get_age_days(now - timedelta(days=3, hours=23), now) == 3

    def test_future_clamped_to_zero(self) -> None:
        """A timestamp in the future gives age 0."""
        now = datetime(2024, 6, 10, tzinfo=UTC)
        assert get_age_days(now + timedelta(days=2), now) == 0


class TestFolderSize:
    """Tests for get_folder_size and get_folder_size_fast."""

    @pytest.mark.asyncio
    async def test_sums_nested_files(self, tmp_path: Path) -> None:
        """All files in the tree are counted."""
        (tmp_path / "a" / "b").mkdir(parents=True)
        (tmp_path / "one.txt").write_bytes(b"x" * 10)
        (tmp_path / "a" / "two.txt").write_bytes(b"x" * 20)
        (tmp_path / "a" / "b" / "three.txt").write_bytes(b"x" * 30)

        assert await get_folder_size(str(tmp_path)) == 60

    @pytest.mark.asyncio
    async def test_symlinked_dir_not_followed(self, tmp_path: Path) -> None:
        """A symlink to a directory does not pull in the target's files."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "big.bin").write_bytes(b"x" * 1000)
        tree = tmp_path / "tree"
        tree.mkdir()
        (tree / "link").symlink_to(outside)

        assert await get_folder_size(str(tree)) < 1000

    @pytest.mark.asyncio
    async def test_missing_dir_is_zero(self, tmp_path: Path) -> None:
        """Unreadable paths contribute 0."""
        assert await get_folder_size(str(tmp_path / "missing")) == 0

    @pytest.mark.asyncio
    async def test_fast_empty_dir_is_zero(self, tmp_path: Path) -> None:
        """An empty directory measures 0 without running du."""
        with patch("node_janitor.janitor.metadata.run_command", new=AsyncMock()) as mock_run:
            assert await get_folder_size_fast(str(tmp_path)) == 0
        mock_run.assert_not_called()

    @pytest.mark.asyncio
    async def test_fast_uses_du_kilobytes(self, tmp_path: Path) -> None:
        """du -sk output is converted to bytes."""
        (tmp_path / "f").write_text("x")
        result = CommandResult(stdout=f"12\t{tmp_path}\n", stderr="", returncode=0)

        with patch("node_janitor.janitor.metadata.run_command", new=AsyncMock(return_value=result)) as mock_run:
            size = await get_folder_size_fast(str(tmp_path))

        assert size == 12 * 1024
        assert mock_run.call_args.args[0] == ["du", "-sk", str(tmp_path)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "outcome",
        [
            FileNotFoundError("du"),
            TimeoutError(),
            CommandResult(stdout="", stderr="du: error", returncode=1),
            CommandResult(stdout="garbage", stderr="", returncode=0),
        ],
    )
    async def test_fast_falls_back_to_walk(self, tmp_path: Path, outcome) -> None:
        """Any du failure falls back to the walking calculation."""
        (tmp_path / "f").write_bytes(b"x" * 42)
        mock = AsyncMock(side_effect=outcome) if isinstance(outcome, Exception) else AsyncMock(return_value=outcome)

        with patch("node_janitor.janitor.metadata.run_command", new=mock):
            assert await get_folder_size_fast(str(tmp_path)) == 42


class TestPackageListing:
    """Tests for list_package_dirs and count_packages."""

    @pytest.mark.asyncio
    async def test_scoped_packages_expanded(self, tmp_path: Path) -> None:
        """Scope directories are replaced by their packages; hidden entries are skipped at both levels."""
        nm = tmp_path / "node_modules"
        for name in ("a", "b", "@s/x", "@s/y", "@s/z", "@s/.cache", ".bin", ".package-lock"):
            (nm / name).mkdir(parents=True)
        (nm / ".package-lock.json").write_text("{}")
        (nm / "stray-file").write_text("x")

        assert await count_packages(str(nm)) == 5
        names = [os.path.relpath(p, nm) for p in await list_package_dirs(str(nm))]
        assert names == ["@s/x", "@s/y", "@s/z", "a", "b"]

    @pytest.mark.asyncio
    async def test_empty_and_missing(self, tmp_path: Path) -> None:
        """Empty or missing node_modules count as 0 packages."""
        (tmp_path / "node_modules").mkdir()
        assert await count_packages(str(tmp_path / "node_modules")) == 0
        assert await count_packages(str(tmp_path / "missing")) == 0


class TestCollectMetadata:
    """Tests for collect_metadata."""

    @pytest.mark.asyncio
    async def test_full_record(self, make_project) -> None:
        """Size, age, packages and lockfiles are all collected."""
        nm = make_project(
            "app",
            packages={"lodash": {"index.js": 100}, "@types/node": {"index.d.ts": 50}},
            lockfile="yarn.lock",
            age_days=40,
        )

        with patch("node_janitor.janitor.metadata.get_folder_size_fast", new=AsyncMock(return_value=150)):
            record = await collect_metadata(str(nm), str(nm.parent))

        assert record.path == str(nm)
        assert record.project_path == str(nm.parent)
        assert record.size_bytes == 150
        assert record.age_days == 40
        assert record.package_count == 2
        assert record.has_yarn_lock is True
        assert record.has_npm_lock is False
        assert record.lockfile_type == LockfileType.YARN
        assert record.git_status is None

    @pytest.mark.asyncio
    async def test_quick_skips_size_and_git(self, make_project) -> None:
        """Quick mode reports size 0 and never probes git."""
        nm = make_project("app", packages={"a": {"i.js": 10}})
        git = AsyncMock(return_value=GitStatus(is_git_repo=True, is_dirty=False))

        with patch("node_janitor.janitor.metadata.get_git_status", new=git):
            record = await collect_metadata(str(nm), str(nm.parent), quick=True, with_git=True)

        assert record.size_bytes == 0
        assert record.package_count == 1
        git.assert_not_called()

    @pytest.mark.asyncio
    async def test_git_collected_on_request(self, make_project) -> None:
        """with_git stores the probed status."""
        nm = make_project("app")
        status = GitStatus(is_git_repo=True, is_dirty=True, branch="main")

        with patch("node_janitor.janitor.metadata.get_git_status", new=AsyncMock(return_value=status)):
            record = await collect_metadata(str(nm), str(nm.parent), with_git=True)

        assert record.git_status == status
