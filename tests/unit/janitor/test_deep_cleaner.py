"""Unit tests for the deep-clean engine."""

from pathlib import Path

import pytest
from node_janitor.janitor.deep_cleaner import deep_clean, is_removable_directory, is_removable_file


@pytest.fixture
def package_tree(make_project) -> Path:
    """A node_modules with one README (50 B) and one source map (30 B)."""
    return make_project(
        "app",
        packages={
            "lib": {
                "README.md": 50,
                "index.js.map": 30,
                "index.js": 200,
                "package.json": 20,
            },
        },
    )


class TestPredicates:
    """Tests for the denylist predicates."""

    @pytest.mark.parametrize("name", ["README.md", "LICENSE", ".npmignore", "tsconfig.json", "notes.md", "a.min.map"])
    def test_removable_files(self, name: str) -> None:
        """Listed names and extensions are removable."""
        assert is_removable_file(name)

    @pytest.mark.parametrize("name", ["index.js", "package.json", "README", "map.js"])
    def test_kept_files(self, name: str) -> None:
        """Runtime files are kept."""
        assert not is_removable_file(name)

    def test_directories(self) -> None:
        """Only listed directory names are removable."""
        assert is_removable_directory("__tests__")
        assert is_removable_directory("docs")
        assert not is_removable_directory("lib")


class TestDeepClean:
    """Tests for deep_clean."""

    @pytest.mark.asyncio
    async def test_dry_run_counts_without_removing(self, package_tree: Path) -> None:
        """A dry run measures the files and leaves them in place."""
        outcome = await deep_clean(str(package_tree), dry_run=True)

        assert outcome.freed_bytes == 80
        assert outcome.deleted_file_count == 2
        assert outcome.processed_folders == 1
        assert (package_tree / "lib" / "README.md").exists()
        assert (package_tree / "lib" / "index.js.map").exists()

    @pytest.mark.asyncio
    async def test_live_run_matches_dry_run(self, package_tree: Path) -> None:
        """A real run frees what the dry run predicted."""
        predicted = await deep_clean(str(package_tree), dry_run=True)
        outcome = await deep_clean(str(package_tree))

        assert outcome == predicted
        assert not (package_tree / "lib" / "README.md").exists()
        assert not (package_tree / "lib" / "index.js.map").exists()
        assert (package_tree / "lib" / "index.js").exists()
        assert (package_tree / "lib" / "package.json").exists()

    @pytest.mark.asyncio
    async def test_second_run_finds_nothing(self, package_tree: Path) -> None:
        """After a real run nothing is left to remove."""
        await deep_clean(str(package_tree))
        outcome = await deep_clean(str(package_tree))

        assert outcome.deleted_file_count == 0
        assert outcome.freed_bytes == 0
        assert outcome.processed_folders == 1

    @pytest.mark.asyncio
    async def test_directories_count_once(self, make_project) -> None:
        """A removed directory is one item carrying its recursive size."""
        nm = make_project(
            "app",
            packages={
                "@scope/pkg": {"test/a.js": 40, "test/nested/b.js": 60, "index.js": 5},
                "other": {"docs/guide.txt": 25},
            },
        )

        outcome = await deep_clean(str(nm), verbose=True)

        assert outcome.processed_folders == 2
        assert outcome.deleted_file_count == 2
        assert outcome.freed_bytes == 125
        assert outcome.deleted_files is not None
        assert {Path(p).name for p in outcome.deleted_files} == {"test", "docs"}
        assert not (nm / "@scope" / "pkg" / "test").exists()
        assert (nm / "@scope" / "pkg" / "index.js").exists()

    @pytest.mark.asyncio
    async def test_file_list_only_when_verbose(self, package_tree: Path) -> None:
        """deleted_files is None unless verbose."""
        outcome = await deep_clean(str(package_tree), dry_run=True)

        assert outcome.deleted_files is None

    @pytest.mark.asyncio
    async def test_empty_and_missing(self, tmp_path: Path) -> None:
        """Empty or missing node_modules produce an empty outcome."""
        (tmp_path / "node_modules").mkdir()

        for path in (tmp_path / "node_modules", tmp_path / "missing"):
            outcome = await deep_clean(str(path))
            assert outcome.processed_folders == 0
            assert outcome.deleted_file_count == 0

    @pytest.mark.asyncio
    async def test_progress(self, make_project) -> None:
        """on_progress receives each package name."""
        nm = make_project("app", packages={"a": {}, "b": {}})
        names: list[str] = []

        await deep_clean(str(nm), dry_run=True, on_progress=names.append)

        assert names == ["a", "b"]
