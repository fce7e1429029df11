"""Unit tests for git status probing."""

from unittest.mock import AsyncMock, patch

import pytest
from node_janitor.janitor.git import get_current_branch, get_git_status, is_dirty, is_git_repo
from node_janitor.janitor.models import GitStatus
from node_janitor.utils.shell import CommandResult


def _ok(stdout: str) -> CommandResult:
    return CommandResult(stdout=stdout, stderr="", returncode=0)


def _fail() -> CommandResult:
    return CommandResult(stdout="", stderr="fatal: not a git repository", returncode=128)


def _responder(responses: dict[str, CommandResult]) -> AsyncMock:
    """Mock run_command answering by git subcommand."""

    async def _run(args: list[str], **kwargs) -> CommandResult:
        key = " ".join(args[1:])
        return responses.get(key, _fail())

    return AsyncMock(side_effect=_run)


class TestGitProbes:
    """Tests for the individual probes."""

    @pytest.mark.asyncio
    async def test_is_git_repo(self) -> None:
        """A successful rev-parse means inside a repository."""
        mock = _responder({"rev-parse --show-toplevel": _ok("/w/repo\n")})
        with patch("node_janitor.janitor.git.run_command", new=mock):
            assert await is_git_repo("/w/repo/app") is True

        assert mock.call_args.kwargs["cwd"] == "/w/repo/app"

    @pytest.mark.asyncio
    async def test_not_a_repo(self) -> None:
        """A failing rev-parse means not a repository."""
        with patch("node_janitor.janitor.git.run_command", new=_responder({})):
            assert await is_git_repo("/tmp") is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("porcelain", "expected"), [("", False), (" M package.json\n", True)])
    async def test_is_dirty(self, porcelain: str, expected: bool) -> None:
        """Any porcelain output means uncommitted changes."""
        with patch("node_janitor.janitor.git.run_command", new=_responder({"status --porcelain": _ok(porcelain)})):
            assert await is_dirty("/w/repo") is expected

    @pytest.mark.asyncio
    async def test_branch(self) -> None:
        """The current branch is stripped of whitespace."""
        mock = _responder({"rev-parse --abbrev-ref HEAD": _ok("feature/x\n")})
        with patch("node_janitor.janitor.git.run_command", new=mock):
            assert await get_current_branch("/w/repo") == "feature/x"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [FileNotFoundError("git"), TimeoutError()])
    async def test_git_unavailable(self, error: Exception) -> None:
        """Missing git or a timeout degrade to False/None."""
        with patch("node_janitor.janitor.git.run_command", new=AsyncMock(side_effect=error)):
            assert await is_git_repo("/w") is False
            assert await is_dirty("/w") is False
            assert await get_current_branch("/w") is None


class TestGetGitStatus:
    """Tests for get_git_status."""

    @pytest.mark.asyncio
    async def test_repository(self) -> None:
        """All probes are combined into a GitStatus."""
        mock = _responder(
            {
                "rev-parse --show-toplevel": _ok("/w/repo\n"),
                "status --porcelain": _ok("?? new.txt\n"),
                "rev-parse --abbrev-ref HEAD": _ok("main\n"),
            }
        )
        with patch("node_janitor.janitor.git.run_command", new=mock):
            status = await get_git_status("/w/repo")

        assert status == GitStatus(is_git_repo=True, is_dirty=True, branch="main")

    @pytest.mark.asyncio
    async def test_not_a_repository(self) -> None:
        """Outside a repository the status is None."""
        with patch("node_janitor.janitor.git.run_command", new=_responder({})):
            assert await get_git_status("/tmp") is None
