"""Unit tests for shell utilities."""

import os
import sys
from unittest.mock import patch

import pytest
from node_janitor.utils.shell import CommandResult, command_exists, run_command


class TestCommandResult:
    """Tests for CommandResult dataclass."""

    def test_success_when_returncode_zero(self) -> None:
        """CommandResult.success returns True for returncode 0."""
        result = CommandResult(stdout="output", stderr="", returncode=0)
        assert result.success is True

    def test_failure_when_returncode_nonzero(self) -> None:
        """CommandResult.success returns False for non-zero returncode."""
        result = CommandResult(stdout="", stderr="error", returncode=1)
        assert result.success is False

    def test_is_immutable(self) -> None:
        """CommandResult is frozen."""
        result = CommandResult(stdout="", stderr="", returncode=0)
        with pytest.raises(AttributeError):
            result.returncode = 1  # type: ignore[misc]


class TestRunCommand:
    """Tests for run_command function."""

    @pytest.mark.asyncio
    async def test_captures_stdout(self) -> None:
        """run_command returns the decoded stdout."""
        result = await run_command([sys.executable, "-c", "print('hello')"])
        assert result.success
        assert result.stdout.strip() == "hello"

    @pytest.mark.asyncio
    async def test_captures_stderr_and_exit_code(self) -> None:
        """Non-zero exit codes are reported, not raised."""
        result = await run_command(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"],
        )
        assert result.returncode == 3
        assert result.success is False
        assert "boom" in result.stderr

    @pytest.mark.asyncio
    async def test_timeout_raises(self) -> None:
        """A command exceeding the timeout raises TimeoutError."""
        with pytest.raises(TimeoutError):
            await run_command([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)

    @pytest.mark.asyncio
    async def test_missing_command_raises(self) -> None:
        """A missing executable raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            await run_command(["node-janitor-no-such-command"])

    @pytest.mark.asyncio
    async def test_cwd(self, tmp_path) -> None:
        """The command runs in the requested directory."""
        result = await run_command(
            [sys.executable, "-c", "import os; print(os.getcwd())"],
            cwd=str(tmp_path),
        )
        assert result.stdout.strip() == str(tmp_path.resolve())

    @pytest.mark.asyncio
    async def test_paths_output_keeps_undecodable_bytes(self) -> None:
        """paths_output decodes stdout like os.fsdecode instead of replacing bytes."""
        args = [sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'caf\\xe9')"]

        plain = await run_command(args)
        paths = await run_command(args, paths_output=True)

        assert plain.stdout == "caf\ufffd"
        assert paths.stdout == os.fsdecode(b"caf\xe9")


class TestCommandExists:
    """Tests for command_exists function."""

    def test_existing_command(self) -> None:
        """command_exists returns True when shutil.which finds the command."""
        with patch("node_janitor.utils.shell.shutil.which", return_value="/usr/bin/find"):
            assert command_exists("find") is True

    def test_missing_command(self) -> None:
        """command_exists returns False when shutil.which returns None."""
        with patch("node_janitor.utils.shell.shutil.which", return_value=None):
            assert command_exists("nonexistent") is False
