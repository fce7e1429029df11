"""Shell execution utilities.

Provides non-blocking subprocess execution with timeouts and proper
error handling.
"""

import asyncio
import os
import shutil
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


async def run_command(
    args: list[str],
    *,
    timeout: float | None = 60.0,
    cwd: str | None = None,
    paths_output: bool = False,
) -> CommandResult:
    """Execute a command without blocking the event loop.

    The child process is killed when the timeout expires.

    Args:
        args: Command and arguments to execute.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.
        paths_output: Decode stdout with the filesystem encoding so that
            file names which are not valid UTF-8 survive unchanged.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        TimeoutError: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
        OSError: If the command cannot be started (e.g. cwd is missing).
    """
    process = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except TimeoutError:
        process.kill()
        await process.wait()
        raise

    return CommandResult(
        stdout=os.fsdecode(stdout) if paths_output else stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
        returncode=process.returncode if process.returncode is not None else -1,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None
