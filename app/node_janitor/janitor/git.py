"""Git status probing for project directories.

Every probe shells out to ``git`` and degrades to ``False``/``None``
when git is missing, the directory is not a repository, or the
command fails for any other reason.
"""

import logging

from node_janitor.janitor.models import GitStatus
from node_janitor.utils.shell import run_command

logger = logging.getLogger(__name__)

_GIT_TIMEOUT = 10.0


async def _git(args: list[str], cwd: str) -> str | None:
    """Run a git subcommand and return stdout, or None on any failure."""
    try:
        result = await run_command(["git", *args], timeout=_GIT_TIMEOUT, cwd=cwd)
    except (OSError, TimeoutError) as e:
        logger.debug("git %s failed in %s: %s", " ".join(args), cwd, e)
        return None

    if not result.success:
        return None
    return result.stdout


async def get_git_root(project_path: str) -> str | None:
    """Get the top-level directory of the repository containing a path.

    Args:
        project_path: Directory inside the working tree.

    Returns:
        Absolute path of the repository root, or None if not in a repository.
    """
    stdout = await _git(["rev-parse", "--show-toplevel"], project_path)
    if stdout is None:
        return None
    return stdout.strip() or None


async def is_git_repo(project_path: str) -> bool:
    """Check if a directory is inside a git working tree."""
    return await get_git_root(project_path) is not None


async def is_dirty(project_path: str) -> bool:
    """Check whether the working tree has uncommitted changes.

    Returns:
        True if ``git status --porcelain`` prints anything, False otherwise
        (including on failure).
    """
    stdout = await _git(["status", "--porcelain"], project_path)
    return bool(stdout and stdout.strip())


async def get_current_branch(project_path: str) -> str | None:
    """Get the checked-out branch name, or None on failure."""
    stdout = await _git(["rev-parse", "--abbrev-ref", "HEAD"], project_path)
    if stdout is None:
        return None
    return stdout.strip() or None


async def get_git_status(project_path: str) -> GitStatus | None:
    """Collect git status for a project directory.

    Args:
        project_path: Project directory (parent of node_modules).

    Returns:
        GitStatus if the directory is under version control, None otherwise.
    """
    if not await is_git_repo(project_path):
        return None

    return GitStatus(
        is_git_repo=True,
        is_dirty=await is_dirty(project_path),
        branch=await get_current_branch(project_path),
    )
