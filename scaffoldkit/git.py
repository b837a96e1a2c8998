"""Remote template sources.

Templates can be fetched from a git repository; the repository is shallow
cloned into a temporary directory which the caller removes once scaffolding
is done.
"""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

from scaffoldkit.utils import remove_tree

CLONE_DIR_PREFIX = "scaffoldkit-git-"


class GitCloneError(Exception):
    """Raised when a template repository cannot be cloned."""

    def __init__(self, message: str, command: str = "", stderr: str = ""):
        self.command = command
        self.stderr = stderr
        super().__init__(message)


def is_git_url(source: str) -> bool:
    """Return ``True`` if *source* looks like a git remote rather than a path."""
    return (
        source.startswith("https://")
        or source.startswith("git@")
        or source.endswith(".git")
    )


async def _run_git(
    *args: str,
    cwd: str | Path | None = None,
    timeout: float = 120.0,
) -> tuple[str, str]:
    """Run a git command asynchronously and return (stdout, stderr).

    Raises GitCloneError if the command exits with a non-zero code, cannot be
    started or times out.
    """
    cmd = ["git"] + list(args)
    cmd_str = " ".join(cmd)

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
        )
    except OSError as exc:
        raise GitCloneError(f"Could not run git: {exc}", command=cmd_str) from exc

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise GitCloneError(
            f"Git command timed out after {timeout}s: {cmd_str}",
            command=cmd_str,
        )

    stdout = stdout_bytes.decode("utf-8", errors="replace").strip()
    stderr = stderr_bytes.decode("utf-8", errors="replace").strip()

    if process.returncode != 0:
        raise GitCloneError(
            f"Git command failed (exit {process.returncode}): {cmd_str}\n{stderr}",
            command=cmd_str,
            stderr=stderr,
        )

    return stdout, stderr


async def clone_repo(url: str, timeout: float = 120.0) -> Path:
    """Shallow-clone *url* into a fresh temporary directory.

    Returns:
        The directory holding the clone.  The caller owns it and should
        delete it with :func:`scaffoldkit.utils.remove_tree`.

    Raises:
        GitCloneError: If git fails; the temporary directory is removed.
    """
    target = Path(tempfile.mkdtemp(prefix=CLONE_DIR_PREFIX))
    try:
        await _run_git("clone", "--depth", "1", url, str(target), timeout=timeout)
    except GitCloneError:
        remove_tree(target)
        raise
    return target
