"""Shared utility functions for scaffoldkit.

Provides async shell command execution, file-system helpers, Rich-based
console output and small validation helpers used by the CLI.
"""

from __future__ import annotations

import asyncio
import os
import re
import shutil
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: str | list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously and capture its output.

    Args:
        cmd: Shell command string, or a list of arguments executed without a
            shell.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` waits for as long as the command runs.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A timed-out command reports
        ``-1`` and an explanatory stderr.

    Raises:
        OSError: If the process cannot be started (e.g. *cwd* is missing).
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    if isinstance(cmd, list):
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )
    else:
        process = await asyncio.create_subprocess_shell(
            cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (
            -1,
            "",
            f"Command timed out after {timeout}s: {cmd if isinstance(cmd, str) else ' '.join(cmd)}",
        )

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Returns:
        The resolved ``Path`` object.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


def remove_tree(path: str | Path) -> None:
    """Delete a directory tree, ignoring a tree that is already gone."""
    shutil.rmtree(path, ignore_errors=True)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def matches_pattern(value: str, pattern: str) -> bool:
    """Return ``True`` if *pattern* matches anywhere in *value*."""
    return re.search(pattern, value) is not None


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    if seconds < 0:
        return "0.0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    if hours > 0 or minutes > 0:
        parts.append(f"{int(secs)}s")
    else:
        parts.append(f"{secs:.1f}s")

    return " ".join(parts)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success line."""
    console.print(f"  [green]✔[/green] {escape(message)}")


def print_error(message: str) -> None:
    """Print a red error line."""
    console.print(f"  [bold red]✖[/bold red] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a yellow warning line."""
    console.print(f"  [bold yellow]⚠[/bold yellow] {escape(message)}")


def print_info(message: str) -> None:
    """Print a cyan informational line."""
    console.print(f"  [cyan]ℹ[/cyan] {escape(message)}")
