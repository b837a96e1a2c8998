"""Post-generation hook execution.

Hooks are opaque shell commands declared in a template manifest.  They run
one after another inside the generated project; a failing hook is recorded
and the remaining hooks still run.  Nothing is rolled back.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from scaffoldkit.manifest import TemplateHook
from scaffoldkit.utils import run_command


class HookExecutionError(Exception):
    """Raised internally when a hook command fails; always captured."""

    def __init__(self, message: str, command: str = "") -> None:
        self.command = command
        super().__init__(message)


@dataclass(frozen=True)
class HookResult:
    """Outcome of a single hook."""

    command: str
    description: str
    success: bool
    duration: float
    error: Optional[str] = None


OnStart = Callable[[TemplateHook], None]
OnComplete = Callable[[HookResult], None]


class HookRunner:
    """Runs hook commands sequentially in a working directory.

    Args:
        timeout: Per-hook limit in seconds.  ``None`` (the default) lets a
            command run for as long as it takes.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    async def run(
        self,
        hooks: Iterable[TemplateHook],
        cwd: str | Path,
        *,
        on_start: OnStart | None = None,
        on_complete: OnComplete | None = None,
    ) -> list[HookResult]:
        """Run every hook in order and return one result per hook.

        *on_start* is called right before a hook starts and *on_complete*
        right after it finishes, whether it succeeded or not.
        """
        results: list[HookResult] = []

        for hook in hooks:
            if on_start is not None:
                on_start(hook)

            start = time.monotonic()
            error: str | None = None
            try:
                await self._execute(hook.command, Path(cwd))
            except HookExecutionError as exc:
                error = str(exc)

            result = HookResult(
                command=hook.command,
                description=hook.description,
                success=error is None,
                duration=time.monotonic() - start,
                error=error,
            )
            results.append(result)

            if on_complete is not None:
                on_complete(result)

        return results

    async def _execute(self, command: str, cwd: Path) -> None:
        try:
            returncode, _stdout, stderr = await run_command(
                command, cwd=cwd, timeout=self.timeout
            )
        except OSError as exc:
            raise HookExecutionError(f"Could not start command: {exc}", command) from exc

        if returncode != 0:
            raise HookExecutionError(
                stderr or f"Command exited with code {returncode}", command
            )


def all_succeeded(results: Iterable[HookResult]) -> bool:
    return all(r.success for r in results)
