"""scaffoldkit configuration.

Typed settings for a CLI invocation.  Values come from defaults, then
``SCAFFOLDKIT_*`` environment variables, then command-line flags; Pydantic
validates them at construction time.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

BUILTIN_TEMPLATES_DIR = Path(__file__).parent / "templates"

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global scaffoldkit configuration.

    Instances are created once by the CLI entry point and then passed to the
    commands that need them.
    """

    templates_dir: Path = Field(
        default=BUILTIN_TEMPLATES_DIR,
        description="Directory holding the built-in templates",
    )
    hook_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-hook timeout in seconds; None waits indefinitely",
    )
    clone_timeout: float = Field(
        default=120.0, gt=0, description="Timeout for cloning remote templates"
    )
    run_hooks: bool = Field(default=True, description="Whether post hooks run")

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            SCAFFOLDKIT_TEMPLATES_DIR, SCAFFOLDKIT_HOOK_TIMEOUT,
            SCAFFOLDKIT_CLONE_TIMEOUT, SCAFFOLDKIT_NO_HOOKS.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("SCAFFOLDKIT_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["SCAFFOLDKIT_TEMPLATES_DIR"])
        if os.environ.get("SCAFFOLDKIT_HOOK_TIMEOUT"):
            kwargs["hook_timeout"] = float(os.environ["SCAFFOLDKIT_HOOK_TIMEOUT"])
        if os.environ.get("SCAFFOLDKIT_CLONE_TIMEOUT"):
            kwargs["clone_timeout"] = float(os.environ["SCAFFOLDKIT_CLONE_TIMEOUT"])
        if os.environ.get("SCAFFOLDKIT_NO_HOOKS", "").strip().lower() in _TRUTHY:
            kwargs["run_hooks"] = False
        return cls(**kwargs)
