"""Shared pytest fixtures for the scaffoldkit test suite.

Provides reusable fixtures for:
- Manifest documents (minimal and fully featured)
- On-disk template directories built from a file mapping
- Mock subprocess helpers
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable, Union
from unittest.mock import AsyncMock, MagicMock

import pytest

from scaffoldkit.template import TemplateContext, TemplateEngine

FileContent = Union[str, bytes]


# ---------------------------------------------------------------------------
# Manifest documents
# ---------------------------------------------------------------------------

MINIMAL_MANIFEST = textwrap.dedent("""\
    name: api
    description: d
    version: 1.0.0
    variables:
      - name: projectName
        description: Project name
        type: string
        required: true
""")


FULL_MANIFEST = textwrap.dedent("""\
    name: web
    description: Web application
    version: 2.1.0
    variables:
      - name: projectName
        description: Project name
        type: string
        required: true
        validate: "^[a-z][a-z0-9-]*$"
      - name: author
        description: Author name
        type: string
        default: Jane
      - name: useDocker
        description: Include Docker?
        type: boolean
        default: true
      - name: features
        description: Features to include
        type: multiselect
        options: [auth, db, cache]
        default: [auth]
    hooks:
      post:
        - command: git init
          description: Initialise git
        - command: echo done
          description: Say done
""")


@pytest.fixture
def minimal_manifest_text() -> str:
    """Smallest manifest that passes validation."""
    return MINIMAL_MANIFEST


@pytest.fixture
def full_manifest_text() -> str:
    """Manifest exercising every variable type and a hook list."""
    return FULL_MANIFEST


# ---------------------------------------------------------------------------
# Template directories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_template(tmp_path: Path) -> Callable[..., Path]:
    """Factory that writes a template root under ``tmp_path``.

    Usage:
        def test_something(make_template):
            root = make_template({"README.md.hbs": "# {{projectName}}"})

    ``files`` maps POSIX relative paths under ``files/`` to text or bytes.
    Pass ``manifest=None`` to leave out ``template.yaml``.
    """
    def factory(
        files: dict[str, FileContent] | None = None,
        manifest: str | None = MINIMAL_MANIFEST,
        name: str = "template",
        with_files_dir: bool = True,
    ) -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        if manifest is not None:
            (root / "template.yaml").write_text(manifest, encoding="utf-8")
        if with_files_dir:
            files_dir = root / "files"
            files_dir.mkdir(exist_ok=True)
            for rel_path, content in (files or {}).items():
                target = files_dir / rel_path
                target.parent.mkdir(parents=True, exist_ok=True)
                if isinstance(content, bytes):
                    target.write_bytes(content)
                else:
                    target.write_text(content, encoding="utf-8")
        return root

    return factory


@pytest.fixture
def engine() -> TemplateEngine:
    """Engine with the default configuration."""
    return TemplateEngine()


@pytest.fixture
def demo_context() -> TemplateContext:
    return TemplateContext({"projectName": "demo"})


# ---------------------------------------------------------------------------
# Binary content
# ---------------------------------------------------------------------------

# 1x1 transparent PNG; contains bytes that are not valid UTF-8.
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d49484452000000010000000108060000001f15c489"
    "0000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


# ---------------------------------------------------------------------------
# Subprocess Mocking
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
