"""Main scaffolding orchestrator.

Takes a :class:`LoadedTemplate` and a resolved :class:`TemplateContext` and
materialises the template's ``files/`` tree into an output directory:
rendering path segments, rendering ``.hbs`` content and copying everything
else byte-for-byte.  A dry run computes the identical plan without creating
directories or writing files.
"""

from __future__ import annotations

import asyncio
import shutil
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from scaffoldkit.template import (
    LoadedTemplate,
    TemplateContext,
    TemplateEngine,
    TemplateFile,
    TemplateRenderError,
    is_binary_file,
)
from scaffoldkit.utils import ensure_dir


class ScaffoldError(Exception):
    """Raised when a file cannot be rendered or written.

    Files written before the failure are left in place.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


@dataclass(frozen=True)
class ScaffoldedFile:
    """One entry of the scaffold plan."""

    relative_path: str
    source: Path
    rendered: bool
    size: int


@dataclass
class ScaffoldResult:
    """What a scaffold run produced, or would produce in dry-run mode."""

    output_dir: Path
    files_created: list[str] = field(default_factory=list)
    directories_created: set[Path] = field(default_factory=set)
    entries: list[ScaffoldedFile] = field(default_factory=list)
    dry_run: bool = False


class Scaffolder:
    """Materialises loaded templates into project directories."""

    def __init__(self, engine: TemplateEngine) -> None:
        self.engine = engine

    # -- Public API --------------------------------------------------------

    async def scaffold(
        self,
        template: LoadedTemplate,
        context: TemplateContext,
        output_dir: str | Path,
        *,
        dry_run: bool = False,
    ) -> ScaffoldResult:
        """Render every file of *template* into *output_dir*.

        Files are processed one at a time, in the order the loader returned
        them.  Binary assets are always copied verbatim, even when they carry
        the ``.hbs`` marker.

        Args:
            template: Template returned by :func:`load_template`.
            context: Resolved variable values.
            output_dir: Destination project root.
            dry_run: Compute the plan without touching the filesystem.

        Returns:
            The ordered list of created files and the set of directories.

        Raises:
            ScaffoldError: If a file cannot be read, rendered or written, or
                a rendered path would land outside *output_dir*.
        """
        root = Path(output_dir).resolve()
        result = ScaffoldResult(output_dir=root, dry_run=dry_run)

        if not dry_run:
            await asyncio.to_thread(_make_dir, root)
        result.directories_created.add(root)

        for file in template.files:
            rel_path = self._render_path(file, context)
            dest = root.joinpath(*rel_path.parts)

            parent = dest.parent
            if parent not in result.directories_created:
                result.directories_created.add(parent)
                if not dry_run:
                    await asyncio.to_thread(_make_dir, parent)

            entry = await self._materialise(file, dest, rel_path.as_posix(), context, dry_run)
            result.entries.append(entry)
            result.files_created.append(entry.relative_path)

        return result

    # -- Per-file handling -------------------------------------------------

    def _render_path(self, file: TemplateFile, context: TemplateContext) -> PurePosixPath:
        try:
            rel_path = self.engine.render_path(file.relative_path, context)
        except TemplateRenderError as exc:
            raise ScaffoldError(
                f"Cannot render path {file.relative_path.as_posix()}: {exc}", file.absolute_path
            ) from exc

        # Rendered values must not move the file outside the output directory.
        if not rel_path.parts or rel_path.is_absolute() or ".." in rel_path.parts:
            raise ScaffoldError(
                f"Invalid output path {str(rel_path)!r} rendered from "
                f"{file.relative_path.as_posix()}",
                file.absolute_path,
            )
        return rel_path

    async def _materialise(
        self,
        file: TemplateFile,
        dest: Path,
        rel_path: str,
        context: TemplateContext,
        dry_run: bool,
    ) -> ScaffoldedFile:
        source = file.absolute_path

        if file.is_template and not is_binary_file(source):
            try:
                content = await asyncio.to_thread(source.read_text, "utf-8")
                rendered = self.engine.render(content, context)
            except (OSError, UnicodeDecodeError) as exc:
                raise ScaffoldError(f"Cannot read template {source}: {exc}", source) from exc
            except TemplateRenderError as exc:
                raise ScaffoldError(f"Cannot render {source}: {exc}", source) from exc

            if not dry_run:
                await self._write(_write_text, dest, rendered)
            return ScaffoldedFile(
                relative_path=rel_path,
                source=source,
                rendered=True,
                size=len(rendered.encode("utf-8")),
            )

        if not dry_run:
            await self._write(_copy_file, dest, source)
        try:
            size = source.stat().st_size
        except OSError as exc:
            raise ScaffoldError(f"Cannot read {source}: {exc}", source) from exc
        return ScaffoldedFile(relative_path=rel_path, source=source, rendered=False, size=size)

    @staticmethod
    async def _write(writer, dest: Path, payload) -> None:
        try:
            await asyncio.to_thread(writer, dest, payload)
        except OSError as exc:
            raise ScaffoldError(f"Cannot write {dest}: {exc}", dest) from exc


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _make_dir(path: Path) -> None:
    try:
        ensure_dir(path)
    except OSError as exc:
        raise ScaffoldError(f"Cannot create directory {path}: {exc}", path) from exc


def _write_text(path: Path, content: str) -> None:
    """Synchronous helper: write rendered content."""
    path.write_text(content, encoding="utf-8")


def _copy_file(path: Path, source: Path) -> None:
    """Synchronous helper: copy *source* to *path* byte-for-byte."""
    shutil.copyfile(source, path)
