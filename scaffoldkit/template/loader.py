"""Template directory loading and discovery.

A template root holds a ``template.yaml`` manifest and a ``files/``
directory with the content to scaffold.  :func:`load_template` validates that
layout, parses the manifest and enumerates every regular file under
``files/``; :func:`list_builtin_templates` builds the menu of templates
available one level below a templates directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath

from scaffoldkit.manifest import (
    MANIFEST_FILENAME,
    ManifestValidationError,
    TemplateManifest,
    load_manifest,
)

from .engine import TEMPLATE_SUFFIX

FILES_DIRNAME = "files"

BINARY_EXTENSIONS: frozenset[str] = frozenset({
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".ico",
    ".bmp",
    ".webp",
    ".svg",
    ".woff",
    ".woff2",
    ".ttf",
    ".eot",
    ".otf",
    ".zip",
    ".tar",
    ".gz",
    ".pdf",
})


class LoadFailure(str, Enum):
    """Why a template directory could not be loaded."""
    NOT_A_DIRECTORY = "not_a_directory"
    MISSING_MANIFEST = "missing_manifest"
    MISSING_FILES_DIR = "missing_files_dir"


class TemplateLoadError(Exception):
    """Raised when a template directory does not have the expected layout."""

    def __init__(self, reason: LoadFailure, path: Path, message: str) -> None:
        self.reason = reason
        self.path = path
        super().__init__(message)


@dataclass(frozen=True)
class TemplateFile:
    """A content file found under a template's ``files/`` directory."""

    relative_path: PurePath
    absolute_path: Path
    is_template: bool


@dataclass(frozen=True)
class LoadedTemplate:
    """A validated template: its manifest plus the files to scaffold."""

    manifest: TemplateManifest
    files: tuple[TemplateFile, ...]
    base_path: Path


@dataclass(frozen=True)
class DiscoveredTemplate:
    """An entry in the menu of built-in templates."""

    name: str
    path: Path
    manifest: TemplateManifest


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def is_template_file(path: str | PurePath) -> bool:
    """Return ``True`` if the file name carries the ``.hbs`` marker."""
    return PurePath(path).name.endswith(TEMPLATE_SUFFIX)


def is_binary_file(path: str | PurePath) -> bool:
    """Return ``True`` if the file extension marks a binary asset.

    The ``.hbs`` marker is ignored, so ``logo.png.hbs`` still counts as a
    binary ``.png``.
    """
    name = PurePath(path).name
    if name.endswith(TEMPLATE_SUFFIX):
        name = name[: -len(TEMPLATE_SUFFIX)]
    return PurePath(name).suffix.lower() in BINARY_EXTENSIONS


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_template(template_dir: str | Path) -> LoadedTemplate:
    """Load and validate the template rooted at *template_dir*.

    Raises:
        TemplateLoadError: If the root, its manifest or its ``files/``
            directory is missing.
        ManifestValidationError: If the manifest is malformed.
    """
    root = Path(template_dir)
    if not root.is_dir():
        raise TemplateLoadError(
            LoadFailure.NOT_A_DIRECTORY,
            root,
            f"Template directory does not exist: {root}",
        )

    manifest_path = root / MANIFEST_FILENAME
    if not manifest_path.is_file():
        raise TemplateLoadError(
            LoadFailure.MISSING_MANIFEST,
            manifest_path,
            f"Missing {MANIFEST_FILENAME} in {root}",
        )

    manifest = load_manifest(manifest_path)

    files_dir = root / FILES_DIRNAME
    if not files_dir.is_dir():
        raise TemplateLoadError(
            LoadFailure.MISSING_FILES_DIR,
            files_dir,
            f"Missing {FILES_DIRNAME}/ directory in {root}",
        )

    return LoadedTemplate(
        manifest=manifest,
        files=tuple(_walk_files(files_dir, files_dir)),
        base_path=files_dir,
    )


def _walk_files(directory: Path, base: Path) -> list[TemplateFile]:
    """Depth-first walk collecting regular files; directories are not recorded."""
    files: list[TemplateFile] = []
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            files.extend(_walk_files(entry, base))
        elif entry.is_file():
            files.append(
                TemplateFile(
                    relative_path=entry.relative_to(base),
                    absolute_path=entry,
                    is_template=is_template_file(entry),
                )
            )
    return files


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def list_builtin_templates(templates_dir: str | Path) -> list[DiscoveredTemplate]:
    """Return every valid template one level below *templates_dir*.

    Directories without a manifest, or whose manifest is invalid, are
    skipped.  A missing *templates_dir* yields an empty list.
    """
    root = Path(templates_dir)
    if not root.is_dir():
        return []

    discovered: list[DiscoveredTemplate] = []
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        manifest_path = entry / MANIFEST_FILENAME
        if not entry.is_dir() or not manifest_path.is_file():
            continue
        try:
            manifest = load_manifest(manifest_path)
        except (ManifestValidationError, OSError, UnicodeDecodeError):
            continue
        discovered.append(DiscoveredTemplate(name=entry.name, path=entry, manifest=manifest))

    return discovered
