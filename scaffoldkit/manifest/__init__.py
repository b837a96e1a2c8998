"""Template manifest parsing and validation.

Usage::

    from scaffoldkit.manifest import parse_manifest

    manifest = parse_manifest(Path("template.yaml").read_text())
    print(manifest.name, [v.name for v in manifest.variables])
"""

from scaffoldkit.manifest.models import (
    TemplateHook,
    TemplateHooks,
    TemplateManifest,
    TemplateVariable,
    VariableType,
)
from scaffoldkit.manifest.validator import (
    MANIFEST_FILENAME,
    ManifestErrorKind,
    ManifestValidationError,
    load_manifest,
    parse_manifest,
)

__all__ = [
    "MANIFEST_FILENAME",
    "ManifestErrorKind",
    "ManifestValidationError",
    "TemplateHook",
    "TemplateHooks",
    "TemplateManifest",
    "TemplateVariable",
    "VariableType",
    "load_manifest",
    "parse_manifest",
]
