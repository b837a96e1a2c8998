"""Ordered validation of ``template.yaml`` documents.

The checks run in a fixed order and the first failure wins, so every
malformed manifest produces exactly one descriptive message.  Validation is
all-or-nothing: either a fully populated :class:`TemplateManifest` is
returned or :class:`ManifestValidationError` is raised.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from .models import (
    TemplateHook,
    TemplateHooks,
    TemplateManifest,
    TemplateVariable,
    VariableType,
)

MANIFEST_FILENAME = "template.yaml"

_VALID_TYPES = [t.value for t in VariableType]


class ManifestErrorKind(str, Enum):
    """Category of a manifest validation failure."""
    INVALID_DOCUMENT = "invalid_document"
    MISSING_FIELD = "missing_field"
    INVALID_VARIABLE = "invalid_variable"
    INVALID_HOOK = "invalid_hook"


class ManifestValidationError(Exception):
    """Raised when a manifest document fails validation."""

    def __init__(self, kind: ManifestErrorKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(message)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_manifest(content: str) -> TemplateManifest:
    """Parse and validate the text of a manifest document.

    Args:
        content: Raw YAML text.

    Returns:
        The validated, immutable manifest.

    Raises:
        ManifestValidationError: On the first rule the document breaks.
    """
    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ManifestValidationError(
            ManifestErrorKind.INVALID_DOCUMENT, f"Manifest is not valid YAML: {exc}"
        ) from exc

    if not isinstance(raw, dict):
        raise ManifestValidationError(
            ManifestErrorKind.INVALID_DOCUMENT, "Manifest must be a YAML mapping"
        )

    for field_name in ("name", "description", "version"):
        if not _is_non_empty_str(raw.get(field_name)):
            raise ManifestValidationError(
                ManifestErrorKind.MISSING_FIELD,
                f'Manifest must have a non-empty "{field_name}" string',
            )

    raw_variables = raw.get("variables")
    if not isinstance(raw_variables, list):
        raise ManifestValidationError(
            ManifestErrorKind.MISSING_FIELD, 'Manifest must have a "variables" list'
        )

    variables: list[TemplateVariable] = []
    seen: set[str] = set()
    for index, entry in enumerate(raw_variables):
        variable = _validate_variable(entry, index)
        if variable.name in seen:
            raise ManifestValidationError(
                ManifestErrorKind.INVALID_VARIABLE,
                f'Variable "{variable.name}" is declared more than once',
            )
        seen.add(variable.name)
        variables.append(variable)

    hooks = _validate_hooks(raw["hooks"]) if "hooks" in raw else None

    return TemplateManifest(
        name=raw["name"],
        description=raw["description"],
        version=raw["version"],
        variables=tuple(variables),
        hooks=hooks,
    )


def load_manifest(path: str | Path) -> TemplateManifest:
    """Read a manifest file from disk and validate it."""
    return parse_manifest(Path(path).read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def _invalid_variable(message: str) -> ManifestValidationError:
    return ManifestValidationError(ManifestErrorKind.INVALID_VARIABLE, message)


def _validate_variable(entry: Any, index: int) -> TemplateVariable:
    if not isinstance(entry, dict):
        raise _invalid_variable(f"Variable at index {index} must be a mapping")

    name = entry.get("name")
    if not _is_non_empty_str(name):
        raise _invalid_variable(
            f'Variable at index {index} must have a non-empty "name" string'
        )

    if not _is_non_empty_str(entry.get("description")):
        raise _invalid_variable(
            f'Variable "{name}" must have a non-empty "description" string'
        )

    raw_type = entry.get("type")
    if raw_type not in _VALID_TYPES:
        raise _invalid_variable(
            f'Variable "{name}" has invalid type "{raw_type}". '
            f"Must be one of: {', '.join(_VALID_TYPES)}"
        )
    var_type = VariableType(raw_type)

    options = entry.get("options")
    if var_type is VariableType.MULTISELECT:
        if not isinstance(options, list) or not options:
            raise _invalid_variable(
                f'Variable "{name}" of type "multiselect" must have a non-empty "options" list'
            )
        if not all(isinstance(opt, str) for opt in options):
            raise _invalid_variable(f'Variable "{name}" options must all be strings')
    elif options is not None and not (
        isinstance(options, list) and all(isinstance(opt, str) for opt in options)
    ):
        raise _invalid_variable(f'Variable "{name}" options must be a list of strings')

    pattern = entry.get("validate")
    if pattern is not None:
        if not isinstance(pattern, str):
            raise _invalid_variable(
                f'Variable "{name}" validate must be a string regex pattern'
            )
        try:
            re.compile(pattern)
        except re.error as exc:
            raise _invalid_variable(
                f'Variable "{name}" has invalid regex pattern: {pattern} ({exc})'
            ) from exc

    required = entry.get("required")

    return TemplateVariable(
        name=name,
        description=entry["description"],
        type=var_type,
        required=None if required is None else bool(required),
        default=_coerce_default(name, entry.get("default")),
        pattern=pattern,
        options=tuple(options) if options is not None else None,
    )


def _coerce_default(name: str, value: Any) -> Any:
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise _invalid_variable(
        f'Variable "{name}" default must be a string, a boolean or a list of strings'
    )


def _validate_hooks(raw_hooks: Any) -> TemplateHooks:
    if not isinstance(raw_hooks, dict):
        raise ManifestValidationError(
            ManifestErrorKind.INVALID_HOOK, 'Manifest "hooks" must be a mapping'
        )

    raw_post = raw_hooks.get("post")
    if raw_post is None:
        return TemplateHooks()
    if not isinstance(raw_post, list):
        raise ManifestValidationError(
            ManifestErrorKind.INVALID_HOOK, 'Manifest "hooks.post" must be a list'
        )

    post: list[TemplateHook] = []
    for index, entry in enumerate(raw_post):
        if not isinstance(entry, dict):
            raise ManifestValidationError(
                ManifestErrorKind.INVALID_HOOK, f"Hook at index {index} must be a mapping"
            )
        for field_name in ("command", "description"):
            if not _is_non_empty_str(entry.get(field_name)):
                raise ManifestValidationError(
                    ManifestErrorKind.INVALID_HOOK,
                    f'Hook at index {index} must have a non-empty "{field_name}" string',
                )
        post.append(
            TemplateHook(command=entry["command"], description=entry["description"])
        )

    return TemplateHooks(post=tuple(post))
