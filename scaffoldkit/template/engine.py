"""Handlebars rendering for template content and file names.

Provides the :class:`TemplateEngine` class which compiles Handlebars source
with ``pybars3`` and renders it against a :class:`TemplateContext`.  The
engine is configured once through an explicit :class:`EngineConfig` value
(escaping policy, helpers, template suffix) and then passed to whoever needs
to render, so nothing depends on global registration order.

Supported grammar is whatever ``pybars3`` understands; templates in practice
use plain substitution, ``{{#if}}``/``{{#unless}}``, ``{{#each}}`` with
``{{this}}`` and the four case helpers.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import PurePath, PurePosixPath
from typing import Any

from pybars import Compiler, PybarsError

from .context import TemplateContext

TEMPLATE_SUFFIX = ".hbs"
SUBSTITUTION_MARKER = "{{"
COMPILE_CACHE_SIZE = 128

# ``{{expr}}`` that is not already a triple-stash, block, comment, partial or
# ``{{else}}``.
_ESCAPED_MUSTACHE = re.compile(
    r"(?<!\{)\{\{(?![{#/^!>&])(?!\s*else\s*\}\})([^{}]*?)\}\}"
)


class TemplateRenderError(Exception):
    """Raised when Handlebars source cannot be compiled or rendered."""


# ---------------------------------------------------------------------------
# Case-conversion helpers
# ---------------------------------------------------------------------------


def kebab_case(value: str) -> str:
    """Convert ``MyProject`` or ``my project`` to ``my-project``."""
    result = re.sub(r"([a-z])([A-Z])", r"\1-\2", value)
    result = re.sub(r"[\s_]+", "-", result)
    return result.lower()


def camel_case(value: str) -> str:
    """Convert ``my-project`` or ``my_project`` to ``myProject``."""
    result = re.sub(
        r"[-_\s]+(.)?",
        lambda m: m.group(1).upper() if m.group(1) else "",
        value,
    )
    return re.sub(r"^[A-Z]", lambda m: m.group(0).lower(), result)


def pascal_case(value: str) -> str:
    """Convert ``my-project`` or ``my_project`` to ``MyProject``."""
    camel = camel_case(value)
    return camel[:1].upper() + camel[1:]


def upper_case(value: str) -> str:
    return value.upper()


def _as_helper(convert: Callable[[str], str]) -> Callable[..., str]:
    # pybars passes the current scope first, then the positional arguments.
    def helper(this: Any, value: Any = None, *args: Any) -> str:
        return convert("" if value is None else str(value))

    helper.__name__ = convert.__name__
    return helper


DEFAULT_HELPERS: dict[str, Callable[[str], str]] = {
    "kebabCase": kebab_case,
    "camelCase": camel_case,
    "pascalCase": pascal_case,
    "upperCase": upper_case,
}


# ---------------------------------------------------------------------------
# Engine configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EngineConfig:
    """Rendering policy, fixed for the lifetime of an engine.

    Attributes:
        escape_html: Whether ``{{expr}}`` output is HTML-escaped.  Scaffolded
            files are source code and config, so this is off by default.
        helpers: Helper name to ``str -> str`` conversion function.
        suffix: File-name suffix marking a file as a Handlebars template.
    """

    escape_html: bool = False
    helpers: Mapping[str, Callable[[str], str]] = field(
        default_factory=lambda: dict(DEFAULT_HELPERS)
    )
    suffix: str = TEMPLATE_SUFFIX


# ---------------------------------------------------------------------------
# TemplateEngine
# ---------------------------------------------------------------------------


class TemplateEngine:
    """Renders Handlebars template strings, file names and relative paths."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()
        self._compiler = Compiler()
        self._helpers = {
            name: _as_helper(convert) for name, convert in self.config.helpers.items()
        }
        # Bounded per-engine cache of compiled sources.
        self._compile = functools.lru_cache(maxsize=COMPILE_CACHE_SIZE)(self._compile)

    # -- Content rendering -------------------------------------------------

    def render(self, template: str, context: TemplateContext) -> str:
        """Render Handlebars *template* against *context*.

        Raises:
            TemplateRenderError: If the source is not valid Handlebars or a
                helper fails while rendering.
        """
        if not template:
            return ""
        compiled = self._compile(template)
        try:
            return str(compiled(context.to_render_data(), helpers=self._helpers))
        except PybarsError as exc:
            raise TemplateRenderError(f"Template rendering failed: {exc}") from exc

    # -- File-name rendering -----------------------------------------------

    def render_filename(self, filename: str, context: TemplateContext) -> str:
        """Render a single file or directory name.

        Names without a substitution marker skip the engine entirely; the
        only change applied to them is stripping the template suffix.
        """
        if SUBSTITUTION_MARKER not in filename:
            return self.strip_suffix(filename)
        return self.strip_suffix(self.render(filename, context))

    def render_path(self, relative_path: PurePath, context: TemplateContext) -> PurePosixPath:
        """Render every segment of *relative_path* independently."""
        parts = [self.render_filename(part, context) for part in relative_path.parts]
        return PurePosixPath(*parts)

    def strip_suffix(self, name: str) -> str:
        suffix = self.config.suffix
        if suffix and name.endswith(suffix):
            return name[: -len(suffix)]
        return name

    def is_template_name(self, name: str) -> bool:
        return bool(self.config.suffix) and name.endswith(self.config.suffix)

    # -- Internal ------------------------------------------------------------

    def _compile(self, template: str) -> Callable[..., Any]:
        source = template if self.config.escape_html else _disable_escaping(template)
        try:
            compiled = self._compiler.compile(source)
        except PybarsError as exc:
            raise TemplateRenderError(f"Invalid template syntax: {exc}") from exc
        return compiled


def _disable_escaping(source: str) -> str:
    """Turn every escaped ``{{expr}}`` into the raw ``{{{expr}}}`` form."""
    return _ESCAPED_MUSTACHE.sub(r"{{{\1}}}", source)
