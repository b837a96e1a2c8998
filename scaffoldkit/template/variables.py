"""Static extraction of variable references from Handlebars text.

Matching is regular-expression based rather than a real parse.  It finds
plain ``{{name}}`` substitutions, the controlling variable of ``#if``,
``#each`` and ``#unless`` blocks, and the first argument of the four case
helpers.  Dotted paths (``{{a.b}}``), subexpressions and block parameters are
out of the matcher's reach and are silently ignored.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from scaffoldkit.manifest.models import TemplateVariable

from .engine import DEFAULT_HELPERS, SUBSTITUTION_MARKER
from .loader import LoadedTemplate, is_binary_file

_VARIABLE_PATTERN = re.compile(
    r"\{\{\s*(?:#(?:if|each|unless)\s+)?([A-Za-z_]\w*)\s*\}\}"
)
_HELPER_CALL_PATTERN = re.compile(
    r"\{\{\s*(?:" + "|".join(DEFAULT_HELPERS) + r")\s+([A-Za-z_]\w*)\s*\}\}"
)
_KEYWORDS = frozenset({"this", "else"})


def extract_variables(templates: Iterable[str]) -> set[str]:
    """Return the distinct variable names referenced across *templates*."""
    variables: set[str] = set()
    for template in templates:
        for pattern in (_VARIABLE_PATTERN, _HELPER_CALL_PATTERN):
            for match in pattern.finditer(template):
                name = match.group(1)
                if name not in _KEYWORDS:
                    variables.add(name)
    return variables


@dataclass
class CrossReference:
    """Declared vs. referenced variables of a template."""

    defined: list[str] = field(default_factory=list)
    used: list[str] = field(default_factory=list)
    undefined: list[str] = field(default_factory=list)
    unused: list[str] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.undefined and not self.unused


def cross_reference(
    variables: Iterable[TemplateVariable],
    templates: Iterable[str],
) -> CrossReference:
    """Compare manifest declarations against references in *templates*.

    ``undefined`` lists names referenced but never declared; ``unused``
    lists declarations never referenced.  All lists are sorted.
    """
    defined = [v.name for v in variables]
    used = extract_variables(templates)
    defined_set = set(defined)

    return CrossReference(
        defined=defined,
        used=sorted(used),
        undefined=sorted(used - defined_set),
        unused=sorted(defined_set - used),
    )


def collect_template_sources(template: LoadedTemplate) -> list[str]:
    """Gather every piece of text in *template* that the engine renders.

    That is the content of each ``.hbs`` file plus each path segment that
    carries a substitution marker.  Binary files are skipped.
    """
    sources: list[str] = []
    for file in template.files:
        sources.extend(
            part for part in file.relative_path.parts if SUBSTITUTION_MARKER in part
        )
        if file.is_template and not is_binary_file(file.absolute_path):
            sources.append(file.absolute_path.read_text(encoding="utf-8"))
    return sources
