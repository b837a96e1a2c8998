"""Immutable rendering context.

A context maps variable names to exactly one of three value kinds: text
(``str``), flag (``bool``) or list of text (``tuple[str, ...]``).  Values are
checked once when the context is built; the template engine only ever sees a
fresh plain-``dict`` copy, so rendering can never mutate the context.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Union

ContextValue = Union[str, bool, tuple[str, ...]]


def coerce_value(name: str, value: Any) -> ContextValue:
    """Normalise *value* into one of the three context value kinds.

    Lists and tuples of strings become tuples; anything else that is not a
    ``str`` or ``bool`` is rejected.

    Raises:
        TypeError: If the value does not fit any of the three kinds.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        if all(isinstance(item, str) for item in value):
            return tuple(value)
        raise TypeError(f'Context value "{name}" must be a list of strings')
    raise TypeError(
        f'Context value "{name}" must be a string, a boolean or a list of strings, '
        f"not {type(value).__name__}"
    )


class TemplateContext(Mapping[str, ContextValue]):
    """Read-only mapping of resolved template variables."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, ContextValue] = {
            name: coerce_value(name, value) for name, value in (values or {}).items()
        }

    def __getitem__(self, name: str) -> ContextValue:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"TemplateContext({self._values!r})"

    def with_values(self, **updates: Any) -> "TemplateContext":
        """Return a new context with *updates* applied on top of this one."""
        return TemplateContext({**self._values, **updates})

    def get_text(self, name: str) -> str | None:
        """Return the value of *name* if it is text, otherwise ``None``."""
        value = self._values.get(name)
        return value if isinstance(value, str) else None

    def to_render_data(self) -> dict[str, Any]:
        """Return a fresh plain-data copy for the template engine.

        Lists are handed over as ``list`` so ``{{#each}}`` iterates them like
        any other sequence.
        """
        data: dict[str, Any] = {}
        for name, value in self._values.items():
            if isinstance(value, bool):
                data[name] = value
            elif isinstance(value, str):
                data[name] = value
            else:
                data[name] = list(value)
        return data

    def display_value(self, name: str) -> str:
        """Human-readable rendering of a value for summaries."""
        value = self._values[name]
        if isinstance(value, bool):
            return "yes" if value else "no"
        if isinstance(value, str):
            return value
        return ", ".join(value) if value else "(none)"
