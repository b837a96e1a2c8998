"""Collecting variable values, interactively or from command-line flags."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from rich.markup import escape
from rich.prompt import Confirm, Prompt

from scaffoldkit.manifest import TemplateVariable, VariableType
from scaffoldkit.template import ContextValue, DiscoveredTemplate, TemplateContext
from scaffoldkit.utils import console, matches_pattern, print_error


def prompt_for_variables(variables: Iterable[TemplateVariable]) -> TemplateContext:
    """Ask for every declared variable, in declaration order."""
    return TemplateContext({v.name: prompt_for_variable(v) for v in variables})


def prompt_for_variable(variable: TemplateVariable) -> ContextValue:
    """Ask for a single value matching the variable's type.

    String answers are re-asked until they satisfy ``required`` and the
    ``validate`` pattern.
    """
    if variable.type is VariableType.BOOLEAN:
        default = variable.default if isinstance(variable.default, bool) else False
        return Confirm.ask(f"  {escape(variable.description)}", default=default)

    if variable.type is VariableType.MULTISELECT:
        return _prompt_multiselect(variable)

    kwargs: dict[str, Any] = {}
    if isinstance(variable.default, str):
        kwargs["default"] = variable.default

    while True:
        value = Prompt.ask(f"  {escape(variable.description)}", **kwargs)
        problem = validate_text(variable, value)
        if problem is None:
            return value
        print_error(problem)


def validate_text(variable: TemplateVariable, value: str) -> str | None:
    """Return why *value* is unacceptable for *variable*, or ``None``."""
    if variable.is_required and not value.strip():
        return f"{variable.name} is required"
    if variable.pattern and not matches_pattern(value, variable.pattern):
        return f"Must match pattern: {variable.pattern}"
    return None


def _prompt_multiselect(variable: TemplateVariable) -> tuple[str, ...]:
    options = list(variable.options or ())
    defaults = set(variable.default) if isinstance(variable.default, tuple) else set()

    console.print(f"\n  {escape(variable.description)}")
    console.print("  [dim](comma-separated numbers, e.g. 1,3)[/dim]")
    for i, option in enumerate(options, 1):
        mark = "[✓]" if option in defaults else "[ ]"
        console.print(f"  {escape(mark)} {i}) {escape(option)}")

    default_choice = ",".join(str(i) for i, opt in enumerate(options, 1) if opt in defaults)
    while True:
        answer = Prompt.ask("  Select", default=default_choice)
        selected = parse_selection(answer, options)
        if selected is not None:
            return selected
        print_error(f"Choose numbers between 1 and {len(options)}")


def parse_selection(answer: str, options: Sequence[str]) -> tuple[str, ...] | None:
    """Turn ``"1, 3"`` into the matching options, in option order.

    Returns ``None`` if any entry is not a valid option number.
    """
    indices: set[int] = set()
    for part in answer.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit() or not 1 <= int(part) <= len(options):
            return None
        indices.add(int(part) - 1)
    return tuple(options[i] for i in sorted(indices))


def prompt_for_template(templates: Sequence[DiscoveredTemplate]) -> str:
    """Let the user pick one of *templates*; returns its directory name."""
    if not templates:
        raise ValueError("No templates to choose from")

    console.print("\n  [bold]Select a template[/bold]")
    for i, template in enumerate(templates, 1):
        console.print(
            f"  {i}) [cyan]{escape(template.name)}[/cyan] -- {escape(template.manifest.description)}"
        )
    choices = [str(i) for i in range(1, len(templates) + 1)]
    choice = Prompt.ask("  Template", choices=choices, default="1")
    return templates[int(choice) - 1].name


def build_context_from_flags(
    flags: Mapping[str, str | bool | None],
    variables: Iterable[TemplateVariable],
) -> TemplateContext:
    """Build a context from flag values, falling back to declared defaults.

    Boolean variables accept ``"true"`` or a real ``bool``; multiselect
    variables split a string on commas.  Variables with neither a flag nor a
    default are left out.
    """
    values: dict[str, ContextValue] = {}
    for variable in variables:
        flag_value = flags.get(variable.name)

        if flag_value is None:
            if variable.default is not None:
                values[variable.name] = variable.default
            continue

        if variable.type is VariableType.BOOLEAN:
            values[variable.name] = flag_value is True or flag_value == "true"
        elif variable.type is VariableType.MULTISELECT and isinstance(flag_value, str):
            values[variable.name] = tuple(s.strip() for s in flag_value.split(","))
        else:
            values[variable.name] = flag_value

    return TemplateContext(values)


def has_all_required(
    flags: Mapping[str, str | bool | None],
    variables: Iterable[TemplateVariable],
) -> bool:
    """Whether every required variable has a flag value or a default."""
    return all(
        flags.get(v.name) is not None or v.default is not None
        for v in variables
        if v.is_required
    )


def validate_flags(
    flags: Mapping[str, str | bool | None],
    variables: Iterable[TemplateVariable],
) -> list[str]:
    """Problems with string flag values, checked like interactive answers."""
    problems: list[str] = []
    for variable in variables:
        value = flags.get(variable.name)
        if variable.type is VariableType.STRING and isinstance(value, str):
            problem = validate_text(variable, value)
            if problem is not None:
                problems.append(problem)
    return problems
