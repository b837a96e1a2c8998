"""scaffoldkit command-line interface.

Usage::

    scaffoldkit new cli --name my-tool
    scaffoldkit new --from ./my-template --dry-run
    scaffoldkit new --from https://github.com/acme/template.git --name demo
    scaffoldkit list
    scaffoldkit validate ./my-template
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.markup import escape

from scaffoldkit import __version__
from scaffoldkit.config import Config
from scaffoldkit.git import GitCloneError, clone_repo, is_git_url
from scaffoldkit.manifest import ManifestValidationError
from scaffoldkit.scaffolder import (
    HookRunner,
    ScaffoldError,
    Scaffolder,
    all_succeeded,
)
from scaffoldkit.template import (
    LoadedTemplate,
    TemplateContext,
    TemplateEngine,
    TemplateLoadError,
    collect_template_sources,
    cross_reference,
    list_builtin_templates,
    load_template,
)
from scaffoldkit.utils import (
    console,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
    remove_tree,
)

from .output import build_file_tree, done_message, dry_run_banner, hook_result_line
from .prompts import (
    build_context_from_flags,
    has_all_required,
    prompt_for_template,
    prompt_for_variables,
    validate_flags,
)


class FlagValueError(Exception):
    """Raised when a command-line value breaks a variable's rules."""


_FATAL_ERRORS = (
    TemplateLoadError,
    FlagValueError,
    ManifestValidationError,
    ScaffoldError,
    GitCloneError,
)


# ---------------------------------------------------------------------------
# new
# ---------------------------------------------------------------------------


async def run_new_command(args: argparse.Namespace, config: Config) -> int:
    """Scaffold a project; returns the process exit code."""
    engine = TemplateEngine()
    cleanup_dir: Path | None = None

    try:
        if args.source:
            if is_git_url(args.source):
                print_info("Cloning template repository...")
                cleanup_dir = await clone_repo(args.source, timeout=config.clone_timeout)
                print_success("Template repository cloned")
                template_dir = cleanup_dir
            else:
                template_dir = Path(args.source).resolve()
        else:
            template_name = args.template
            if not template_name:
                discovered = list_builtin_templates(config.templates_dir)
                if not discovered:
                    print_error("No built-in templates found")
                    return 1
                template_name = prompt_for_template(discovered)
            template_dir = config.templates_dir / template_name

        template = load_template(template_dir)
        manifest = template.manifest
        console.print()
        print_success(f"Template: {manifest.name} ({manifest.description})")

        context = _resolve_context(template, args.name)
        project_name = (
            context.get_text("projectName")
            or context.get_text("name")
            or args.name
            or "project"
        )
        output_dir = Path(args.output).resolve() if args.output else Path.cwd() / project_name

        if args.verbose:
            print_summary_table(
                {
                    "Template path": str(template_dir),
                    "Output": str(output_dir),
                    **{name: context.display_value(name) for name in context},
                },
                title="Scaffold settings",
            )

        if args.dry_run:
            console.print(dry_run_banner())

        result = await Scaffolder(engine).scaffold(
            template, context, output_dir, dry_run=args.dry_run
        )
        print_success("Project structure created" if not args.dry_run else "Project plan computed")

        console.print()
        console.print(build_file_tree(result.files_created, project_name))
        if args.verbose:
            for entry in result.entries:
                action = "rendered" if entry.rendered else "copied"
                console.print(f"  [dim]{action:<8} {escape(entry.relative_path)} ({entry.size} bytes)[/dim]")

        if args.dry_run:
            console.print("\n  [yellow]No files were created (dry-run mode)[/yellow]\n")
            return 0

        hooks = manifest.post_hooks
        if hooks and config.run_hooks:
            console.print("\n  [dim]Running post-scaffold hooks...[/dim]\n")
            results = await HookRunner(timeout=config.hook_timeout).run(
                hooks,
                result.output_dir,
                on_start=lambda hook: console.print(f"  [dim]⏳ {escape(hook.description)}...[/dim]"),
                on_complete=lambda hook_result: console.print(hook_result_line(hook_result)),
            )
            if not all_succeeded(results):
                print_warning("Some hooks failed; the project files were still created")

        console.print(done_message(project_name, result.output_dir))
        return 0

    except _FATAL_ERRORS as exc:
        print_error(str(exc))
        return 1
    finally:
        if cleanup_dir is not None:
            remove_tree(cleanup_dir)


def _resolve_context(template: LoadedTemplate, name: str | None) -> TemplateContext:
    """Use flags when they cover every required variable, else prompt."""
    variables = template.manifest.variables
    flags: dict[str, str | bool | None] = {}
    if name:
        flags["projectName"] = name
        flags["name"] = name

    if name and has_all_required(flags, variables):
        problems = validate_flags(flags, variables)
        if problems:
            raise FlagValueError("Invalid --name: " + "; ".join(problems))
        return build_context_from_flags(flags, variables)
    return prompt_for_variables(variables)


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


def run_list_command(config: Config) -> int:
    discovered = list_builtin_templates(config.templates_dir)
    if not discovered:
        print_warning("No built-in templates found")
        return 0

    console.print("\n  [bold]Available templates:[/bold]\n")
    for template in discovered:
        console.print(
            f"  [bold cyan]{escape(template.name):<12}[/bold cyan] {escape(template.manifest.description)}"
        )
        if template.manifest.variables:
            names = ", ".join(template.manifest.variable_names)
            console.print(f"  [dim]{'':<12} Variables: {escape(names)}[/dim]")
        console.print()
    return 0


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


def run_validate_command(path: str) -> int:
    """Check a template's layout and manifest, then cross-check variables."""
    try:
        template = load_template(Path(path).resolve())
        sources = collect_template_sources(template)
    except (TemplateLoadError, ManifestValidationError) as exc:
        print_error(f"Invalid template: {exc}")
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        print_error(f"Cannot read template files: {exc}")
        return 1

    manifest = template.manifest
    print_success(f'Template "{manifest.name}" is valid')
    console.print(
        f"  [dim]{len(manifest.variables)} variables, {len(manifest.post_hooks)} hooks, "
        f"{len(template.files)} files[/dim]"
    )

    report = cross_reference(manifest.variables, sources)
    for name in report.undefined:
        print_warning(f'Variable "{name}" is used but not declared in the manifest')
    for name in report.unused:
        print_warning(f'Variable "{name}" is declared but never used')
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scaffoldkit",
        description="Scaffold new projects from configurable templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  scaffoldkit new cli --name my-tool\n"
            "  scaffoldkit new --from ./my-template --dry-run\n"
            "  scaffoldkit list\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    new = subparsers.add_parser("new", help="Scaffold a new project from a template")
    new.add_argument("template", nargs="?", help="Built-in template name")
    new.add_argument("--name", help="Project name")
    new.add_argument("--from", dest="source", help="Custom template path or git URL")
    new.add_argument("--dry-run", action="store_true", help="Preview files without creating them")
    new.add_argument("--no-hooks", action="store_true", help="Skip post-scaffold hooks")
    new.add_argument("--verbose", action="store_true", help="Show detailed output")
    new.add_argument("--output", help="Output directory (defaults to ./<name>)")
    new.add_argument(
        "--hook-timeout",
        type=float,
        default=None,
        help="Per-hook timeout in seconds (default: no timeout)",
    )

    subparsers.add_parser("list", help="List available built-in templates")

    validate = subparsers.add_parser("validate", help="Validate a template directory")
    validate.add_argument("path", help="Path to the template directory")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``scaffoldkit`` and ``python -m scaffoldkit``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.from_env()
    except ValueError as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(1)

    if args.command == "new":
        updates: dict[str, object] = {}
        if args.no_hooks:
            updates["run_hooks"] = False
        if args.hook_timeout is not None:
            if args.hook_timeout <= 0:
                parser.error("--hook-timeout must be positive")
            updates["hook_timeout"] = args.hook_timeout
        config = config.model_copy(update=updates)
        code = asyncio.run(run_new_command(args, config))
    elif args.command == "list":
        code = run_list_command(config)
    else:
        code = run_validate_command(args.path)

    sys.exit(code)


if __name__ == "__main__":
    main()
