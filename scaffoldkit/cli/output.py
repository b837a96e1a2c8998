"""Terminal presentation for the CLI: file trees, banners and summaries."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from rich.markup import escape
from rich.tree import Tree

from scaffoldkit.scaffolder import HookResult
from scaffoldkit.utils import format_duration


def build_file_tree(files: Iterable[str], root_name: str) -> Tree:
    """Build a Rich tree of POSIX relative *files* under *root_name*.

    Directories are listed before files; both are sorted by name.
    """
    nested: dict[str, dict] = {}
    for file_path in sorted(files):
        node = nested
        for part in file_path.split("/"):
            node = node.setdefault(part, {})

    tree = Tree(f"[bold cyan]{escape(root_name)}/[/bold cyan]", guide_style="grey50")
    _add_nodes(tree, nested)
    return tree


def _add_nodes(parent: Tree, nodes: dict[str, dict]) -> None:
    directories = sorted(name for name, children in nodes.items() if children)
    files = sorted(name for name, children in nodes.items() if not children)

    for name in directories:
        branch = parent.add(f"[blue]{escape(name)}/[/blue]")
        _add_nodes(branch, nodes[name])
    for name in files:
        parent.add(escape(name))


def dry_run_banner() -> str:
    return "\n  [bold yellow]⚠ DRY RUN -- no files will be created[/bold yellow]\n"


def done_message(project_name: str, output_dir: Path) -> str:
    return (
        f"\n  [bold green]Done![/bold green] Created [bold]{escape(project_name)}[/bold] "
        f"in [dim]{escape(str(output_dir))}[/dim]\n"
    )


def hook_result_line(result: HookResult) -> str:
    """One status line for a finished hook."""
    duration = format_duration(result.duration)
    if result.success:
        return f"  [green]✔[/green] {escape(result.description)} [dim]({duration})[/dim]"
    error = escape(result.error or "unknown error")
    return f"  [bold red]✖[/bold red] {escape(result.description)} -- {error}"
