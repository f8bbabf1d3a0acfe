"""Shared console helpers for libgen wrappers.

The generator cores never print.  Wrappers (scripts, editor integrations,
tests that want readable output) report progress and results through the
shared Rich ``console`` below.
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from .scaffolder.generator import GeneratorResult
from .storage.buffered import FileChange

console = Console()


# ---------------------------------------------------------------------------
# Generation results
# ---------------------------------------------------------------------------


def build_file_tree(root: str, paths: Iterable[str]) -> Tree:
    """Build a Rich tree of *paths* below *root*, keeping emission order."""
    tree = Tree(f"[bold]{root}[/bold]")
    nodes: dict[str, Tree] = {"": tree}
    prefix = f"{root}/"
    for path in paths:
        relative = path[len(prefix):] if path.startswith(prefix) else path
        parts = relative.split("/")
        parent = ""
        for depth, part in enumerate(parts):
            key = "/".join(parts[: depth + 1])
            if key not in nodes:
                is_file = depth == len(parts) - 1
                label = part if is_file else f"[blue]{part}/[/blue]"
                nodes[key] = nodes[parent].add(label)
            parent = key
    return tree


def print_generation_summary(result: GeneratorResult) -> None:
    """Print the project facts and the generated file tree for *result*."""
    facts = Table(title="Generated library", show_header=False)
    facts.add_column("Field", style="dim", no_wrap=True)
    facts.add_column("Value")
    facts.add_row("Project", result.project_name)
    facts.add_row("Package", result.package_name)
    facts.add_row("Root", result.project_root)
    facts.add_row("Source", result.source_root)
    facts.add_row("Files", str(len(result.files_generated)))

    console.print(facts)
    console.print(build_file_tree(result.project_root, result.files_generated))
    console.print(f"[bold green]Created {result.package_name}[/bold green]")


def print_pending_changes(changes: Iterable[FileChange]) -> None:
    """Print the change list of a buffered adapter before it is flushed."""
    styles = {"create": "green", "update": "yellow", "delete": "red"}
    table = Table(title="Pending changes", show_header=True, header_style="bold cyan")
    table.add_column("Change", no_wrap=True)
    table.add_column("Path")
    for change in changes:
        style = styles[change.kind]
        table.add_row(f"[{style}]{change.kind.upper()}[/{style}]", change.path)
    console.print(table)
    console.print()
