"""
Rich terminal display utilities for CLI.

Provides formatted output using the Rich library for:
- Error, warning and compiler diagnostic messages (stderr)
- Diff reports rendered as a colored tree
- Finding count tables

The plain text report is not printed through Rich so that it stays byte-for-byte
stable for scripts and golden-file comparisons.
"""

from typing import Dict

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from proto_diff.diff import DiffSection, ItemKind, SectionKind
from proto_diff.schema import Diagnostic


console = Console()
err_console = Console(stderr=True)

USAGE = (
    "Expected arguments: root-dir1 file1 root-dir2 file2 message\n"
    "Use '.' for message to compare all messages in given files."
)

_ITEM_STYLES = {
    ItemKind.FIELD_ADDED: "green",
    ItemKind.MESSAGE_ADDED: "green",
    ItemKind.ENUM_ADDED: "green",
    ItemKind.ENUM_VALUE_ADDED: "green",
    ItemKind.FIELD_REMOVED: "red",
    ItemKind.MESSAGE_REMOVED: "red",
    ItemKind.ENUM_REMOVED: "red",
    ItemKind.ENUM_VALUE_REMOVED: "red",
    ItemKind.NAME_MISSING: "bold red",
}


def print_error(message: str) -> None:
    """Print an error message with X mark."""
    err_console.print(f"[red]✗[/red] {escape(message)}")


def print_usage() -> None:
    err_console.print(escape(USAGE), highlight=False)


def print_diagnostic(diagnostic: Diagnostic) -> None:
    """Print a compiler diagnostic as ``Error: file@line,column: message``."""
    style = "yellow" if diagnostic.is_warning else "red"
    err_console.print(f"[{style}]{escape(str(diagnostic))}[/{style}]", highlight=False)


def print_report_tree(root: DiffSection) -> None:
    """
    Print a trimmed report as a Rich tree.

    Args:
        root: Root section, already trimmed
    """
    tree = Tree(f"[bold]{escape(root.message)}[/bold]")
    _add_branch(tree, root)
    console.print(tree)


def _add_branch(tree: Tree, section: DiffSection) -> None:
    for item in section.items:
        style = _ITEM_STYLES.get(item.kind, "yellow")
        tree.add(f"[{style}]{escape(item.message)}[/{style}]")

    for subsection in section.subsections:
        label = escape(subsection.message)
        if subsection.kind in (SectionKind.MESSAGE_COMPARISON, SectionKind.ENUM_COMPARISON):
            label = f"[bold cyan]{label}[/bold cyan]"
        else:
            label = f"[cyan]{label}[/cyan]"
        _add_branch(tree.add(label), subsection)


def print_summary(counts: Dict[ItemKind, int]) -> None:
    """
    Print finding counts in a table on stderr.

    Args:
        counts: Findings per kind, as returned by ``summarize``
    """
    table = Table(title="Findings", show_header=True, header_style="bold cyan")
    table.add_column("Change", style="cyan", width=25)
    table.add_column("Count", justify="right", width=8)

    for kind, count in counts.items():
        table.add_row(kind.value, str(count))

    table.add_row("[bold]Total[/bold]", f"[bold]{sum(counts.values())}[/bold]")

    err_console.print()
    err_console.print(table)
