"""
CLI command implementations.

This module contains the logic behind the ``proto-diff`` command: load both
schema versions, run the comparison and print the report in the requested
format.
"""

import io
import logging
from enum import Enum
from pathlib import Path

import typer

from proto_diff.api import WHOLE_SCHEMA
from proto_diff.diff import (
    DiffSection,
    compare_named_type,
    compare_schemas,
    finalize,
    report_to_json,
    summarize,
)
from proto_diff.schema import SchemaLoadError, SchemaPool, load_schema

from .display import print_diagnostic, print_error, print_report_tree, print_summary

logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    TEXT = "text"
    TREE = "tree"
    JSON = "json"


def load_schema_side(root_dir: Path, entry_file: Path) -> SchemaPool:
    """
    Load one schema version, printing compiler diagnostics as they arrive.

    Args:
        root_dir: Import root
        entry_file: Entry file relative to root_dir

    Returns:
        SchemaPool: Loaded schema

    Raises:
        typer.Exit: With code 1 if the schema cannot be loaded
    """
    try:
        pool = load_schema(root_dir, entry_file, on_diagnostic=print_diagnostic)
    except SchemaLoadError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    logger.info(f"Loaded {root_dir / entry_file}: {len(pool.messages)} messages, {len(pool.enums)} enums")
    return pool


def diff_command(
    root_dir1: Path,
    entry_file1: Path,
    root_dir2: Path,
    entry_file2: Path,
    target: str,
    output_format: OutputFormat,
    show_summary: bool
) -> None:
    """
    Execute the diff command.

    Args:
        root_dir1: Import root of the old schema
        entry_file1: Entry file of the old schema
        root_dir2: Import root of the new schema
        entry_file2: Entry file of the new schema
        target: "." for every top-level type, otherwise a type name
        output_format: text, tree or json
        show_summary: Whether to print finding counts to stderr
    """
    old = load_schema_side(root_dir1, entry_file1)
    new = load_schema_side(root_dir2, entry_file2)

    if target == WHOLE_SCHEMA:
        root = compare_schemas(old, new)
    else:
        root = compare_named_type(old, new, target)

    finalize(root)
    print_report(root, output_format)

    if show_summary:
        print_summary(summarize(root))


def print_report(root: DiffSection, output_format: OutputFormat) -> None:
    """Write a trimmed report to stdout."""
    if output_format == OutputFormat.JSON:
        typer.echo(report_to_json(root))
    elif output_format == OutputFormat.TREE:
        print_report_tree(root)
    else:
        buffer = io.StringIO()
        root.render(buffer)
        typer.echo(buffer.getvalue(), nl=False)
