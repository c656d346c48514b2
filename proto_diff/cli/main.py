"""
Main CLI entry point using Typer.

This module defines the command-line interface for proto-diff. The command
takes five positional arguments:

    proto-diff ROOT_DIR1 FILE1 ROOT_DIR2 FILE2 TARGET

TARGET "." compares every top-level message and enum of the two entry files;
any other value is the fully-qualified name of one message or enum.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from proto_diff.utils import setup_logging

from .commands import OutputFormat, diff_command
from .display import print_error, print_usage


# Create Typer app
app = typer.Typer(
    name="proto-diff",
    help="proto-diff - Report structural changes between two protobuf schema versions",
    add_completion=False,
    rich_markup_mode="rich"
)


def _version_callback(value: bool) -> None:
    if value:
        from proto_diff import __version__
        typer.echo(f"proto-diff version {__version__}")
        raise typer.Exit()


# Trailing positionals after TARGET are ignored
@app.command(context_settings={"allow_extra_args": True})
def diff(
    root_dir1: Annotated[
        Optional[Path],
        typer.Argument(help="Import root of the old schema", show_default=False)
    ] = None,
    entry_file1: Annotated[
        Optional[Path],
        typer.Argument(help="Entry .proto (or descriptor set) of the old schema, relative to ROOT_DIR1", show_default=False)
    ] = None,
    root_dir2: Annotated[
        Optional[Path],
        typer.Argument(help="Import root of the new schema", show_default=False)
    ] = None,
    entry_file2: Annotated[
        Optional[Path],
        typer.Argument(help="Entry .proto (or descriptor set) of the new schema, relative to ROOT_DIR2", show_default=False)
    ] = None,
    target: Annotated[
        Optional[str],
        typer.Argument(help="'.' for all top-level types, or a fully-qualified message/enum name", show_default=False)
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Report format: text, tree or json")
    ] = OutputFormat.TEXT,
    summary: Annotated[
        bool,
        typer.Option("--summary", help="Print finding counts to stderr after the report")
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log loading and comparison details to stderr")
    ] = False,
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit", callback=_version_callback, is_eager=True)
    ] = False,
) -> None:
    """
    Compare two versions of a protobuf schema.

    Example:
        proto-diff protos/v1 shapes.proto protos/v2 shapes.proto .

        proto-diff protos/v1 shapes.proto protos/v2 shapes.proto shapes.Point --format tree
    """
    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    if root_dir1 is None or entry_file1 is None or root_dir2 is None or entry_file2 is None or target is None:
        print_usage()
        raise typer.Exit(code=1)

    try:
        diff_command(
            root_dir1=root_dir1,
            entry_file1=entry_file1,
            root_dir2=root_dir2,
            entry_file2=entry_file2,
            target=target,
            output_format=output_format,
            show_summary=summary
        )
    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)


def cli() -> None:
    """CLI entry point for poetry script."""
    app()


if __name__ == "__main__":
    cli()
