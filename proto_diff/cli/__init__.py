"""
Command-line interface module.

This module provides the ``proto-diff`` terminal command using Typer and Rich.

Features:
    - Plain indented text report (default), Rich tree, or JSON
    - Compiler errors and warnings printed to stderr as they are reported
    - Optional table of finding counts

Example Usage:
    ```bash
    # Compare every top-level message and enum
    proto-diff protos/v1 shapes.proto protos/v2 shapes.proto .

    # Compare one message, as a colored tree
    proto-diff protos/v1 shapes.proto protos/v2 shapes.proto shapes.Point \\
        --format tree --summary
    ```
"""

from .main import app

__all__ = ["app"]
