"""
High-level Python API for proto-diff.

This module ties the schema loader and the comparison engine together for
callers that just want a report for two schema versions on disk.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from proto_diff.diff import DiffSection, compare_named_type, compare_schemas, finalize
from proto_diff.schema import load_schema
from proto_diff.schema.loader import DiagnosticCallback

logger = logging.getLogger(__name__)

WHOLE_SCHEMA = "."

PathLike = Union[str, Path]


def diff_schemas(
    old_root: PathLike,
    old_entry: PathLike,
    new_root: PathLike,
    new_entry: PathLike,
    target: str = WHOLE_SCHEMA,
    on_diagnostic: Optional[DiagnosticCallback] = None
) -> DiffSection:
    """
    Load two schema versions and return their trimmed diff report.

    Args:
        old_root: Import root of the old schema
        old_entry: Entry file of the old schema, relative to old_root
        new_root: Import root of the new schema
        new_entry: Entry file of the new schema, relative to new_root
        target: "." to compare every top-level type of the entry files,
            otherwise the fully-qualified name of one message or enum
        on_diagnostic: Receives compiler errors and warnings from both loads

    Returns:
        DiffSection: Trimmed root section

    Raises:
        SchemaLoadError: If either schema fails to load

    Example:
        ```python
        report = diff_schemas("v1", "shapes.proto", "v2", "shapes.proto")
        report.render()
        ```
    """
    old = load_schema(old_root, old_entry, on_diagnostic=on_diagnostic)
    new = load_schema(new_root, new_entry, on_diagnostic=on_diagnostic)

    if target == WHOLE_SCHEMA:
        root = compare_schemas(old, new)
    else:
        root = compare_named_type(old, new, target)

    return finalize(root)
