"""
Schema comparison module.

This module compares two loaded schemas and builds a hierarchical report of
their differences.

Components:
    - tree: DiffSection / DiffItem report tree with trim and text rendering
    - engine: Recursive matching of messages, fields and enums by name
    - report: Trim-then-render helpers, JSON output and finding counts

Comparison Flow:
    1. Match top-level types (or one named type) between the two schemas
    2. Recurse into matched messages, fields and enums, appending findings
    3. Trim sections without findings
    4. Render the remaining tree

Example:
    ```python
    from proto_diff.diff import compare_schemas, render_report

    report = compare_schemas(old_pool, new_pool)
    render_report(report)
    # /
    #   Comparing messages: shapes.Point -> shapes.Point
    #     * Field removed: y ->
    #     * Field added:  -> z
    ```
"""

from proto_diff.diff.engine import (
    Comparison,
    compare_enums,
    compare_fields,
    compare_messages,
    compare_named_type,
    compare_schemas,
    default_values_equal,
)
from proto_diff.diff.report import finalize, render_report, report_to_json, summarize
from proto_diff.diff.tree import DiffItem, DiffSection, ItemKind, SectionKind

__all__ = [
    "Comparison",
    "compare_schemas",
    "compare_named_type",
    "compare_messages",
    "compare_enums",
    "compare_fields",
    "default_values_equal",
    "finalize",
    "render_report",
    "report_to_json",
    "summarize",
    "DiffItem",
    "DiffSection",
    "ItemKind",
    "SectionKind",
]
