"""
proto-diff: Schema Evolution Audits for Protocol Buffers

proto-diff compares two versions of a protobuf schema and reports every
structural change between them as a hierarchical diff report. It reports raw
differences only; it does not judge whether a change is wire-compatible.

Key Features:
    - Messages, fields and enum values matched by name, never by position
    - Field renames, renumbering, label, type and default value changes
    - Added and removed fields, enum values and top-level types
    - Recursion into referenced message and enum types
    - Text, Rich tree and JSON output

Quick Start:
    ```python
    from proto_diff import diff_schemas

    report = diff_schemas("protos/v1", "shapes.proto", "protos/v2", "shapes.proto")
    report.render()
    ```

Architecture:
    1. Schema Loader: Compile .proto files with protoc into a descriptor set
    2. Parser: Convert the descriptor set into read-only snapshots
    3. Comparison Engine: Walk both snapshot graphs, building a report tree
    4. Reporter: Trim empty branches and render the report
"""

__version__ = "0.1.0"

from proto_diff.api import diff_schemas  # noqa: F401

__all__ = [
    "diff_schemas",
]
