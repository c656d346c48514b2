"""
Schema loading and snapshot model.

This module turns a schema root directory plus an entry file into a read-only
SchemaPool of message and enum snapshots that the comparison engine walks.

Components:
    - types: Snapshot type definitions (MessageSnapshot, FieldSnapshot, etc.)
    - parser: Convert a compiled FileDescriptorSet into snapshots
    - loader: Compile .proto files with protoc, or read precompiled sets
    - errors: SchemaLoadError and compiler Diagnostics

Example:
    ```python
    from proto_diff.schema import load_schema

    pool = load_schema("protos/v2", "shapes.proto")
    point = pool.find_message("shapes.Point")
    print([f.name for f in point.fields])
    ```
"""

from proto_diff.schema.errors import Diagnostic, SchemaLoadError
from proto_diff.schema.loader import load_schema, parse_protoc_output, read_descriptor_set
from proto_diff.schema.parser import parse_descriptor_set
from proto_diff.schema.types import (
    EnumSnapshot,
    FieldSnapshot,
    FileSnapshot,
    Label,
    MessageSnapshot,
    SchemaPool,
    TypeKind,
    TypeRef,
    ValueKind,
)

__all__ = [
    "load_schema",
    "parse_protoc_output",
    "read_descriptor_set",
    "parse_descriptor_set",
    "Diagnostic",
    "SchemaLoadError",
    "EnumSnapshot",
    "FieldSnapshot",
    "FileSnapshot",
    "Label",
    "MessageSnapshot",
    "SchemaPool",
    "TypeKind",
    "TypeRef",
    "ValueKind",
]
