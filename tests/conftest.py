"""
Shared fixtures for building schemas in tests.

Schemas are written as text-format FileDescriptorSet messages and parsed with
the real parser, so tests do not need protoc.
"""

from pathlib import Path

import pytest
from google.protobuf import descriptor_pb2, text_format

from proto_diff.schema import parse_descriptor_set
from proto_diff.schema.types import (
    SCALAR_VALUE_KINDS,
    DefaultValue,
    FieldSnapshot,
    Label,
    ScalarFieldType,
)


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def build_pool():
    """Return a factory: text-format FileDescriptorSet -> SchemaPool."""
    def _build(text: str, entry_file=None):
        descriptor_set = text_format.Parse(text, descriptor_pb2.FileDescriptorSet())
        return parse_descriptor_set(descriptor_set, entry_file=entry_file)
    return _build


@pytest.fixture
def scalar_field():
    """Return a factory for scalar FieldSnapshots owned by message ``test.Msg``."""
    def _make(name, number, type_name="int32", label=Label.OPTIONAL, default=None):
        value_kind = SCALAR_VALUE_KINDS[type_name]
        return FieldSnapshot(
            name=name,
            full_name=f"test.Msg.{name}",
            number=number,
            label=label,
            field_type=ScalarFieldType(type_name),
            value_kind=value_kind,
            default=DefaultValue(value_kind, default) if default is not None else None
        )
    return _make


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR
