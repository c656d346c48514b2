"""
Unit tests for the schema loader.

These tests cover everything that does not need protoc: diagnostics parsing,
path checks and precompiled descriptor sets.
"""

import pytest
from google.protobuf import descriptor_pb2, text_format

from proto_diff.schema import Diagnostic, SchemaLoadError, load_schema, parse_protoc_output
from proto_diff.schema.loader import PROTOC_TIMEOUT_ENV, DEFAULT_PROTOC_TIMEOUT, _timeout_from_env


POINT_SET = """
file {
  name: "shapes.proto"
  package: "shapes"
  message_type {
    name: "Point"
    field { name: "x" number: 1 label: LABEL_OPTIONAL type: TYPE_INT32 }
  }
}
"""


class TestProtocOutput:
    """Test parsing of protoc stderr."""

    def test_located_error(self):
        """Test an error with file, line and column."""
        diagnostics = parse_protoc_output('shapes.proto:4:3: Expected ";".\n')

        assert diagnostics == [Diagnostic("shapes.proto", 4, 3, 'Expected ";".', False)]

    def test_located_warning(self):
        """Test that warning lines are flagged and the prefix stripped."""
        diagnostics = parse_protoc_output("shapes.proto:1:1: warning: Import other.proto is unused.")

        assert len(diagnostics) == 1
        assert diagnostics[0].is_warning is True
        assert diagnostics[0].message == "Import other.proto is unused."

    def test_file_level_error(self):
        """Test an error without a location."""
        diagnostics = parse_protoc_output("missing.proto: File not found.\n\n")

        assert diagnostics == [Diagnostic("missing.proto", 0, 0, "File not found.", False)]

    def test_unstructured_line(self):
        """Test that unrecognised text is kept as an error."""
        diagnostics = parse_protoc_output("protoc crashed")

        assert diagnostics[0].file == ""
        assert diagnostics[0].message == "protoc crashed"

    def test_diagnostic_str(self):
        """Test the printed form of diagnostics."""
        assert str(Diagnostic("a.proto", 2, 5, "boom")) == "Error: a.proto@2,5: boom"
        assert str(Diagnostic("a.proto", 2, 5, "hmm", True)) == "Warning: a.proto@2,5: hmm"


class TestLoadSchema:
    """Test load_schema path handling and descriptor sets."""

    def test_missing_root_dir(self, tmp_path):
        """Test that a missing root directory is a load error."""
        with pytest.raises(SchemaLoadError, match="root directory"):
            load_schema(tmp_path / "nope", "shapes.proto")

    def test_missing_entry_file(self, tmp_path):
        """Test that a missing entry file is a load error."""
        with pytest.raises(SchemaLoadError, match="entry file"):
            load_schema(tmp_path, "shapes.proto")

    def test_precompiled_descriptor_set(self, tmp_path):
        """Test loading a serialized FileDescriptorSet."""
        descriptor_set = text_format.Parse(POINT_SET, descriptor_pb2.FileDescriptorSet())
        (tmp_path / "shapes.binpb").write_bytes(descriptor_set.SerializeToString())

        pool = load_schema(tmp_path, "shapes.binpb")

        assert pool.entry.name == "shapes.proto"
        assert pool.find_message("shapes.Point").find_field("x").number == 1

    def test_corrupt_descriptor_set(self, tmp_path):
        """Test that undecodable descriptor sets are load errors."""
        (tmp_path / "broken.pb").write_bytes(b"\xff\xff\xff\xff")

        with pytest.raises(SchemaLoadError):
            load_schema(tmp_path, "broken.pb")

    def test_load_error_keeps_diagnostics(self):
        """Test that SchemaLoadError separates errors from warnings."""
        error = SchemaLoadError("failed", [
            Diagnostic("a.proto", 1, 1, "bad"),
            Diagnostic("a.proto", 2, 1, "meh", is_warning=True),
        ])

        assert len(error.diagnostics) == 2
        assert [d.message for d in error.errors] == ["bad"]


class TestProtocTimeout:
    """Test timeout configuration from the environment."""

    def test_default(self, monkeypatch):
        monkeypatch.delenv(PROTOC_TIMEOUT_ENV, raising=False)
        assert _timeout_from_env() == DEFAULT_PROTOC_TIMEOUT

    def test_override(self, monkeypatch):
        monkeypatch.setenv(PROTOC_TIMEOUT_ENV, "5")
        assert _timeout_from_env() == 5.0

    def test_invalid_value_ignored(self, monkeypatch):
        monkeypatch.setenv(PROTOC_TIMEOUT_ENV, "soon")
        assert _timeout_from_env() == DEFAULT_PROTOC_TIMEOUT
