#!/usr/bin/env python3
"""
Demo: Comparing two versions of a shapes schema.

This demonstrates:
- Compiling .proto files (with imports) through protoc
- Comparing every top-level type, then a single named message
- Rendering the report as text and JSON
- Counting findings per kind

Uses the schemas in tests/fixtures/v1 and tests/fixtures/v2.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from proto_diff import diff_schemas
from proto_diff.diff import report_to_json, summarize
from proto_diff.schema import SchemaLoadError


FIXTURES_DIR = Path(__file__).parent.parent / "tests" / "fixtures"


def print_diagnostic(diagnostic):
    print(f"  {diagnostic}")


def main():
    print("=" * 60)
    print("proto-diff Demo: shapes.proto v1 -> v2")
    print("=" * 60)

    old_root = FIXTURES_DIR / "v1"
    new_root = FIXTURES_DIR / "v2"

    try:
        report = diff_schemas(
            old_root, "shapes.proto",
            new_root, "shapes.proto",
            on_diagnostic=print_diagnostic
        )
    except SchemaLoadError as e:
        print(f"✗ Failed to load schemas: {e}")
        return 1

    print("\nWhole schema:")
    report.render()

    print("\n" + "=" * 60)
    print("Findings")
    print("=" * 60)
    for kind, count in summarize(report).items():
        print(f"  {kind.value:<25} {count}")

    print("\n" + "=" * 60)
    print("Single message: shapes.Point (JSON)")
    print("=" * 60)
    point_report = diff_schemas(old_root, "shapes.proto", new_root, "shapes.proto", "shapes.Point")
    print(report_to_json(point_report))

    return 0


if __name__ == "__main__":
    sys.exit(main())
