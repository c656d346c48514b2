"""
Unit tests for report finalization, rendering and summaries.
"""

import io
import json

from proto_diff.diff import (
    DiffSection,
    ItemKind,
    SectionKind,
    finalize,
    render_report,
    report_to_json,
    summarize,
)


def sample_report() -> DiffSection:
    root = DiffSection(SectionKind.ROOT)
    point = root.add_subsection(SectionKind.MESSAGE_COMPARISON, "shapes.Point", "shapes.Point")
    point.add_subsection(SectionKind.FIELD_COMPARISON, "shapes.Point.x", "shapes.Point.x")
    point.add_item(ItemKind.FIELD_REMOVED, "y", "")
    point.add_item(ItemKind.FIELD_ADDED, "", "z")
    color = root.add_subsection(SectionKind.ENUM_COMPARISON, "shapes.Color", "shapes.Color")
    color.add_item(ItemKind.ENUM_VALUE_ADDED, "", "CYAN")
    root.add_subsection(SectionKind.ENUM_COMPARISON, "shapes.Kind", "shapes.Kind")
    return root


class TestReport:
    """Test the reporter helpers."""

    def test_finalize_returns_trimmed_root(self):
        root = sample_report()

        assert finalize(root) is root
        assert [s.before for s in root.subsections] == ["shapes.Point", "shapes.Color"]
        assert root.subsections[0].subsections == []

    def test_render_report(self):
        """Test the complete text report for a small diff."""
        buffer = io.StringIO()

        render_report(sample_report(), buffer)

        assert buffer.getvalue() == (
            "/\n"
            "  Comparing messages: shapes.Point -> shapes.Point\n"
            "    * Field removed: y -> \n"
            "    * Field added:  -> z\n"
            "  Comparing enums: shapes.Color -> shapes.Color\n"
            "    * Value added:  -> CYAN\n"
        )

    def test_render_empty_report(self):
        """Test that a report without findings is just the root line."""
        buffer = io.StringIO()
        root = DiffSection(SectionKind.ROOT)
        root.add_subsection(SectionKind.MESSAGE_COMPARISON, "a.A", "a.A")

        render_report(root, buffer)

        assert buffer.getvalue() == "/\n"

    def test_report_to_json(self):
        """Test that JSON output is trimmed and uses lowercase kind names."""
        data = json.loads(report_to_json(sample_report()))

        assert data["kind"] == "root"
        assert len(data["subsections"]) == 2
        assert data["subsections"][0]["items"][0] == {
            "kind": "field_removed",
            "before": "y",
            "after": "",
        }

    def test_report_to_json_compact(self):
        assert "\n" not in report_to_json(sample_report(), indent=None)

    def test_summarize(self):
        """Test counts per finding kind in declaration order."""
        counts = summarize(sample_report())

        assert counts == {
            ItemKind.ENUM_VALUE_ADDED: 1,
            ItemKind.FIELD_ADDED: 1,
            ItemKind.FIELD_REMOVED: 1,
        }
        assert list(counts) == [ItemKind.ENUM_VALUE_ADDED, ItemKind.FIELD_ADDED, ItemKind.FIELD_REMOVED]

    def test_summarize_empty(self):
        assert summarize(DiffSection(SectionKind.ROOT)) == {}
