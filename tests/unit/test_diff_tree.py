"""
Unit tests for the diff report tree.
"""

import copy
import io

from proto_diff.diff import DiffItem, DiffSection, ItemKind, SectionKind


def render(section: DiffSection) -> str:
    buffer = io.StringIO()
    section.render(buffer)
    return buffer.getvalue()


class TestDiffSection:
    """Test building, trimming and rendering sections."""

    def test_subsection_handle_survives_sibling_appends(self):
        """Test that a returned subsection stays live while siblings are added."""
        root = DiffSection(SectionKind.ROOT)
        first = root.add_subsection(SectionKind.MESSAGE_COMPARISON, "a.A", "a.A")

        for i in range(100):
            root.add_subsection(SectionKind.MESSAGE_COMPARISON, f"a.M{i}", f"a.M{i}")

        first.add_item(ItemKind.FIELD_ADDED, "", "z")

        assert root.subsections[0] is first
        assert root.subsections[0].items == [DiffItem(ItemKind.FIELD_ADDED, "", "z")]

    def test_children_keep_append_order(self):
        """Test that items and subsections keep insertion order."""
        section = DiffSection(SectionKind.MESSAGE_COMPARISON, "a", "b")
        section.add_item(ItemKind.FIELD_REMOVED, "y", "")
        section.add_item(ItemKind.FIELD_ADDED, "", "z")

        assert [item.kind for item in section.items] == [ItemKind.FIELD_REMOVED, ItemKind.FIELD_ADDED]

    def test_is_empty(self):
        """Test emptiness covers both items and subsections."""
        section = DiffSection(SectionKind.ENUM_COMPARISON, "E", "E")
        assert section.is_empty()

        section.add_subsection(SectionKind.ENUM_VALUE_COMPARISON, "A", "A")
        assert not section.is_empty()

    def test_trim_removes_empty_branches(self):
        """Test post-order trimming of nested empty sections."""
        root = DiffSection(SectionKind.ROOT)
        message = root.add_subsection(SectionKind.MESSAGE_COMPARISON, "M", "M")
        field = message.add_subsection(SectionKind.FIELD_COMPARISON, "M.f", "M.f")
        field.add_subsection(SectionKind.ENUM_COMPARISON, "E", "E")
        kept = root.add_subsection(SectionKind.ENUM_COMPARISON, "F", "F")
        kept.add_item(ItemKind.ENUM_VALUE_ADDED, "", "B")

        root.trim()

        assert root.subsections == [kept]

    def test_trim_keeps_root_even_when_empty(self):
        """Test that the root survives trimming and still renders."""
        root = DiffSection(SectionKind.ROOT)
        root.add_subsection(SectionKind.MESSAGE_COMPARISON, "M", "M")

        root.trim()

        assert root.is_empty()
        assert render(root) == "/\n"

    def test_trim_is_idempotent(self):
        """Test trim(trim(S)) == trim(S)."""
        root = DiffSection(SectionKind.ROOT)
        message = root.add_subsection(SectionKind.MESSAGE_COMPARISON, "M", "M")
        message.add_subsection(SectionKind.FIELD_COMPARISON, "M.a", "M.a")
        changed = message.add_subsection(SectionKind.FIELD_COMPARISON, "M.b", "M.b")
        changed.add_item(ItemKind.FIELD_ID_CHANGED, "1", "2")

        root.trim()
        once = copy.deepcopy(root)
        root.trim()

        assert root == once

    def test_render_format(self):
        """Test headers, item bullets and indentation."""
        root = DiffSection(SectionKind.ROOT)
        root.add_item(ItemKind.MESSAGE_ADDED, "", "s.Line")
        message = root.add_subsection(SectionKind.MESSAGE_COMPARISON, "s.Point", "s.Point")
        message.add_item(ItemKind.FIELD_REMOVED, "y", "")
        field = message.add_subsection(SectionKind.FIELD_COMPARISON, "s.Point.x", "s.Point.x")
        field.add_item(ItemKind.FIELD_ID_CHANGED, "3", "5")

        assert render(root) == (
            "/\n"
            "  * Message added:  -> s.Line\n"
            "  Comparing messages: s.Point -> s.Point\n"
            "    * Field removed: y -> \n"
            "    Comparing message fields: s.Point.x -> s.Point.x\n"
            "      * ID changed: 3 -> 5\n"
        )

    def test_section_headers(self):
        """Test header text of every section kind."""
        assert DiffSection(SectionKind.ENUM_COMPARISON, "a.E", "b.E").message == "Comparing enums: a.E -> b.E"
        assert DiffSection(SectionKind.ENUM_VALUE_COMPARISON, "A", "A").message == "Comparing enum values: A -> A"
        assert DiffSection(SectionKind.ROOT, "x", "y").message == "/"

    def test_walk_and_to_dict(self):
        """Test depth-first traversal and structured output."""
        root = DiffSection(SectionKind.ROOT)
        enum = root.add_subsection(SectionKind.ENUM_COMPARISON, "E", "E")
        enum.add_item(ItemKind.ENUM_VALUE_REMOVED, "A", "")

        assert [s.kind for s in root.walk()] == [SectionKind.ROOT, SectionKind.ENUM_COMPARISON]
        assert root.to_dict() == {
            "kind": "root",
            "before": "",
            "after": "",
            "items": [],
            "subsections": [{
                "kind": "enum_comparison",
                "before": "E",
                "after": "E",
                "items": [{"kind": "enum_value_removed", "before": "A", "after": ""}],
                "subsections": [],
            }],
        }
