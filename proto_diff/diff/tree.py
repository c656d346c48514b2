"""
Diff report tree.

A report is a tree of DiffSection nodes. Each section scopes one comparison
(two messages, two fields, two enums, ...) and holds:
    - items: leaf findings (DiffItem) in the order they were found
    - subsections: nested comparisons in the order they were started

The comparison engine appends to the tree while it walks the schemas, then the
reporter trims branches without findings and renders the rest:

    /
      Comparing messages: shapes.Point -> shapes.Point
        * Field removed: y ->
        * Field added:  -> z

``add_subsection`` returns the new child so the caller can keep filling it in
while more siblings are appended; children are held by reference in plain
lists, so appending never invalidates a handle returned earlier.
"""

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, TextIO


class ItemKind(Enum):
    """Kinds of findings, with the text used when rendering them."""
    ENUM_VALUE_ID_CHANGED = "Value ID changed"
    ENUM_VALUE_ADDED = "Value added"
    ENUM_VALUE_REMOVED = "Value removed"
    FIELD_NAME_CHANGED = "Name changed"
    FIELD_ID_CHANGED = "ID changed"
    FIELD_LABEL_CHANGED = "Label changed"
    FIELD_TYPE_CHANGED = "Type changed"
    FIELD_DEFAULT_VALUE_CHANGED = "Default value changed"
    FIELD_ADDED = "Field added"
    FIELD_REMOVED = "Field removed"
    MESSAGE_ADDED = "Message added"
    MESSAGE_REMOVED = "Message removed"
    ENUM_ADDED = "Enum added"
    ENUM_REMOVED = "Enum removed"
    NAME_MISSING = "Name missing"


class SectionKind(Enum):
    """Kinds of comparison scopes, with their header prefix."""
    ROOT = "/"
    MESSAGE_COMPARISON = "Comparing messages"
    FIELD_COMPARISON = "Comparing message fields"
    ENUM_COMPARISON = "Comparing enums"
    ENUM_VALUE_COMPARISON = "Comparing enum values"


@dataclass
class DiffItem:
    """
    A single finding.

    Attributes:
        kind: What changed
        before: Value in the old schema ("" when not applicable)
        after: Value in the new schema ("" when not applicable)
    """
    kind: ItemKind
    before: str = ""
    after: str = ""

    @property
    def message(self) -> str:
        return f"{self.kind.value}: {self.before} -> {self.after}"

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.name.lower(), "before": self.before, "after": self.after}


@dataclass
class DiffSection:
    """
    A node of the report tree.

    Attributes:
        kind: Which comparison this section scopes
        before: Name of the compared entity in the old schema
        after: Name of the compared entity in the new schema
        items: Findings directly in this scope
        subsections: Nested comparisons
    """
    kind: SectionKind
    before: str = ""
    after: str = ""
    items: List[DiffItem] = field(default_factory=list)
    subsections: List["DiffSection"] = field(default_factory=list)

    def add_subsection(self, kind: SectionKind, before: str, after: str) -> "DiffSection":
        """Append a new empty child section and return it for further filling."""
        return self.attach(DiffSection(kind, before, after))

    def attach(self, section: "DiffSection") -> "DiffSection":
        """Append an already-built child section."""
        self.subsections.append(section)
        return section

    def add_item(self, kind: ItemKind, before: str = "", after: str = "") -> DiffItem:
        item = DiffItem(kind, before, after)
        self.items.append(item)
        return item

    def is_empty(self) -> bool:
        return not self.items and not self.subsections

    def trim(self) -> None:
        """
        Remove subsections without findings, bottom-up.

        Each child is trimmed first, then dropped if nothing is left in it.
        The section itself is never removed, so a root stays in place even
        when the whole report is empty.
        """
        kept = []
        for subsection in self.subsections:
            subsection.trim()
            if not subsection.is_empty():
                kept.append(subsection)
        self.subsections = kept

    @property
    def message(self) -> str:
        if self.kind == SectionKind.ROOT:
            return self.kind.value
        return f"{self.kind.value}: {self.before} -> {self.after}"

    def render(self, writer: Optional[TextIO] = None, level: int = 0) -> None:
        """
        Write this section and everything below it as indented text.

        Args:
            writer: Text stream (default: sys.stdout)
            level: Indentation depth; two spaces per level
        """
        writer = writer or sys.stdout
        writer.write("  " * level + self.message + "\n")

        prefix = "  " * (level + 1)
        for item in self.items:
            writer.write(f"{prefix}* {item.message}\n")

        for subsection in self.subsections:
            subsection.render(writer, level + 1)

    def walk(self) -> Iterator["DiffSection"]:
        """Yield this section and all descendants, depth-first."""
        yield self
        for subsection in self.subsections:
            yield from subsection.walk()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.name.lower(),
            "before": self.before,
            "after": self.after,
            "items": [item.to_dict() for item in self.items],
            "subsections": [subsection.to_dict() for subsection in self.subsections],
        }
