"""
Comparison engine - walk two schema versions and record their differences.

Types are always matched by name, never by position or tag number:
    - top-level messages and enums by declared name within the entry file
    - a named target by fully-qualified name within the whole pool
    - fields by field name within a message
    - enum values by value name within an enum

Each comparison returns a DiffSection that the caller attaches to its own
section, so the whole report is built in a single recursive pass. Sections
without findings are left in place and removed later by ``DiffSection.trim``.

Field comparison runs independent checks, so one field pair can yield several
findings (e.g. both "ID changed" and "Label changed"). Fields that reference
messages or enums recurse into the referenced types even when the type names
are identical, so a change inside a shared nested type is reported under
every field that uses it.

Usage:
    ```python
    from proto_diff.diff import compare_schemas, compare_named_type

    report = compare_schemas(old_pool, new_pool)
    report.trim()
    report.render()

    report = compare_named_type(old_pool, new_pool, "shapes.Point")
    ```
"""

import logging
import math
from typing import Optional, Set, Tuple

from proto_diff.diff.tree import DiffSection, ItemKind, SectionKind
from proto_diff.schema.types import (
    DefaultValue,
    EnumSnapshot,
    FieldSnapshot,
    MessageSnapshot,
    SchemaPool,
    TypeKind,
    ValueKind,
)

logger = logging.getLogger(__name__)


class Comparison:
    """
    One comparison run between an old and a new schema.

    The run owns a fresh root section. Message pairs currently being compared
    are tracked so that recursive schemas (a message containing itself,
    directly or through other messages) terminate: re-entering a pair that is
    already on the call path yields an empty section, and its findings are
    reported at the outer occurrence.

    Attributes:
        root: Root of the report tree
    """

    def __init__(self):
        self.root = DiffSection(SectionKind.ROOT)
        self._in_progress: Set[Tuple[str, str]] = set()

    def compare_schemas(self, old: SchemaPool, new: SchemaPool) -> DiffSection:
        """
        Compare every top-level message and enum of the two entry files.

        Args:
            old: Old schema
            new: New schema

        Returns:
            DiffSection: The root section
        """
        old_file = old.entry
        new_file = new.entry
        logger.debug(f"Comparing files {old_file.name} -> {new_file.name}")

        for message in old_file.messages:
            counterpart = new_file.find_message(message.name)
            if counterpart is not None:
                self.root.attach(self.compare_message(message, counterpart))
            else:
                self.root.add_item(ItemKind.MESSAGE_REMOVED, message.full_name, "")

        for message in new_file.messages:
            if old_file.find_message(message.name) is None:
                self.root.add_item(ItemKind.MESSAGE_ADDED, "", message.full_name)

        for enum in old_file.enums:
            counterpart = new_file.find_enum(enum.name)
            if counterpart is not None:
                self.root.attach(self.compare_enum(enum, counterpart))
            else:
                self.root.add_item(ItemKind.ENUM_REMOVED, enum.full_name, "")

        for enum in new_file.enums:
            if old_file.find_enum(enum.name) is None:
                self.root.add_item(ItemKind.ENUM_ADDED, "", enum.full_name)

        return self.root

    def compare_named_type(self, old: SchemaPool, new: SchemaPool, name: str) -> DiffSection:
        """
        Compare a single message or enum, looked up by fully-qualified name.

        A name that is not a message in both schemas nor an enum in both
        schemas is reported as a "Name missing" finding; this never raises.

        Args:
            old: Old schema
            new: New schema
            name: Fully-qualified type name, e.g. "shapes.Point"

        Returns:
            DiffSection: The root section
        """
        old_message = old.find_message(name)
        new_message = new.find_message(name)
        if old_message is not None and new_message is not None:
            self.root.attach(self.compare_message(old_message, new_message))
            return self.root

        old_enum = old.find_enum(name)
        new_enum = new.find_enum(name)
        if old_enum is not None and new_enum is not None:
            self.root.attach(self.compare_enum(old_enum, new_enum))
            return self.root

        logger.debug(f"Type {name} not found as the same kind in both schemas")
        self.root.add_item(ItemKind.NAME_MISSING, name, name)
        return self.root

    def compare_message(self, old: MessageSnapshot, new: MessageSnapshot) -> DiffSection:
        """
        Compare two messages field by field.

        Matched fields get a nested field section. Removed fields are reported
        first, interleaved with matched fields in the old declaration order;
        added fields follow in the new declaration order.
        """
        section = DiffSection(SectionKind.MESSAGE_COMPARISON, old.full_name, new.full_name)

        key = (old.full_name, new.full_name)
        if key in self._in_progress:
            logger.debug(f"Not descending into {old.full_name} -> {new.full_name} again")
            return section

        self._in_progress.add(key)
        try:
            for old_field in old.fields:
                new_field = new.find_field(old_field.name)
                if new_field is not None:
                    section.attach(self.compare_field(old_field, new_field))
                else:
                    section.add_item(ItemKind.FIELD_REMOVED, old_field.name, "")

            for new_field in new.fields:
                if old.find_field(new_field.name) is None:
                    section.add_item(ItemKind.FIELD_ADDED, "", new_field.name)
        finally:
            self._in_progress.discard(key)

        return section

    def compare_field(self, old: FieldSnapshot, new: FieldSnapshot) -> DiffSection:
        """
        Compare two fields.

        Checks, each independent of the others:
            1. name
            2. tag number
            3. label
            4. declared type; when it differs nothing below is recursed into
            5. enum fields: referenced enum name, then the enums themselves
            6. message fields: referenced message name, then the messages
            7. default value, only when both fields share a value kind
        """
        section = DiffSection(SectionKind.FIELD_COMPARISON, old.full_name, new.full_name)

        if old.name != new.name:
            section.add_item(ItemKind.FIELD_NAME_CHANGED, old.name, new.name)

        if old.number != new.number:
            section.add_item(ItemKind.FIELD_ID_CHANGED, str(old.number), str(new.number))

        if old.label != new.label:
            section.add_item(ItemKind.FIELD_LABEL_CHANGED, old.label.value, new.label.value)

        if old.type_name != new.type_name:
            section.add_item(ItemKind.FIELD_TYPE_CHANGED, old.type_name, new.type_name)
        elif old.kind == TypeKind.ENUM:
            old_enum, new_enum = old.enum_type, new.enum_type
            if old_enum.full_name != new_enum.full_name:
                section.add_item(ItemKind.FIELD_TYPE_CHANGED, old_enum.full_name, new_enum.full_name)
            section.attach(self.compare_enum(old_enum, new_enum))
        elif old.kind == TypeKind.MESSAGE:
            old_message, new_message = old.message_type, new.message_type
            if old_message.full_name != new_message.full_name:
                section.add_item(ItemKind.FIELD_TYPE_CHANGED, old_message.full_name, new_message.full_name)
            section.attach(self.compare_message(old_message, new_message))

        if old.value_kind == new.value_kind and not default_values_equal(old.default, new.default):
            section.add_item(
                ItemKind.FIELD_DEFAULT_VALUE_CHANGED,
                _default_text(old.default),
                _default_text(new.default)
            )

        return section

    def compare_enum(self, old: EnumSnapshot, new: EnumSnapshot) -> DiffSection:
        """
        Compare two enums value by value.

        Only renumbered values get a nested section; values with unchanged
        numbers produce nothing. Added and removed values are reported
        directly on the enum section.
        """
        section = DiffSection(SectionKind.ENUM_COMPARISON, old.full_name, new.full_name)

        for name, number in old.values:
            new_number = new.find_value(name)
            if new_number is None:
                section.add_item(ItemKind.ENUM_VALUE_REMOVED, name, "")
            elif new_number != number:
                subsection = section.add_subsection(SectionKind.ENUM_VALUE_COMPARISON, name, name)
                subsection.add_item(ItemKind.ENUM_VALUE_ID_CHANGED, str(number), str(new_number))

        for name, _ in new.values:
            if not old.has_value(name):
                section.add_item(ItemKind.ENUM_VALUE_ADDED, "", name)

        return section


def default_values_equal(old: Optional[DefaultValue], new: Optional[DefaultValue]) -> bool:
    """
    Whether two explicit defaults are the same.

    Both absent counts as equal and only one present as different. Values are
    compared on both sides for every kind; NaN equals NaN, and enum defaults
    compare by value number.
    """
    if old is None or new is None:
        return old is None and new is None

    if old.kind != new.kind:
        return False

    if old.kind == ValueKind.ENUM:
        return old.value.number == new.value.number

    if old.kind in (ValueKind.FLOAT, ValueKind.DOUBLE):
        if math.isnan(old.value) and math.isnan(new.value):
            return True

    return old.value == new.value


def _default_text(value: Optional[DefaultValue]) -> str:
    return "" if value is None else str(value)


def compare_schemas(old: SchemaPool, new: SchemaPool) -> DiffSection:
    """Compare two whole schemas; returns a new, untrimmed root section."""
    return Comparison().compare_schemas(old, new)


def compare_named_type(old: SchemaPool, new: SchemaPool, name: str) -> DiffSection:
    """Compare one named message or enum; returns a new, untrimmed root section."""
    return Comparison().compare_named_type(old, new, name)


def compare_messages(old: MessageSnapshot, new: MessageSnapshot) -> DiffSection:
    """Compare two message snapshots directly; returns the message section."""
    return Comparison().compare_message(old, new)


def compare_enums(old: EnumSnapshot, new: EnumSnapshot) -> DiffSection:
    """Compare two enum snapshots directly; returns the enum section."""
    return Comparison().compare_enum(old, new)


def compare_fields(old: FieldSnapshot, new: FieldSnapshot) -> DiffSection:
    """Compare two field snapshots directly; returns the field section."""
    return Comparison().compare_field(old, new)
