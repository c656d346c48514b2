"""
Descriptor set parser - converts a compiled FileDescriptorSet into snapshots.

This module turns the ``google.protobuf.descriptor_pb2`` messages produced by
protoc into the read-only snapshot model in ``proto_diff.schema.types``. It
handles:
    - Fully-qualified naming of top-level and nested types
    - Resolution of field type references (messages, enums, groups)
    - Typed parsing of textual default values

Parsing runs in two passes so that fields can reference types declared later
in the set, including the message that owns them:
    1. Register every message and enum under its fully-qualified name
    2. Populate message fields, resolving type references against the registry

Usage:
    ```python
    from google.protobuf import descriptor_pb2
    from proto_diff.schema import parse_descriptor_set

    fds = descriptor_pb2.FileDescriptorSet.FromString(data)
    pool = parse_descriptor_set(fds, entry_file="shapes.proto")
    point = pool.find_message("shapes.Point")
    ```
"""

import logging
import posixpath
from typing import Dict, List, Optional, Tuple

from google.protobuf import descriptor_pb2

from proto_diff.schema.errors import SchemaLoadError
from proto_diff.schema.types import (
    SCALAR_VALUE_KINDS,
    DefaultValue,
    EnumFieldType,
    EnumSnapshot,
    EnumValueRef,
    FieldSnapshot,
    FieldType,
    FileSnapshot,
    Label,
    MessageFieldType,
    MessageSnapshot,
    ScalarFieldType,
    SchemaPool,
    ValueKind,
)

logger = logging.getLogger(__name__)

FieldProto = descriptor_pb2.FieldDescriptorProto

_LABELS = {
    FieldProto.LABEL_OPTIONAL: Label.OPTIONAL,
    FieldProto.LABEL_REQUIRED: Label.REQUIRED,
    FieldProto.LABEL_REPEATED: Label.REPEATED,
}


def parse_descriptor_set(
    descriptor_set: descriptor_pb2.FileDescriptorSet,
    entry_file: Optional[str] = None
) -> SchemaPool:
    """
    Build a SchemaPool from a FileDescriptorSet.

    Args:
        descriptor_set: Compiled descriptor set (imports included)
        entry_file: Name of the entry file inside the set. When None or not
            found, the last file in the set is used, which is where protoc
            places the requested file when ``--include_imports`` is given.

    Returns:
        SchemaPool: Snapshots of every type in the set

    Raises:
        SchemaLoadError: If the set is empty or a field references a type
            that is not part of the set
    """
    files = list(descriptor_set.file)
    if not files:
        raise SchemaLoadError("Descriptor set contains no files")

    registry = _Registry()
    snapshots = [registry.register_file(file_proto) for file_proto in files]

    for file_proto in files:
        registry.populate_fields(file_proto)

    entry = _select_entry(snapshots, entry_file)
    logger.debug(
        f"Parsed {len(files)} file(s): {len(registry.messages)} messages, "
        f"{len(registry.enums)} enums; entry {entry.name}"
    )

    return SchemaPool(
        entry=entry,
        files=snapshots,
        messages=registry.messages,
        enums=registry.enums
    )


def _select_entry(snapshots: List[FileSnapshot], entry_file: Optional[str]) -> FileSnapshot:
    if entry_file is not None:
        wanted = posixpath.normpath(entry_file.replace("\\", "/"))
        for snapshot in snapshots:
            if snapshot.name == wanted:
                return snapshot
        logger.debug(f"Entry {entry_file} not named in descriptor set, using last file")
    return snapshots[-1]


def _qualify(scope: str, name: str) -> str:
    return f"{scope}.{name}" if scope else name


class _Registry:
    """Fully-qualified name index built during the first parsing pass."""

    def __init__(self):
        self.messages: Dict[str, MessageSnapshot] = {}
        self.enums: Dict[str, EnumSnapshot] = {}
        # message full name -> its DescriptorProto, for the second pass
        self._message_protos: Dict[str, descriptor_pb2.DescriptorProto] = {}

    def register_file(self, file_proto: descriptor_pb2.FileDescriptorProto) -> FileSnapshot:
        snapshot = FileSnapshot(name=file_proto.name, package=file_proto.package)

        for message_proto in file_proto.message_type:
            snapshot.messages.append(self._register_message(file_proto.package, message_proto))

        for enum_proto in file_proto.enum_type:
            snapshot.enums.append(self._register_enum(file_proto.package, enum_proto))

        return snapshot

    def _register_message(self, scope: str, message_proto: descriptor_pb2.DescriptorProto) -> MessageSnapshot:
        full_name = _qualify(scope, message_proto.name)
        message = MessageSnapshot(name=message_proto.name, full_name=full_name)
        self.messages[full_name] = message
        self._message_protos[full_name] = message_proto

        for nested in message_proto.nested_type:
            self._register_message(full_name, nested)
        for nested_enum in message_proto.enum_type:
            self._register_enum(full_name, nested_enum)

        return message

    def _register_enum(self, scope: str, enum_proto: descriptor_pb2.EnumDescriptorProto) -> EnumSnapshot:
        full_name = _qualify(scope, enum_proto.name)
        enum = EnumSnapshot(
            name=enum_proto.name,
            full_name=full_name,
            values=[(value.name, value.number) for value in enum_proto.value]
        )
        self.enums[full_name] = enum
        return enum

    def populate_fields(self, file_proto: descriptor_pb2.FileDescriptorProto) -> None:
        for message_proto in file_proto.message_type:
            self._populate_message(_qualify(file_proto.package, message_proto.name), file_proto.name)

    def _populate_message(self, full_name: str, file_name: str) -> None:
        message = self.messages[full_name]
        message_proto = self._message_protos[full_name]

        message.fields = [
            _parse_field(field_proto, message, self, file_name)
            for field_proto in message_proto.field
        ]

        for nested in message_proto.nested_type:
            self._populate_message(_qualify(full_name, nested.name), file_name)

    def resolve(self, type_name: str, scope: str) -> Tuple[Optional[MessageSnapshot], Optional[EnumSnapshot]]:
        """
        Resolve a field's type name.

        protoc always emits fully-qualified names with a leading dot. Relative
        names (hand-built descriptor sets) are looked up from the innermost
        enclosing scope outwards, following protobuf scoping rules.
        """
        if type_name.startswith("."):
            candidates = [type_name[1:]]
        else:
            candidates = []
            parts = scope.split(".") if scope else []
            while True:
                candidates.append(_qualify(".".join(parts), type_name))
                if not parts:
                    break
                parts.pop()

        for candidate in candidates:
            if candidate in self.messages:
                return self.messages[candidate], None
            if candidate in self.enums:
                return None, self.enums[candidate]
        return None, None


def _parse_field(
    field_proto: descriptor_pb2.FieldDescriptorProto,
    owner: MessageSnapshot,
    registry: _Registry,
    file_name: str
) -> FieldSnapshot:
    """
    Parse one field of ``owner``.

    Args:
        field_proto: Field descriptor
        owner: Message declaring the field
        registry: Index of every type in the descriptor set
        file_name: Declaring file, for error messages

    Returns:
        FieldSnapshot: Parsed field

    Raises:
        SchemaLoadError: If the field's type cannot be resolved
    """
    field_type, value_kind = _parse_field_type(field_proto, owner, registry, file_name)

    default = None
    if field_proto.HasField("default_value"):
        default = _parse_default_value(field_proto.default_value, value_kind, field_type)

    return FieldSnapshot(
        name=field_proto.name,
        full_name=_qualify(owner.full_name, field_proto.name),
        number=field_proto.number,
        label=_LABELS.get(field_proto.label, Label.OPTIONAL),
        field_type=field_type,
        value_kind=value_kind,
        default=default
    )


def _parse_field_type(
    field_proto: descriptor_pb2.FieldDescriptorProto,
    owner: MessageSnapshot,
    registry: _Registry,
    file_name: str
) -> Tuple[FieldType, ValueKind]:
    proto_type = field_proto.type

    # Hand-built descriptors may leave the type unset for named types
    if not field_proto.HasField("type") and field_proto.type_name:
        message, enum = registry.resolve(field_proto.type_name, owner.full_name)
        if message is not None:
            proto_type = FieldProto.TYPE_MESSAGE
        elif enum is not None:
            proto_type = FieldProto.TYPE_ENUM
        else:
            raise _unresolved(field_proto, owner, file_name)

    if proto_type in (FieldProto.TYPE_MESSAGE, FieldProto.TYPE_GROUP, FieldProto.TYPE_ENUM):
        message, enum = registry.resolve(field_proto.type_name, owner.full_name)

        if proto_type == FieldProto.TYPE_ENUM:
            if enum is None:
                raise _unresolved(field_proto, owner, file_name)
            return EnumFieldType(enum), ValueKind.ENUM

        if message is None:
            raise _unresolved(field_proto, owner, file_name)
        return MessageFieldType(message, is_group=proto_type == FieldProto.TYPE_GROUP), ValueKind.MESSAGE

    type_name = FieldProto.Type.Name(proto_type)[len("TYPE_"):].lower()
    value_kind = SCALAR_VALUE_KINDS.get(type_name)
    if value_kind is None:
        raise SchemaLoadError(f"{file_name}: unsupported type {type_name} for field {owner.full_name}.{field_proto.name}")
    return ScalarFieldType(type_name), value_kind


def _unresolved(field_proto: descriptor_pb2.FieldDescriptorProto, owner: MessageSnapshot, file_name: str) -> SchemaLoadError:
    return SchemaLoadError(
        f"{file_name}: field {owner.full_name}.{field_proto.name} references "
        f"unknown type {field_proto.type_name!r}"
    )


def _parse_default_value(text: str, value_kind: ValueKind, field_type: FieldType) -> Optional[DefaultValue]:
    """
    Convert protoc's textual default into a typed DefaultValue.

    Integers are decimal, floats may be ``inf``, ``-inf`` or ``nan``, bools are
    ``true``/``false``, bytes keep their C-escaped text and enum defaults name
    a value of the field's enum.
    """
    if value_kind in (ValueKind.INT32, ValueKind.INT64, ValueKind.UINT32, ValueKind.UINT64):
        return DefaultValue(value_kind, int(text))
    if value_kind in (ValueKind.FLOAT, ValueKind.DOUBLE):
        return DefaultValue(value_kind, float(text))
    if value_kind == ValueKind.BOOL:
        return DefaultValue(value_kind, text == "true")
    if value_kind == ValueKind.STRING:
        return DefaultValue(value_kind, text)
    if value_kind == ValueKind.ENUM:
        enum = field_type.enum
        number = enum.find_value(text)
        if number is None:
            raise SchemaLoadError(f"Default value {text!r} is not a value of enum {enum.full_name}")
        return DefaultValue(value_kind, EnumValueRef(text, number))

    # Message fields cannot carry defaults
    logger.warning(f"Ignoring default value {text!r} on a {value_kind.value} field")
    return None
