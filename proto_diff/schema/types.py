"""
Descriptor snapshot types for protobuf schemas.

This module defines the read-only in-memory model the comparison engine works
on. Snapshots are built once by the parser from a compiled
``FileDescriptorSet`` and are never modified afterwards.

Type Hierarchy:
    SchemaPool: every message and enum of an entry file and its imports
    └── FileSnapshot: top-level messages and enums of one file
        ├── MessageSnapshot: ordered FieldSnapshot list
        │   └── FieldSnapshot: name, number, label, field type, default value
        │       └── field type (closed union)
        │           ├── ScalarFieldType: int32, string, bytes, ...
        │           ├── MessageFieldType: reference to a MessageSnapshot
        │           └── EnumFieldType: reference to an EnumSnapshot
        └── EnumSnapshot: ordered (name, number) values

Message and enum snapshots may reference each other in cycles (a message
holding a field of its own type), so they compare by identity and their
reprs only show the type name.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class TypeKind(Enum):
    """Discriminator of a field's declared type."""
    MESSAGE = "message"
    ENUM = "enum"
    SCALAR = "scalar"


class Label(Enum):
    """Field multiplicity marker."""
    OPTIONAL = "optional"
    REQUIRED = "required"
    REPEATED = "repeated"


class ValueKind(Enum):
    """
    In-memory representation kind of a field value.

    Several protobuf wire types share one representation: ``sint32`` and
    ``sfixed32`` are both INT32, ``bytes`` is STRING, ``group`` is MESSAGE.
    Default values are only comparable between fields of the same kind.
    """
    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT = "float"
    DOUBLE = "double"
    BOOL = "bool"
    STRING = "string"
    ENUM = "enum"
    MESSAGE = "message"


# Protobuf scalar type keyword -> value representation
SCALAR_VALUE_KINDS: Dict[str, ValueKind] = {
    "int32": ValueKind.INT32,
    "sint32": ValueKind.INT32,
    "sfixed32": ValueKind.INT32,
    "int64": ValueKind.INT64,
    "sint64": ValueKind.INT64,
    "sfixed64": ValueKind.INT64,
    "uint32": ValueKind.UINT32,
    "fixed32": ValueKind.UINT32,
    "uint64": ValueKind.UINT64,
    "fixed64": ValueKind.UINT64,
    "float": ValueKind.FLOAT,
    "double": ValueKind.DOUBLE,
    "bool": ValueKind.BOOL,
    "string": ValueKind.STRING,
    "bytes": ValueKind.STRING,
}


@dataclass(frozen=True)
class TypeRef:
    """
    Fully-qualified reference to a type.

    Scalar types use their protobuf keyword as ``full_name``.
    """
    full_name: str
    kind: TypeKind


@dataclass(frozen=True)
class EnumValueRef:
    """An enum value used as a field default."""
    name: str
    number: int


@dataclass(frozen=True)
class DefaultValue:
    """
    Explicit default value of a field.

    Attributes:
        kind: Representation kind; matches the owning field's value_kind
        value: int, float, bool, str, or EnumValueRef for ENUM
    """
    kind: ValueKind
    value: Any

    def __str__(self) -> str:
        if self.kind == ValueKind.BOOL:
            return "true" if self.value else "false"
        if self.kind == ValueKind.ENUM:
            return self.value.name
        return str(self.value)


@dataclass(eq=False)
class EnumSnapshot:
    """
    Enum type with its values in declaration order.

    Attributes:
        name: Declared (short) name
        full_name: Fully-qualified name, e.g. "shapes.Color"
        values: (value name, number) pairs
    """
    name: str
    full_name: str
    values: List[Tuple[str, int]] = field(default_factory=list)

    def find_value(self, name: str) -> Optional[int]:
        """Return the number of the value called ``name``, or None."""
        for value_name, number in self.values:
            if value_name == name:
                return number
        return None

    def has_value(self, name: str) -> bool:
        return any(value_name == name for value_name, _ in self.values)

    def __repr__(self) -> str:
        return f"EnumSnapshot({self.full_name!r})"


@dataclass(eq=False)
class MessageSnapshot:
    """
    Message type with its fields in declaration order (not tag order).

    Attributes:
        name: Declared (short) name
        full_name: Fully-qualified name, e.g. "shapes.Point"
        fields: Field snapshots in declaration order
    """
    name: str
    full_name: str
    fields: List["FieldSnapshot"] = field(default_factory=list)

    def find_field(self, name: str) -> Optional["FieldSnapshot"]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def __repr__(self) -> str:
        return f"MessageSnapshot({self.full_name!r})"


@dataclass(frozen=True)
class ScalarFieldType:
    """Field type for a protobuf scalar such as ``int32`` or ``bytes``."""
    type_name: str

    kind = TypeKind.SCALAR

    @property
    def ref(self) -> TypeRef:
        return TypeRef(self.type_name, TypeKind.SCALAR)


@dataclass(frozen=True, eq=False)
class MessageFieldType:
    """Field type referencing a message (or a proto2 group)."""
    message: MessageSnapshot
    is_group: bool = False

    kind = TypeKind.MESSAGE

    @property
    def type_name(self) -> str:
        return "group" if self.is_group else "message"

    @property
    def ref(self) -> TypeRef:
        return TypeRef(self.message.full_name, TypeKind.MESSAGE)


@dataclass(frozen=True, eq=False)
class EnumFieldType:
    """Field type referencing an enum."""
    enum: EnumSnapshot

    kind = TypeKind.ENUM
    type_name = "enum"

    @property
    def ref(self) -> TypeRef:
        return TypeRef(self.enum.full_name, TypeKind.ENUM)


FieldType = Union[ScalarFieldType, MessageFieldType, EnumFieldType]


@dataclass(eq=False)
class FieldSnapshot:
    """
    A single message field.

    Attributes:
        name: Field name
        full_name: Fully-qualified name, e.g. "shapes.Point.x"
        number: Numeric tag
        label: optional, required or repeated
        field_type: Scalar, message or enum type
        value_kind: Representation kind of the field's values
        default: Explicit default value, None when not declared
    """
    name: str
    full_name: str
    number: int
    label: Label
    field_type: FieldType
    value_kind: ValueKind
    default: Optional[DefaultValue] = None

    @property
    def kind(self) -> TypeKind:
        return self.field_type.kind

    @property
    def type_name(self) -> str:
        return self.field_type.type_name

    @property
    def message_type(self) -> Optional[MessageSnapshot]:
        if isinstance(self.field_type, MessageFieldType):
            return self.field_type.message
        return None

    @property
    def enum_type(self) -> Optional[EnumSnapshot]:
        if isinstance(self.field_type, EnumFieldType):
            return self.field_type.enum
        return None

    def __repr__(self) -> str:
        return f"FieldSnapshot({self.full_name!r}, number={self.number})"


@dataclass(eq=False)
class FileSnapshot:
    """
    Top-level types declared by one schema file.

    Attributes:
        name: File name relative to its schema root
        package: Declared package ("" when none)
        messages: Top-level messages in declaration order
        enums: Top-level enums in declaration order
    """
    name: str
    package: str = ""
    messages: List[MessageSnapshot] = field(default_factory=list)
    enums: List[EnumSnapshot] = field(default_factory=list)

    def find_message(self, name: str) -> Optional[MessageSnapshot]:
        """Find a top-level message by its declared name."""
        for message in self.messages:
            if message.name == name:
                return message
        return None

    def find_enum(self, name: str) -> Optional[EnumSnapshot]:
        """Find a top-level enum by its declared name."""
        for enum in self.enums:
            if enum.name == name:
                return enum
        return None


@dataclass(eq=False)
class SchemaPool:
    """
    Every message and enum reachable from an entry file, by full name.

    Attributes:
        entry: The entry file
        files: All loaded files, imports first
        messages: Fully-qualified name -> message, nested types included
        enums: Fully-qualified name -> enum, nested types included
    """
    entry: FileSnapshot
    files: List[FileSnapshot] = field(default_factory=list)
    messages: Dict[str, MessageSnapshot] = field(default_factory=dict)
    enums: Dict[str, EnumSnapshot] = field(default_factory=dict)

    def find_message(self, full_name: str) -> Optional[MessageSnapshot]:
        return self.messages.get(full_name.lstrip("."))

    def find_enum(self, full_name: str) -> Optional[EnumSnapshot]:
        return self.enums.get(full_name.lstrip("."))
