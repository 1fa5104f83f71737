"""Intermediate Representation (IR) for GraphQL schemas.

This module defines dataclasses that represent the parts of a GraphQL schema
document the generator reads: type references, the five kinds of type
definitions, and the resource models inferred from the root types.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class NamedType:
    """A leaf type reference, e.g. ``Widget``."""
    name: str


@dataclass(frozen=True)
class NonNullType:
    """A non-null modifier, e.g. ``Widget!``."""
    of_type: "TypeRef"


@dataclass(frozen=True)
class ListType:
    """A list modifier, e.g. ``[Widget]``."""
    of_type: "TypeRef"


TypeRef = Union[NamedType, NonNullType, ListType]


def base_type_name(type_ref: TypeRef) -> str:
    """Unwrap all list and non-null modifiers down to the leaf name."""
    while not isinstance(type_ref, NamedType):
        type_ref = type_ref.of_type
    return type_ref.name


def is_optional(type_ref: TypeRef) -> bool:
    """True when the outermost position is nullable."""
    return not isinstance(type_ref, NonNullType)


def contains_list(type_ref: TypeRef) -> bool:
    """True when any modifier on the reference is a list."""
    while not isinstance(type_ref, NamedType):
        if isinstance(type_ref, ListType):
            return True
        type_ref = type_ref.of_type
    return False


@dataclass
class IRArgument:
    """An argument of a field, or a field of an input object."""
    name: str
    type: TypeRef
    # Printed GraphQL literal, e.g. "10" or "[]"
    default: str | None = None

    @property
    def is_required(self) -> bool:
        """Non-null without a default: callers must supply a value."""
        return isinstance(self.type, NonNullType) and self.default is None


@dataclass
class IRField:
    """A field of an object type."""
    name: str
    type: TypeRef
    arguments: list[IRArgument] = field(default_factory=list)

    @property
    def base_type(self) -> str:
        return base_type_name(self.type)


@dataclass
class IREnum:
    """A GraphQL enum; values keep declaration order."""
    name: str
    values: list[str] = field(default_factory=list)
    description: str | None = None


@dataclass
class IRInputObject:
    """A GraphQL input object type."""
    name: str
    fields: list[IRArgument] = field(default_factory=list)
    description: str | None = None


@dataclass
class IRObject:
    """A GraphQL object type."""
    name: str
    fields: list[IRField] = field(default_factory=list)
    description: str | None = None

    def get_field(self, name: str) -> IRField | None:
        """Return the first field called ``name``, if any."""
        for ir_field in self.fields:
            if ir_field.name == name:
                return ir_field
        return None

    def has_field(self, name: str) -> bool:
        return self.get_field(name) is not None


@dataclass
class IRUnion:
    """A GraphQL union. Member types are not tracked."""
    name: str
    description: str | None = None


@dataclass
class IRScalar:
    """A custom GraphQL scalar."""
    name: str
    description: str | None = None


TypeDefinition = Union[IREnum, IRInputObject, IRObject, IRUnion, IRScalar]


@dataclass
class IRSchemaDefinition:
    """The ``schema { query: ... mutation: ... }`` block."""
    query: str | None = None
    mutation: str | None = None


@dataclass
class IRDocument:
    """A parsed schema document: definitions in source order."""
    definitions: list[Union[TypeDefinition, IRSchemaDefinition]] = field(default_factory=list)

    def extend(self, other: "IRDocument"):
        """Append the definitions of another document (multi-file schemas)."""
        self.definitions.extend(other.definitions)


class PrimitiveKind(Enum):
    """Builtin value kinds a schema scalar can map onto."""
    TEXT = "text"
    INT64 = "int64"
    FLOAT64 = "float64"
    BOOLEAN = "boolean"


# Target-neutral type expressions produced by the type mapper. Rendering
# to source text happens separately, so these stay free of target syntax.


@dataclass(frozen=True)
class Primitive:
    kind: PrimitiveKind


@dataclass(frozen=True)
class Opaque:
    """Untyped JSON-like value, the fallback for unmodeled scalars."""


@dataclass(frozen=True)
class Named:
    """A schema type passed by value."""
    name: str


@dataclass(frozen=True)
class Boxed:
    """A schema object owned through an indirection (output positions)."""
    name: str


@dataclass(frozen=True)
class ListOf:
    item: "TypeExpr"


@dataclass(frozen=True)
class OptionalOf:
    inner: "TypeExpr"


TypeExpr = Union[Primitive, Opaque, Named, Boxed, ListOf, OptionalOf]


@dataclass(frozen=True)
class ModelInfo:
    """A resource model inferred from root field names.

    Built once by the model inferencer and only read afterwards.
    """
    name: str
    namespace: str
    node_type: TypeExpr
    node_boxed: bool = False
    # The paginated list query for this model and its payload type name
    query_field: IRField | None = None
    query_return: str | None = None
    create: IRField | None = None
    update: IRField | None = None
    upsert: IRField | None = None
    delete: IRField | None = None

    @property
    def mutations(self) -> list[tuple[str, IRField]]:
        """Populated mutation slots as (slot, field), in create/update/upsert/delete order."""
        slots = [
            ("create", self.create),
            ("update", self.update),
            ("upsert", self.upsert),
            ("delete", self.delete),
        ]
        return [(slot, ir_field) for slot, ir_field in slots if ir_field is not None]
