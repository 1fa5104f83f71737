"""Map GraphQL type references to type expressions and render them as Python.

Mapping is total: every leaf name has a fallback (an opaque JSON value), so
any syntactically valid type reference maps to some expression.
"""

from .ir import (
    Boxed,
    ListOf,
    ListType,
    Named,
    NamedType,
    NonNullType,
    Opaque,
    OptionalOf,
    Primitive,
    PrimitiveKind,
    TypeExpr,
    TypeRef,
)
from .naming import to_class_name
from .registry import SchemaRegistry

# Builtin leaf names and the primitive they map to
PRIMITIVE_LEAVES = {
    "String": PrimitiveKind.TEXT,
    "ID": PrimitiveKind.TEXT,
    "DateTime": PrimitiveKind.TEXT,
    "Int": PrimitiveKind.INT64,
    "BigInt": PrimitiveKind.INT64,
    "Float": PrimitiveKind.FLOAT64,
    "Boolean": PrimitiveKind.BOOLEAN,
}

# Mapped to an untyped value even when the schema declares them
OPAQUE_LEAVES = frozenset({"GenericScalar"})

PYTHON_PRIMITIVES = {
    PrimitiveKind.TEXT: "str",
    PrimitiveKind.INT64: "int",
    PrimitiveKind.FLOAT64: "float",
    PrimitiveKind.BOOLEAN: "bool",
}


def map_type(
    type_ref: TypeRef,
    registry: SchemaRegistry,
    is_input: bool,
    in_list: bool = False,
) -> TypeExpr:
    """Map a type reference, nullable unless wrapped in a non-null modifier."""
    if isinstance(type_ref, NonNullType):
        return map_type_nonnull(type_ref.of_type, registry, is_input, in_list)
    return OptionalOf(map_type_nonnull(type_ref, registry, is_input, in_list))


def map_type_nonnull(
    type_ref: TypeRef,
    registry: SchemaRegistry,
    is_input: bool,
    in_list: bool = False,
) -> TypeExpr:
    """Map a type reference ignoring nullability at the outermost position."""
    if isinstance(type_ref, ListType):
        return ListOf(map_type(type_ref.of_type, registry, is_input, in_list=True))
    if isinstance(type_ref, NonNullType):
        return map_type_nonnull(type_ref.of_type, registry, is_input, in_list)
    return _map_leaf(type_ref, registry, is_input, in_list)


def _map_leaf(
    type_ref: NamedType,
    registry: SchemaRegistry,
    is_input: bool,
    in_list: bool,
) -> TypeExpr:
    name = type_ref.name
    if name in PRIMITIVE_LEAVES:
        return Primitive(PRIMITIVE_LEAVES[name])
    if name in OPAQUE_LEAVES:
        return Opaque()
    if name in registry.enums or name in registry.inputs or name in registry.scalars:
        return Named(name)
    if name in registry.objects:
        # Lists already provide the indirection a self-referencing
        # output object needs
        if is_input or in_list:
            return Named(name)
        return Boxed(name)
    if name in registry.unions:
        return Named(name)
    return Opaque()


def unwrap_optional_boxed(expr: TypeExpr) -> tuple[TypeExpr, bool]:
    """Strip one optional layer and one boxed layer; report whether it was boxed."""
    if isinstance(expr, OptionalOf):
        expr = expr.inner
    if isinstance(expr, Boxed):
        return Named(expr.name), True
    return expr, False


def render_annotation(expr: TypeExpr) -> str:
    """Render a type expression as a Python annotation.

    Boxed objects render as quoted forward references, the Python spelling
    of an owned indirection that may point back at the enclosing class.
    """
    if isinstance(expr, Primitive):
        return PYTHON_PRIMITIVES[expr.kind]
    if isinstance(expr, Opaque):
        return "Any"
    if isinstance(expr, Named):
        return to_class_name(expr.name)
    if isinstance(expr, Boxed):
        return f"'{to_class_name(expr.name)}'"
    if isinstance(expr, ListOf):
        return f"List[{render_annotation(expr.item)}]"
    if isinstance(expr, OptionalOf):
        return f"Optional[{render_annotation(expr.inner)}]"
    raise TypeError(f"Unsupported type expression: {expr!r}")


def python_type(type_ref: TypeRef, registry: SchemaRegistry, is_input: bool) -> str:
    """Map and render in one step."""
    return render_annotation(map_type(type_ref, registry, is_input))
