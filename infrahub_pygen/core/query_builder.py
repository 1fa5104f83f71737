"""Query builder for GraphQL operations.

Synthesizes selection sets from the schema registry and assembles complete
query/mutation strings for root fields. Selections are bounded in depth and
guarded against cycles, so any schema produces a finite string.
"""

from .ir import IRArgument, IRField, ListType, NamedType, NonNullType, TypeRef
from .registry import SchemaRegistry

MAX_SELECTION_DEPTH = 3

TYPENAME_SELECTION = "{ __typename }"
ID_SELECTION = "{ id }"


def synthesize_selection(
    type_name: str,
    registry: SchemaRegistry,
    visiting: set[str] | None = None,
    depth: int = 0,
) -> str:
    """Build the selection set for an object type.

    Returns ``""`` when nothing is selectable, otherwise ``{ a b c { ... } }``.
    A type already on the current path selects only ``id`` (or
    ``__typename`` when it has no ``id``).
    """
    if visiting is None:
        visiting = set()

    if depth > MAX_SELECTION_DEPTH:
        return TYPENAME_SELECTION

    if type_name in visiting:
        type_def = registry.get_object(type_name)
        if type_def is not None and type_def.has_field("id"):
            return ID_SELECTION
        return TYPENAME_SELECTION

    type_def = registry.get_object(type_name)
    if type_def is None:
        return ""

    visiting.add(type_name)
    try:
        parts = []
        for ir_field in type_def.fields:
            if has_required_args(ir_field):
                continue
            base = ir_field.base_type
            if registry.is_leaf(base):
                parts.append(ir_field.name)
            elif base in registry.objects:
                nested = synthesize_selection(base, registry, visiting, depth + 1)
                if nested:
                    parts.append(f"{ir_field.name} {nested}")
            elif base in registry.unions:
                parts.append(f"{ir_field.name} {TYPENAME_SELECTION}")
        if not parts:
            return ""
        return "{ " + " ".join(parts) + " }"
    finally:
        visiting.discard(type_name)


def selection_for_field(ir_field: IRField, registry: SchemaRegistry) -> str:
    """Selection for a root field, with a leading space, or ``""`` for leaves."""
    base = ir_field.base_type
    if base in registry.unions:
        return f" {TYPENAME_SELECTION}"
    selection = synthesize_selection(base, registry)
    return f" {selection}" if selection else ""


def has_required_args(ir_field: IRField) -> bool:
    """Fields with a required argument cannot be selected without variables."""
    return any(arg.is_required for arg in ir_field.arguments)


def format_graphql_type(type_ref: TypeRef) -> str:
    """Print a type reference in GraphQL syntax, e.g. ``[String!]!``."""
    if isinstance(type_ref, NonNullType):
        return f"{format_graphql_type(type_ref.of_type)}!"
    if isinstance(type_ref, ListType):
        return f"[{format_graphql_type(type_ref.of_type)}]"
    assert isinstance(type_ref, NamedType)
    return type_ref.name


def variable_definitions(args: list[IRArgument]) -> str:
    """Build the variable declaration part: ``($ids: [ID], $limit: Int! = 10)``.

    Schema defaults are repeated on the variable, so an omitted value falls
    back to the default instead of failing a non-null check.
    """
    if not args:
        return ""
    decls = []
    for arg in args:
        decl = f"${arg.name}: {format_graphql_type(arg.type)}"
        if arg.default is not None:
            decl = f"{decl} = {arg.default}"
        decls.append(decl)
    return f"({', '.join(decls)})"


def field_arguments(args: list[IRArgument]) -> str:
    """Build the argument part of a field: ``(ids: $ids, limit: $limit)``."""
    if not args:
        return ""
    return f"({', '.join(f'{arg.name}: ${arg.name}' for arg in args)})"


def build_operation(
    kind: str,
    op_name: str,
    field_name: str,
    args: list[IRArgument],
    selection: str,
) -> str:
    """Assemble ``kind Name($a: T) { field(a: $a) { ... } }``.

    ``selection`` is the output of :func:`selection_for_field`, leading space
    included.
    """
    return (
        f"{kind} {op_name}{variable_definitions(args)} "
        f"{{ {field_name}{field_arguments(args)}{selection} }}"
    )
