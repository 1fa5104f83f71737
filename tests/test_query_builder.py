"""Unit tests for selection synthesis and operation assembly."""

from infrahub_pygen.core.ir import IRArgument, IRField, ListType, NamedType, NonNullType
from infrahub_pygen.core.parser import parse_schema
from infrahub_pygen.core.query_builder import (
    MAX_SELECTION_DEPTH,
    build_operation,
    field_arguments,
    format_graphql_type,
    has_required_args,
    selection_for_field,
    synthesize_selection,
    variable_definitions,
)
from infrahub_pygen.core.registry import SchemaRegistry


def _registry(sdl: str) -> SchemaRegistry:
    return SchemaRegistry.build(parse_schema(sdl))


# =============================================================================
# Tests: Selection synthesis
# =============================================================================


class TestSynthesizeSelection:
    def test_leaf_fields(self, registry):
        assert synthesize_selection("Widget", registry) == "{ id name }"

    def test_cycle_selects_id(self, registry):
        assert synthesize_selection("DeviceInterface", registry) == (
            "{ id name device { id label interfaces { id } } status }"
        )

    def test_self_reference_terminates(self):
        registry = _registry("type Node { id: ID! self: Node }")
        assert synthesize_selection("Node", registry) == "{ id self { id } }"

    def test_cycle_without_id_selects_typename(self):
        registry = _registry("type Node { name: String self: Node }")
        assert synthesize_selection("Node", registry) == "{ name self { __typename } }"

    def test_depth_bound(self):
        registry = _registry("""
            type A { b: B }
            type B { c: C }
            type C { d: D }
            type D { e: E }
            type E { x: Int }
        """)
        assert synthesize_selection("A", registry) == "{ b { c { d { e { __typename } } } } }"

    def test_beyond_depth_is_typename(self, registry):
        assert synthesize_selection("Widget", registry, depth=MAX_SELECTION_DEPTH + 1) == "{ __typename }"

    def test_no_selectable_fields(self):
        registry = _registry("type Empty { items(first: Int!): [Int] }")
        assert synthesize_selection("Empty", registry) == ""

    def test_empty_nested_selection_omits_field(self):
        registry = _registry("type A { id: ID b: B } type B { items(first: Int!): Int }")
        assert synthesize_selection("A", registry) == "{ id }"

    def test_optional_argument_fields_are_kept(self):
        registry = _registry("type A { items(first: Int = 5): Int other(x: Int!): Int }")
        assert synthesize_selection("A", registry) == "{ items }"

    def test_union_field(self):
        registry = _registry("union U = A type A { id: ID } type T { u: U }")
        assert synthesize_selection("T", registry) == "{ u { __typename } }"

    def test_unknown_type(self, registry):
        assert synthesize_selection("Nope", registry) == ""

    def test_visiting_is_restored(self, registry):
        visiting = {"Other"}
        synthesize_selection("DeviceInterface", registry, visiting)
        assert visiting == {"Other"}

    def test_deterministic(self, registry):
        first = synthesize_selection("DeviceRack", registry)
        assert synthesize_selection("DeviceRack", registry) == first


# =============================================================================
# Tests: Operation assembly
# =============================================================================


class TestOperation:
    def test_format_graphql_type(self):
        type_ref = NonNullType(ListType(NonNullType(NamedType("String"))))
        assert format_graphql_type(type_ref) == "[String!]!"

    def test_variables_and_arguments(self):
        args = [
            IRArgument(name="ids", type=ListType(NamedType("ID"))),
            IRArgument(name="limit", type=NamedType("Int")),
        ]
        assert variable_definitions(args) == "($ids: [ID], $limit: Int)"
        assert field_arguments(args) == "(ids: $ids, limit: $limit)"

    def test_variable_default(self):
        args = [IRArgument(name="limit", type=NonNullType(NamedType("Int")), default="10")]
        assert variable_definitions(args) == "($limit: Int! = 10)"

    def test_schema_defaults_in_operation(self):
        registry = _registry("""
            enum Status { ACTIVE RETIRED }
            type Query { widgetList(limit: Int! = 10, status: Status = ACTIVE): String }
        """)
        widget_list = registry.query_root().get_field("widgetList")
        query = build_operation("query", "WidgetList", "widgetList", widget_list.arguments, "")
        assert query == (
            "query WidgetList($limit: Int! = 10, $status: Status = ACTIVE) "
            "{ widgetList(limit: $limit, status: $status) }"
        )

    def test_no_arguments(self):
        assert variable_definitions([]) == ""
        assert field_arguments([]) == ""

    def test_has_required_args(self):
        required = IRField(name="a", type=NamedType("Int"), arguments=[
            IRArgument(name="x", type=NonNullType(NamedType("Int"))),
        ])
        defaulted = IRField(name="b", type=NamedType("Int"), arguments=[
            IRArgument(name="x", type=NonNullType(NamedType("Int")), default="1"),
        ])
        assert has_required_args(required)
        assert not has_required_args(defaulted)

    def test_selection_for_leaf_field(self, registry):
        info = registry.query_root().get_field("info")
        assert selection_for_field(info, registry) == ""

    def test_build_operation(self, registry):
        widget_list = registry.query_root().get_field("widgetList")
        query = build_operation(
            "query",
            "WidgetList",
            widget_list.name,
            widget_list.arguments,
            selection_for_field(widget_list, registry),
        )
        assert query == (
            "query WidgetList($ids: [ID], $limit: Int, $offset: Int) "
            "{ widgetList(ids: $ids, limit: $limit, offset: $offset) "
            "{ count edges { node { id name } } } }"
        )

    def test_build_operation_without_arguments(self):
        assert build_operation("query", "Info", "info", [], "") == "query Info { info }"
