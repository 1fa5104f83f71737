"""Unit tests for the client generator."""

import ast

import pytest

from infrahub_pygen.core.client_generator import (
    ClientGenerator,
    operation_name,
    required_first,
    response_class_name,
    root_fields,
)
from infrahub_pygen.core.inference import infer_models
from infrahub_pygen.core.ir import IRArgument, NamedType, NonNullType
from infrahub_pygen.core.namespaces import group_models
from infrahub_pygen.core.parser import parse_schema
from infrahub_pygen.core.registry import SchemaRegistry


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def generator(registry):
    return ClientGenerator(registry)


@pytest.fixture
def client_code(generator):
    return generator.generate_client_code()


@pytest.fixture
def device_code(generator, registry):
    groups = group_models(infer_models(registry).values())
    return generator.generate_namespace_code("Device", groups["Device"])


@pytest.fixture
def widget_code(generator, registry):
    groups = group_models(infer_models(registry).values())
    return generator.generate_namespace_code("Widget", groups["Widget"])


@pytest.fixture
def keyword_registry():
    """Root fields whose names and arguments collide with Python names."""
    return SchemaRegistry.build(parse_schema("""
        type Query {
          close: Int
          api: Int
          importData(from: String!, class: String, limit: Int = 10, request_branch: String): Int
        }
    """))


# =============================================================================
# Tests: Helper Functions
# =============================================================================


class TestHelperFunctions:
    def test_response_class_name(self):
        assert response_class_name("widgetList") == "WidgetListResponse"
        assert response_class_name("DeviceRack") == "DeviceRackResponse"

    def test_operation_name(self):
        assert operation_name("widgetList") == "WidgetList"

    def test_root_fields_query_first(self, registry):
        kinds = [kind for kind, _ in root_fields(registry)]
        assert kinds == ["query"] * 5 + ["mutation"] * 3

    def test_required_first(self):
        args = [
            IRArgument(name="a", type=NamedType("Int")),
            IRArgument(name="b", type=NonNullType(NamedType("Int"))),
            IRArgument(name="c", type=NonNullType(NamedType("Int")), default="1"),
            IRArgument(name="d", type=NonNullType(NamedType("Int"))),
        ]
        assert [a.name for a in required_first(args)] == ["b", "d", "a", "c"]


# =============================================================================
# Tests: client.py
# =============================================================================


class TestClientCode:
    def test_parses(self, client_code):
        ast.parse(client_code)

    def test_one_method_per_root_field(self, client_code):
        for name in ("widget_list", "device_interface", "device_rack", "search", "info"):
            assert f"    async def {name}(" in client_code

    def test_method_signature(self, client_code):
        assert (
            "    async def widget_list(\n"
            "        self,\n"
            "        ids: Optional[List[Optional[str]]] = None,\n"
            "        limit: Optional[int] = None,\n"
            "        offset: Optional[int] = None,\n"
            "        request_branch: Optional[str] = None,\n"
            "    ) -> runtime.GraphQLResponse[WidgetListResponse]:\n"
        ) in client_code

    def test_query_text_and_variables(self, client_code):
        assert (
            "'query Search($q: String!) { search(q: $q) { __typename } }'" in client_code
        )
        assert '                "q": q,' in client_code
        assert "            response_model=SearchResponse," in client_code

    def test_mutation_with_input(self, client_code):
        assert "        data: WidgetCreateInput,\n" in client_code
        assert "'mutation WidgetCreate($data: WidgetCreateInput!)" in client_code

    def test_no_arguments_sends_empty_variables(self, client_code):
        assert "'query Info { info }',\n            {},\n" in client_code

    def test_imports(self, client_code):
        assert "from infrahub_pygen import core as runtime" in client_code
        assert "from .api import Api" in client_code


class TestNameEscaping:
    def test_reserved_method_names(self, keyword_registry):
        code = ClientGenerator(keyword_registry).generate_client_code()
        ast.parse(code)
        assert "    async def field_close(" in code
        assert "    async def field_api(" in code

    def test_keyword_parameters(self, keyword_registry):
        code = ClientGenerator(keyword_registry).generate_client_code()
        assert "        field_from: str,\n" in code
        assert "        field_class: Optional[str] = None,\n" in code
        assert '"from": field_from,' in code

    def test_required_parameters_before_optional(self, keyword_registry):
        code = ClientGenerator(keyword_registry).generate_client_code()
        method = code.split("async def import_data(")[1]
        assert method.index("field_from: str") < method.index("field_class: Optional[str]")
        assert method.index("limit: Optional[int] = None") < method.index("        request_branch: Optional[str] = None")

    def test_branch_parameter_collision(self, keyword_registry):
        code = ClientGenerator(keyword_registry).generate_client_code()
        assert "field_request_branch: Optional[str] = None" in code
        assert '"request_branch": field_request_branch,' in code


# =============================================================================
# Tests: api/<namespace>.py
# =============================================================================


class TestNamespaceCode:
    def test_parses(self, device_code, widget_code):
        ast.parse(device_code)
        ast.parse(widget_code)

    def test_filters_dataclass(self, device_code):
        assert "@dataclass\nclass DeviceRackFilters:" in device_code
        assert "    limit: Optional[int] = None" in device_code
        assert '            "limit": self.limit,' in device_code

    def test_model_clients_and_accessors(self, device_code):
        assert "class DeviceInterfaceClient:" in device_code
        assert "class DeviceRackClient:" in device_code
        assert "class DeviceApi:" in device_code
        assert "    def interface(self) -> DeviceInterfaceClient:" in device_code
        assert "    def rack(self) -> DeviceRackClient:" in device_code

    def test_list_walks_edges(self, device_code):
        assert "    ) -> List[DeviceRack]:" in device_code
        assert "        connection = response.data.device_rack" in device_code
        assert "edge.node for edge in connection.edges or []" in device_code

    def test_get_by_id_only_with_ids_argument(self, device_code):
        interface_client = device_code.split("class DeviceInterfaceClient:")[1].split("class DeviceRack")[0]
        rack_client = device_code.split("class DeviceRackClient:")[1]
        assert "async def get_by_id(" in interface_client
        assert "DeviceInterfaceFilters(ids=[node_id])" in interface_client
        assert "async def get_by_id(" not in rack_client

    def test_upsert_returns_object(self, device_code):
        assert "    async def upsert(" in device_code
        assert "        data: Optional[Any] = None," in device_code
        assert "    ) -> DeviceRack:" in device_code
        assert '            raise runtime.ResponseError("missing object")' in device_code

    def test_create_and_delete(self, widget_code):
        assert "    async def create(" in widget_code
        assert "    ) -> Widget:" in widget_code
        assert "    async def delete(" in widget_code
        assert "    ) -> bool:" in widget_code
        assert "        return bool(payload.ok)" in widget_code
        assert widget_code.index("async def create(") < widget_code.index("async def delete(")

    def test_mutation_only_model(self):
        registry = SchemaRegistry.build(parse_schema("""
            schema { mutation: Mutation }
            type Mutation { TagCreate(name: String!): TagCreate }
            type TagCreate { ok: Boolean object: Tag }
            type Tag { id: ID! }
        """))
        models = infer_models(registry)
        code = ClientGenerator(registry, models).generate_namespace_code("Tag", [models["Tag"]])
        ast.parse(code)
        assert "class TagFilters" not in code
        assert "async def list(" not in code
        assert "    async def create(" in code
        assert "    def tag(self) -> TagClient:" in code

    def test_missing_connection_shape_skips_list(self):
        registry = SchemaRegistry.build(parse_schema("""
            type Query { things: PaginatedThing }
            type PaginatedThing { count: Int }
        """))
        models = infer_models(registry)
        code = ClientGenerator(registry, models).generate_namespace_code("Thing", [models["Thing"]])
        ast.parse(code)
        assert "class ThingFilters:" in code
        assert "async def list(" not in code
