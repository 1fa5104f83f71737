"""Client class generator for Infrahub GraphQL operations.

Generates two kinds of modules:
    client.py: GeneratedClient with one async method per root field
        response = await client.widget_list(limit=10)
    api/<namespace>.py: per model Filters and Client classes
        widgets = await client.api.widget.widget.list()
"""

import logging

from .inference import infer_models, payload_object_type
from .ir import IRArgument, IRField, ModelInfo, OptionalOf, contains_list
from .namespaces import model_accessor_name
from .naming import FIELD_PREFIX, to_class_name, to_field_name
from .query_builder import build_operation, selection_for_field
from .registry import SchemaRegistry
from .type_mapper import map_type, render_annotation, unwrap_optional_boxed

logger = logging.getLogger(__name__)

RESPONSE_SUFFIX = "Response"
BRANCH_PARAM = "request_branch"
RUNTIME_IMPORT = "from infrahub_pygen import core as runtime"

# Attributes of GeneratedClient that root field methods must not shadow
RESERVED_METHOD_NAMES = frozenset({"api", "close", "from_config"})

STAR_IMPORT = "  # noqa: F401,F403"


def response_class_name(field_name: str) -> str:
    """``widgetList`` -> ``WidgetListResponse``."""
    return f"{to_class_name(field_name)}{RESPONSE_SUFFIX}"


def operation_name(field_name: str) -> str:
    """Name of the GraphQL operation that selects a root field."""
    return to_class_name(field_name)


def root_fields(registry: SchemaRegistry) -> list[tuple[str, IRField]]:
    """Root fields as (operation kind, field), query root first."""
    fields = []
    for kind, root in (("query", registry.query_root()), ("mutation", registry.mutation_root())):
        if root is not None:
            fields.extend((kind, ir_field) for ir_field in root.fields)
    return fields


def required_first(args: list[IRArgument]) -> list[IRArgument]:
    """Required arguments keep their order and precede the optional ones."""
    return [a for a in args if a.is_required] + [a for a in args if not a.is_required]


class ClientGenerator:
    """Generates client code from root fields and inferred models."""

    def __init__(self, registry: SchemaRegistry, models: dict[str, ModelInfo] | None = None):
        self.registry = registry
        self.models = models if models is not None else infer_models(registry)

    # -------------------------------------------------------------------------
    # Shared pieces
    # -------------------------------------------------------------------------

    def _parameters(self, args: list[IRArgument]) -> list[tuple[IRArgument, str, str]]:
        """(argument, parameter name, declaration), required parameters first."""
        params = []
        for arg in required_first(args):
            param_name = to_field_name(arg.name)
            if param_name == BRANCH_PARAM:
                param_name = f"{FIELD_PREFIX}{param_name}"
            expr = map_type(arg.type, self.registry, is_input=True)
            if arg.is_required:
                params.append((arg, param_name, f"{param_name}: {render_annotation(expr)}"))
            else:
                if not isinstance(expr, OptionalOf):
                    expr = OptionalOf(expr)
                params.append((arg, param_name, f"{param_name}: {render_annotation(expr)} = None"))
        return params

    @staticmethod
    def _signature(method_name: str, params: list[str], return_type: str) -> list[str]:
        params = ["self"] + params + [f"{BRANCH_PARAM}: Optional[str] = None"]
        lines = [f"    async def {method_name}("]
        for param in params:
            lines.append(f"        {param},")
        lines.append(f"    ) -> {return_type}:")
        return lines

    @staticmethod
    def _variables(params: list[tuple[IRArgument, str, str]], indent: str) -> list[str]:
        """A dict literal mapping variable names to parameters."""
        if not params:
            return [f"{indent}{{}},"]
        lines = [f"{indent}{{"]
        for arg, param_name, _ in params:
            lines.append(f'{indent}    "{arg.name}": {param_name},')
        lines.append(f"{indent}}},")
        return lines

    def _execute_call(self, kind: str, ir_field: IRField, variables: list[str], prefix: str) -> list[str]:
        query = build_operation(
            kind,
            operation_name(ir_field.name),
            ir_field.name,
            ir_field.arguments,
            selection_for_field(ir_field, self.registry),
        )
        return [
            f"        {prefix}await self._client.execute(",
            f"            {query!r},",
            *variables,
            f"            {BRANCH_PARAM},",
            f"            response_model={response_class_name(ir_field.name)},",
            "        )",
        ]

    # -------------------------------------------------------------------------
    # client.py
    # -------------------------------------------------------------------------

    def generate_client_code(self) -> str:
        """Generate the complete client module code."""
        lines = [
            '"""Generated Infrahub client. Do not edit by hand."""',
            "",
            "from __future__ import annotations",
            "",
            "from typing import Any, Dict, List, Optional",
            "",
            RUNTIME_IMPORT,
            "",
            "from .api import Api",
            f"from .inputs import *{STAR_IMPORT}",
            f"from .responses import *{STAR_IMPORT}",
            f"from .types import *{STAR_IMPORT}",
            "",
            "",
            "class GeneratedClient:",
            '    """Typed access to every root field.',
            "",
            "    Usage:",
            "        config = runtime.ClientConfig('https://infrahub.example.com', token)",
            "        async with GeneratedClient.from_config(config) as client:",
            "            response = await client.<field>(...)",
            "            nodes = await client.api.<namespace>.<model>.list()",
            '    """',
            "",
            "    def __init__(self, client: runtime.Client):",
            "        self._client = client",
            "",
            "    @classmethod",
            "    def from_config(cls, config: runtime.ClientConfig) -> GeneratedClient:",
            "        return cls(runtime.Client(config))",
            "",
            "    @property",
            "    def api(self) -> Api:",
            "        return Api(self._client)",
            "",
            "    async def close(self):",
            '        """Close the client connection."""',
            "        await self._client.close()",
            "",
            "    async def __aenter__(self) -> GeneratedClient:",
            "        return self",
            "",
            "    async def __aexit__(self, exc_type, exc_val, exc_tb):",
            "        await self.close()",
        ]

        for kind, ir_field in root_fields(self.registry):
            lines.append("")
            lines.extend(self._generate_root_method(kind, ir_field))

        return "\n".join(lines) + "\n"

    def _generate_root_method(self, kind: str, ir_field: IRField) -> list[str]:
        """Generate an async method for a root field."""
        method_name = to_field_name(ir_field.name)
        if method_name in RESERVED_METHOD_NAMES:
            method_name = f"{FIELD_PREFIX}{method_name}"

        params = self._parameters(ir_field.arguments)
        lines = self._signature(
            method_name,
            [decl for _, _, decl in params],
            f"runtime.GraphQLResponse[{response_class_name(ir_field.name)}]",
        )
        lines.append(f'        """Run the ``{ir_field.name}`` {kind}."""')
        lines.extend(self._execute_call(kind, ir_field, self._variables(params, "            "), "return "))
        return lines

    # -------------------------------------------------------------------------
    # api/<namespace>.py
    # -------------------------------------------------------------------------

    @staticmethod
    def namespace_class_name(namespace: str) -> str:
        return f"{to_class_name(namespace)}Api"

    def generate_namespace_code(self, namespace: str, models: list[ModelInfo]) -> str:
        """Generate the module of one namespace: model classes, then the namespace API."""
        lines = [
            f'"""Generated API for the {namespace} namespace. Do not edit by hand."""',
            "",
            "from __future__ import annotations",
            "",
            "from dataclasses import dataclass",
            "from typing import Any, Dict, List, Optional",
            "",
            RUNTIME_IMPORT,
            "",
            f"from ..inputs import *{STAR_IMPORT}",
            f"from ..responses import *{STAR_IMPORT}",
            f"from ..types import *{STAR_IMPORT}",
        ]

        accessors: list[tuple[str, str]] = []
        for model in models:
            if not model.name:
                logger.warning("Skipping model with an empty name in namespace %s", namespace)
                continue
            if model.query_field is not None:
                lines.extend(["", ""])
                lines.extend(self._generate_filters_class(model))
            lines.extend(["", ""])
            lines.extend(self._generate_model_client(model))

            accessor = model_accessor_name(model.name, namespace)
            if accessor in (name for name, _ in accessors):
                accessor = to_field_name(model.name)
            accessors.append((accessor, f"{to_class_name(model.name)}Client"))

        class_name = self.namespace_class_name(namespace)
        lines.extend([
            "",
            "",
            f"class {class_name}:",
            f'    """Models of the ``{namespace}`` namespace."""',
            "",
            "    def __init__(self, client: runtime.Client):",
            "        self._client = client",
        ])
        for accessor, client_class in accessors:
            lines.extend([
                "",
                "    @property",
                f"    def {accessor}(self) -> {client_class}:",
                f"        return {client_class}(self._client)",
            ])
        return "\n".join(lines) + "\n"

    def _filters(self, model: ModelInfo) -> list[tuple[IRArgument, str, str]]:
        """Every query argument as an optional filter field."""
        fields = []
        for arg in model.query_field.arguments:
            expr = map_type(arg.type, self.registry, is_input=True)
            if not isinstance(expr, OptionalOf):
                expr = OptionalOf(expr)
            name = to_field_name(arg.name)
            fields.append((arg, name, f"{name}: {render_annotation(expr)} = None"))
        return fields

    def _generate_filters_class(self, model: ModelInfo) -> list[str]:
        lines = [
            "@dataclass",
            f"class {to_class_name(model.name)}Filters:",
            f'    """Variables of the ``{model.query_field.name}`` query."""',
            "",
        ]
        filters = self._filters(model)
        for _, _, decl in filters:
            lines.append(f"    {decl}")
        if filters:
            lines.append("")
        lines.append("    def to_variables(self) -> Dict[str, Any]:")
        if not filters:
            lines.append("        return {}")
            return lines
        lines.append("        return {")
        for arg, name, _ in filters:
            lines.append(f'            "{arg.name}": self.{name},')
        lines.append("        }")
        return lines

    def _generate_model_client(self, model: ModelInfo) -> list[str]:
        class_name = to_class_name(model.name)
        lines = [
            f"class {class_name}Client:",
            f'    """Operations on ``{model.name}``."""',
            "",
            "    def __init__(self, client: runtime.Client):",
            "        self._client = client",
        ]

        if model.query_field is not None:
            list_method = self._generate_list_method(model)
            if list_method:
                lines.append("")
                lines.extend(list_method)
                if any(arg.name == "ids" for arg in model.query_field.arguments):
                    lines.append("")
                    lines.extend(self._generate_get_by_id_method(model))
            else:
                logger.warning(
                    "%s has no edges/node structure, skipping list()", model.query_return
                )

        for slot, ir_field in model.mutations:
            lines.append("")
            lines.extend(self._generate_mutation_method(slot, ir_field))
        return lines

    def _generate_list_method(self, model: ModelInfo) -> list[str]:
        """``list()`` walks ``<field>.edges[].node``; empty when the shape is missing."""
        paginated = self.registry.get_object(model.query_return)
        edges = paginated.get_field("edges") if paginated is not None else None
        edge_type = self.registry.get_object(edges.base_type) if edges is not None else None
        if edge_type is None or not edge_type.has_field("node"):
            return []

        class_name = to_class_name(model.name)
        node = render_annotation(model.node_type)
        lines = [
            "    async def list(",
            "        self,",
            f"        filters: Optional[{class_name}Filters] = None,",
            f"        {BRANCH_PARAM}: Optional[str] = None,",
            f"    ) -> List[{node}]:",
            f'        """Fetch every ``{model.name}`` matching the filters."""',
            f"        filters = filters or {class_name}Filters()",
        ]
        lines.extend(self._execute_call(
            "query", model.query_field, ["            filters.to_variables(),"], "response = "
        ))
        lines.extend([
            "        if response.data is None:",
            '            raise runtime.ResponseError("missing data")',
            f"        connection = response.data.{to_field_name(model.query_field.name)}",
            "        if connection is None:",
            "            return []",
        ])
        edges_attr = to_field_name("edges")
        if contains_list(edges.type):
            lines.append(
                f"        return [edge.node for edge in connection.{edges_attr} or [] "
                "if edge is not None and edge.node is not None]"
            )
        else:
            lines.extend([
                f"        edge = connection.{edges_attr}",
                "        if edge is None or edge.node is None:",
                "            return []",
                "        return [edge.node]",
            ])
        return lines

    def _generate_get_by_id_method(self, model: ModelInfo) -> list[str]:
        class_name = to_class_name(model.name)
        node = render_annotation(model.node_type)
        return [
            "    async def get_by_id(",
            "        self,",
            "        node_id: str,",
            f"        {BRANCH_PARAM}: Optional[str] = None,",
            f"    ) -> Optional[{node}]:",
            f'        """Fetch one ``{model.name}`` by id, None when it does not exist."""',
            f"        nodes = await self.list({class_name}Filters({to_field_name('ids')}=[node_id]), {BRANCH_PARAM})",
            "        return nodes[0] if nodes else None",
        ]

    def _generate_mutation_method(self, slot: str, ir_field: IRField) -> list[str]:
        """``delete`` reports ``payload.ok``; the other slots return ``payload.object``."""
        payload_type = self.registry.get_object(ir_field.base_type)
        if slot == "delete" and payload_type is not None:
            return_type = "bool"
        elif payload_type is not None and payload_type.has_field("object"):
            expr, _ = payload_object_type(ir_field.base_type, self.registry)
            return_type = render_annotation(expr)
        else:
            expr, _ = unwrap_optional_boxed(map_type(ir_field.type, self.registry, is_input=False))
            return_type = render_annotation(expr)

        params = self._parameters(ir_field.arguments)
        lines = self._signature(slot, [decl for _, _, decl in params], return_type)
        lines.append(f'        """Run the ``{ir_field.name}`` mutation."""')
        lines.extend(self._execute_call(
            "mutation", ir_field, self._variables(params, "            "), "response = "
        ))
        lines.extend([
            "        if response.data is None:",
            '            raise runtime.ResponseError("missing data")',
            f"        payload = response.data.{to_field_name(ir_field.name)}",
            "        if payload is None:",
            '            raise runtime.ResponseError("missing payload")',
        ])

        if slot == "delete" and payload_type is not None:
            if payload_type.has_field("ok"):
                lines.append(f"        return bool(payload.{to_field_name('ok')})")
            else:
                lines.append("        return True")
        elif payload_type is not None and payload_type.has_field("object"):
            object_attr = to_field_name("object")
            lines.extend([
                f"        if payload.{object_attr} is None:",
                '            raise runtime.ResponseError("missing object")',
                f"        return payload.{object_attr}",
            ])
        else:
            lines.append("        return payload")
        return lines
