"""Core modules for Infrahub client generation and the runtime they target."""

from .client_generator import ClientGenerator
from .config import ClientConfig, GeneratorConfig
from .errors import (
    ConfigError,
    GraphQLError,
    InfrahubError,
    ResponseError,
    SchemaLoadError,
    SchemaParseError,
    TransportError,
)
from .executor import Client, Operation
from .generator import CodeGenerator
from .inference import infer_models, node_type_for_model, payload_object_type
from .ir import (
    Boxed,
    IRArgument,
    IRDocument,
    IREnum,
    IRField,
    IRInputObject,
    IRObject,
    IRScalar,
    IRSchemaDefinition,
    IRUnion,
    ListOf,
    ListType,
    ModelInfo,
    Named,
    NamedType,
    NonNullType,
    Opaque,
    OptionalOf,
    Primitive,
    PrimitiveKind,
)
from .namespaces import group_models, model_accessor_name, namespace_from_type
from .pagination import EdgePage, Paginator
from .parser import SchemaParser, parse_schema
from .query_builder import build_operation, synthesize_selection
from .registry import SchemaRegistry
from .response import GraphQLErrorEntry, GraphQLLocation, GraphQLResponse
from .type_mapper import map_type, render_annotation

__all__ = [
    # IR types
    "Boxed",
    "IRArgument",
    "IRDocument",
    "IREnum",
    "IRField",
    "IRInputObject",
    "IRObject",
    "IRScalar",
    "IRSchemaDefinition",
    "IRUnion",
    "ListOf",
    "ListType",
    "ModelInfo",
    "Named",
    "NamedType",
    "NonNullType",
    "Opaque",
    "OptionalOf",
    "Primitive",
    "PrimitiveKind",
    # Parser and registry
    "SchemaParser",
    "parse_schema",
    "SchemaRegistry",
    # Analysis
    "map_type",
    "render_annotation",
    "infer_models",
    "node_type_for_model",
    "payload_object_type",
    "synthesize_selection",
    "build_operation",
    "namespace_from_type",
    "group_models",
    "model_accessor_name",
    # Generators
    "CodeGenerator",
    "ClientGenerator",
    "GeneratorConfig",
    # Runtime
    "Client",
    "Operation",
    "ClientConfig",
    "GraphQLResponse",
    "GraphQLErrorEntry",
    "GraphQLLocation",
    "EdgePage",
    "Paginator",
    # Errors
    "InfrahubError",
    "SchemaLoadError",
    "SchemaParseError",
    "ConfigError",
    "TransportError",
    "GraphQLError",
    "ResponseError",
]
