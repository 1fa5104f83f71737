"""GraphQL schema parser using graphql-core.

Parses SDL text, or .graphql/.graphqls files, into an IRDocument.
"""

import logging
import os

from graphql import (
    EnumTypeDefinitionNode,
    GraphQLSyntaxError,
    InputObjectTypeDefinitionNode,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    OperationType,
    ScalarTypeDefinitionNode,
    SchemaDefinitionNode,
    TypeNode,
    UnionTypeDefinitionNode,
    parse,
    print_ast,
)

from .errors import SchemaLoadError, SchemaParseError
from .ir import (
    IRArgument,
    IRDocument,
    IREnum,
    IRField,
    IRInputObject,
    IRObject,
    IRScalar,
    IRSchemaDefinition,
    IRUnion,
    ListType,
    NamedType,
    NonNullType,
    TypeRef,
)

logger = logging.getLogger(__name__)

SCHEMA_EXTENSIONS = (".graphql", ".graphqls")


class SchemaParser:
    """Parses GraphQL schema files into IR."""

    def __init__(self, schema_path: str):
        """Initialize a parser with a path to a schema file or directory."""
        self.schema_path = schema_path
        self.current_file = ""

    def parse_all(self) -> IRDocument:
        """Parse all schema files and return one document, files in path order."""
        schema_files = self._collect_schema_files()
        if not schema_files:
            raise SchemaLoadError(f"No schema files found at {self.schema_path}")

        document = IRDocument()
        for file_path in schema_files:
            self.current_file = os.path.basename(file_path)
            try:
                with open(file_path, encoding="utf-8") as f:
                    content = f.read()
            except OSError as e:
                raise SchemaLoadError(f"Cannot read {file_path}: {e}") from e
            logger.debug("Parsing %s", self.current_file)
            document.extend(parse_schema(content, source=self.current_file))
        return document

    def _collect_schema_files(self) -> list[str]:
        """Collect all schema files from path."""
        files = []
        if os.path.isfile(self.schema_path):
            if self.schema_path.endswith(SCHEMA_EXTENSIONS):
                files.append(self.schema_path)
        else:
            for root, _, filenames in os.walk(self.schema_path):
                for filename in filenames:
                    if filename.endswith(SCHEMA_EXTENSIONS):
                        files.append(os.path.join(root, filename))
        return sorted(files)


def parse_schema(text: str, source: str = "<schema>") -> IRDocument:
    """Parse SDL text.

    Interfaces, directives and type extensions are ignored.
    """
    try:
        ast = parse(text)
    except GraphQLSyntaxError as e:
        raise SchemaParseError(f"Error parsing {source}: {e.message}") from e

    document = IRDocument()
    for definition in ast.definitions:
        if isinstance(definition, SchemaDefinitionNode):
            document.definitions.append(_convert_schema_definition(definition))
        elif isinstance(definition, ScalarTypeDefinitionNode):
            document.definitions.append(
                IRScalar(name=definition.name.value, description=_description(definition))
            )
        elif isinstance(definition, EnumTypeDefinitionNode):
            document.definitions.append(
                IREnum(
                    name=definition.name.value,
                    values=[v.name.value for v in definition.values or ()],
                    description=_description(definition),
                )
            )
        elif isinstance(definition, UnionTypeDefinitionNode):
            document.definitions.append(
                IRUnion(name=definition.name.value, description=_description(definition))
            )
        elif isinstance(definition, ObjectTypeDefinitionNode):
            document.definitions.append(
                IRObject(
                    name=definition.name.value,
                    fields=[_convert_field(f) for f in definition.fields or ()],
                    description=_description(definition),
                )
            )
        elif isinstance(definition, InputObjectTypeDefinitionNode):
            document.definitions.append(
                IRInputObject(
                    name=definition.name.value,
                    fields=[_convert_argument(f) for f in definition.fields or ()],
                    description=_description(definition),
                )
            )
    return document


def _convert_schema_definition(node: SchemaDefinitionNode) -> IRSchemaDefinition:
    schema = IRSchemaDefinition()
    for operation_type in node.operation_types:
        if operation_type.operation == OperationType.QUERY:
            schema.query = operation_type.type.name.value
        elif operation_type.operation == OperationType.MUTATION:
            schema.mutation = operation_type.type.name.value
    return schema


def _convert_field(node) -> IRField:
    return IRField(
        name=node.name.value,
        type=_convert_type(node.type),
        arguments=[_convert_argument(a) for a in node.arguments or ()],
    )


def _convert_argument(node) -> IRArgument:
    default = print_ast(node.default_value) if node.default_value is not None else None
    return IRArgument(name=node.name.value, type=_convert_type(node.type), default=default)


def _convert_type(type_node: TypeNode) -> TypeRef:
    """Convert a graphql-core type node, keeping every modifier."""
    if isinstance(type_node, NonNullTypeNode):
        return NonNullType(_convert_type(type_node.type))
    if isinstance(type_node, ListTypeNode):
        return ListType(_convert_type(type_node.type))
    assert isinstance(type_node, NamedTypeNode), f"Expected NamedTypeNode, got {type(type_node)}"
    return NamedType(type_node.name.value)


def _description(node) -> str | None:
    return node.description.value if node.description else None
