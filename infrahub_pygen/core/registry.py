"""Schema registry: every named type classified by kind, plus the root types."""

import logging
from dataclasses import dataclass, field

from .ir import (
    IRDocument,
    IREnum,
    IRInputObject,
    IRObject,
    IRScalar,
    IRSchemaDefinition,
    IRUnion,
    TypeDefinition,
)

logger = logging.getLogger(__name__)

# Scalars the generator maps without a schema declaration
BUILTIN_SCALARS = frozenset({
    "String", "Int", "Float", "Boolean", "ID",
    "DateTime", "BigInt", "GenericScalar",
})

DEFAULT_QUERY_TYPE = "Query"


def is_builtin_scalar(name: str) -> bool:
    return name in BUILTIN_SCALARS


@dataclass
class SchemaRegistry:
    """Name -> definition map and the five kind sets partitioning it.

    Read-only once built; every later stage only looks things up.
    """
    types: dict[str, TypeDefinition] = field(default_factory=dict)
    query_type: str = DEFAULT_QUERY_TYPE
    mutation_type: str | None = None
    enums: set[str] = field(default_factory=set)
    inputs: set[str] = field(default_factory=set)
    objects: set[str] = field(default_factory=set)
    unions: set[str] = field(default_factory=set)
    scalars: set[str] = field(default_factory=set)

    @classmethod
    def build(cls, document: IRDocument) -> "SchemaRegistry":
        """Classify every definition of a parsed document.

        Duplicate names are last-write-wins. Without a schema block the query
        root is ``Query`` and there is no mutation root.
        """
        registry = cls()
        for definition in document.definitions:
            if isinstance(definition, IRSchemaDefinition):
                if definition.query:
                    registry.query_type = definition.query
                registry.mutation_type = definition.mutation
            else:
                registry._add(definition)

        logger.debug(
            "Registry built: %d enums, %d inputs, %d objects, %d unions, %d scalars",
            len(registry.enums), len(registry.inputs), len(registry.objects),
            len(registry.unions), len(registry.scalars),
        )
        return registry

    def _add(self, definition: TypeDefinition):
        name = definition.name
        if name in self.types:
            self._kind_set(self.types[name]).discard(name)
        self._kind_set(definition).add(name)
        self.types[name] = definition

    def _kind_set(self, definition: TypeDefinition) -> set[str]:
        if isinstance(definition, IREnum):
            return self.enums
        if isinstance(definition, IRInputObject):
            return self.inputs
        if isinstance(definition, IRObject):
            return self.objects
        if isinstance(definition, IRUnion):
            return self.unions
        if isinstance(definition, IRScalar):
            return self.scalars
        raise TypeError(f"Unsupported definition: {type(definition).__name__}")

    def get(self, name: str) -> TypeDefinition | None:
        return self.types.get(name)

    def get_object(self, name: str | None) -> IRObject | None:
        """Look up an object type; None for missing names or other kinds."""
        if name is None:
            return None
        definition = self.types.get(name)
        if isinstance(definition, IRObject):
            return definition
        return None

    def query_root(self) -> IRObject | None:
        return self.get_object(self.query_type)

    def mutation_root(self) -> IRObject | None:
        return self.get_object(self.mutation_type)

    def is_root(self, name: str) -> bool:
        """Root containers are not emitted as data objects."""
        return name == self.query_type or name == self.mutation_type

    def is_leaf(self, name: str) -> bool:
        """Builtin scalars, enums and custom scalars have no sub-selection."""
        return is_builtin_scalar(name) or name in self.enums or name in self.scalars

    def kind_of(self, name: str) -> str | None:
        """Return 'enum', 'input', 'object', 'union' or 'scalar'."""
        for kind, names in (
            ("enum", self.enums),
            ("input", self.inputs),
            ("object", self.objects),
            ("union", self.unions),
            ("scalar", self.scalars),
        ):
            if name in names:
                return kind
        return None

    def data_objects(self) -> list[IRObject]:
        """Object types to emit, alphabetic, root containers excluded."""
        return [
            self.types[name]
            for name in sorted(self.objects)
            if not self.is_root(name)
        ]
