"""Infer resource models from the naming conventions of the root types.

Query side: a root query field returning ``Paginated<Model>`` is the list
query of ``<Model>``; the item type is the ``node`` field of
``Edged<Model>``.

Mutation side: a root mutation field named ``<Model>Create``,
``<Model>Update``, ``<Model>Upsert`` or ``<Model>Delete`` fills the
matching slot of ``<Model>``.

Both heuristics are plain string matching. Their precedence and fallbacks
are relied on by generated code, keep them exactly as they are.
"""

import dataclasses
import logging

from .ir import IRField, ModelInfo, Opaque, TypeExpr, base_type_name, contains_list
from .namespaces import namespace_from_type
from .registry import SchemaRegistry
from .type_mapper import map_type, unwrap_optional_boxed

logger = logging.getLogger(__name__)

PAGINATED_PREFIX = "Paginated"
EDGED_PREFIX = "Edged"

# Checked in this order, first match wins
MUTATION_SUFFIXES = (
    ("Create", "create"),
    ("Update", "update"),
    ("Upsert", "upsert"),
    ("Delete", "delete"),
)


def infer_models(registry: SchemaRegistry) -> dict[str, ModelInfo]:
    """Fold the root query and mutation fields into models, keyed by name."""
    models: dict[str, ModelInfo] = {}

    query = registry.query_root()
    if query is not None:
        for ir_field in query.fields:
            return_type = ir_field.base_type
            if not return_type.startswith(PAGINATED_PREFIX):
                continue
            name = return_type[len(PAGINATED_PREFIX):]
            node_type, node_boxed = node_type_for_model(name, registry)
            existing = models.get(name)
            if existing is None:
                existing = ModelInfo(
                    name=name,
                    namespace=namespace_from_type(name),
                    node_type=node_type,
                    node_boxed=node_boxed,
                )
            models[name] = dataclasses.replace(
                existing,
                query_field=ir_field,
                query_return=return_type,
                node_type=node_type,
                node_boxed=node_boxed,
            )

    mutation = registry.mutation_root()
    if mutation is not None:
        for ir_field in mutation.fields:
            match = split_mutation_name(ir_field.name)
            if match is None:
                continue
            name, slot = match
            if not name:
                logger.warning("Mutation %r has an empty model name", ir_field.name)
            existing = models.get(name)
            if existing is None:
                node_type, node_boxed = node_type_for_model(name, registry)
                existing = ModelInfo(
                    name=name,
                    namespace=namespace_from_type(name),
                    node_type=node_type,
                    node_boxed=node_boxed,
                )
            models[name] = dataclasses.replace(existing, **{slot: ir_field})

    logger.debug("Inferred %d models", len(models))
    return {name: models[name] for name in sorted(models)}


def split_mutation_name(field_name: str) -> tuple[str, str] | None:
    """Split ``WidgetCreate`` into ``("Widget", "create")``; None when no suffix matches."""
    for suffix, slot in MUTATION_SUFFIXES:
        if field_name.endswith(suffix):
            return field_name[: -len(suffix)], slot
    return None


def node_type_for_model(model: str, registry: SchemaRegistry) -> tuple[TypeExpr, bool]:
    """Item type of a model's paginated list, from ``Edged<Model>.node``."""
    edge_type = registry.get_object(f"{EDGED_PREFIX}{model}")
    node_field = edge_type.get_field("node") if edge_type is not None else None
    if node_field is None:
        return Opaque(), False
    in_list = _edges_are_listed(model, registry)
    return unwrap_optional_boxed(map_type(node_field.type, registry, is_input=False, in_list=in_list))


def _edges_are_listed(model: str, registry: SchemaRegistry) -> bool:
    """Edges reached through a list field hold their node by value."""
    paginated = registry.get_object(f"{PAGINATED_PREFIX}{model}")
    edges = paginated.get_field("edges") if paginated is not None else None
    return edges is not None and contains_list(edges.type)


def payload_object_type(type_name: str, registry: SchemaRegistry) -> tuple[TypeExpr, bool]:
    """Type of the ``object`` field a mutation payload carries."""
    payload = registry.get_object(type_name)
    object_field = payload.get_field("object") if payload is not None else None
    if object_field is None:
        return Opaque(), False
    return unwrap_optional_boxed(map_type(object_field.type, registry, is_input=False))


def mutation_payload_type(ir_field: IRField) -> str:
    return base_type_name(ir_field.type)
