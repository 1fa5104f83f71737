"""Namespace grouping for inferred models.

The namespace of a model is the leading capitalized word of its name,
``DeviceInterface`` -> ``Device``. Generated API modules are organised one
per namespace.
"""

from collections.abc import Iterable

from .ir import ModelInfo
from .naming import to_field_name


def namespace_from_type(name: str) -> str:
    """Take characters until an uppercase letter follows a lowercase one."""
    out = []
    prev_lower = False
    for ch in name:
        if ch.isupper() and prev_lower:
            break
        out.append(ch)
        prev_lower = ch.islower()
    return "".join(out) or name


def group_models(models: Iterable[ModelInfo]) -> dict[str, list[ModelInfo]]:
    """Bucket models by namespace; namespaces and bucket contents sorted."""
    buckets: dict[str, list[ModelInfo]] = {}
    for model in models:
        buckets.setdefault(model.namespace, []).append(model)
    return {
        namespace: sorted(buckets[namespace], key=lambda m: m.name)
        for namespace in sorted(buckets)
    }


def model_accessor_name(model: str, namespace: str) -> str:
    """Accessor for a model on its namespace API: ``DeviceRack`` -> ``rack``."""
    name = model[len(namespace):] if model.startswith(namespace) else model
    return to_field_name(name or model)
