"""Code generator for Infrahub GraphQL schemas.

Renders Jinja2 templates and the client line builders into a mapping of
relative file path to Python source. Nothing is written to disk here; the
CLI owns the filesystem.

Supports custom templates via GeneratorConfig.template_dir:
    generator = CodeGenerator(registry, GeneratorConfig(template_dir="./my_templates"))

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .. import __version__
from .client_generator import ClientGenerator, response_class_name, root_fields
from .config import GeneratorConfig
from .inference import infer_models
from .ir import OptionalOf, TypeRef
from .namespaces import group_models
from .naming import safe_docstring, to_class_name, to_enum_member, to_field_name, to_module_name, to_snake
from .registry import SchemaRegistry
from .type_mapper import OPAQUE_LEAVES, PRIMITIVE_LEAVES, map_type, render_annotation

logger = logging.getLogger(__name__)


@dataclass
class FieldView:
    """One attribute line of a generated model."""
    name: str
    annotation: str
    default: str | None = None

    @property
    def declaration(self) -> str:
        if self.default is None:
            return f"{self.name}: {self.annotation}"
        return f"{self.name}: {self.annotation} = {self.default}"


def field_view(
    wire_name: str,
    type_ref: TypeRef,
    registry: SchemaRegistry,
    is_input: bool,
    partial: bool = False,
) -> FieldView:
    """Map one schema field; an alias keeps the wire name when the attribute differs.

    With ``partial`` every field defaults to None: synthesized selections stop
    at the depth limit and on cycles, so an object may arrive with only
    ``id`` or ``__typename``.
    """
    expr = map_type(type_ref, registry, is_input)
    if partial and not isinstance(expr, OptionalOf):
        expr = OptionalOf(expr)
    name = to_field_name(wire_name)
    optional = isinstance(expr, OptionalOf)
    if name != wire_name:
        default = f"Field(default=None, alias={wire_name!r})" if optional else f"Field(alias={wire_name!r})"
    else:
        default = "None" if optional else None
    return FieldView(name=name, annotation=render_annotation(expr), default=default)


class CodeGenerator:
    """Generates a Python client package from a schema registry.

    Available templates to override:
        - types.py.j2 - enums, scalar aliases, object and union models
        - inputs.py.j2 - input models
        - responses.py.j2 - per root field response envelopes
        - api_init.py.j2 - the Api entry point over namespace modules
        - package_init.py.j2 - package re-exports
        - pyproject.toml.j2 - packaging for a named package

    Example:
        registry = SchemaRegistry.build(parse_schema(sdl))
        files = CodeGenerator(registry, GeneratorConfig(package_name="my-client")).generate()
    """

    def __init__(self, registry: SchemaRegistry, config: GeneratorConfig | None = None):
        """Initialize the code generator.

        Args:
            registry: The classified schema
            config: Output options; defaults to a flat, unnamed layout
        """
        self.registry = registry
        self.config = config or GeneratorConfig()

        # Build template loader - custom templates take precedence
        loaders = []
        if self.config.template_dir:
            template_path = Path(self.config.template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
            else:
                logger.warning("Template directory %s does not exist, using defaults", template_path)
        loaders.append(PackageLoader("infrahub_pygen", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        # Register custom filters
        self.env.filters["snake_case"] = to_snake
        self.env.filters["pascal_case"] = to_class_name
        self.env.filters["field_name"] = to_field_name
        self.env.filters["repr"] = repr
        self.env.filters["safe_docstring"] = safe_docstring

    @property
    def module_prefix(self) -> str:
        import_name = self.config.import_name
        return f"{import_name}/" if import_name else ""

    def generate(self) -> dict[str, str]:
        """Generate all files; the same registry always yields the same mapping."""
        models = infer_models(self.registry)
        prefix = self.module_prefix
        files: dict[str, str] = {}

        files[f"{prefix}types.py"] = self._render("types.py.j2", self._types_context())
        files[f"{prefix}inputs.py"] = self._render("inputs.py.j2", self._inputs_context())
        files[f"{prefix}responses.py"] = self._render("responses.py.j2", self._responses_context())

        client_generator = ClientGenerator(self.registry, models)
        files[f"{prefix}client.py"] = client_generator.generate_client_code()

        namespaces = []
        for namespace, bucket in group_models(models.values()).items():
            if not namespace:
                logger.warning("Skipping %d models with an empty namespace", len(bucket))
                continue
            module = to_module_name(namespace)
            files[f"{prefix}api/{module}.py"] = client_generator.generate_namespace_code(namespace, bucket)
            namespaces.append({"module": module, "class_name": client_generator.namespace_class_name(namespace)})
        files[f"{prefix}api/__init__.py"] = self._render("api_init.py.j2", {"namespaces": namespaces})

        files[f"{prefix}__init__.py"] = self._render(
            "package_init.py.j2", {"package_name": self.config.package_name}
        )

        if self.config.package_name:
            files["pyproject.toml"] = self._render("pyproject.toml.j2", {
                "package_name": self.config.package_name,
                "import_name": self.config.import_name,
                "base_path": self.config.base_path,
                "version": __version__,
            })

        logger.debug("Generated %d files for %d models", len(files), len(models))
        return dict(sorted(files.items()))

    def _render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a template to a string."""
        template = self.env.get_template(template_name)
        return template.render(context)

    def _types_context(self) -> dict[str, Any]:
        registry = self.registry
        scalars = [
            {"name": to_class_name(name)}
            for name in sorted(registry.scalars)
            # Mapped onto builtins; an alias would never be referenced
            if name not in PRIMITIVE_LEAVES and name not in OPAQUE_LEAVES
        ]
        enums = [
            {
                "name": to_class_name(enum.name),
                "description": enum.description,
                "members": [{"name": to_enum_member(v), "value": v} for v in enum.values],
            }
            for enum in (registry.types[name] for name in sorted(registry.enums))
        ]
        objects = [
            {
                "name": to_class_name(obj.name),
                "description": obj.description,
                "fields": [
                    field_view(f.name, f.type, registry, is_input=False, partial=True)
                    for f in obj.fields
                ],
            }
            for obj in registry.data_objects()
        ]
        unions = [
            {"name": to_class_name(name), "description": registry.types[name].description}
            for name in sorted(registry.unions)
        ]
        return {"scalars": scalars, "enums": enums, "objects": objects, "unions": unions}

    def _inputs_context(self) -> dict[str, Any]:
        registry = self.registry
        inputs = [
            {
                "name": to_class_name(item.name),
                "description": item.description,
                "fields": [
                    field_view(arg.name, arg.type, registry, is_input=True) for arg in item.fields
                ],
            }
            for item in (registry.types[name] for name in sorted(registry.inputs))
        ]
        return {"inputs": inputs}

    def _responses_context(self) -> dict[str, Any]:
        responses = [
            {
                "name": response_class_name(ir_field.name),
                "field": ir_field.name,
                "kind": kind,
                "declaration": field_view(
                    ir_field.name, ir_field.type, self.registry, is_input=False
                ).declaration,
            }
            for kind, ir_field in root_fields(self.registry)
        ]
        return {"responses": responses}
