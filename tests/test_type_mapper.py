"""Unit tests for the type mapper."""

import pytest

from infrahub_pygen.core.ir import (
    Boxed,
    ListOf,
    ListType,
    Named,
    NamedType,
    NonNullType,
    Opaque,
    OptionalOf,
    Primitive,
    PrimitiveKind,
)
from infrahub_pygen.core.type_mapper import (
    map_type,
    map_type_nonnull,
    python_type,
    render_annotation,
    unwrap_optional_boxed,
)

TEXT = Primitive(PrimitiveKind.TEXT)


def _nn(inner):
    return NonNullType(inner)


def _list(inner):
    return ListType(inner)


def _named(name):
    return NamedType(name)


# =============================================================================
# Tests: Leaves
# =============================================================================


class TestLeaves:
    @pytest.mark.parametrize("name,kind", [
        ("String", PrimitiveKind.TEXT),
        ("ID", PrimitiveKind.TEXT),
        ("DateTime", PrimitiveKind.TEXT),
        ("Int", PrimitiveKind.INT64),
        ("BigInt", PrimitiveKind.INT64),
        ("Float", PrimitiveKind.FLOAT64),
        ("Boolean", PrimitiveKind.BOOLEAN),
    ])
    def test_primitives(self, registry, name, kind):
        assert map_type(_nn(_named(name)), registry, is_input=False) == Primitive(kind)

    def test_generic_scalar_is_opaque_even_when_declared(self, registry):
        assert "GenericScalar" in registry.scalars
        assert map_type(_nn(_named("GenericScalar")), registry, is_input=False) == Opaque()

    def test_unknown_leaf_is_opaque(self, registry):
        assert map_type(_nn(_named("Nowhere")), registry, is_input=False) == Opaque()

    def test_enum_input_scalar_by_value(self, registry):
        for name in ("WidgetStatus", "WidgetCreateInput", "JSONString"):
            assert map_type(_nn(_named(name)), registry, is_input=False) == Named(name)

    def test_object_output_is_boxed(self, registry):
        assert map_type(_nn(_named("Widget")), registry, is_input=False) == Boxed("Widget")

    def test_object_input_is_by_value(self, registry):
        assert map_type(_nn(_named("Widget")), registry, is_input=True) == Named("Widget")

    def test_object_in_list_is_by_value(self, registry):
        expr = map_type(_nn(_list(_nn(_named("Widget")))), registry, is_input=False)
        assert expr == ListOf(Named("Widget"))

    def test_in_list_flag_passes_through(self, registry):
        assert map_type_nonnull(_named("Widget"), registry, False, in_list=True) == Named("Widget")

    def test_union_is_named(self, registry):
        assert map_type(_nn(_named("SearchResult")), registry, is_input=False) == Named("SearchResult")


# =============================================================================
# Tests: Modifiers
# =============================================================================


class TestModifiers:
    def test_nullable(self, registry):
        assert map_type(_named("String"), registry, is_input=False) == OptionalOf(TEXT)

    def test_list_of_nullable(self, registry):
        expr = map_type(_list(_named("String")), registry, is_input=False)
        assert expr == OptionalOf(ListOf(OptionalOf(TEXT)))

    def test_deep_nesting_is_total(self, registry):
        type_ref = _named("Widget")
        for i in range(10):
            type_ref = _list(type_ref) if i % 2 else _nn(type_ref)
        expr = map_type(type_ref, registry, is_input=False)
        assert render_annotation(expr).count("List[") == 5


# =============================================================================
# Tests: Rendering
# =============================================================================


class TestRender:
    @pytest.mark.parametrize("type_ref,expected", [
        (_named("String"), "Optional[str]"),
        (_nn(_named("String")), "str"),
        (_nn(_list(_nn(_named("String")))), "List[str]"),
        (_list(_named("String")), "Optional[List[Optional[str]]]"),
        (_nn(_named("Int")), "int"),
        (_named("Float"), "Optional[float]"),
        (_nn(_named("Boolean")), "bool"),
        (_named("GenericScalar"), "Optional[Any]"),
    ])
    def test_python_type(self, registry, type_ref, expected):
        assert python_type(type_ref, registry, is_input=False) == expected

    def test_boxed_is_forward_reference(self, registry):
        assert python_type(_named("Widget"), registry, is_input=False) == "Optional['Widget']"

    def test_named_goes_through_class_name(self):
        assert render_annotation(Named("widget_status")) == "WidgetStatus"
        assert render_annotation(Named("Any")) == "AnyType"

    def test_unsupported_expression(self):
        with pytest.raises(TypeError):
            render_annotation("str")


class TestUnwrap:
    def test_optional_boxed(self):
        assert unwrap_optional_boxed(OptionalOf(Boxed("Widget"))) == (Named("Widget"), True)

    def test_by_value(self):
        assert unwrap_optional_boxed(OptionalOf(Named("Widget"))) == (Named("Widget"), False)

    def test_non_optional_primitive(self):
        assert unwrap_optional_boxed(TEXT) == (TEXT, False)
