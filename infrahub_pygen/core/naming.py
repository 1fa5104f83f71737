"""Identifier conversion for generated Python source.

Class identifiers and field names follow different rules: class names are
PascalCase and get a ``Type`` suffix when they would shadow a name the
generated modules import, field names are snake_case and get a ``field_``
prefix when Python or pydantic reserves them.
"""

import keyword

# Names already bound in every generated module
RESERVED_IDENTIFIERS = frozenset({
    "None", "True", "False",
    "Any", "Dict", "List", "Optional", "Enum",
    "BaseModel", "ConfigDict", "Field", "RootModel", "GeneratedModel",
})

IDENTIFIER_SUFFIX = "Type"

# Attribute names pydantic models or the generated methods cannot use
RESERVED_FIELD_NAMES = frozenset({
    "self", "model_config", "str", "int", "float", "bool",
})

FIELD_PREFIX = "field_"


def to_class_name(name: str) -> str:
    """Convert a snake or kebab separated name to a PascalCase identifier.

    Only the first character and characters after a separator change case:
    ``widget_list`` -> ``WidgetList``, ``InfrahubInfo`` stays as it is.
    """
    out = []
    upper = True
    for ch in name:
        if ch in "_-":
            upper = True
            continue
        if upper:
            out.append(ch.upper())
            upper = False
        else:
            out.append(ch)
    ident = "".join(out)
    if ident in RESERVED_IDENTIFIERS:
        return f"{ident}{IDENTIFIER_SUFFIX}"
    return ident


def to_snake(name: str) -> str:
    """Insert ``_`` before every uppercase character but the first and lowercase it."""
    out = []
    for idx, ch in enumerate(name):
        if ch.isupper():
            if idx > 0:
                out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


def to_field_name(name: str) -> str:
    """Convert a schema field or argument name to a Python attribute name."""
    snake = to_snake(name)
    if (
        keyword.iskeyword(snake)
        or snake in RESERVED_FIELD_NAMES
        or snake.startswith("_")
    ):
        return f"{FIELD_PREFIX}{snake}"
    return snake


def to_module_name(name: str) -> str:
    """Module names share the field-name rules so they stay importable."""
    return to_field_name(name)


def safe_docstring(text: str | None) -> str:
    """Escape text for use in docstrings."""
    if not text:
        return ""
    text = text.strip().replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text += " "
    return text


def to_enum_member(value: str) -> str:
    """Enum values keep their spelling; keywords get a trailing underscore."""
    if keyword.iskeyword(value):
        return f"{value}_"
    return value
