"""TypeScript interface generation from walker output."""

from typing import Any

from .models import FieldDescriptor, TypeShape
from .walker import walk

_INDENT = "  "


def field_type(descriptor: FieldDescriptor, depth: int = 1) -> str:
    """Render the TypeScript type of one field (without nullability)."""
    kind = descriptor.kind
    if descriptor.enum and kind in ("string", "int"):
        return " | ".join(_literal(v) for v in descriptor.enum)
    if kind == "string":
        return "string"
    if kind in ("int", "uint", "float"):
        return "number"
    if kind == "bool":
        return "boolean"
    if kind == "array":
        inner = field_type(descriptor.element, depth) if descriptor.element else "any"
        if descriptor.element is not None and descriptor.element.nullable:
            inner = f"({inner} | null)"
        elif " " in inner:
            inner = f"({inner})"
        return inner + "[]"
    if kind == "map":
        inner = field_type(descriptor.element, depth) if descriptor.element else "any"
        return f"Record<string, {inner}>"
    if kind == "reference" and descriptor.reference_name:
        return descriptor.reference_name
    if kind == "object":
        body = _render_fields(descriptor.fields or [], depth + 1)
        return "{\n" + body + _INDENT * depth + "}"
    return "any"


def _literal(value: Any) -> str:
    if isinstance(value, str):
        return '"' + value.replace('"', '\\"') + '"'
    return str(value)


def _render_fields(fields: list[FieldDescriptor], depth: int = 1) -> str:
    lines = []
    for f in fields:
        ts_type = field_type(f, depth)
        if f.nullable:
            ts_type += " | null"
        optional = "" if f.required else "?"
        lines.append(f"{_INDENT * depth}{f.name}{optional}: {ts_type};\n")
    return "".join(lines)


def render_interface(name: str, shape: TypeShape) -> str:
    return f"export interface {name} {{\n{_render_fields(shape.fields)}}}"


def generate_typescript(name: str, schema_type: Any) -> str:
    """Generate TypeScript declarations for ``schema_type``.

    Interfaces for every named nested type come first, followed by the main
    interface ``name``. Array roots also get ``export type <name>List``.

    Args:
        name: Name of the main interface
        schema_type: Anything ``TypeWalker.walk`` accepts

    Returns:
        TypeScript source, or an empty string for non-structured input
    """
    result = walk(schema_type)
    if result.shape is None:
        return ""

    root = result.shape.name
    # The root keeps its own name too when it refers back to itself
    keep_root = root != name and any(
        _mentions(shape.fields, root) for shape in result.definitions.values()
    )
    blocks = [
        render_interface(type_name, shape)
        for type_name, shape in result.definitions.items()
        if type_name != root or keep_root
    ]
    blocks.append(render_interface(name, result.shape))
    if result.is_array:
        blocks.append(f"export type {name}List = {name}[];")
    return "\n\n".join(blocks) + "\n"


def _mentions(fields: list[FieldDescriptor], ref: str) -> bool:
    for f in fields:
        if f.reference_name == ref:
            return True
        if f.element is not None and _mentions([f.element], ref):
            return True
        if f.fields and _mentions(f.fields, ref):
            return True
    return False
