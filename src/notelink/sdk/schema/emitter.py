"""JSON Schema emission from walker output.

The emitter never fails: kinds it cannot describe degrade to an empty
schema node ``{}``.
"""

import logging
from typing import Any

from .models import FieldDescriptor, TypeShape, WalkResult
from .walker import walk

logger = logging.getLogger(__name__)

COMPONENTS_REF_PREFIX = "#/components/schemas/"


class TypeRegistry:
    """Named shapes and their memoized component schemas for one generation pass.

    The first shape registered under a name wins; later shapes with the
    same name are ignored.
    """

    def __init__(self) -> None:
        self._shapes: dict[str, TypeShape] = {}
        self._schemas: dict[str, dict[str, Any]] = {}

    def register(self, shape: TypeShape) -> bool:
        """Register a named shape. Returns False if the name was already taken."""
        if not shape.name:
            return False
        if shape.name in self._shapes:
            if self._shapes[shape.name] != shape:
                logger.debug(
                    f"Schema name '{shape.name}' registered twice with different shapes, "
                    "keeping the first one"
                )
            return False
        self._shapes[shape.name] = shape
        return True

    def get(self, name: str) -> TypeShape | None:
        return self._shapes.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._shapes

    def __len__(self) -> int:
        return len(self._shapes)

    @property
    def shapes(self) -> dict[str, TypeShape]:
        return dict(self._shapes)

    def component_schema(self, name: str, emitter: "SchemaEmitter") -> dict[str, Any] | None:
        if name not in self._schemas:
            shape = self._shapes.get(name)
            if shape is None:
                return None
            self._schemas[name] = emitter.shape_schema(shape, title=name)
        return self._schemas[name]

    def components(self, emitter: "SchemaEmitter | None" = None) -> dict[str, dict[str, Any]]:
        """All component schemas keyed by name, in registration order."""
        emitter = emitter or SchemaEmitter(self)
        result: dict[str, dict[str, Any]] = {}
        for name in self._shapes:
            schema = self.component_schema(name, emitter)
            if schema is not None:
                result[name] = schema
        return result


class SchemaEmitter:
    """Maps walker output to JSON Schema documents."""

    def __init__(self, registry: TypeRegistry | None = None):
        self.registry = registry if registry is not None else TypeRegistry()

    def emit(self, result: WalkResult, title: str = "") -> dict[str, Any]:
        """Emit the main schema for a walk and register its named shapes.

        Args:
            result: Walker output
            title: Title for the root object schema

        Returns:
            The root schema; ``{"type": "object"}`` for an empty walk
        """
        for shape in result.definitions.values():
            self.registry.register(shape)

        if result.shape is not None:
            main = self.shape_schema(result.shape, title=title)
        elif result.element is not None:
            main = self.field_schema(result.element)
        elif result.is_array:
            main = {}
        else:
            return {"type": "object"}

        if result.is_array:
            return {"type": "array", "items": main}
        return main

    def shape_schema(self, shape: TypeShape, title: str = "") -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "object"}
        if title:
            schema["title"] = title
        schema["properties"] = {f.name: self.field_schema(f) for f in shape.fields}
        required = shape.required_names
        if required:
            schema["required"] = required
        return schema

    def field_schema(self, descriptor: FieldDescriptor) -> dict[str, Any]:
        schema = self._base_schema(descriptor)
        if descriptor.enum is not None:
            schema["enum"] = list(descriptor.enum)
        if descriptor.nullable:
            schema["nullable"] = True
        return schema

    def _base_schema(self, descriptor: FieldDescriptor) -> dict[str, Any]:
        kind = descriptor.kind
        if kind == "string":
            schema: dict[str, Any] = {"type": "string"}
            if descriptor.format:
                schema["format"] = descriptor.format
            return schema
        if kind == "int":
            return {"type": "integer", "format": descriptor.format or "int64"}
        if kind == "uint":
            return {"type": "integer", "format": descriptor.format or "int64", "minimum": 0}
        if kind == "float":
            return {"type": "number", "format": descriptor.format or "double"}
        if kind == "bool":
            return {"type": "boolean"}
        if kind == "array":
            items = self.field_schema(descriptor.element) if descriptor.element else {}
            return {"type": "array", "items": items}
        if kind == "map":
            values: Any = True
            if descriptor.element is not None and descriptor.element.kind != "unknown":
                values = self.field_schema(descriptor.element)
            return {"type": "object", "additionalProperties": values}
        if kind == "reference" and descriptor.reference_name:
            return {"$ref": COMPONENTS_REF_PREFIX + descriptor.reference_name}
        if kind == "object":
            return self.shape_schema(TypeShape(fields=descriptor.fields or []))
        return {}


def parameter_type_to_schema(param_type: str) -> dict[str, Any]:
    """Map a flat parameter type name to a JSON Schema node."""
    normalized = param_type.lower()
    if normalized in ("number", "float", "double"):
        return {"type": "number"}
    if normalized in ("integer", "int"):
        return {"type": "integer"}
    if normalized in ("boolean", "bool"):
        return {"type": "boolean"}
    return {"type": "string"}


def generate_json_schema(
    schema_type: Any, name: str = "", registry: TypeRegistry | None = None
) -> tuple[dict[str, Any], dict[str, dict[str, Any]]]:
    """Generate the schema of ``schema_type`` plus the component schemas it references.

    Args:
        schema_type: Anything ``TypeWalker.walk`` accepts
        name: Title of the root schema
        registry: Registry to accumulate components into; a new one if omitted

    Returns:
        Tuple of (main schema, component schemas keyed by name)
    """
    emitter = SchemaEmitter(registry)
    main = emitter.emit(walk(schema_type), title=name)
    return main, emitter.registry.components(emitter)
