"""Example payload generation.

Examples are built from the same walker output as schemas, so they always
use the same wire names. Scalar values come from ordered, kind-specific
heuristic tables matched case-insensitively against the wire name; the
first matching row wins.
"""

import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from .models import FieldDescriptor, TypeShape, WalkResult
from .walker import walk

logger = logging.getLogger(__name__)

STRING_EXAMPLES: list[tuple[tuple[str, ...], str]] = [
    (("email",), "user@example.com"),
    (("password",), "securePassword123"),
    (("username", "user_name"), "john_doe"),
    (("firstname", "first_name"), "John"),
    (("lastname", "last_name"), "Doe"),
    (("name",), "John Doe"),
    (("phone",), "+1-555-0123"),
    (("address",), "123 Main Street, City, Country"),
    (("url", "link"), "https://example.com"),
    (("id",), "12345"),
    (("token",), "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."),
    (("description",), "This is a sample description"),
    (("title",), "Sample Title"),
    (("status",), "active"),
    (("type",), "default"),
]

INT_EXAMPLES: list[tuple[tuple[str, ...], int]] = [
    (("age",), 25),
    (("count", "total"), 10),
    (("id",), 12345),
    (("port",), 8080),
    (("year",), 2024),
    (("month",), 6),
    (("day",), 15),
]

FLOAT_EXAMPLES: list[tuple[tuple[str, ...], float]] = [
    (("price", "cost"), 99.99),
    (("rate",), 0.15),
    (("percentage",), 75.5),
    (("latitude",), 40.7128),
    (("longitude",), -74.006),
    (("weight",), 70.5),
    (("height",), 175.0),
]

BOOL_EXAMPLES: list[tuple[tuple[str, ...], bool]] = [
    (("active", "enabled"), True),
    (("deleted", "disabled"), False),
    (("verified", "confirmed"), True),
]

DEFAULT_STRING = "example_value"
DEFAULT_INT = 1
DEFAULT_FLOAT = 1.0
DEFAULT_BOOL = False


def _lookup(table: list[tuple[tuple[str, ...], Any]], field_name: str, default: Any) -> Any:
    lowered = field_name.lower()
    for patterns, value in table:
        if any(p in lowered for p in patterns):
            return value
    return default


def string_example(field_name: str) -> str:
    return _lookup(STRING_EXAMPLES, field_name, DEFAULT_STRING)


def int_example(field_name: str) -> int:
    return _lookup(INT_EXAMPLES, field_name, DEFAULT_INT)


def uint_example(field_name: str) -> int:
    return max(int_example(field_name), 0)


def float_example(field_name: str) -> float:
    return _lookup(FLOAT_EXAMPLES, field_name, DEFAULT_FLOAT)


def bool_example(field_name: str) -> bool:
    return _lookup(BOOL_EXAMPLES, field_name, DEFAULT_BOOL)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ExampleGenerator:
    """Synthesizes example values from walker output.

    References are expanded inline using ``definitions``. A reference that is
    already being expanded on the current path becomes ``{}``.
    """

    def __init__(
        self,
        definitions: dict[str, TypeShape] | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.definitions = definitions or {}
        self.clock = clock
        self._expanding: set[str] = set()

    def generate(self, result: WalkResult) -> Any:
        """Generate the example for a whole walk.

        Returns:
            A JSON-encodable value; ``{}`` for an empty walk, a one-element
            list for array roots
        """
        if result.definitions:
            self.definitions = {**result.definitions, **self.definitions}

        if result.shape is not None:
            value: Any = self.shape_example(result.shape)
        elif result.element is not None:
            value = self.field_example(result.element)
        elif result.is_array:
            value = {}
        else:
            return {}

        if result.is_array:
            return [value]
        return value

    def shape_example(self, shape: TypeShape) -> dict[str, Any]:
        if shape.name:
            self._expanding.add(shape.name)
        try:
            return {f.name: self.field_example(f) for f in shape.fields}
        finally:
            if shape.name:
                self._expanding.discard(shape.name)

    def field_example(self, descriptor: FieldDescriptor) -> Any:
        kind = descriptor.kind
        name = descriptor.name

        if descriptor.enum:
            return descriptor.enum[0]
        if kind == "string":
            if descriptor.format == "date-time":
                return self.clock().replace(microsecond=0).isoformat()
            if descriptor.format == "date":
                return self.clock().date().isoformat()
            return string_example(name)
        if kind == "int":
            return int_example(name)
        if kind == "uint":
            return uint_example(name)
        if kind == "float":
            return float_example(name)
        if kind == "bool":
            return bool_example(name)
        if kind == "array":
            element = descriptor.element or FieldDescriptor(name=name, kind="unknown")
            return [self.field_example(element)]
        if kind == "map":
            element = descriptor.element or FieldDescriptor(name=name, kind="unknown")
            return {"key": self.field_example(element)}
        if kind == "object":
            return self.shape_example(TypeShape(fields=descriptor.fields or []))
        if kind == "reference":
            return self._reference_example(descriptor.reference_name or "")
        # Unknown kinds still need a non-null value to satisfy required checks
        return string_example(name)

    def _reference_example(self, ref: str) -> dict[str, Any]:
        if ref in self._expanding:
            return {}
        shape = self.definitions.get(ref)
        if shape is None:
            logger.debug(f"No definition for referenced type '{ref}'")
            return {}
        return self.shape_example(shape)


def generate_example(schema_type: Any) -> Any:
    """Generate an example value for anything ``TypeWalker.walk`` accepts."""
    return ExampleGenerator().generate(walk(schema_type))


def generate_json_template(schema_type: Any, indent: int = 2) -> str:
    """Generate an indented JSON example document for ``schema_type``."""
    return json.dumps(generate_example(schema_type), indent=indent)


__all__ = [
    "ExampleGenerator",
    "generate_example",
    "generate_json_template",
    "string_example",
    "int_example",
    "uint_example",
    "float_example",
    "bool_example",
]
