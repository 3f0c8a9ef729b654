"""Type descriptor walker.

The walker introspects dataclasses and pydantic models and produces the
normalized field lists the emitter, the example generator and the validators
work from. All three consumers see the same wire names and the same
requiredness, so the rules live here and nowhere else:

- Only public fields are considered (no leading underscore); a field tagged
  ``-`` is dropped entirely.
- The wire name is the explicit tag name (text before the first comma) or,
  without one, the declared identifier with its first letter lower-cased.
  This camelCase fallback is a default naming convention only: it leaves
  ``first_name`` unchanged and turns ``FirstName`` into ``firstName``.
- A field is required iff it is not nullable and not tagged omit-if-empty.
- Named nested structures become references; ``@inline`` structures are
  embedded. ``datetime``/``date`` are strings with a format hint.
- A type name already being walked on the current path is recorded as a
  reference without recursing, so self-referential types terminate.
"""

import dataclasses
import enum
import inspect
import logging
import types
import typing
from collections.abc import Mapping, Sequence, Set
from datetime import date, datetime
from typing import Annotated, Any, Union, get_args, get_origin

from annotated_types import Ge, Gt
from pydantic import BaseModel

from ._types import INLINE_ATTR, OMIT_EMPTY, WIRE_TAG_KEY, Format, Kind
from .models import FieldDescriptor, TypeShape, WalkResult

logger = logging.getLogger(__name__)

_ARRAY_ORIGINS = (list, tuple, set, frozenset, Sequence, Set)
_MAP_ORIGINS = (dict, Mapping)


def is_structured(tp: Any) -> bool:
    """Return True for dataclass and pydantic model classes."""
    if not isinstance(tp, type):
        return False
    if dataclasses.is_dataclass(tp):
        return True
    return issubclass(tp, BaseModel) and tp is not BaseModel


def is_inline(tp: type) -> bool:
    return bool(vars(tp).get(INLINE_ATTR, False))


def type_name(tp: type) -> str:
    """Declared name used as the registry key; empty for inline types."""
    if is_inline(tp):
        return ""
    return tp.__name__


def camel_case(identifier: str) -> str:
    return identifier[:1].lower() + identifier[1:]


def parse_wire_tag(tag: str | None, identifier: str) -> tuple[str | None, bool]:
    """Resolve a wire tag into ``(wire_name, omitempty)``.

    Returns a None name when the tag excludes the field.
    """
    if tag is None:
        return camel_case(identifier), False
    if tag == "-":
        return None, False
    name, _, modifiers = tag.partition(",")
    omitempty = OMIT_EMPTY in [m.strip() for m in modifiers.split(",")]
    return (name or camel_case(identifier)), omitempty


def _strip_annotated(tp: Any) -> tuple[Any, list[Any]]:
    metadata: list[Any] = []
    while get_origin(tp) is Annotated:
        args = get_args(tp)
        tp = args[0]
        metadata.extend(args[1:])
    return tp, metadata


def _strip_optional(tp: Any) -> tuple[Any, bool]:
    """Remove ``None`` from a union; returns ``(type, nullable)``."""
    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(tp) if a is not type(None)]
        nullable = len(args) != len(get_args(tp))
        if len(args) == 1:
            return args[0], nullable
        # Unions of several concrete types are not describable
        return Any, nullable
    return tp, False


def _format_from(metadata: list[Any]) -> str | None:
    for item in metadata:
        if isinstance(item, Format):
            return item.name
    return None


def _is_unsigned(metadata: list[Any]) -> bool:
    for item in metadata:
        if isinstance(item, Ge) and item.ge >= 0:
            return True
        if isinstance(item, Gt) and item.gt >= 0:
            return True
    return False


class _FieldSpec:
    """A public field of a structured type before classification."""

    __slots__ = ("identifier", "annotation", "metadata", "tag", "omitempty")

    def __init__(
        self,
        identifier: str,
        annotation: Any,
        metadata: list[Any],
        tag: str | None,
        omitempty: bool = False,
    ) -> None:
        self.identifier = identifier
        self.annotation = annotation
        self.metadata = metadata
        self.tag = tag
        self.omitempty = omitempty


def _field_hint(cls: type, name: str, annotation: Any) -> Any:
    """Resolve a single field annotation in the namespace of its declaring class."""
    if not isinstance(annotation, str):
        return annotation
    for base in cls.__mro__:
        if name not in inspect.get_annotations(base):
            continue
        namespace = {"__annotations__": {name: annotation}, "__module__": base.__module__}
        holder = type(base.__name__, (), namespace)
        try:
            hints = typing.get_type_hints(holder, localns=dict(vars(base)), include_extras=True)
            return hints[name]
        except (NameError, TypeError) as e:
            logger.warning(f"Could not resolve annotation of {cls.__name__}.{name}: {e}")
            break
    return Any


def _dataclass_fields(cls: type) -> list[_FieldSpec]:
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        logger.debug(f"Resolving annotations of {cls.__name__} field by field: {e}")
        hints = {f.name: _field_hint(cls, f.name, f.type) for f in dataclasses.fields(cls)}
    specs = []
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, f.type if not isinstance(f.type, str) else Any)
        specs.append(_FieldSpec(f.name, annotation, [], f.metadata.get(WIRE_TAG_KEY)))
    return specs


def _pydantic_fields(cls: type[BaseModel]) -> list[_FieldSpec]:
    specs = []
    for identifier, info in cls.model_fields.items():
        if info.exclude:
            tag: str | None = "-"
        else:
            alias = info.serialization_alias or info.alias
            tag = alias if alias else None
        specs.append(
            _FieldSpec(
                identifier,
                info.annotation,
                list(info.metadata),
                tag,
                omitempty=not info.is_required(),
            )
        )
    return specs


def _field_specs(cls: type) -> list[_FieldSpec]:
    if dataclasses.is_dataclass(cls):
        return _dataclass_fields(cls)
    return _pydantic_fields(cls)


class TypeWalker:
    """Recursive type introspection with a per-walk cycle guard.

    A walker instance is cheap and holds state for one walk only; use a
    fresh instance (or the module-level ``walk``) per call.
    """

    def __init__(self) -> None:
        self._definitions: dict[str, TypeShape] = {}
        self._in_progress: set[str] = set()
        self._inline_stack: set[type] = set()

    def walk(self, value: Any) -> WalkResult:
        """Produce the WalkResult for a type, an instance, or a list of either.

        Args:
            value: A structured class, an instance, ``Optional[...]``,
                ``list[...]`` alias, or a non-empty list instance

        Returns:
            WalkResult; empty when ``value`` is None or not introspectable
        """
        self._definitions = {}
        self._in_progress = set()
        self._inline_stack = set()

        if value is None:
            return WalkResult()

        tp, is_array = self._unwrap_root(value)
        if tp is None:
            return WalkResult(is_array=is_array)

        if is_structured(tp):
            shape = self._shape_for(tp)
            return WalkResult(
                shape=shape, is_array=is_array, definitions=dict(self._definitions)
            )

        element = self.describe("", tp)
        if element.kind == "unknown" and not is_array:
            logger.debug(f"Type {tp!r} is not introspectable, producing an empty result")
            return WalkResult()
        return WalkResult(is_array=is_array, element=element, definitions=dict(self._definitions))

    def _unwrap_root(self, value: Any) -> tuple[Any, bool]:
        """Resolve the root type, transparently unwrapping optionals and arrays."""
        if isinstance(value, list):
            if not value:
                logger.debug("Empty list has no element type to introspect")
                return None, True
            return self._unwrap_root(value[0])[0], True

        tp = value if self._is_type_like(value) else type(value)
        tp, _ = _strip_annotated(tp)
        tp, _ = _strip_optional(tp)

        origin = get_origin(tp)
        if origin in _ARRAY_ORIGINS:
            args = [a for a in get_args(tp) if a is not Ellipsis]
            inner = args[0] if args else Any
            inner, _ = _strip_annotated(inner)
            inner, _ = _strip_optional(inner)
            return inner, True
        return tp, False

    @staticmethod
    def _is_type_like(value: Any) -> bool:
        return (
            isinstance(value, type)
            or get_origin(value) is not None
            or value is Any
        )

    def _shape_for(self, cls: type) -> TypeShape:
        name = type_name(cls)
        if name:
            self._in_progress.add(name)
        try:
            fields = []
            for spec in _field_specs(cls):
                if spec.identifier.startswith("_"):
                    continue
                wire_name, omitempty = parse_wire_tag(spec.tag, spec.identifier)
                if wire_name is None:
                    continue
                descriptor = self.describe(wire_name, spec.annotation, spec.metadata)
                required = not descriptor.nullable and not (omitempty or spec.omitempty)
                fields.append(descriptor.model_copy(update={"required": required}))
        finally:
            if name:
                self._in_progress.discard(name)

        shape = TypeShape(name=name, fields=fields)
        if name:
            if name in self._definitions:
                logger.debug(f"Type name '{name}' already registered, keeping the first shape")
            else:
                self._definitions[name] = shape
        return shape

    def describe(self, name: str, annotation: Any, metadata: list[Any] | None = None) -> FieldDescriptor:
        """Classify one annotation into a FieldDescriptor named ``name``."""
        extra = list(metadata or [])
        tp, inner_meta = _strip_annotated(annotation)
        extra.extend(inner_meta)
        tp, nullable = _strip_optional(tp)
        tp, more_meta = _strip_annotated(tp)
        extra.extend(more_meta)

        descriptor = self._classify(name, tp, extra)
        if nullable:
            descriptor = descriptor.model_copy(update={"nullable": True, "required": False})
        return descriptor

    def _classify(self, name: str, tp: Any, metadata: list[Any]) -> FieldDescriptor:
        fmt = _format_from(metadata)
        kind: Kind

        if tp is Any or tp is object or isinstance(tp, typing.TypeVar):
            return FieldDescriptor(name=name, kind="unknown")

        origin = get_origin(tp)
        if origin in _ARRAY_ORIGINS:
            args = [a for a in get_args(tp) if a is not Ellipsis]
            element = self.describe(name, args[0] if args else Any)
            return FieldDescriptor(name=name, kind="array", element=element)
        if origin in _MAP_ORIGINS:
            args = get_args(tp)
            value = self.describe(name, args[1] if len(args) == 2 else Any)
            return FieldDescriptor(name=name, kind="map", element=value)
        if origin is not None:
            logger.debug(f"Unsupported generic annotation {tp!r} on field '{name}'")
            return FieldDescriptor(name=name, kind="unknown")

        if not isinstance(tp, type):
            return FieldDescriptor(name=name, kind="unknown")

        if tp in _ARRAY_ORIGINS:
            return FieldDescriptor(
                name=name, kind="array", element=FieldDescriptor(name=name, kind="unknown")
            )
        if tp in _MAP_ORIGINS:
            return FieldDescriptor(
                name=name, kind="map", element=FieldDescriptor(name=name, kind="unknown")
            )

        if issubclass(tp, enum.Enum):
            return self._classify_enum(name, tp)
        if issubclass(tp, bool):
            return FieldDescriptor(name=name, kind="bool")
        if issubclass(tp, int):
            kind = "uint" if _is_unsigned(metadata) else "int"
            return FieldDescriptor(name=name, kind=kind, format=fmt or "int64")
        if issubclass(tp, float):
            return FieldDescriptor(name=name, kind="float", format=fmt or "double")
        if issubclass(tp, str):
            return FieldDescriptor(name=name, kind="string", format=fmt)
        # datetime is a date subclass, check it first
        if issubclass(tp, datetime):
            return FieldDescriptor(name=name, kind="string", format="date-time")
        if issubclass(tp, date):
            return FieldDescriptor(name=name, kind="string", format="date")

        if is_structured(tp):
            return self._classify_struct(name, tp)

        logger.debug(f"Unsupported type {tp.__name__} on field '{name}'")
        return FieldDescriptor(name=name, kind="unknown")

    def _classify_struct(self, name: str, tp: type) -> FieldDescriptor:
        ref = type_name(tp)
        if not ref:
            if tp in self._inline_stack:
                return FieldDescriptor(name=name, kind="object", fields=[])
            self._inline_stack.add(tp)
            try:
                shape = self._shape_for(tp)
            finally:
                self._inline_stack.discard(tp)
            return FieldDescriptor(name=name, kind="object", fields=shape.fields)
        if ref not in self._in_progress and ref not in self._definitions:
            self._shape_for(tp)
        return FieldDescriptor(name=name, kind="reference", reference_name=ref)

    def _classify_enum(self, name: str, tp: type[enum.Enum]) -> FieldDescriptor:
        values = [member.value for member in tp]
        if values and all(isinstance(v, str) for v in values):
            kind: Kind = "string"
        elif values and all(isinstance(v, int) and not isinstance(v, bool) for v in values):
            kind = "int"
        else:
            return FieldDescriptor(name=name, kind="unknown", enum=values or None)
        return FieldDescriptor(
            name=name, kind=kind, format="int64" if kind == "int" else None, enum=values
        )


def walk(value: Any) -> WalkResult:
    """Walk ``value`` with a fresh TypeWalker."""
    return TypeWalker().walk(value)
