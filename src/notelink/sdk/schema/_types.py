"""Type definitions and annotation helpers for the notelink schema engine.

Besides the descriptor literals, this module holds the markers application
code uses to shape the wire representation of its dataclasses:

    >>> from dataclasses import dataclass
    >>> from notelink.sdk.schema import Int32, UInt, wire
    >>>
    >>> @dataclass
    ... class User:
    ...     id: UInt
    ...     user_name: str = wire("username")
    ...     nickname: str = wire(omitempty=True, default="")
    ...     age: Int32 = 0
    ...     secret: str = wire(exclude=True, default="")
"""

import dataclasses
from dataclasses import dataclass
from typing import Annotated, Any, Literal, TypeVar

from annotated_types import Ge

# Descriptor kinds produced by the walker
Kind = Literal["string", "int", "uint", "float", "bool", "array", "map", "object", "reference", "unknown"]

# Error kinds reported by the validators
ErrorKind = Literal["required", "type_error", "parse_error"]

ParameterLocation = Literal["path", "query", "header"]

# Metadata key holding the wire tag on dataclass fields
WIRE_TAG_KEY = "json"

# Modifier that marks a field as omit-if-empty
OMIT_EMPTY = "omitempty"

# Marker set on classes decorated with @inline
INLINE_ATTR = "__notelink_inline__"


@dataclass(frozen=True)
class Format:
    """Declared width marker, emitted as the schema ``format``."""

    name: str


Int32 = Annotated[int, Format("int32")]
Int64 = Annotated[int, Format("int64")]
UInt = Annotated[int, Ge(0)]
UInt32 = Annotated[int, Ge(0), Format("int32")]
UInt64 = Annotated[int, Ge(0), Format("int64")]
Float32 = Annotated[float, Format("float")]
Float64 = Annotated[float, Format("double")]


def wire(
    name: str | None = None,
    *,
    omitempty: bool = False,
    exclude: bool = False,
    **field_kwargs: Any,
) -> Any:
    """Declare a dataclass field with an explicit wire tag.

    Args:
        name: Wire name; the camelCase fallback applies when omitted
        omitempty: Mark the field as omit-if-empty (not required)
        exclude: Drop the field from schemas, examples and validation
        **field_kwargs: Passed through to ``dataclasses.field``

    Returns:
        A ``dataclasses.field`` carrying the tag in its metadata
    """
    if exclude:
        tag = "-"
    else:
        tag = name or ""
        if omitempty:
            tag += "," + OMIT_EMPTY
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[WIRE_TAG_KEY] = tag
    return dataclasses.field(metadata=metadata, **field_kwargs)


T = TypeVar("T", bound=type)


def inline(cls: T) -> T:
    """Mark a structured type as anonymous.

    Inline types are embedded into every schema that uses them and are never
    added to the shared component registry.
    """
    setattr(cls, INLINE_ATTR, True)
    return cls


__all__ = [
    "Kind",
    "ErrorKind",
    "ParameterLocation",
    "Format",
    "Int32",
    "Int64",
    "UInt",
    "UInt32",
    "UInt64",
    "Float32",
    "Float64",
    "wire",
    "inline",
    "WIRE_TAG_KEY",
    "OMIT_EMPTY",
    "INLINE_ATTR",
]
