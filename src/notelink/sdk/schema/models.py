"""Pydantic models for the notelink schema engine.

This module contains the value objects shared by the walker, the schema
emitter, the example generator and the validators. All of them are frozen,
so a walk result can be handed to several consumers without copying.
"""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from notelink.sdk.models import SdkBaseModel

from ._types import ErrorKind, Kind, ParameterLocation


class FieldDescriptor(SdkBaseModel):
    """Normalized description of one field of a structured type.

    Attributes:
        name: Wire name after tag resolution.
        kind: Descriptor kind.
        format: Width or string format hint (int32, int64, float, double, date-time, date).
        element: Element descriptor for arrays, value descriptor for maps.
        reference_name: Registry key for named nested structures.
        fields: Embedded field list for anonymous (inline) structures.
        required: Whether the field must be present in a payload.
        nullable: Whether JSON null is a valid value.
        enum: Allowed values for enum-typed fields.

    Example:
        >>> FieldDescriptor(name="tags", kind="array",
        ...                 element=FieldDescriptor(name="tags", kind="string"))
    """

    name: str
    kind: Kind
    format: str | None = None
    element: FieldDescriptor | None = None
    reference_name: str | None = None
    fields: list[FieldDescriptor] | None = None
    required: bool = True
    nullable: bool = False
    enum: list[Any] | None = None


class TypeShape(SdkBaseModel):
    """Ordered field list for one structured type.

    ``name`` is empty for inline types, which are never deduplicated.
    """

    name: str = ""
    fields: list[FieldDescriptor] = Field(default_factory=list)

    @property
    def required_names(self) -> list[str]:
        return [f.name for f in self.fields if f.required]


class WalkResult(SdkBaseModel):
    """Output of one walk over a caller-supplied type.

    Attributes:
        shape: Shape of the root structure, None when the root is not a structure.
        is_array: Whether the usage site is an array of the root type.
        definitions: Every reachable named shape, root included, keyed by name.
        element: Descriptor of a non-structured root (e.g. ``list[int]``).
    """

    shape: TypeShape | None = None
    is_array: bool = False
    definitions: dict[str, TypeShape] = Field(default_factory=dict)
    element: FieldDescriptor | None = None

    @property
    def is_empty(self) -> bool:
        return self.shape is None and self.element is None


class ValidationErrorModel(SdkBaseModel):
    """A single field-qualified validation error.

    ``field`` uses ``.`` for object nesting and ``[i]`` for array indices,
    e.g. ``users[1].age``. Serialized with ``by_alias=True`` the kind is
    exposed as ``type``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    field: str
    message: str
    kind: ErrorKind = Field(alias="type")

    def to_dict(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class ValidationErrorResponseModel(SdkBaseModel):
    """Error body returned to HTTP clients when validation fails."""

    error: str
    errors: list[ValidationErrorModel] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ParameterModel(SdkBaseModel):
    """Declaration of a flat path, query or header parameter.

    Example:
        >>> ParameterModel(name="limit", location="query", type="integer")
        >>> ParameterModel.model_validate({"name": "id", "in": "path", "required": True})
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation = Field(default="query", alias="in")
    type: str = "string"
    description: str | None = None
    required: bool = False


FieldDescriptor.model_rebuild()
TypeShape.model_rebuild()
WalkResult.model_rebuild()
