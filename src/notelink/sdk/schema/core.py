"""Structural validation of decoded JSON payloads.

By default only the top-level fields of a struct schema are checked and
array-of-struct schemas are only parsed, not inspected. Passing
``deep=True`` extends the checks into nested objects, references and array
elements; error paths then use ``.`` for nesting and ``[i]`` for indices
(``users[0].age``).
"""

import json
import logging
from typing import Any

from .converters import ValidationError
from .models import FieldDescriptor, TypeShape, ValidationErrorModel, WalkResult
from .walker import walk

logger = logging.getLogger(__name__)

BODY_FIELD = "body"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integral(value: Any) -> bool:
    if isinstance(value, float):
        return value.is_integer()
    return _is_number(value)


def _join(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


class StructuralValidator:
    """Checks payloads against the shape of a structured type.

    Example:
        >>> validator = StructuralValidator(CreateUser)
        >>> validator.validate({"name": "John"})
        [ValidationErrorModel(field='age', message="Required field 'age' is missing", kind='required')]
    """

    def __init__(self, schema_type: Any = None, *, deep: bool = False):
        """Initialize the validator.

        Args:
            schema_type: Anything ``TypeWalker.walk`` accepts, or a WalkResult.
                None means no validation is requested.
            deep: Also validate nested objects and array elements
        """
        if isinstance(schema_type, WalkResult):
            self.result = schema_type
        else:
            self.result = walk(schema_type)
        self.deep = deep

    @property
    def enabled(self) -> bool:
        return not self.result.is_empty or self.result.is_array

    def validate(self, payload: Any) -> list[ValidationErrorModel]:
        """Validate a decoded JSON value.

        Args:
            payload: Decoded JSON (dicts, lists and scalars)

        Returns:
            Every error found; empty means valid
        """
        shape = self.result.shape
        if shape is None:
            return []

        if self.result.is_array:
            if not self.deep:
                return []
            if not isinstance(payload, list):
                return [
                    ValidationErrorModel(
                        field=BODY_FIELD,
                        message="Request body must be a JSON array",
                        kind="type_error",
                    )
                ]
            errors: list[ValidationErrorModel] = []
            for index, item in enumerate(payload):
                errors.extend(self._validate_element(item, shape, f"[{index}]"))
            return errors

        if not isinstance(payload, dict):
            return [
                ValidationErrorModel(
                    field=BODY_FIELD,
                    message="Request body must be a JSON object",
                    kind="parse_error",
                )
            ]
        return self._validate_object(payload, shape.fields, "")

    def validate_json(self, body: str | bytes) -> list[ValidationErrorModel]:
        """Decode and validate a raw JSON body.

        A body that does not decode yields a single ``parse_error``.
        """
        if not self.enabled:
            return []
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.debug(f"Request body is not valid JSON: {e}")
            return [ValidationErrorModel(field=BODY_FIELD, message=str(e), kind="parse_error")]
        return self.validate(payload)

    def check(self, payload: Any) -> None:
        """Validate and raise ``ValidationError`` listing every error."""
        errors = self.validate(payload)
        if errors:
            raise ValidationError("Request body validation failed", errors)

    def _validate_element(
        self, item: Any, shape: TypeShape, path: str
    ) -> list[ValidationErrorModel]:
        if not isinstance(item, dict):
            return [
                ValidationErrorModel(
                    field=path, message=f"Field '{path}' must be an object", kind="type_error"
                )
            ]
        return self._validate_object(item, shape.fields, path)

    def _validate_object(
        self, data: dict[str, Any], fields: list[FieldDescriptor], prefix: str
    ) -> list[ValidationErrorModel]:
        errors: list[ValidationErrorModel] = []
        for descriptor in fields:
            path = _join(prefix, descriptor.name)
            value = data.get(descriptor.name)

            if value is None:
                if descriptor.required:
                    errors.append(
                        ValidationErrorModel(
                            field=path,
                            message=f"Required field '{path}' is missing",
                            kind="required",
                        )
                    )
                continue

            errors.extend(self._validate_value(value, descriptor, path))
        return errors

    def _validate_value(
        self, value: Any, descriptor: FieldDescriptor, path: str
    ) -> list[ValidationErrorModel]:
        message = self._type_mismatch(value, descriptor)
        if message is not None:
            return [
                ValidationErrorModel(
                    field=path, message=f"Field '{path}' {message}", kind="type_error"
                )
            ]
        if not self.deep:
            return []

        kind = descriptor.kind
        if kind == "array" and descriptor.element is not None:
            errors = []
            for index, item in enumerate(value):
                errors.extend(self._validate_item(item, descriptor.element, f"{path}[{index}]"))
            return errors
        if kind == "map" and descriptor.element is not None:
            errors = []
            for key, item in value.items():
                errors.extend(self._validate_item(item, descriptor.element, _join(path, key)))
            return errors
        if kind == "object":
            return self._validate_object(value, descriptor.fields or [], path)
        if kind == "reference":
            shape = self.result.definitions.get(descriptor.reference_name or "")
            if shape is None:
                return []
            return self._validate_object(value, shape.fields, path)
        return []

    def _validate_item(
        self, item: Any, element: FieldDescriptor, path: str
    ) -> list[ValidationErrorModel]:
        """Validate one array element or map value; null is only allowed when nullable."""
        if item is None:
            if element.nullable:
                return []
            return [
                ValidationErrorModel(
                    field=path, message=f"Field '{path}' must not be null", kind="type_error"
                )
            ]
        return self._validate_value(item, element, path)

    @staticmethod
    def _type_mismatch(value: Any, descriptor: FieldDescriptor) -> str | None:
        """Return the failure message for a value of the wrong shape, else None."""
        kind = descriptor.kind
        if kind == "string":
            return None if isinstance(value, str) else "must be a string"
        if kind == "int":
            if not _is_number(value):
                return "must be a number"
            return None if _is_integral(value) else "must be an integer"
        if kind == "uint":
            if not _is_number(value):
                return "must be a number"
            if value < 0 or not _is_integral(value):
                return "must be a non-negative integer"
            return None
        if kind == "float":
            return None if _is_number(value) else "must be a number"
        if kind == "bool":
            return None if isinstance(value, bool) else "must be a boolean"
        if kind == "array":
            return None if isinstance(value, list) else "must be an array"
        if kind in ("object", "reference", "map"):
            return None if isinstance(value, dict) else "must be an object"
        return None


def validate_payload(
    payload: Any, schema_type: Any, *, deep: bool = False
) -> list[ValidationErrorModel]:
    """Validate a decoded JSON value against ``schema_type``."""
    return StructuralValidator(schema_type, deep=deep).validate(payload)


def validate_request_body(
    body: str | bytes, schema_type: Any, *, deep: bool = False
) -> list[ValidationErrorModel]:
    """Decode and validate a raw JSON body against ``schema_type``."""
    return StructuralValidator(schema_type, deep=deep).validate_json(body)
