"""Parameter coercion and validation for notelink.

Path, query and header parameters arrive as raw strings. Validation only
checks that the string can be coerced to the declared type; the coerced
value is returned for callers that want it but nothing is rewritten in the
request.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .models import ParameterModel, ValidationErrorModel

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_REJECT_RE = re.compile(r"[\s_]")
_BOOL_ADAPTER = TypeAdapter(bool)


class ValidationError(ValueError):
    """Raised when a payload or parameter set fails validation.

    Attributes:
        errors: Every error found, in check order
    """

    def __init__(self, message: str, errors: Iterable[ValidationErrorModel] | None = None):
        super().__init__(message)
        self.message = message
        self.errors: list[ValidationErrorModel] = list(errors or [])

    def to_dict(self) -> dict[str, Any]:
        """Error body in the ``{"error": ..., "errors": [...]}`` wire shape."""
        return {"error": self.message, "errors": [e.to_dict() for e in self.errors]}


class CoercionError(ValueError):
    """A raw parameter string could not be coerced to its declared type."""

    pass


def coerce_parameter(value: str, param_type: str) -> Any:
    """Coerce a raw parameter string to its declared type.

    Args:
        value: Raw string from the path, query string or headers
        param_type: Declared type name (case-insensitive)

    Returns:
        The coerced value; the raw string for ``string`` and unknown types

    Raises:
        CoercionError: If the value does not parse as the declared type
    """
    normalized = param_type.lower()

    if normalized in ("number", "float", "double"):
        # float() tolerates surrounding whitespace and digit separators
        if _FLOAT_REJECT_RE.search(value):
            raise CoercionError(f"invalid number: {value!r}")
        try:
            return float(value)
        except ValueError:
            raise CoercionError(f"invalid number: {value!r}") from None

    if normalized in ("integer", "int"):
        if not _INTEGER_RE.fullmatch(value):
            raise CoercionError(f"invalid integer: {value!r}")
        return int(value)

    if normalized in ("boolean", "bool"):
        try:
            return _BOOL_ADAPTER.validate_python(value)
        except PydanticValidationError:
            raise CoercionError(f"invalid boolean: {value!r}") from None

    # "string" and unrecognized types pass through untouched
    return value


def validate_parameter(value: str | None, param: ParameterModel) -> ValidationErrorModel | None:
    """Validate one parameter value; None means valid (or absent and optional)."""
    if value is None or value == "":
        if param.required:
            return ValidationErrorModel(
                field=param.name,
                message=f"Required parameter '{param.name}' is missing",
                kind="required",
            )
        return None

    try:
        coerce_parameter(value, param.type)
    except CoercionError as e:
        return ValidationErrorModel(
            field=param.name,
            message=f"Parameter '{param.name}' must be of type {param.type}: {e}",
            kind="type_error",
        )
    return None


def validate_parameters(
    values: Mapping[str, str | None], params: Iterable[ParameterModel]
) -> list[ValidationErrorModel]:
    """Validate every declared parameter against the supplied raw values.

    Args:
        values: Raw values keyed by parameter name; missing keys are absent
        params: Declared parameters, checked in order

    Returns:
        All errors found; empty when every parameter is valid
    """
    errors = []
    for param in params:
        error = validate_parameter(values.get(param.name), param)
        if error is not None:
            errors.append(error)
    return errors
