"""Tests for notelink.sdk.schema.converters module."""

import pytest

from notelink.sdk.schema.converters import (
    CoercionError,
    coerce_parameter,
    validate_parameter,
    validate_parameters,
)
from notelink.sdk.schema.models import ParameterModel


class TestCoercion:
    """Test raw string coercion per declared type."""

    @pytest.mark.parametrize(
        "value,param_type,expected",
        [
            ("42", "integer", 42),
            ("-7", "int", -7),
            ("+3", "INTEGER", 3),
            ("3.14", "number", 3.14),
            ("1e3", "double", 1000.0),
            ("2", "float", 2.0),
            ("true", "boolean", True),
            ("0", "bool", False),
            ("yes", "boolean", True),
            ("anything", "string", "anything"),
            ("anything", "uuid", "anything"),
        ],
    )
    def test_valid_values(self, value, param_type, expected):
        """Test values that coerce cleanly."""
        assert coerce_parameter(value, param_type) == expected

    @pytest.mark.parametrize(
        "value,param_type",
        [
            ("abc", "integer"),
            ("1.5", "integer"),
            ("", "int"),
            ("ten", "number"),
            ("5\n", "integer"),
            (" 5", "integer"),
            ("\u0661\u0662", "integer"),
            (" 1.5 ", "number"),
            ("1_0", "number"),
            ("1.5\n", "float"),
            ("maybe", "boolean"),
        ],
    )
    def test_invalid_values(self, value, param_type):
        """Test values that do not parse raise CoercionError."""
        with pytest.raises(CoercionError):
            coerce_parameter(value, param_type)


class TestParameterValidation:
    """Test per-parameter validation results."""

    def test_integer_type_error(self):
        """Test a non-numeric value for a required integer parameter."""
        param = ParameterModel(name="age", type="integer", required=True)
        error = validate_parameter("abc", param)
        assert error is not None
        assert error.kind == "type_error"
        assert error.field == "age"
        assert error.message.startswith("Parameter 'age' must be of type integer")

    def test_required_missing(self):
        """Test absent and empty required parameters."""
        param = ParameterModel(name="id", location="path", required=True)
        for value in (None, ""):
            error = validate_parameter(value, param)
            assert error.kind == "required"
            assert error.message == "Required parameter 'id' is missing"

    def test_optional_absent_skips_type_check(self):
        """Test optional parameters are not checked when absent."""
        param = ParameterModel(name="limit", type="integer")
        assert validate_parameter(None, param) is None
        assert validate_parameter("", param) is None

    def test_unknown_type_never_fails(self):
        """Test unrecognized types are treated as strings."""
        param = ParameterModel(name="token", type="uuid", required=True)
        assert validate_parameter("not-a-uuid", param) is None

    def test_validate_parameters_collects_all(self):
        """Test every failing parameter is reported in declaration order."""
        params = [
            ParameterModel(name="id", location="path", type="integer", required=True),
            ParameterModel(name="limit", type="integer"),
            ParameterModel(name="verbose", type="boolean"),
            ParameterModel(name="X-Request-Id", location="header", required=True),
        ]
        errors = validate_parameters({"id": "x1", "limit": "10", "verbose": "sure"}, params)
        assert [(e.field, e.kind) for e in errors] == [
            ("id", "type_error"),
            ("verbose", "type_error"),
            ("X-Request-Id", "required"),
        ]

    def test_parameter_model_aliases(self):
        """Test the location is exposed as ``in``."""
        param = ParameterModel.model_validate({"name": "q", "in": "query", "type": "string"})
        assert param.location == "query"
        assert param.model_dump(by_alias=True)["in"] == "query"
