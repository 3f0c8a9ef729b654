"""notelink SDK Schema - type-driven schemas, examples and validation.

This module derives three artifacts from a single application-defined type
(a dataclass or a pydantic model):

- a JSON Schema document with shared named components
- a realistic example payload
- a structural validator for decoded JSON bodies

plus a flat validator for string path/query/header parameters.

## Key Components

### Walker
- `TypeWalker` / `walk`: introspects a type into a `WalkResult`

### Emitters
- `SchemaEmitter`, `TypeRegistry`, `generate_json_schema`
- `ExampleGenerator`, `generate_example`, `generate_json_template`
- `generate_typescript`

### Validators
- `StructuralValidator`, `validate_payload`, `validate_request_body`
- `validate_parameters`, `coerce_parameter`
- `ValidationError`: exception carrying every `ValidationErrorModel`

## Quick Examples

```python
from dataclasses import dataclass
from notelink.sdk.schema import UInt, generate_example, generate_json_schema, validate_payload, wire

@dataclass
class Address:
    city: str

@dataclass
class CreateUser:
    name: str
    age: UInt
    email: str = wire(omitempty=True, default="")
    address: Address | None = None

schema, components = generate_json_schema(CreateUser, "CreateUser")
# schema["required"] == ["name", "age"]
# components["Address"]["properties"] == {"city": {"type": "string"}}

generate_example(CreateUser)
# {"name": "John Doe", "age": 25, "email": "user@example.com", "address": {"city": "example_value"}}

validate_payload({"name": "John", "age": -5}, CreateUser)
# [ValidationErrorModel(field="age", kind="type_error", ...)]
```
"""

from ._types import (
    Float32,
    Float64,
    Format,
    Int32,
    Int64,
    UInt,
    UInt32,
    UInt64,
    inline,
    wire,
)
from .converters import (
    CoercionError,
    ValidationError,
    coerce_parameter,
    validate_parameter,
    validate_parameters,
)
from .core import StructuralValidator, validate_payload, validate_request_body
from .emitter import SchemaEmitter, TypeRegistry, generate_json_schema, parameter_type_to_schema
from .examples import ExampleGenerator, generate_example, generate_json_template
from .models import (
    FieldDescriptor,
    ParameterModel,
    TypeShape,
    ValidationErrorModel,
    ValidationErrorResponseModel,
    WalkResult,
)
from .typescript import generate_typescript
from .walker import TypeWalker, walk

__all__ = [
    # Annotations
    "Format",
    "Int32",
    "Int64",
    "UInt",
    "UInt32",
    "UInt64",
    "Float32",
    "Float64",
    "inline",
    "wire",
    # Models
    "FieldDescriptor",
    "TypeShape",
    "WalkResult",
    "ParameterModel",
    "ValidationErrorModel",
    "ValidationErrorResponseModel",
    # Walker
    "TypeWalker",
    "walk",
    # Emitters
    "SchemaEmitter",
    "TypeRegistry",
    "generate_json_schema",
    "parameter_type_to_schema",
    "ExampleGenerator",
    "generate_example",
    "generate_json_template",
    "generate_typescript",
    # Validators
    "StructuralValidator",
    "validate_payload",
    "validate_request_body",
    "coerce_parameter",
    "validate_parameter",
    "validate_parameters",
    "CoercionError",
    "ValidationError",
]
