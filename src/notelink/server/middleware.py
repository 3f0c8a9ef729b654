"""Request validation applied in front of documented route handlers."""

import logging
from collections.abc import Iterable

from fastapi import Request
from fastapi.responses import JSONResponse

from notelink.sdk.schema.converters import validate_parameters
from notelink.sdk.schema.core import StructuralValidator
from notelink.sdk.schema.models import ParameterModel, ValidationErrorResponseModel
from notelink.server.registry import EndpointModel

logger = logging.getLogger(__name__)

PARAMETER_ERROR = "Parameter validation failed"
INVALID_JSON_ERROR = "Invalid JSON body"
BODY_ERROR = "Request body validation failed"


def extract_parameter_values(
    request: Request, params: Iterable[ParameterModel]
) -> dict[str, str | None]:
    """Collect the raw string value of every declared parameter.

    Missing parameters map to None.
    """
    values: dict[str, str | None] = {}
    for param in params:
        if param.location == "path":
            raw = request.path_params.get(param.name)
            values[param.name] = None if raw is None else str(raw)
        elif param.location == "header":
            values[param.name] = request.headers.get(param.name)
        else:
            values[param.name] = request.query_params.get(param.name)
    return values


def error_response(response: ValidationErrorResponseModel, status_code: int = 400) -> JSONResponse:
    return JSONResponse(response.to_dict(), status_code=status_code)


class RequestValidator:
    """Validates the parameters and JSON body of requests to one endpoint."""

    def __init__(self, endpoint: EndpointModel, *, deep: bool = False):
        self.endpoint = endpoint
        self.body_validator = (
            StructuralValidator(endpoint.request_schema, deep=deep)
            if endpoint.validates_body
            else None
        )

    @property
    def active(self) -> bool:
        return bool(self.endpoint.parameters) or self.body_validator is not None

    async def __call__(self, request: Request) -> JSONResponse | None:
        """Return a 400 response if the request is invalid, else None."""
        if self.endpoint.parameters:
            values = extract_parameter_values(request, self.endpoint.parameters)
            errors = validate_parameters(values, self.endpoint.parameters)
            if errors:
                logger.debug(f"{self.endpoint.key}: {len(errors)} parameter error(s)")
                return error_response(
                    ValidationErrorResponseModel(error=PARAMETER_ERROR, errors=errors)
                )

        if self.body_validator is not None:
            errors = self.body_validator.validate_json(await request.body())
            if errors:
                logger.debug(f"{self.endpoint.key}: {len(errors)} body error(s)")
                summary = (
                    INVALID_JSON_ERROR
                    if any(e.kind == "parse_error" for e in errors)
                    else BODY_ERROR
                )
                return error_response(ValidationErrorResponseModel(error=summary, errors=errors))

        return None
