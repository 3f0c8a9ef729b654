"""
Pydantic models for the OpenAPI 3.1 document.

Documents are dumped with ``by_alias=True`` and ``exclude_none=True`` so that
unset optional members never appear in the output. Schema nodes are kept as
plain dicts produced by the schema emitter.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

OPENAPI_VERSION = "3.1.0"

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "head", "options", "trace")


class _OpenAPIModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class InfoModel(_OpenAPIModel):
    title: str
    description: str | None = None
    version: str


class ServerModel(_OpenAPIModel):
    url: str
    description: str | None = None


class MediaTypeModel(_OpenAPIModel):
    schema_: dict[str, Any] | None = Field(None, alias="schema")
    example: Any = None


class ParameterSpecModel(_OpenAPIModel):
    name: str
    location: str = Field(alias="in")
    description: str | None = None
    required: bool | None = None
    schema_: dict[str, Any] = Field(alias="schema")


class RequestBodyModel(_OpenAPIModel):
    description: str | None = None
    required: bool | None = None
    content: dict[str, MediaTypeModel]


class ResponseModel(_OpenAPIModel):
    description: str
    content: dict[str, MediaTypeModel] | None = None


class OperationModel(_OpenAPIModel):
    operation_id: str = Field(alias="operationId")
    summary: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    parameters: list[ParameterSpecModel] | None = None
    request_body: RequestBodyModel | None = Field(None, alias="requestBody")
    responses: dict[str, ResponseModel] = Field(default_factory=dict)
    security: list[dict[str, list[str]]] | None = None


class PathItemModel(_OpenAPIModel):
    get: OperationModel | None = None
    post: OperationModel | None = None
    put: OperationModel | None = None
    delete: OperationModel | None = None
    patch: OperationModel | None = None
    head: OperationModel | None = None
    options: OperationModel | None = None
    trace: OperationModel | None = None


class SecuritySchemeModel(_OpenAPIModel):
    type: str
    scheme: str | None = None
    bearer_format: str | None = Field(None, alias="bearerFormat")
    description: str | None = None
    name: str | None = None
    location: str | None = Field(None, alias="in")


class ComponentsModel(_OpenAPIModel):
    schemas: dict[str, dict[str, Any]] | None = None
    security_schemes: dict[str, SecuritySchemeModel] | None = Field(
        None, alias="securitySchemes"
    )


class OpenAPISpecModel(_OpenAPIModel):
    """Root of an OpenAPI 3.1 document."""

    openapi: str = OPENAPI_VERSION
    info: InfoModel
    servers: list[ServerModel] | None = None
    paths: dict[str, PathItemModel] = Field(default_factory=dict)
    components: ComponentsModel | None = None
    security: list[dict[str, list[str]]] | None = None
