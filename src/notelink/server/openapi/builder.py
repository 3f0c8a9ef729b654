"""
OpenAPI document assembly.

One ``TypeRegistry`` is shared across every endpoint of a single build, so a
type used by several endpoints appears once under ``components.schemas``.
"""

import json
import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from notelink.sdk.schema.emitter import SchemaEmitter, TypeRegistry, parameter_type_to_schema
from notelink.sdk.schema.examples import ExampleGenerator
from notelink.sdk.schema.walker import walk
from notelink.server.core.config.models import DocsConfigModel
from notelink.server.openapi.models import (
    ComponentsModel,
    InfoModel,
    MediaTypeModel,
    OpenAPISpecModel,
    OperationModel,
    ParameterSpecModel,
    PathItemModel,
    RequestBodyModel,
    ResponseModel,
    SecuritySchemeModel,
    ServerModel,
)
from notelink.server.registry import EndpointModel, route_path

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
BEARER_SCHEME = "bearerAuth"
SUCCESS_CODES = ("200", "201")

_VERSION_SEGMENT = re.compile(r"^v\d+$")
_TYPED_PARAM = re.compile(r"\{([^{}:]+):[^{}]+\}")


def normalize_path(path: str) -> str:
    """Rewrite route parameters to OpenAPI form.

    ``/users/:id`` and ``/users/{id:int}`` both become ``/users/{id}``.
    """
    return _TYPED_PARAM.sub(r"{\1}", route_path(path))


def _title(segment: str) -> str:
    return segment[:1].upper() + segment[1:]


def _is_version(segment: str) -> bool:
    return bool(_VERSION_SEGMENT.match(segment))


def generate_operation_id(method: str, path: str) -> str:
    """Build an operation id from a method and path.

    ``api`` and version segments are skipped and parameters become ``By<Name>``:
    ``GET /api/v1/users/{id}`` -> ``getUsersById``.
    """
    parts = [method.lower()]
    for segment in normalize_path(path).strip("/").split("/"):
        if not segment or segment == "api" or _is_version(segment):
            continue
        if segment.startswith("{") and segment.endswith("}"):
            parts.append("By" + _title(segment[1:-1]))
        else:
            parts.append(_title(segment))
    return "".join(parts)


def extract_tags_from_path(path: str) -> list[str]:
    """Tag an operation by its first resource segment (``/api/v1/users/{id}`` -> ``["users"]``)."""
    for segment in normalize_path(path).strip("/").split("/"):
        if not segment or segment == "api" or _is_version(segment):
            continue
        if segment.startswith("{"):
            continue
        return [segment]
    return []


class OpenAPIBuilder:
    """Builds one OpenAPI document from a config and a set of endpoints."""

    def __init__(self, config: DocsConfigModel):
        self.config = config
        self.registry = TypeRegistry()
        self.emitter = SchemaEmitter(self.registry)

    def build(self, endpoints: Iterable[EndpointModel]) -> OpenAPISpecModel:
        endpoints = list(endpoints)
        paths: dict[str, dict[str, OperationModel]] = {}

        for endpoint in endpoints:
            path = normalize_path(endpoint.path)
            paths.setdefault(path, {})[endpoint.method.lower()] = self.operation(endpoint)

        security_schemes = None
        if any(e.auth_required for e in endpoints):
            security_schemes = {
                BEARER_SCHEME: SecuritySchemeModel(
                    type="http",
                    scheme="bearer",
                    bearer_format="JWT",
                    description="JWT Authorization header using the Bearer scheme",
                )
            }

        schemas = self.registry.components(self.emitter)
        components = None
        if schemas or security_schemes:
            components = ComponentsModel(schemas=schemas or None, security_schemes=security_schemes)
        return OpenAPISpecModel(
            info=InfoModel(
                title=self.config.title,
                description=self.config.description or None,
                version=self.config.version,
            ),
            servers=[ServerModel(url=self.config.server_url, description="API Server")],
            paths={path: PathItemModel(**ops) for path, ops in paths.items()},
            components=components,
        )

    def operation(self, endpoint: EndpointModel) -> OperationModel:
        parameters = [
            ParameterSpecModel(
                name=param.name,
                location=param.location,
                description=param.description,
                required=param.required or None,
                schema_=parameter_type_to_schema(param.type),
            )
            for param in endpoint.parameters
        ]

        request_body = None
        if endpoint.request_schema is not None:
            request_body = RequestBodyModel(
                required=True,
                content={JSON_CONTENT_TYPE: self.media_type(endpoint.request_schema, "RequestBody")},
            )

        responses: dict[str, ResponseModel] = {}
        for status_code, description in endpoint.responses.items():
            content = None
            if status_code in SUCCESS_CODES and endpoint.response_schema is not None:
                content = {JSON_CONTENT_TYPE: self.media_type(endpoint.response_schema, "ResponseBody")}
            responses[status_code] = ResponseModel(description=description, content=content)
        if not responses:
            responses["200"] = ResponseModel(description="Successful response")

        return OperationModel(
            operation_id=generate_operation_id(endpoint.method, endpoint.path),
            summary=endpoint.description or None,
            description=endpoint.description or None,
            tags=extract_tags_from_path(endpoint.path) or None,
            parameters=parameters or None,
            request_body=request_body,
            responses=responses,
            security=[{BEARER_SCHEME: []}] if endpoint.auth_required else None,
        )

    def media_type(self, schema_type: Any, title: str) -> MediaTypeModel:
        result = walk(schema_type)
        schema = self.emitter.emit(result, title=title)
        example = ExampleGenerator(self.registry.shapes).generate(result)
        return MediaTypeModel(schema_=schema, example=example)


def build_openapi_spec(
    config: DocsConfigModel, endpoints: Iterable[EndpointModel]
) -> dict[str, Any]:
    """Build the OpenAPI 3.1 document for ``endpoints`` as a JSON-ready dict."""
    return OpenAPIBuilder(config).build(endpoints).to_dict()


def export_openapi_to_file(spec: dict[str, Any], path: Path | str) -> Path:
    """Write an OpenAPI document as indented JSON.

    Returns:
        The path written to
    """
    target = Path(path)
    if target.parent != Path("."):
        target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(spec, indent=2) + "\n")
    logger.info(f"OpenAPI specification written to {target}")
    return target
