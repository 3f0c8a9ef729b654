"""Registry of documented endpoints.

Endpoints are registered during application setup and only read afterwards
(by the OpenAPI builder and the docs routes), so the registry does no
locking of its own.
"""

import logging
import re
from collections.abc import Callable, Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from notelink.sdk.schema.models import ParameterModel

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", "TRACE")

BODY_METHODS = ("POST", "PUT", "PATCH")

_COLON_PARAM = re.compile(r"(?<=/):([^/{}]+)")


def route_path(path: str) -> str:
    """Rewrite ``:name`` parameters to the ``{name}`` form used for routing."""
    return _COLON_PARAM.sub(r"{\1}", path)


class EndpointModel(BaseModel):
    """A documented route as it appears in the OpenAPI document."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str
    path: str
    description: str = ""
    responses: dict[str, str] = Field(default_factory=dict)
    parameters: list[ParameterModel] = Field(default_factory=list)
    request_schema: Any = None
    response_schema: Any = None
    auth_required: bool = False
    handler: Callable[..., Any] | None = Field(default=None, exclude=True, repr=False)

    @property
    def key(self) -> str:
        return f"{self.method} {self.path}"

    @property
    def validates_body(self) -> bool:
        return self.request_schema is not None and self.method in BODY_METHODS


class EndpointRegistry:
    """Ordered collection of endpoints keyed by ``"METHOD path"``.

    Registering the same key again replaces the earlier endpoint in place.
    """

    def __init__(self) -> None:
        self._endpoints: dict[str, EndpointModel] = {}

    def register(self, endpoint: EndpointModel) -> None:
        if endpoint.key in self._endpoints:
            logger.warning(f"Endpoint {endpoint.key} registered twice, replacing it")
        self._endpoints[endpoint.key] = endpoint

    def get(self, method: str, path: str) -> EndpointModel | None:
        return self._endpoints.get(f"{method.upper()} {path}")

    def __iter__(self) -> Iterator[EndpointModel]:
        return iter(list(self._endpoints.values()))

    def __len__(self) -> int:
        return len(self._endpoints)

    def __contains__(self, key: object) -> bool:
        return key in self._endpoints

    @property
    def requires_auth(self) -> bool:
        return any(e.auth_required for e in self._endpoints.values())
