"""
FastAPI host for documented routes.

``ApiNote`` records every route registered through ``documented_route`` so it
can be described in the generated OpenAPI document, and wraps the handler
with authentication guards, request validation and custom middleware, in
that order.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from notelink.sdk.schema.converters import ValidationError
from notelink.sdk.schema.models import ParameterModel
from notelink.server.core.config.models import DocsConfigModel
from notelink.server.middleware import RequestValidator
from notelink.server.openapi.builder import build_openapi_spec, export_openapi_to_file
from notelink.server.registry import (
    SUPPORTED_METHODS,
    EndpointModel,
    EndpointRegistry,
    route_path,
)
from notelink.server.ui import docs_page

logger = logging.getLogger(__name__)

Handler = Callable[[Request], Any]
AuthGuard = Callable[[Request], Any]
CallNext = Callable[[Request], Awaitable[Response]]
Middleware = Callable[[Request, CallNext], Awaitable[Response]]


async def _invoke(func: Callable[..., Any], *args: Any) -> Any:
    if inspect.iscoroutinefunction(func):
        return await func(*args)
    result = await run_in_threadpool(func, *args)
    if inspect.isawaitable(result):
        return await result
    return result


def _to_response(result: Any) -> Response:
    if isinstance(result, Response):
        return result
    if hasattr(result, "model_dump"):
        result = result.model_dump(mode="json", by_alias=True)
    return JSONResponse(result)


def _rejection_response(rejection: Any) -> Response:
    if isinstance(rejection, Response):
        return rejection
    if isinstance(rejection, str):
        rejection = {"error": rejection}
    return JSONResponse(rejection, status_code=401)


class ApiNote:
    """Registers documented routes and serves them together with their docs.

    Example:
        >>> api = ApiNote(DocsConfigModel(title="Users API"))
        >>> api.documented_route(
        ...     "POST",
        ...     "/users",
        ...     create_user,
        ...     description="Create a user",
        ...     responses={"201": "User created", "400": "Invalid input"},
        ...     request_schema=CreateUser,
        ...     response_schema=User,
        ... )
        >>> api.app  # FastAPI application, ready for uvicorn or TestClient
    """

    def __init__(
        self,
        config: DocsConfigModel | None = None,
        *,
        deep_validation: bool = False,
        debug: bool = False,
    ):
        self.config = config or DocsConfigModel()
        self.deep_validation = deep_validation
        self.debug = debug
        self.endpoints = EndpointRegistry()
        self._middlewares: list[Middleware] = []
        self._auth_guards: list[AuthGuard] = []
        self._routes: dict[str, tuple[str, str, Callable[[Request], Awaitable[Response]]]] = {}
        self._app: FastAPI | None = None

    def use(self, *middlewares: Middleware) -> None:
        """Add middleware run after validation for routes registered from now on.

        Each middleware is called as ``await middleware(request, call_next)``.
        """
        self._middlewares.extend(middlewares)

    def use_auth(self, *guards: AuthGuard) -> None:
        """Add authentication guards for routes registered from now on.

        A guard returns None to let the request through, or a Response to
        reject it. Routes registered after this call default to requiring
        authentication.
        """
        self._auth_guards.extend(guards)

    def documented_route(
        self,
        method: str,
        path: str,
        handler: Handler | None,
        *,
        description: str = "",
        responses: Mapping[str, str] | None = None,
        params: Iterable[ParameterModel | Mapping[str, Any]] | None = None,
        request_schema: Any = None,
        response_schema: Any = None,
        auth_required: bool | None = None,
    ) -> EndpointModel:
        """Register a route and record it for the OpenAPI document.

        Args:
            method: HTTP method
            path: Route path relative to the configured base path. ``{id}``,
                ``{id:int}`` and ``:id`` parameter forms are accepted.
            handler: Called with the request; may return a Response or any
                JSON-encodable value. Sync handlers run in a thread pool.
            description: Operation summary and description
            responses: Status code to description
            params: Path, query and header parameters to validate
            request_schema: Type the JSON body must match
            response_schema: Type documented for 200/201 responses
            auth_required: Defaults to whether any auth guard is installed

        Returns:
            The recorded endpoint

        Raises:
            ValueError: If method, path or handler is missing, or the method
                is not supported
        """
        if not method or not path:
            raise ValueError("method and path are required")
        if handler is None:
            raise ValueError("handler is required")
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"unsupported HTTP method: {method}")
        if self._app is not None:
            raise ValueError("routes must be registered before the application is built")

        parameters = [
            p if isinstance(p, ParameterModel) else ParameterModel.model_validate(p)
            for p in params or []
        ]
        if auth_required is None:
            auth_required = bool(self._auth_guards)

        endpoint = EndpointModel(
            method=method,
            path=self.config.base_path + path,
            description=description,
            responses=dict(responses or {}),
            parameters=parameters,
            request_schema=request_schema,
            response_schema=response_schema,
            auth_required=auth_required,
            handler=handler,
        )
        self.endpoints.register(endpoint)
        self._routes[endpoint.key] = (
            method,
            route_path(endpoint.path),
            self._build_endpoint(endpoint, handler),
        )
        logger.debug(f"Registered documented route {endpoint.key}")
        return endpoint

    def _build_endpoint(
        self, endpoint: EndpointModel, handler: Callable[..., Any]
    ) -> Callable[[Request], Awaitable[Response]]:
        guards = list(self._auth_guards) if endpoint.auth_required else []
        validator = RequestValidator(endpoint, deep=self.deep_validation)

        async def call_handler(request: Request) -> Response:
            return _to_response(await _invoke(handler, request))

        chain: CallNext = call_handler
        for middleware in reversed(self._middlewares):
            chain = self._wrap(middleware, chain)

        async def route(request: Request) -> Response:
            for guard in guards:
                rejection = await _invoke(guard, request)
                if rejection is not None:
                    return _rejection_response(rejection)
            if validator.active:
                invalid = await validator(request)
                if invalid is not None:
                    return invalid
            return await chain(request)

        return route

    @staticmethod
    def _wrap(middleware: Middleware, call_next: CallNext) -> CallNext:
        async def wrapped(request: Request) -> Response:
            return await middleware(request, call_next)

        return wrapped

    def generate_openapi_spec(self) -> dict[str, Any]:
        """Build the OpenAPI 3.1 document for every documented route."""
        return build_openapi_spec(self.config, self.endpoints)

    def export_openapi(self, path: Path | str) -> Path:
        """Write the OpenAPI document to ``path`` as indented JSON."""
        return export_openapi_to_file(self.generate_openapi_spec(), path)

    @property
    def app(self) -> FastAPI:
        """The FastAPI application, built on first access."""
        if self._app is None:
            self._app = self._create_app()
        return self._app

    def _create_app(self) -> FastAPI:
        app = FastAPI(
            title=self.config.title,
            version=self.config.version,
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
        )

        @app.exception_handler(ValidationError)
        async def validation_exception_handler(
            request: Request, exc: ValidationError
        ) -> JSONResponse:
            return JSONResponse(status_code=400, content=exc.to_dict())

        @app.exception_handler(Exception)
        async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
            logger.error(
                f"Unhandled exception in {request.method} {request.url.path}: {exc}",
                exc_info=True,
            )
            content: dict[str, Any] = {"error": "Internal server error"}
            if self.debug:
                content["detail"] = str(exc)
            return JSONResponse(status_code=500, content=content)

        docs_path = self.config.docs_path

        async def docs(request: Request) -> Response:
            return docs_page(self.config)

        async def openapi_json(request: Request) -> Response:
            return JSONResponse(self.generate_openapi_spec())

        app.add_route(docs_path, docs, methods=["GET"], include_in_schema=False)
        app.add_route(
            self.config.openapi_path, openapi_json, methods=["GET"], include_in_schema=False
        )

        for method, path, route in self._routes.values():
            app.add_route(path, route, methods=[method], include_in_schema=False)

        return app
