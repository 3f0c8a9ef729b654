"""Tests for the ApiNote application host."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pytest
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from notelink.sdk.schema import UInt, ValidationError, wire
from notelink.sdk.schema.models import ParameterModel, ValidationErrorModel
from notelink.server.app import ApiNote
from notelink.server.core.config.models import DocsConfigModel


@dataclass
class Member:
    name: str
    age: UInt


@dataclass
class CreateTeam:
    title: str
    members: list[Member] = wire(omitempty=True, default_factory=list)
    lead: Optional[Member] = None


async def create_team(request: Request):
    data = await request.json()
    return JSONResponse({"created": data["title"]}, status_code=201)


def get_team(request: Request):
    return {"id": int(request.path_params["team_id"])}


def require_token(request: Request):
    if request.headers.get("Authorization") != "Bearer secret":
        return "Authorization header required"
    return None


@pytest.fixture
def api():
    api = ApiNote(DocsConfigModel(title="Teams API", base_path="/api"))
    api.documented_route(
        "POST",
        "/teams",
        create_team,
        description="Create a team",
        responses={"201": "Created", "400": "Invalid input"},
        request_schema=CreateTeam,
    )
    api.documented_route(
        "GET",
        "/teams/:team_id",
        get_team,
        description="Get a team",
        params=[
            {"name": "team_id", "in": "path", "type": "integer", "required": True},
            {"name": "verbose", "in": "query", "type": "boolean"},
            {"name": "X-Trace", "in": "header", "type": "integer"},
        ],
    )
    return api


@pytest.fixture
def client(api):
    return TestClient(api.app, raise_server_exceptions=False)


class TestDocumentedRoute:
    """Test route registration."""

    def test_registration_records_endpoints(self, api):
        """Test endpoints are recorded with the base path."""
        keys = [e.key for e in api.endpoints]
        assert keys == ["POST /api/teams", "GET /api/teams/:team_id"]
        endpoint = api.endpoints.get("GET", "/api/teams/:team_id")
        assert [p.name for p in endpoint.parameters] == ["team_id", "verbose", "X-Trace"]
        assert isinstance(endpoint.parameters[0], ParameterModel)

    @pytest.mark.parametrize(
        "method,path,handler,message",
        [
            ("", "/x", get_team, "method and path are required"),
            ("GET", "", get_team, "method and path are required"),
            ("GET", "/x", None, "handler is required"),
            ("FETCH", "/x", get_team, "unsupported HTTP method"),
        ],
    )
    def test_invalid_registration(self, method, path, handler, message):
        """Test invalid input is rejected."""
        api = ApiNote()
        with pytest.raises(ValueError, match=message):
            api.documented_route(method, path, handler)

    def test_registration_after_build(self, api):
        """Test routes cannot be added once the app exists."""
        api.app
        with pytest.raises(ValueError, match="before the application is built"):
            api.documented_route("GET", "/late", get_team)

    def test_method_is_case_insensitive(self):
        """Test lower-case methods are accepted."""
        api = ApiNote()
        endpoint = api.documented_route("get", "/ping", get_team)
        assert endpoint.method == "GET"


class TestRequestValidation:
    """Test validation in front of handlers."""

    def test_valid_body(self, client):
        """Test a valid body reaches the handler."""
        response = client.post("/api/teams", json={"title": "Core", "members": []})
        assert response.status_code == 201
        assert response.json() == {"created": "Core"}

    def test_missing_required_field(self, client):
        """Test a missing field is reported as a 400."""
        response = client.post("/api/teams", json={"members": []})
        assert response.status_code == 400
        assert response.json() == {
            "error": "Request body validation failed",
            "errors": [
                {"field": "title", "message": "Required field 'title' is missing", "type": "required"}
            ],
        }

    def test_invalid_json(self, client):
        """Test an undecodable body is reported as invalid JSON."""
        response = client.post(
            "/api/teams", content=b"{oops", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid JSON body"
        assert body["errors"][0]["field"] == "body"
        assert body["errors"][0]["type"] == "parse_error"

    def test_nested_errors_ignored_by_default(self, client):
        """Test nested values are not checked without deep validation."""
        response = client.post("/api/teams", json={"title": "Core", "members": [{"name": "a"}]})
        assert response.status_code == 201

    def test_deep_validation(self):
        """Test deep validation reports nested paths."""
        api = ApiNote(deep_validation=True)
        api.documented_route("POST", "/teams", create_team, request_schema=CreateTeam)
        client = TestClient(api.app)
        response = client.post(
            "/teams", json={"title": "Core", "members": [{"name": "a", "age": -1}]}
        )
        assert response.status_code == 400
        assert response.json()["errors"] == [
            {
                "field": "members[0].age",
                "message": "Field 'members[0].age' must be a non-negative integer",
                "type": "type_error",
            }
        ]

    def test_parameters(self, client):
        """Test path, query and header parameters are validated."""
        assert client.get("/api/teams/7").json() == {"id": 7}
        assert client.get("/api/teams/7?verbose=true", headers={"X-Trace": "12"}).status_code == 200

        response = client.get("/api/teams/seven?verbose=perhaps", headers={"X-Trace": "abc"})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Parameter validation failed"
        assert [(e["field"], e["type"]) for e in body["errors"]] == [
            ("team_id", "type_error"),
            ("verbose", "type_error"),
            ("X-Trace", "type_error"),
        ]

    def test_body_not_checked_for_get(self):
        """Test request schemas only apply to POST, PUT and PATCH."""
        api = ApiNote()
        api.documented_route("GET", "/teams", get_team_list, request_schema=CreateTeam)
        client = TestClient(api.app)
        assert client.get("/teams").status_code == 200

    def test_handler_validation_error(self):
        """Test ValidationError raised by a handler becomes a 400."""

        def handler(request: Request):
            raise ValidationError(
                "Business check failed",
                [ValidationErrorModel(field="title", message="taken", kind="type_error")],
            )

        api = ApiNote()
        api.documented_route("POST", "/teams", handler)
        response = TestClient(api.app).post("/teams", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "Business check failed"

    def test_unhandled_error(self):
        """Test unexpected exceptions become a 500."""

        def handler(request: Request):
            raise RuntimeError("boom")

        api = ApiNote()
        api.documented_route("GET", "/boom", handler)
        response = TestClient(api.app, raise_server_exceptions=False).get("/boom")
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


def get_team_list(request: Request):
    return []


class TestAuthAndMiddleware:
    """Test auth guards and custom middleware ordering."""

    def test_auth_guard(self):
        """Test guards reject requests before validation runs."""
        api = ApiNote()
        api.use_auth(require_token)
        api.documented_route("POST", "/teams", create_team, request_schema=CreateTeam)
        api.documented_route("GET", "/public", get_team_list, auth_required=False)
        client = TestClient(api.app)

        response = client.post("/teams", json={})
        assert response.status_code == 401
        assert response.json() == {"error": "Authorization header required"}

        response = client.post(
            "/teams", json={"title": "Core"}, headers={"Authorization": "Bearer secret"}
        )
        assert response.status_code == 201
        assert client.get("/public").status_code == 200

        assert api.endpoints.get("POST", "/teams").auth_required
        assert not api.endpoints.get("GET", "/public").auth_required

    def test_auth_defaults_to_guards_installed(self):
        """Test routes registered before use_auth stay public."""
        api = ApiNote()
        api.documented_route("GET", "/before", get_team_list)
        api.use_auth(require_token)
        api.documented_route("GET", "/after", get_team_list)
        assert not api.endpoints.get("GET", "/before").auth_required
        assert api.endpoints.get("GET", "/after").auth_required

    def test_middleware_order(self):
        """Test middleware runs after validation, first registered outermost."""
        calls = []

        def recorder(label):
            async def middleware(request, call_next):
                calls.append(f"{label}:before")
                response = await call_next(request)
                calls.append(f"{label}:after")
                return response

            return middleware

        api = ApiNote()
        api.use(recorder("outer"), recorder("inner"))
        api.documented_route("POST", "/teams", create_team, request_schema=CreateTeam)
        client = TestClient(api.app)

        client.post("/teams", json={})
        assert calls == []

        client.post("/teams", json={"title": "Core"})
        assert calls == ["outer:before", "inner:before", "inner:after", "outer:after"]


class TestDocsRoutes:
    """Test the documentation endpoints."""

    def test_openapi_json(self, client):
        """Test the OpenAPI document is served."""
        response = client.get("/api-docs/openapi.json")
        assert response.status_code == 200
        spec = response.json()
        assert spec["info"]["title"] == "Teams API"
        assert spec["servers"][0]["url"] == "http://localhost:8080/api"
        assert set(spec["paths"]) == {"/api/teams", "/api/teams/{team_id}"}
        assert "Member" in spec["components"]["schemas"]

    def test_scalar_page(self, client):
        """Test the default docs page uses Scalar."""
        response = client.get("/api-docs")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert 'data-url="/api-docs/openapi.json"' in response.text
        assert "<title>Teams API - API Reference</title>" in response.text

    def test_swagger_page(self):
        """Test the Swagger UI page when configured."""
        api = ApiNote(DocsConfigModel(title="<Teams>", docs_ui="swagger", docs_path="/docs"))
        response = TestClient(api.app).get("/docs")
        assert response.status_code == 200
        assert "swagger-ui" in response.text
        assert "/docs/openapi.json" in response.text
        assert "<Teams>" not in response.text

    def test_export_openapi(self, api, tmp_path: Path):
        """Test exporting writes the same document that is served."""
        target = api.export_openapi(tmp_path / "openapi.json")
        assert target.exists()
        assert api.generate_openapi_spec()["paths"]["/api/teams"]["post"]["operationId"] == "postTeams"
