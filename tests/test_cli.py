"""Tests for the notelink command line interface."""

import json
import textwrap
import uuid
from pathlib import Path

import pytest
from click.testing import CliRunner

from notelink.__main__ import cli
from notelink.server.interfaces.cli.utils import get_env_flag, load_object

APP_SOURCE = """
from dataclasses import dataclass

from notelink.server.app import ApiNote
from notelink.server.core.config.models import DocsConfigModel


@dataclass
class Item:
    name: str
    price: float


def list_items(request):
    return []


api = ApiNote(DocsConfigModel(title="Shop"))
api.documented_route("GET", "/items", list_items, response_schema=list[Item],
                     responses={"200": "OK"})


def create_api(config):
    app = ApiNote(config)
    app.documented_route("POST", "/items", list_items, request_schema=Item)
    return app


not_an_api = 42
"""


@pytest.fixture
def project(tmp_path: Path, monkeypatch):
    """A working directory holding a uniquely named application module."""
    module = f"shop_{uuid.uuid4().hex[:8]}"
    (tmp_path / f"{module}.py").write_text(textwrap.dedent(APP_SOURCE))
    monkeypatch.chdir(tmp_path)
    monkeypatch.syspath_prepend(str(tmp_path))
    return tmp_path, module


class TestExportCommand:
    """Test the export command."""

    def test_export_instance(self, project):
        """Test exporting an ApiNote instance."""
        path, module = project
        result = CliRunner().invoke(cli, ["export", f"{module}:api", "-o", "spec.json"])
        assert result.exit_code == 0, result.output
        spec = json.loads((path / "spec.json").read_text())
        assert spec["info"]["title"] == "Shop"
        assert spec["paths"]["/items"]["get"]["operationId"] == "getItems"

    def test_export_factory_with_config(self, project):
        """Test a factory receives the config loaded from notelink.yml."""
        path, module = project
        (path / "notelink.yml").write_text("title: Configured\nbase_path: /v1\n")
        result = CliRunner().invoke(
            cli, ["export", f"{module}:create_api", "--config", "notelink.yml", "--json-output"]
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["status"] == "ok"
        assert payload["result"]["endpoints"] == 1
        spec = json.loads((path / "openapi.json").read_text())
        assert spec["info"]["title"] == "Configured"
        assert "/v1/items" in spec["paths"]

    def test_export_bad_target(self, project):
        """Test a target that is not an ApiNote fails."""
        _, module = project
        result = CliRunner().invoke(cli, ["export", f"{module}:not_an_api", "--json-output"])
        assert result.exit_code != 0
        payload = json.loads(result.stdout)
        assert payload["status"] == "error"
        assert "not an ApiNote" in payload["error"]


class TestSchemaCommand:
    """Test the schema command."""

    def test_json_schema(self, project):
        """Test the default JSON Schema output."""
        _, module = project
        result = CliRunner().invoke(cli, ["schema", f"{module}:Item"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["schema"]["title"] == "Item"
        assert payload["schema"]["required"] == ["name", "price"]
        assert set(payload["components"]) == {"Item"}

    def test_example(self, project):
        """Test example output."""
        _, module = project
        result = CliRunner().invoke(cli, ["schema", f"{module}:Item", "--format", "example"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"name": "John Doe", "price": 99.99}

    def test_typescript(self, project):
        """Test TypeScript output with a custom name."""
        _, module = project
        result = CliRunner().invoke(
            cli, ["schema", f"{module}:Item", "--format", "typescript", "--name", "ItemDto"]
        )
        assert result.exit_code == 0, result.output
        assert "export interface ItemDto {" in result.stdout
        assert "price: number;" in result.stdout

    def test_missing_attribute(self, project):
        """Test a missing attribute is reported as an error."""
        _, module = project
        result = CliRunner().invoke(cli, ["schema", f"{module}:Missing"])
        assert result.exit_code != 0


class TestUtils:
    """Test CLI helpers."""

    def test_get_env_flag(self, monkeypatch):
        """Test truthy environment values."""
        monkeypatch.setenv("NOTELINK_TEST_FLAG", "Yes")
        assert get_env_flag("NOTELINK_TEST_FLAG")
        monkeypatch.setenv("NOTELINK_TEST_FLAG", "0")
        assert not get_env_flag("NOTELINK_TEST_FLAG")
        monkeypatch.delenv("NOTELINK_TEST_FLAG")
        assert get_env_flag("NOTELINK_TEST_FLAG", default=True)

    def test_load_object(self):
        """Test dotted attribute paths and malformed targets."""
        assert load_object("json:dumps") is json.dumps
        assert load_object("os:path.join") is __import__("os").path.join
        with pytest.raises(ValueError):
            load_object("json")
        with pytest.raises(ValueError):
            load_object("json:nope")
