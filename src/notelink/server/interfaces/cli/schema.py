import json
from typing import Any

import click

from notelink.sdk.schema.emitter import generate_json_schema
from notelink.sdk.schema.examples import generate_example
from notelink.sdk.schema.typescript import generate_typescript
from notelink.server.interfaces.cli.utils import (
    configure_logging,
    load_object,
    output_error,
    output_json,
)


def render_schema(schema_type: Any, output_format: str, name: str) -> Any:
    """Produce the requested artifact for ``schema_type``."""
    if output_format == "example":
        return generate_example(schema_type)
    if output_format == "typescript":
        return generate_typescript(name, schema_type)
    main, components = generate_json_schema(schema_type, name)
    return {"schema": main, "components": components}


@click.command(name="schema")
@click.argument("target")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json-schema", "example", "typescript"]),
    default="json-schema",
    show_default=True,
    help="Artifact to generate",
)
@click.option("--name", help="Root schema or interface name (default: the type name)")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def schema(
    target: str, output_format: str, name: str | None, json_output: bool, debug: bool
) -> None:
    """Generate a JSON Schema, example payload or TypeScript for a type.

    TARGET is "module:Type" naming a dataclass or pydantic model.

    \b
    Examples:
        notelink schema myapp.models:CreateUser
        notelink schema myapp.models:CreateUser --format example
        notelink schema myapp.models:User --format typescript --name UserDto
    """
    configure_logging(debug=debug)
    try:
        schema_type = load_object(target)
        root_name = name or getattr(schema_type, "__name__", "Schema")
        result = render_schema(schema_type, output_format, root_name)

        if json_output:
            output_json(result)
        elif isinstance(result, str):
            click.echo(result, nl=False)
        else:
            click.echo(json.dumps(result, indent=2))
    except click.Abort:
        raise
    except Exception as e:
        output_error(e, json_output, debug)
