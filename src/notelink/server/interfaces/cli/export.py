from pathlib import Path
from typing import Any

import click

from notelink.server.app import ApiNote
from notelink.server.core.config.loader import load_docs_config
from notelink.server.core.config.models import DocsConfigModel
from notelink.server.interfaces.cli.utils import (
    DEBUG_ENV,
    configure_logging_from_config,
    get_env_flag,
    load_object,
    output_error,
    output_json,
)


def resolve_api(target: str, config: DocsConfigModel) -> ApiNote:
    """Resolve ``module:attr`` to an ApiNote.

    The attribute may be an ApiNote instance or a factory called with the
    loaded docs config.
    """
    obj: Any = load_object(target)
    if not isinstance(obj, ApiNote) and callable(obj):
        obj = obj(config)
    if not isinstance(obj, ApiNote):
        raise ValueError(f"'{target}' is not an ApiNote instance or factory")
    return obj


@click.command(name="export")
@click.argument("target")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("openapi.json"),
    show_default=True,
    help="File to write the OpenAPI document to",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to notelink.yml",
)
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def export(
    target: str, output: Path, config_path: Path | None, json_output: bool, debug: bool
) -> None:
    """Export the OpenAPI document of an application.

    TARGET is "module:attribute" naming an ApiNote instance or a factory
    that takes the docs config and returns one.

    \b
    Examples:
        notelink export myapp.api:api                   # Write ./openapi.json
        notelink export myapp.api:create_api -o docs/openapi.json
        notelink export myapp.api:api --json-output     # Output results in JSON format
    """
    debug = debug or get_env_flag(DEBUG_ENV)
    try:
        config = load_docs_config(config_path)
        configure_logging_from_config(config.logging, debug=debug)

        api = resolve_api(target, config)
        written = api.export_openapi(output)

        if json_output:
            output_json({"path": str(written), "endpoints": len(api.endpoints)})
        else:
            click.echo(
                f"{click.style('✓', fg='green')} Wrote OpenAPI document for "
                f"{len(api.endpoints)} endpoint(s) to {click.style(str(written), fg='cyan')}"
            )
    except click.Abort:
        raise
    except Exception as e:
        output_error(e, json_output, debug)
