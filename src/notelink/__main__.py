import click

from notelink.server.interfaces.cli.export import export
from notelink.server.interfaces.cli.schema import schema


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """notelink CLI"""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(export)
cli.add_command(schema)


if __name__ == "__main__":
    cli()
