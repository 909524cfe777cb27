"""intentsql CLI - intentsql command."""

import click

from intentsql.cli.cache import cache_group
from intentsql.cli.collect import collect_command
from intentsql.cli.plan import plan_command
from intentsql.cli.schema import schema_command
from intentsql.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="intentsql")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """intentsql - Natural-language query intents compiled to SQL at build time."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(schema_command, name="schema")
cli.add_command(collect_command, name="collect")
cli.add_command(plan_command, name="plan")
cli.add_command(cache_group, name="cache")


if __name__ == "__main__":
    cli()
