"""intentsql plan command - show which queries need regeneration."""

from pathlib import Path

import click

from intentsql.build import load_manifest, plan_build
from intentsql.cli.utils import handle_errors, load_cli_config
from intentsql.config import resolve_path
from intentsql.core.formatting import compress_path, format_categorization, truncate
from intentsql.core.progress import status


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def plan_command(ctx: click.Context, path: Path) -> None:
    """Compare query sites against previously generated SQL.

    PATH is the project root (default: current directory).
    """
    root = path.resolve()
    with handle_errors():
        config = load_cli_config(ctx, root)
        existing = load_manifest(resolve_path(root, config.paths.manifest))
        plan = plan_build(config, existing, root=root)

    categorization = plan.categorization
    click.echo(
        format_categorization(
            len(categorization.valid), len(categorization.changed), len(categorization.new)
        )
    )
    for label, queries in (("new", categorization.new), ("changed", categorization.changed)):
        for query in queries:
            location = f"{compress_path(query.location.file)}:{query.location.line}"
            click.echo(f"  {label:<8}{location}  {truncate(query.intent)}")

    if plan.to_generate:
        status(f"{len(plan.to_generate)} to generate", style="warning")
    else:
        status("Up to date", style="success")
