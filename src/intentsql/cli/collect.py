"""intentsql collect command - list query sites."""

import json
from pathlib import Path

import click
from rich.table import Table

from intentsql.build import resolve_query_files
from intentsql.cli.utils import handle_errors, load_cli_config
from intentsql.core.formatting import compress_path, truncate
from intentsql.core.progress import get_console, pluralize, progress, status
from intentsql.queries import CollectedQuery, QueryCollector


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def collect_command(ctx: click.Context, path: Path, as_json: bool) -> None:
    """Find natural-language query sites in the configured sources.

    PATH is the project root (default: current directory).
    """
    root = path.resolve()
    with handle_errors():
        config = load_cli_config(ctx, root)
        files = resolve_query_files(config.paths.queries, root)
        collector = QueryCollector(
            receivers=config.recognition.query_receivers,
            method=config.recognition.query_method,
            template_tag=config.recognition.template_tag,
            root=root,
        )
        queries: list[CollectedQuery] = []
        for file in progress(files, desc="Collecting"):
            queries.extend(collector.collect_file(file))

    if as_json:
        click.echo(json.dumps([q.to_dict() for q in queries], indent=2, ensure_ascii=False))
        return

    if not queries:
        status(f"No query sites found in {pluralize(len(files), 'file')}", style="warning")
        return

    table = Table(show_edge=False, header_style="bold")
    table.add_column("Location", style="cyan", no_wrap=True)
    table.add_column("Intent")
    table.add_column("Returns", style="dim")
    for query in queries:
        location = f"{compress_path(query.location.file)}:{query.location.line}"
        table.add_row(location, truncate(query.intent), query.return_type or "-")
    get_console().print(table)
    status(
        f"{pluralize(len(queries), 'query', 'queries')} in {pluralize(len(files), 'file')}",
        style="success",
    )
