"""intentsql schema command - show the analyzed schema."""

import json
from pathlib import Path

import click

from intentsql.cli.utils import handle_errors, load_cli_config
from intentsql.core.progress import pluralize, status
from intentsql.schema import SchemaAnalyzer, format_schema_compact, format_schema_for_llm


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option("--compact", is_flag=True, help="One line per table")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def schema_command(ctx: click.Context, path: Path, compact: bool, as_json: bool) -> None:
    """Analyze the schema source and print its tables.

    PATH is the project root (default: current directory).
    """
    root = path.resolve()
    with handle_errors():
        config = load_cli_config(ctx, root)
        analyzer = SchemaAnalyzer(table_functions=config.recognition.table_functions)
        schema = analyzer.analyze_schema_path(config.paths.schema_path, root)

    if as_json:
        click.echo(json.dumps(schema.to_dict(), indent=2, ensure_ascii=False))
        return

    click.echo(format_schema_compact(schema) if compact else format_schema_for_llm(schema), nl=False)
    status(f"Found {pluralize(len(schema.tables), 'table')}", style="success")
