"""intentsql cache commands - inspect and clean the generated-query cache."""

from pathlib import Path

import click
import questionary

from intentsql.cache import QueryCache
from intentsql.cli.utils import handle_errors, load_cli_config
from intentsql.config import resolve_path
from intentsql.core.formatting import format_bytes
from intentsql.core.progress import pluralize, status


def _open_cache(ctx: click.Context, path: Path) -> QueryCache:
    root = path.resolve()
    with handle_errors():
        config = load_cli_config(ctx, root)
    return QueryCache(resolve_path(root, config.cache.directory), enabled=config.cache.enabled)


@click.group()
def cache_group() -> None:
    """Inspect and clean the generated-query cache."""


@cache_group.command("stats")
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def stats_command(ctx: click.Context, path: Path) -> None:
    """Show cache entry count and size."""
    cache = _open_cache(ctx, path)
    if not cache.enabled:
        status("Cache is disabled", style="warning")
        return
    stats = cache.stats()
    click.echo(f"{pluralize(stats.count, 'entry', 'entries')}, {format_bytes(stats.total_bytes)}")
    click.echo(f"Directory: {cache.directory}")


@cache_group.command("clear")
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def clear_command(ctx: click.Context, path: Path, yes: bool) -> None:
    """Delete every cache entry."""
    cache = _open_cache(ctx, path)
    stats = cache.stats()
    if stats.count == 0:
        status("Nothing to clear", style="warning")
        return

    if not yes:
        answer = questionary.confirm(
            f"Delete {pluralize(stats.count, 'cache entry', 'cache entries')}?",
            default=False,
        ).ask()
        if not answer:
            status("[dim]Cancelled[/dim]", style="none")
            return

    removed = cache.clear()
    status(f"Removed {pluralize(removed, 'entry', 'entries')}", style="success")


@cache_group.command("prune")
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def prune_command(ctx: click.Context, path: Path) -> None:
    """Delete expired and unreadable cache entries."""
    cache = _open_cache(ctx, path)
    removed = cache.prune()
    status(f"Pruned {pluralize(removed, 'entry', 'entries')}", style="success")
