"""CLI utilities."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from intentsql.config import IntentSQLConfig, load_config
from intentsql.core.errors import IntentSQLError
from intentsql.core.logging import configure_logging
from intentsql.core.progress import get_console


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report intentsql errors as one red line and exit with status 1."""
    try:
        yield
    except IntentSQLError as e:
        get_console().print(f"[red]Error:[/red] {e.message}", highlight=False)
        raise SystemExit(1) from e


def load_cli_config(ctx: click.Context, root: Path) -> IntentSQLConfig:
    """Load config for ``root`` and apply its logging section.

    ``-v`` on the command line overrides the configured level.
    """
    config = load_config(root)
    if ctx.obj and ctx.obj.get("verbose"):
        configure_logging(level="DEBUG")
    else:
        configure_logging(config=config.logging)
    return config
