"""Terminal feedback for CLI commands: status lines and file progress.

Everything here writes to stderr through one rich console, so command
output on stdout stays machine-readable::

    for path in progress(paths, desc="Collecting"):
        collect(path)
    status("3 queries in 2 files", style="success")

The progress bar only appears on a TTY and for long runs. While it is
drawing, console log handlers are muted (see ``core.logging``).
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Iterable, Iterator, Sized
from contextlib import contextmanager

import structlog
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

log = structlog.get_logger()

_BAR_MIN_ITEMS = 50

_console = Console(stderr=True)

_PREFIXES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

_live = threading.local()


def is_console_suppressed() -> bool:
    return getattr(_live, "active", False)


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Mute console log handlers for the duration; file outputs still log."""
    _live.active = True
    try:
        yield
    finally:
        _live.active = False


def get_console() -> Console:
    return _console


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print one status line, prefixed by a marker for ``style``."""
    _console.print(f"{' ' * indent}{_PREFIXES.get(style, '')}{message}", highlight=False)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return "1 query" / "3 queries" style counts."""
    word = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {word}"


def progress[T](
    iterable: Iterable[T],
    *,
    desc: str = "Processing",
    unit: str = "files",
) -> Iterator[T]:
    """Yield from ``iterable``, drawing a bar on a TTY when it is long enough."""
    total = len(iterable) if isinstance(iterable, Sized) else None
    if total is None or total <= _BAR_MIN_ITEMS or not sys.stderr.isatty():
        log.debug("progress", desc=desc, total=total)
        yield from iterable
        return

    bar = Progress(
        TextColumn("    {task.description}:"),
        BarColumn(bar_width=25, style="cyan", complete_style="cyan"),
        TaskProgressColumn(),
        TextColumn("{task.completed}/{task.total} {task.fields[unit]}"),
        console=_console,
        transient=True,
    )
    with suppress_console_logs(), bar:
        task = bar.add_task(desc, total=total, unit=unit)
        for item in iterable:
            yield item
            bar.advance(task)
