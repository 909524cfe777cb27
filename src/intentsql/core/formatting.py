"""Summary formatting utilities for consistent terminal output.

Design principles:
- Every summary fits on one line (~80 chars max)
- Paths compressed for deep nesting
- Grammatically correct (1 query vs 2 queries)
"""

from __future__ import annotations


def compress_path(path: str, max_len: int = 30) -> str:
    """Compress path to fit within max_len.

    Examples:
        src/app/query/analytics/report.ts -> src/.../report.ts
        short/path.ts -> short/path.ts (unchanged)
    """
    if len(path) <= max_len:
        return path

    parts = path.split("/")
    if len(parts) <= 2:
        return path

    compressed = f"{parts[0]}/.../{parts[-1]}"
    if len(compressed) <= max_len:
        return compressed

    return parts[-1]


def truncate(text: str, max_len: int = 60) -> str:
    """Cut text to max_len characters, marking the cut with '...'."""
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


def format_bytes(size: int) -> str:
    """Human-readable byte count.

    Examples:
        0 -> "0 B"
        1024 -> "1 KB"
        1572864 -> "1.5 MB"
    """
    if size <= 0:
        return "0 B"

    units = ("B", "KB", "MB", "GB")
    exponent = 0
    while size >= 1024 ** (exponent + 1) and exponent < len(units) - 1:
        exponent += 1
    value = round(size / 1024**exponent, 2)
    if value == int(value):
        return f"{int(value)} {units[exponent]}"
    return f"{value} {units[exponent]}"


def format_categorization(valid: int, changed: int, new: int) -> str:
    """One-line categorization summary.

    Examples:
        (3, 1, 2) -> "3 unchanged, 1 changed, 2 new"
        (5, 0, 0) -> "5 unchanged"
    """
    parts = [f"{valid} unchanged"]
    if changed:
        parts.append(f"{changed} changed")
    if new:
        parts.append(f"{new} new")
    return ", ".join(parts)
