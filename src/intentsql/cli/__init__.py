"""intentsql command-line interface."""

from intentsql.cli.main import cli

__all__ = ["cli"]
