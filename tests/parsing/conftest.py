"""Shared helpers for parsing tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from intentsql.parsing.treesitter import ParseResult, TypeScriptParser


@pytest.fixture(scope="module")
def parser() -> TypeScriptParser:
    return TypeScriptParser()


@pytest.fixture
def parse(parser: TypeScriptParser) -> Callable[..., ParseResult]:
    def _parse(source: str, name: str = "sample.ts") -> ParseResult:
        return parser.parse(Path(name), source.encode("utf-8"))

    return _parse

