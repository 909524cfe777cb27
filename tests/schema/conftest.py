"""Fixtures for schema analysis tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from intentsql.parsing.treesitter import Node, TypeScriptParser, walk
from intentsql.schema import SchemaAnalyzer, SchemaInfo


@pytest.fixture(scope="module")
def analyzer() -> SchemaAnalyzer:
    return SchemaAnalyzer()


@pytest.fixture
def analyze(analyzer: SchemaAnalyzer, tmp_path: Path) -> Callable[[str], SchemaInfo]:
    """Write a schema source to disk and analyze it."""

    def _analyze(source: str) -> SchemaInfo:
        path = tmp_path / "schema.ts"
        path.write_text(source, encoding="utf-8")
        return analyzer.analyze_schema(path)

    return _analyze


@pytest.fixture
def initializer() -> Callable[[str], Node]:
    """Parse ``const c = <expression>;`` and return the expression node."""
    parser = TypeScriptParser()

    def _initializer(expression: str) -> Node:
        result = parser.parse(Path("column.ts"), f"const c = {expression};".encode())
        for node in walk(result.root_node):
            if node.type == "variable_declarator":
                value = node.child_by_field_name("value")
                assert value is not None
                return value
        raise AssertionError("no declarator parsed")

    return _initializer
