"""Tests for node kinds, the visitor and literal decoding."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from intentsql.parsing.nodes import (
    NodeKind,
    NodeVisitor,
    is_function_like,
    is_literal,
    kind_of,
    literal_value,
    parse_number,
    unwrap,
)
from intentsql.parsing.treesitter import Node, ParseResult, node_text, walk

Parse = Callable[..., ParseResult]


def first_of_type(result: ParseResult, node_type: str) -> Node:
    for node in walk(result.root_node):
        if node.type == node_type:
            return node
    raise AssertionError(f"no {node_type} node in source")


def value_of(result: ParseResult) -> Node:
    declarator = first_of_type(result, "variable_declarator")
    value = declarator.child_by_field_name("value")
    assert value is not None
    return value


class TestKindOf:
    """Mapping grammar node types onto NodeKind."""

    def test_call_and_tagged_template_differ(self, parse: Parse) -> None:
        result = parse("f('x'); llm`y`;\n")
        calls = [n for n in walk(result.root_node) if n.type == "call_expression"]
        assert [kind_of(n) for n in calls] == [NodeKind.CALL, NodeKind.TAGGED_TEMPLATE]

    @pytest.mark.parametrize(
        ("source", "kind"),
        [
            ("a.b", NodeKind.PROPERTY_ACCESS),
            ("{ a: 1 }", NodeKind.OBJECT),
            ("[1, 2]", NodeKind.ARRAY),
            ("name", NodeKind.IDENTIFIER),
            ("'s'", NodeKind.STRING),
            ("3", NodeKind.NUMBER),
            ("false", NodeKind.BOOLEAN),
            ("null", NodeKind.NULL),
            ("() => 1", NodeKind.ARROW_FUNCTION),
            ("function () {}", NodeKind.FUNCTION),
            ("a + b", NodeKind.OTHER),
        ],
    )
    def test_expression_kinds(self, parse: Parse, source: str, kind: NodeKind) -> None:
        assert kind_of(value_of(parse(f"const v = {source};\n"))) is kind

    def test_none_is_other(self) -> None:
        assert kind_of(None) is NodeKind.OTHER

    def test_function_boundaries(self, parse: Parse) -> None:
        result = parse("class A { m() { return () => 1; } }\n")
        boundaries = [n.type for n in walk(result.root_node) if is_function_like(n)]
        assert boundaries == ["method_definition", "arrow_function"]


class TestUnwrap:
    """Transparent wrappers."""

    def test_parentheses_and_assertions(self, parse: Parse) -> None:
        result = parse("const v = ((x as Foo))!;\n")
        assert node_text(unwrap(value_of(result))) == "x"


class TestLiterals:
    """Literal decoding."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("'text'", "text"),
            ("42", 42),
            ("1.5", 1.5),
            ("0x10", 16),
            ("1_000", 1000),
            ("true", True),
            ("false", False),
            ("null", None),
        ],
    )
    def test_decoded_values(self, parse: Parse, source: str, expected: object) -> None:
        value = value_of(parse(f"const v = {source};\n"))
        assert is_literal(value)
        assert literal_value(value) == expected

    @pytest.mark.parametrize("source", ["someVar", "a.b", "f()", "`x ${y}`"])
    def test_non_literals(self, parse: Parse, source: str) -> None:
        value = value_of(parse(f"const v = {source};\n"))
        assert not is_literal(value)
        assert literal_value(value) is None

    def test_parse_number_rejects_garbage(self) -> None:
        assert parse_number("abc") is None


class TestNodeVisitor:
    """Dispatch by kind with a fallback."""

    def test_dispatch_and_fallback(self, parse: Parse) -> None:
        class Describe(NodeVisitor[str]):
            def visit_string(self, node: Node) -> str:
                return "string"

            def visit_call(self, node: Node) -> str:
                return "call"

            def generic_visit(self, node: Node) -> str:
                return "other"

        visitor = Describe()
        assert visitor.visit(value_of(parse("const v = 'a';\n"))) == "string"
        assert visitor.visit(value_of(parse("const v = f();\n"))) == "call"
        assert visitor.visit(value_of(parse("const v = 1;\n"))) == "other"
