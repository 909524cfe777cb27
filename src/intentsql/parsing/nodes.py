"""Closed set of node kinds and a typed visitor over them.

Tree-sitter exposes a node's grammar type as a free-form string. The
analyzer and collector only care about a handful of shapes, so those
strings are folded onto ``NodeKind`` once and every consumer dispatches
on the enum instead of comparing type names.
"""

from __future__ import annotations

import math
from enum import Enum

from intentsql.parsing.treesitter import Node, named_children, node_text, string_value


class NodeKind(Enum):
    CALL = "call"
    PROPERTY_ACCESS = "property_access"
    TAGGED_TEMPLATE = "tagged_template"
    TEMPLATE = "template"
    TEMPLATE_SUBSTITUTION = "template_substitution"
    OBJECT = "object"
    ARRAY = "array"
    PAIR = "pair"
    IDENTIFIER = "identifier"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    ARROW_FUNCTION = "arrow_function"
    VARIABLE_DECLARATOR = "variable_declarator"
    FUNCTION = "function"
    OTHER = "other"


_KIND_BY_TYPE: dict[str, NodeKind] = {
    "call_expression": NodeKind.CALL,
    "member_expression": NodeKind.PROPERTY_ACCESS,
    "template_string": NodeKind.TEMPLATE,
    "template_substitution": NodeKind.TEMPLATE_SUBSTITUTION,
    "object": NodeKind.OBJECT,
    "array": NodeKind.ARRAY,
    "pair": NodeKind.PAIR,
    "identifier": NodeKind.IDENTIFIER,
    "string": NodeKind.STRING,
    "number": NodeKind.NUMBER,
    "true": NodeKind.BOOLEAN,
    "false": NodeKind.BOOLEAN,
    "null": NodeKind.NULL,
    "arrow_function": NodeKind.ARROW_FUNCTION,
    "variable_declarator": NodeKind.VARIABLE_DECLARATOR,
    "function_declaration": NodeKind.FUNCTION,
    "generator_function_declaration": NodeKind.FUNCTION,
    "function_expression": NodeKind.FUNCTION,
    "function": NodeKind.FUNCTION,
    "generator_function": NodeKind.FUNCTION,
    "method_definition": NodeKind.FUNCTION,
}

# Wrappers that do not change the value of the wrapped expression
_TRANSPARENT_TYPES = frozenset(
    {"parenthesized_expression", "as_expression", "satisfies_expression", "non_null_expression"}
)


def kind_of(node: Node | None) -> NodeKind:
    if node is None:
        return NodeKind.OTHER
    kind = _KIND_BY_TYPE.get(node.type, NodeKind.OTHER)
    if kind is NodeKind.CALL:
        args = node.child_by_field_name("arguments")
        if args is not None and args.type == "template_string":
            return NodeKind.TAGGED_TEMPLATE
    return kind


def is_function_like(node: Node) -> bool:
    """Function boundary: declarations, expressions, arrows and methods."""
    return kind_of(node) in (NodeKind.FUNCTION, NodeKind.ARROW_FUNCTION)


def unwrap(node: Node) -> Node:
    """Strip parentheses and type assertions around an expression."""
    while node.type in _TRANSPARENT_TYPES:
        inner = named_children(node)
        if not inner:
            break
        node = inner[0]
    return node


class NodeVisitor[T]:
    """Dispatch on ``NodeKind``: ``visit_call``, ``visit_string``, ...

    Subclasses implement the ``visit_<kind>`` methods they care about;
    everything else falls through to ``generic_visit``.
    """

    def visit(self, node: Node) -> T | None:
        kind = kind_of(node)
        method = getattr(self, f"visit_{kind.value}", None)
        if method is None:
            return self.generic_visit(node)
        return method(node)

    def generic_visit(self, node: Node) -> T | None:  # noqa: ARG002
        return None


def parse_number(text: str) -> int | float | None:
    """Decode a JavaScript numeric literal."""
    cleaned = text.replace("_", "").rstrip("n")
    lowered = cleaned.lower()
    try:
        if lowered.startswith("0x"):
            return int(lowered[2:], 16)
        if lowered.startswith("0o"):
            return int(lowered[2:], 8)
        if lowered.startswith("0b"):
            return int(lowered[2:], 2)
        value = float(cleaned)
    except ValueError:
        return None
    if math.isfinite(value) and value.is_integer() and not any(c in lowered for c in ".e"):
        return int(value)
    return value


class _LiteralDecoder(NodeVisitor[object]):
    """Decode string / number / boolean / null literals; other kinds give None."""

    def visit_string(self, node: Node) -> object:
        return string_value(node)

    def visit_template(self, node: Node) -> object:
        return string_value(node)

    def visit_number(self, node: Node) -> object:
        return parse_number(node_text(node))

    def visit_boolean(self, node: Node) -> object:
        return node.type == "true"


_LITERALS = _LiteralDecoder()


def is_literal(node: Node) -> bool:
    """True for nodes ``literal_value`` can decode."""
    node = unwrap(node)
    kind = kind_of(node)
    if kind is NodeKind.TEMPLATE:
        return string_value(node) is not None
    if kind is NodeKind.NUMBER:
        return parse_number(node_text(node)) is not None
    return kind in (NodeKind.STRING, NodeKind.BOOLEAN, NodeKind.NULL)


def literal_value(node: Node) -> object:
    """Python value of a literal node (``None`` for ``null`` and non-literals)."""
    return _LITERALS.visit(unwrap(node))
