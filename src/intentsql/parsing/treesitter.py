"""Tree-sitter parsing for TypeScript / JavaScript sources.

This module provides:
- Parsing a file into a ``ParseResult`` (tree, source bytes, error count)
- Source locations as 1-based line / 1-based character column
- Small node helpers shared by the schema analyzer and query collector
  (text, pre-order walk, call arguments, string literal decoding)

Nothing here resolves symbols or types. Every helper looks at node shape
only.
"""

from __future__ import annotations

import importlib
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter

from intentsql.core.errors import AnalysisError, InternalError
from intentsql.parsing.packs import LanguagePack, get_pack_for_ext

Node = tree_sitter.Node

# Node types that never carry meaning for argument lists
_TRIVIA_TYPES = frozenset({"comment", "html_comment"})


@dataclass
class ParseResult:
    """Result of parsing a file."""

    tree: Any  # Tree-sitter Tree (not serializable)
    language: str
    source: bytes
    error_count: int
    path: Path

    @property
    def root_node(self) -> Node:
        return self.tree.root_node

    def location_of(self, node: Node) -> tuple[int, int]:
        """1-based (line, column) of a node's start; column counts characters."""
        line = node.start_point[0] + 1
        line_start = self.source.rfind(b"\n", 0, node.start_byte) + 1
        prefix = self.source[line_start : node.start_byte].decode("utf-8", errors="replace")
        return line, len(prefix) + 1


@dataclass
class TypeScriptParser:
    """
    Tree-sitter parser for TypeScript and JavaScript sources.

    Usage::

        parser = TypeScriptParser()
        result = parser.parse(Path("src/db/schema.ts"))
        for node in walk(result.root_node):
            ...
    """

    _parser: Any = field(default=None, repr=False)
    _languages: dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self._parser = tree_sitter.Parser()
        self._languages = {}

    def _get_language(self, pack: LanguagePack) -> Any:
        """Get or load the tree-sitter language for a pack."""
        if pack.name in self._languages:
            return self._languages[pack.name]

        try:
            mod = importlib.import_module(pack.grammar_module)
            lang_fn = getattr(mod, pack.language_func)
        except (ImportError, AttributeError) as err:
            raise InternalError.unexpected(
                f"grammar {pack.name} unavailable, install {pack.grammar_package}",
                grammar=pack.name,
            ) from err

        lang = tree_sitter.Language(lang_fn())
        self._languages[pack.name] = lang
        return lang

    def parse(self, path: Path, content: bytes | None = None) -> ParseResult:
        """
        Parse a file with Tree-sitter.

        Args:
            path: Path to file (used for grammar detection)
            content: File content as bytes. If None, reads from path.

        Returns:
            ParseResult with tree, source and error info.

        Raises:
            AnalysisError: The file extension has no grammar.
            OSError: content is None and the file cannot be read.
            InternalError: The grammar package cannot be loaded.
        """
        pack = get_pack_for_ext(path.suffix)
        if pack is None:
            raise AnalysisError.unsupported_source(str(path), path.suffix)

        if content is None:
            content = path.read_bytes()

        self._parser.language = self._get_language(pack)
        tree = self._parser.parse(content)

        error_count = sum(
            1 for node in walk(tree.root_node) if node.type == "ERROR" or node.is_missing
        )

        return ParseResult(
            tree=tree,
            language=pack.name,
            source=content,
            error_count=error_count,
            path=path,
        )


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal (source order), iterative to survive deep trees."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def named_children(node: Node) -> list[Node]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type not in _TRIVIA_TYPES]


def call_arguments(call: Node) -> list[Node]:
    """Argument expressions of a call (empty for tagged templates)."""
    args = call.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return []
    return named_children(args)


def property_name(member: Node) -> str | None:
    """Name of the accessed property of ``obj.name``."""
    prop = member.child_by_field_name("property")
    return node_text(prop) if prop is not None else None


def callee_name(call: Node) -> str | None:
    """Simple name a call targets: ``f(...)`` -> f, ``a.b.f(...)`` -> f."""
    fn = call.child_by_field_name("function")
    if fn is None:
        return None
    if fn.type == "identifier":
        return node_text(fn)
    if fn.type == "member_expression":
        return property_name(fn)
    return None


def first_type_argument(node: Node) -> str | None:
    """Text of the first explicit generic argument: ``f<User[]>()`` -> "User[]"."""
    type_args = node.child_by_field_name("type_arguments")
    if type_args is None:
        return None
    types = named_children(type_args)
    return node_text(types[0]) if types else None


def annotation_text(annotation: Node | None) -> str | None:
    """Type text of a ``: T`` annotation node."""
    if annotation is None:
        return None
    types = named_children(annotation)
    if annotation.type == "type_annotation" and types:
        return node_text(types[0])
    return node_text(annotation).lstrip(":").strip() or None


_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|.)", re.DOTALL)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_LINE_CONTINUATIONS = frozenset({"\n", "\r", "\r\n", "\u2028", "\u2029"})


def _decode_escape(match: re.Match[str]) -> str:
    esc = match.group(1)
    if esc in _LINE_CONTINUATIONS:
        return ""
    if esc.startswith("u{"):
        code = int(esc[2:-1], 16)
        return chr(code) if code <= 0x10FFFF else match.group(0)
    if len(esc) > 1 and esc[0] in "ux":
        return chr(int(esc[1:], 16))
    return _SIMPLE_ESCAPES.get(esc, esc)


_SURROGATE_PAIR_RE = re.compile("[\ud800-\udbff][\udc00-\udfff]")


def _join_surrogates(match: re.Match[str]) -> str:
    high, low = match.group(0)
    return chr(0x10000 + ((ord(high) - 0xD800) << 10) + (ord(low) - 0xDC00))


def unescape(raw: str) -> str:
    """Cook JavaScript string escapes (``\\n``, ``\\u00e9``, ``\\'`` ...).

    ``\\uD83D\\uDE00`` pairs combine into one code point. Lone surrogates
    are kept as they are.
    """
    if "\\" not in raw:
        return raw
    return _SURROGATE_PAIR_RE.sub(_join_surrogates, _ESCAPE_RE.sub(_decode_escape, raw))


def string_value(node: Node | None) -> str | None:
    """Value of a string literal, or of a template literal without substitutions."""
    if node is None:
        return None
    if node.type == "string":
        return unescape(node_text(node)[1:-1])
    if node.type == "template_string" and not any(
        child.type == "template_substitution" for child in node.children
    ):
        return unescape(node_text(node)[1:-1])
    return None


def pair_key(pair: Node) -> str | None:
    """Property name of an object literal pair (``key: value`` or ``"key": value``)."""
    key = pair.child_by_field_name("key")
    if key is None:
        return None
    if key.type == "string":
        return string_value(key)
    if key.type in ("property_identifier", "identifier", "number"):
        return node_text(key)
    return None


def object_pairs(obj: Node) -> list[tuple[str, Node]]:
    """``(key, value)`` pairs of an object literal; spreads and shorthands are skipped."""
    pairs = []
    for child in named_children(obj):
        if child.type != "pair":
            continue
        key = pair_key(child)
        value = child.child_by_field_name("value")
        if key is not None and value is not None:
            pairs.append((key, value))
    return pairs


def object_value(obj: Node, key: str) -> Node | None:
    for name, value in object_pairs(obj):
        if name == key:
            return value
    return None
