"""Tree-sitter parsing of TypeScript / JavaScript sources."""

from intentsql.parsing.nodes import (
    NodeKind,
    NodeVisitor,
    is_function_like,
    is_literal,
    kind_of,
    literal_value,
    unwrap,
)
from intentsql.parsing.packs import SUPPORTED_EXTENSIONS, LanguagePack, get_pack_for_ext
from intentsql.parsing.treesitter import (
    Node,
    ParseResult,
    TypeScriptParser,
    call_arguments,
    callee_name,
    node_text,
    string_value,
    walk,
)

__all__ = [
    "Node",
    "NodeKind",
    "NodeVisitor",
    "ParseResult",
    "TypeScriptParser",
    "LanguagePack",
    "SUPPORTED_EXTENSIONS",
    "get_pack_for_ext",
    "call_arguments",
    "callee_name",
    "is_function_like",
    "is_literal",
    "kind_of",
    "literal_value",
    "node_text",
    "string_value",
    "unwrap",
    "walk",
]
