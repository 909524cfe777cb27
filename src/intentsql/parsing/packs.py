"""Grammar packs: which tree-sitter grammar parses which source file.

Both schema sources and query sources are TypeScript or JavaScript. The
TypeScript grammar rejects JSX, so ``.tsx`` and plain JavaScript files go
through the TSX grammar, which accepts both.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LanguagePack:
    """tree-sitter configuration for a single grammar."""

    name: str  # Canonical grammar name ("typescript", "tsx")
    grammar_package: str  # PyPI package ("tree-sitter-typescript")
    grammar_module: str  # Python import ("tree_sitter_typescript")
    language_func: str  # Loader function ("language_typescript")
    extensions: frozenset[str] = field(default_factory=frozenset)


TYPESCRIPT_PACK = LanguagePack(
    name="typescript",
    grammar_package="tree-sitter-typescript",
    grammar_module="tree_sitter_typescript",
    language_func="language_typescript",
    extensions=frozenset({"ts", "mts", "cts"}),
)

TSX_PACK = LanguagePack(
    name="tsx",
    grammar_package="tree-sitter-typescript",
    grammar_module="tree_sitter_typescript",
    language_func="language_tsx",
    extensions=frozenset({"tsx", "js", "jsx", "mjs", "cjs"}),
)

PACKS: dict[str, LanguagePack] = {pack.name: pack for pack in (TYPESCRIPT_PACK, TSX_PACK)}

_EXT_INDEX: dict[str, LanguagePack] = {
    ext: pack for pack in PACKS.values() for ext in pack.extensions
}

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(_EXT_INDEX)


def get_pack_for_ext(ext: str) -> LanguagePack | None:
    """Look up the pack for a file extension (with or without leading dot)."""
    return _EXT_INDEX.get(ext.lower().lstrip("."))
