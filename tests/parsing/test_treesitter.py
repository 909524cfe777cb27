"""Tests for tree-sitter parsing and node helpers."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from intentsql.core.errors import AnalysisError, ErrorCode
from intentsql.parsing.packs import SUPPORTED_EXTENSIONS, get_pack_for_ext
from intentsql.parsing.treesitter import (
    Node,
    ParseResult,
    TypeScriptParser,
    call_arguments,
    callee_name,
    first_type_argument,
    node_text,
    object_pairs,
    string_value,
    unescape,
    walk,
)

Parse = Callable[..., ParseResult]


def first_of_type(result: ParseResult, node_type: str) -> Node:
    for node in walk(result.root_node):
        if node.type == node_type:
            return node
    raise AssertionError(f"no {node_type} node in source")


class TestLanguagePacks:
    """Grammar selection by file extension."""

    @pytest.mark.parametrize(
        ("ext", "grammar"),
        [
            (".ts", "typescript"),
            ("mts", "typescript"),
            (".tsx", "tsx"),
            (".js", "tsx"),
            (".JSX", "tsx"),
        ],
    )
    def test_extension_maps_to_grammar(self, ext: str, grammar: str) -> None:
        pack = get_pack_for_ext(ext)
        assert pack is not None
        assert pack.name == grammar

    def test_unknown_extension(self) -> None:
        assert get_pack_for_ext(".py") is None
        assert "py" not in SUPPORTED_EXTENSIONS


class TestTypeScriptParser:
    """Parsing files into trees."""

    def test_given_valid_source_when_parsed_then_no_errors(self, parse: Parse) -> None:
        # When
        result = parse("export const answer: number = 42;\n")

        # Then
        assert result.language == "typescript"
        assert result.error_count == 0
        assert result.root_node.type == "program"

    def test_given_broken_source_when_parsed_then_errors_counted(self, parse: Parse) -> None:
        result = parse("const = = ;\n")
        assert result.error_count > 0

    def test_given_jsx_when_parsed_as_tsx_then_no_errors(self, parse: Parse) -> None:
        result = parse("const el = <div className='a'>hi</div>;\n", "view.tsx")
        assert result.language == "tsx"
        assert result.error_count == 0

    def test_given_file_on_disk_when_parsed_then_read(
        self, parser: TypeScriptParser, tmp_path: Path
    ) -> None:
        source = tmp_path / "q.ts"
        source.write_text("db.llm('x');\n")

        result = parser.parse(source)

        assert result.source == b"db.llm('x');\n"
        assert result.path == source

    def test_given_unsupported_suffix_when_parsed_then_raises(
        self, parser: TypeScriptParser
    ) -> None:
        with pytest.raises(AnalysisError) as exc_info:
            parser.parse(Path("README.md"), b"# hi")
        assert exc_info.value.code == ErrorCode.UNSUPPORTED_SOURCE

    def test_given_missing_file_when_parsed_then_os_error(
        self, parser: TypeScriptParser, tmp_path: Path
    ) -> None:
        with pytest.raises(FileNotFoundError):
            parser.parse(tmp_path / "missing.ts")


class TestLocations:
    """1-based line and character column."""

    def test_first_line(self, parse: Parse) -> None:
        result = parse("foo();\n")
        call = first_of_type(result, "call_expression")
        assert result.location_of(call) == (1, 1)

    def test_columns_count_characters_not_bytes(self, parse: Parse) -> None:
        # "é" is two bytes in UTF-8 but one character
        result = parse('const a = "é"; foo();\n')
        call = first_of_type(result, "call_expression")
        assert result.location_of(call) == (1, 16)

    def test_later_line(self, parse: Parse) -> None:
        result = parse("const a = 1;\n\n  foo();\n")
        call = first_of_type(result, "call_expression")
        assert result.location_of(call) == (3, 3)


class TestNodeHelpers:
    """Small shape helpers."""

    def test_walk_is_preorder(self, parse: Parse) -> None:
        result = parse("a(b(c()));\n")
        calls = [node_text(n) for n in walk(result.root_node) if n.type == "call_expression"]
        assert calls == ["a(b(c()))", "b(c())", "c()"]

    def test_callee_name_direct_and_member(self, parse: Parse) -> None:
        result = parse("builder.table('t', {});\n")
        call = first_of_type(result, "call_expression")
        assert callee_name(call) == "table"

    def test_call_arguments_skip_comments(self, parse: Parse) -> None:
        result = parse("f(/* first */ 1, // second\n 2);\n")
        call = first_of_type(result, "call_expression")
        assert [node_text(a) for a in call_arguments(call)] == ["1", "2"]

    def test_first_type_argument(self, parse: Parse) -> None:
        result = parse("db.llm<User[]>('all users');\n")
        call = first_of_type(result, "call_expression")
        assert first_type_argument(call) == "User[]"

    def test_object_pairs(self, parse: Parse) -> None:
        result = parse("f({ a: 1, 'b-c': 2, d, ...rest });\n")
        obj = first_of_type(result, "object")
        assert [(key, node_text(value)) for key, value in object_pairs(obj)] == [
            ("a", "1"),
            ("b-c", "2"),
        ]


class TestStringValues:
    """String literal decoding."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ('"plain"', "plain"),
            ("'it\\'s'", "it's"),
            ('"line\\nbreak"', "line\nbreak"),
            ("`no substitutions`", "no substitutions"),
        ],
    )
    def test_literals(self, parse: Parse, source: str, expected: str) -> None:
        result = parse(f"const s = {source};\n")
        declarator = first_of_type(result, "variable_declarator")
        assert string_value(declarator.child_by_field_name("value")) == expected

    def test_template_with_substitution_is_not_a_string(self, parse: Parse) -> None:
        result = parse("const s = `id ${id}`;\n")
        template = first_of_type(result, "template_string")
        assert string_value(template) is None

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("caf\\u00e9", "café"),
            ("\\x41", "A"),
            ("\\u{1F600}", "\U0001f600"),
            ("\\uD83D\\uDE00", "\U0001f600"),
            ("lone \\uD800", "lone \ud800"),
            ("tab\\there", "tab\there"),
            ("back\\\\slash", "back\\slash"),
            ("no escapes", "no escapes"),
        ],
    )
    def test_unescape(self, raw: str, expected: str) -> None:
        assert unescape(raw) == expected
