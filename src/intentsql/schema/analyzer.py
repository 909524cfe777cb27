"""Schema analysis: recover tables and columns from a fluent-builder schema.

Recognized shape::

    export const users = pgTable("users", {
      id: uuid("id").primaryKey().defaultRandom(),
      email: text("email").notNull().unique(),
      createdAt: timestamp("created_at").defaultNow(),
    });

Only node shape is inspected; nothing is executed and no identifiers are
resolved. Declarations that do not match are skipped without error.
"""

from __future__ import annotations

import glob
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import structlog

from intentsql.config.constants import (
    COLUMN_TYPE_MAP,
    DEFAULT_TABLE_FUNCTIONS,
    PRIMARY_KEY_COMPOSER,
)
from intentsql.config.loader import resolve_path
from intentsql.core.errors import AnalysisError
from intentsql.parsing.nodes import NodeKind, is_literal, kind_of, literal_value, unwrap
from intentsql.parsing.packs import get_pack_for_ext
from intentsql.parsing.treesitter import (
    Node,
    TypeScriptParser,
    call_arguments,
    callee_name,
    named_children,
    node_text,
    object_pairs,
    object_value,
    property_name,
    string_value,
    walk,
)
from intentsql.schema.chain import ChainCall, MethodChain, unwind_chain
from intentsql.schema.models import ColumnInfo, ColumnReference, SchemaInfo, TableInfo

log = structlog.get_logger()

_DECLARATION_TYPES = frozenset({"lexical_declaration", "variable_declaration"})

# Modifiers that take no argument and store their own call text as default
_DEFAULT_FUNCTIONS = ("defaultRandom", "defaultNow")

_GLOB_CHARS = frozenset("*?[")


def map_column_type(name: str) -> str:
    return COLUMN_TYPE_MAP.get(name, name)


class SchemaAnalyzer:
    """Extracts ``SchemaInfo`` from schema source files."""

    def __init__(
        self,
        table_functions: Iterable[str] = DEFAULT_TABLE_FUNCTIONS,
        parser: TypeScriptParser | None = None,
    ) -> None:
        self._table_functions = frozenset(table_functions)
        self._parser = parser or TypeScriptParser()

    def analyze_schema(self, path: Path) -> SchemaInfo:
        """Analyze one schema file.

        A missing or unreadable file is logged and yields an empty schema.

        Raises:
            AnalysisError: The file extension is not a supported source type.
        """
        try:
            result = self._parser.parse(path)
        except OSError as e:
            log.warning("schema_file_unreadable", path=str(path), error=str(e))
            return SchemaInfo()

        tables = list(self._tables_in(result.root_node))
        log.debug("schema_analyzed", path=str(path), tables=len(tables))
        return SchemaInfo(tables=tables)

    def analyze_schema_path(self, path_or_glob: str, root: Path) -> SchemaInfo:
        """Analyze a schema file, a directory of sources, or a glob.

        Tables are merged in path order.

        Raises:
            AnalysisError: Nothing resolvable at ``path_or_glob``.
        """
        files = resolve_schema_files(path_or_glob, root)
        if not files:
            raise AnalysisError.schema_not_found(path_or_glob)

        schema = SchemaInfo()
        for file in files:
            part = self.analyze_schema(file)
            schema.tables.extend(part.tables)
            schema.relations.extend(part.relations)
        return schema

    # -------------------------------------------------------------------------
    # Table recognition
    # -------------------------------------------------------------------------

    def _tables_in(self, program: Node) -> Iterable[TableInfo]:
        statements = named_children(program)
        for index, statement in enumerate(statements):
            declarators = _declarators(statement)
            for position, declarator in enumerate(declarators):
                table_call = self._table_call(declarator)
                if table_call is None:
                    continue
                table = self._table_from_call(table_call)
                if table is None:
                    continue
                if table.primary_key is None:
                    following = statements[index + 1] if index + 1 < len(statements) else None
                    table.primary_key = self._composite_key(
                        table_call, declarators[position + 1 :], following
                    )
                log.debug("table_recognized", table=table.name, columns=len(table.columns))
                yield table

    def _table_call(self, declarator: Node) -> Node | None:
        value = declarator.child_by_field_name("value")
        if value is None:
            return None
        value = unwrap(value)
        if kind_of(value) is not NodeKind.CALL:
            return None
        if callee_name(value) not in self._table_functions:
            return None
        return value

    def _table_from_call(self, call: Node) -> TableInfo | None:
        args = call_arguments(call)
        if len(args) < 2:
            return None
        name = string_value(unwrap(args[0]))
        columns_node = unwrap(args[1])
        if not name or kind_of(columns_node) is not NodeKind.OBJECT:
            return None

        columns = []
        for key, value in object_pairs(columns_node):
            chain = unwind_chain(value)
            if chain is None:
                log.debug("column_skipped", table=name, column=key)
                continue
            columns.append(self._column_from_chain(key, chain))

        if not columns:
            log.debug("table_without_columns", table=name)
            return None
        return TableInfo(name=name, columns=columns)

    # -------------------------------------------------------------------------
    # Columns
    # -------------------------------------------------------------------------

    def _column_from_chain(self, key: str, chain: MethodChain) -> ColumnInfo:
        root = chain.root
        first = root.argument(0)
        db_name = string_value(unwrap(first)) if first is not None else None

        column = ColumnInfo(
            name=key,
            type=map_column_type(root.name),
            db_name=db_name or key,
            enum_values=_enum_values(root),
        )

        constraints: list[str] = []
        for modifier in chain.modifiers:
            match modifier.name:
                case "notNull":
                    column.nullable = False
                case "default":
                    value = modifier.argument(0)
                    if value is not None:
                        column.default_value = _default_value(value)
                case name if name in _DEFAULT_FUNCTIONS:
                    column.default_value = f"{name}()"
                case "unique":
                    _add_constraint(constraints, "UNIQUE")
                case "primaryKey":
                    _add_constraint(constraints, "PRIMARY KEY")
                case "references":
                    column.references = _reference(modifier)

        column.constraints = constraints or None
        return column

    # -------------------------------------------------------------------------
    # Composite primary keys
    # -------------------------------------------------------------------------

    def _composite_key(
        self,
        table_call: Node,
        later_declarators: Sequence[Node],
        following_statement: Node | None,
    ) -> list[str] | None:
        """Find ``primaryKey(t.a, t.b)`` next to a table declaration.

        Searched in order: the table's extra-config argument, later
        declarators of the same declaration, the next statement. Declarators
        and statements that declare another table are skipped, so a key in
        that table's own config stays with it. Siblings are matched by
        position only, so reordered declarations can still misattribute a key.
        """
        args = call_arguments(table_call)
        scopes: list[Node] = []
        if len(args) > 2:
            scopes.append(args[2])
        scopes.extend(d for d in later_declarators if self._table_call(d) is None)
        if following_statement is not None and not any(
            self._table_call(d) is not None for d in _declarators(following_statement)
        ):
            scopes.append(following_statement)

        for scope in scopes:
            composer = _find_composer(scope)
            if composer is not None:
                return _key_columns(composer)
        return None


def _declarators(statement: Node) -> list[Node]:
    """Declarators of a (possibly exported) ``const/let/var`` statement."""
    declaration: Node | None = statement
    if statement.type == "export_statement":
        declaration = statement.child_by_field_name("declaration")
    if declaration is None or declaration.type not in _DECLARATION_TYPES:
        return []
    return [child for child in named_children(declaration) if child.type == "variable_declarator"]


def _add_constraint(constraints: list[str], constraint: str) -> None:
    if constraint not in constraints:
        constraints.append(constraint)


def _enum_values(root: ChainCall) -> list[str] | None:
    options = root.argument(1)
    if options is None or kind_of(unwrap(options)) is not NodeKind.OBJECT:
        return None
    values = object_value(unwrap(options), "enum")
    if values is None or kind_of(unwrap(values)) is not NodeKind.ARRAY:
        return None
    strings = [string_value(unwrap(element)) for element in named_children(unwrap(values))]
    found = [value for value in strings if value is not None]
    return found or None


def _default_value(node: Node) -> Any:
    if is_literal(node):
        return literal_value(node)
    return node_text(node)


def _reference(call: ChainCall) -> ColumnReference | None:
    target = call.argument(0)
    if target is None or kind_of(unwrap(target)) is not NodeKind.ARROW_FUNCTION:
        return None
    body = unwrap(target).child_by_field_name("body")
    if body is None:
        return None
    body = unwrap(body)
    if kind_of(body) is not NodeKind.PROPERTY_ACCESS:
        return None
    receiver = body.child_by_field_name("object")
    column = property_name(body)
    if receiver is None or column is None or kind_of(receiver) is not NodeKind.IDENTIFIER:
        return None
    return ColumnReference(table=node_text(receiver), column=column)


def _find_composer(scope: Node) -> Node | None:
    for node in walk(scope):
        if (
            kind_of(node) is NodeKind.CALL
            and callee_name(node) == PRIMARY_KEY_COMPOSER
            and call_arguments(node)
        ):
            return node
    return None


def _key_columns(composer: Node) -> list[str]:
    columns: list[str] = []
    for arg in call_arguments(composer):
        arg = unwrap(arg)
        match kind_of(arg):
            case NodeKind.PROPERTY_ACCESS:
                columns.append(property_name(arg) or node_text(arg))
            case NodeKind.OBJECT:
                listed = object_value(arg, "columns")
                if listed is not None and kind_of(unwrap(listed)) is NodeKind.ARRAY:
                    for element in named_children(unwrap(listed)):
                        element = unwrap(element)
                        if kind_of(element) is NodeKind.PROPERTY_ACCESS:
                            columns.append(property_name(element) or node_text(element))
                        else:
                            columns.append(node_text(element))
                else:
                    columns.append(node_text(arg))
            case _:
                columns.append(node_text(arg))
    return columns


def resolve_schema_files(path_or_glob: str, root: Path) -> list[Path]:
    """Schema source files named by a file, a directory, or a glob (sorted)."""
    candidate = resolve_path(root, path_or_glob)
    if candidate.is_file():
        return [candidate]
    if candidate.is_dir():
        return sorted(
            path
            for path in candidate.rglob("*")
            if path.is_file() and get_pack_for_ext(path.suffix) is not None
        )
    if _GLOB_CHARS & set(path_or_glob):
        return sorted(
            Path(match)
            for match in glob.glob(str(candidate), recursive=True)
            if Path(match).is_file() and get_pack_for_ext(Path(match).suffix) is not None
        )
    return []
