"""Query site collection.

Two source forms mark a natural-language query::

    const users = await db.llm<User[]>("active users", { limit: 10 }).all();

    const user: User = llm`user with id ${userId}`;

Sites are found by node shape alone. A call that looks close but does not
fit (a non-literal intent, a different receiver) is not a query site and
is skipped without error.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

import structlog

from intentsql.config.constants import (
    DEFAULT_QUERY_METHOD,
    DEFAULT_QUERY_RECEIVERS,
    DEFAULT_TEMPLATE_TAG,
)
from intentsql.parsing.nodes import (
    NodeKind,
    NodeVisitor,
    is_function_like,
    is_literal,
    kind_of,
    literal_value,
    unwrap,
)
from intentsql.parsing.treesitter import (
    Node,
    ParseResult,
    TypeScriptParser,
    annotation_text,
    call_arguments,
    first_type_argument,
    named_children,
    node_text,
    object_pairs,
    property_name,
    string_value,
    walk,
)
from intentsql.queries.identity import intent_pattern, query_id
from intentsql.queries.models import (
    CollectedQuery,
    Literal,
    MethodInfo,
    ParamValue,
    SourceLocation,
    Unresolved,
)

log = structlog.get_logger()

# Executor method -> whether it yields multiple rows
EXECUTOR_METHODS: dict[str, bool] = {"get": False, "all": True, "run": False}

_PROMISE_RE = re.compile(r"^Promise<(.+)>$", re.DOTALL)


def template_parts(template: Node) -> tuple[list[str], list[Node]]:
    """Literal text segments and substituted expressions of a template literal.

    Segments are raw source text. There is always one more segment than
    there are expressions.
    """
    raw = template.text or b""
    base = template.start_byte
    strings: list[str] = []
    expressions: list[Node] = []
    cursor = 1  # past the opening backtick
    for child in template.children:
        if child.type != "template_substitution":
            continue
        strings.append(raw[cursor : child.start_byte - base].decode("utf-8", errors="replace"))
        inner = named_children(child)
        expressions.append(inner[0] if inner else child)
        cursor = child.end_byte - base
    end = len(raw) - 1 if raw.endswith(b"`") and len(raw) > cursor else len(raw)
    strings.append(raw[cursor:end].decode("utf-8", errors="replace"))
    return strings, expressions


def unwrap_promise(type_text: str) -> str:
    match = _PROMISE_RE.match(type_text.strip())
    return match.group(1).strip() if match else type_text


class _ParamDecoder(NodeVisitor[ParamValue]):
    """String, number and boolean literals decode; anything else stays source text."""

    def _literal(self, node: Node) -> ParamValue:
        value = literal_value(node)
        if value is None:
            return self.generic_visit(node)
        return Literal(value)  # type: ignore[arg-type]

    def visit_string(self, node: Node) -> ParamValue:
        return self._literal(node)

    def visit_template(self, node: Node) -> ParamValue:
        if not is_literal(node):
            return self.generic_visit(node)
        return self._literal(node)

    def visit_number(self, node: Node) -> ParamValue:
        return self._literal(node)

    def visit_boolean(self, node: Node) -> ParamValue:
        return self._literal(node)

    def generic_visit(self, node: Node) -> ParamValue:
        return Unresolved(node_text(node))


_PARAMS = _ParamDecoder()


class QueryCollector:
    """Finds query sites in source files.

    Locations are reported relative to ``root`` when the file lies under
    it, so ids stay stable across checkouts.
    """

    def __init__(
        self,
        receivers: Iterable[str] = DEFAULT_QUERY_RECEIVERS,
        method: str = DEFAULT_QUERY_METHOD,
        template_tag: str = DEFAULT_TEMPLATE_TAG,
        root: Path | None = None,
        parser: TypeScriptParser | None = None,
    ) -> None:
        self._receivers = frozenset(receivers)
        self._method = method
        self._template_tag = template_tag
        self._root = root.resolve() if root is not None else None
        self._parser = parser or TypeScriptParser()

    def collect_queries(self, paths: Iterable[Path]) -> list[CollectedQuery]:
        """All query sites in ``paths``, in file order then source order."""
        queries: list[CollectedQuery] = []
        for path in paths:
            queries.extend(self.collect_file(path))
        return queries

    def collect_file(self, path: Path, content: bytes | None = None) -> list[CollectedQuery]:
        try:
            result = self._parser.parse(path, content)
        except OSError as e:
            log.warning("query_file_unreadable", path=str(path), error=str(e))
            return []

        display = self._display_path(path)
        queries: list[CollectedQuery] = []
        for node in walk(result.root_node):
            match kind_of(node):
                case NodeKind.CALL:
                    query = self._from_call(node, result, display)
                case NodeKind.TAGGED_TEMPLATE:
                    query = self._from_template(node, result, display)
                case _:
                    continue
            if query is not None:
                log.debug(
                    "query_collected",
                    file=display,
                    line=query.location.line,
                    intent=query.intent,
                )
                queries.append(query)
        return queries

    # -------------------------------------------------------------------------
    # Site recognition
    # -------------------------------------------------------------------------

    def _from_call(self, call: Node, result: ParseResult, display: str) -> CollectedQuery | None:
        callee = call.child_by_field_name("function")
        if callee is None:
            return None
        callee = unwrap(callee)
        if kind_of(callee) is not NodeKind.PROPERTY_ACCESS or property_name(callee) != self._method:
            return None
        receiver = callee.child_by_field_name("object")
        if receiver is None:
            return None
        receiver = unwrap(receiver)
        if kind_of(receiver) is not NodeKind.IDENTIFIER or node_text(receiver) not in self._receivers:
            return None

        args = call_arguments(call)
        intent = string_value(unwrap(args[0])) if args else None
        if intent is None:
            log.debug("query_site_skipped", file=display, reason="intent is not a string literal")
            return None

        params: dict[str, ParamValue] | None = None
        if len(args) > 1 and kind_of(unwrap(args[1])) is NodeKind.OBJECT:
            params = {key: _PARAMS.visit(unwrap(value)) for key, value in object_pairs(unwrap(args[1]))}

        return self._build(
            call,
            result,
            display,
            intent=intent,
            params=params,
            return_type=self._return_type(call, call_form=True),
            method_info=self._method_info(call),
        )

    def _from_template(
        self, tagged: Node, result: ParseResult, display: str
    ) -> CollectedQuery | None:
        tag = tagged.child_by_field_name("function")
        if tag is None or kind_of(unwrap(tag)) is not NodeKind.IDENTIFIER:
            return None
        if node_text(unwrap(tag)) != self._template_tag:
            return None
        template = tagged.child_by_field_name("arguments")
        if template is None:
            return None

        strings, expressions = template_parts(template)
        params: dict[str, ParamValue] | None = None
        if expressions:
            params = {
                f"param{index}": Unresolved(node_text(expression))
                for index, expression in enumerate(expressions)
            }

        return self._build(
            tagged,
            result,
            display,
            intent=intent_pattern(strings),
            params=params,
            return_type=self._return_type(tagged, call_form=False),
            method_info=None,
        )

    def _build(
        self,
        node: Node,
        result: ParseResult,
        display: str,
        *,
        intent: str,
        params: dict[str, ParamValue] | None,
        return_type: str | None,
        method_info: MethodInfo | None,
    ) -> CollectedQuery:
        line, column = result.location_of(node)
        location = SourceLocation(file=display, line=line, column=column)
        return CollectedQuery(
            id=query_id(intent, params, location),
            intent=intent,
            location=location,
            source_file=display,
            params=params,
            return_type=return_type,
            method_info=method_info,
        )

    # -------------------------------------------------------------------------
    # Return types and executors
    # -------------------------------------------------------------------------

    def _return_type(self, node: Node, *, call_form: bool) -> str | None:
        explicit = first_type_argument(node)
        if explicit:
            return explicit

        if not call_form:
            # db.get<User>(llm`...`)
            parent = node.parent
            outer = parent.parent if parent is not None and parent.type == "arguments" else None
            if outer is not None and kind_of(outer) is NodeKind.CALL:
                explicit = first_type_argument(outer)
                if explicit:
                    return explicit

        declared = _declared_type(node)
        if declared:
            return declared

        if call_form:
            return _enclosing_return_type(node)
        return None

    def _method_info(self, call: Node) -> MethodInfo | None:
        ancestor = call.parent
        while ancestor is not None and not is_function_like(ancestor):
            if kind_of(ancestor) is NodeKind.CALL:
                callee = ancestor.child_by_field_name("function")
                if callee is not None and kind_of(callee) is NodeKind.PROPERTY_ACCESS:
                    method = property_name(callee)
                    if method in EXECUTOR_METHODS:
                        return MethodInfo(method=method, expects_multiple=EXECUTOR_METHODS[method])
            ancestor = ancestor.parent
        return None

    def _display_path(self, path: Path) -> str:
        resolved = path.resolve()
        if self._root is not None and resolved.is_relative_to(self._root):
            return resolved.relative_to(self._root).as_posix()
        return path.as_posix()


def _declared_type(node: Node) -> str | None:
    """Annotation of the nearest enclosing variable declarator in the same function."""
    ancestor = node.parent
    while ancestor is not None and not is_function_like(ancestor):
        if kind_of(ancestor) is NodeKind.VARIABLE_DECLARATOR:
            return annotation_text(ancestor.child_by_field_name("type"))
        ancestor = ancestor.parent
    return None


def _enclosing_return_type(node: Node) -> str | None:
    """Return annotation of the nearest enclosing function, without one ``Promise<>``."""
    ancestor = node.parent
    while ancestor is not None:
        if is_function_like(ancestor):
            annotated = annotation_text(ancestor.child_by_field_name("return_type"))
            return unwrap_promise(annotated) if annotated else None
        ancestor = ancestor.parent
    return None
