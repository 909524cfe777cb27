"""Query site and generated query models.

``CollectedQuery`` is what the collector finds in source code.
``GeneratedQuery`` is what the SQL generator returns for it; it is a
pydantic model because it round-trips through the cache and the
manifest as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

EXPR_KEY = "$expr"


@dataclass(frozen=True, slots=True)
class SourceLocation:
    file: str
    line: int  # 1-based
    column: int  # 1-based, in characters

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "line": self.line, "column": self.column}


@dataclass(frozen=True, slots=True)
class Literal:
    """A parameter value decoded from a string, number or boolean literal."""

    value: str | int | float | bool


@dataclass(frozen=True, slots=True)
class Unresolved:
    """A parameter value kept as the source text of its expression."""

    source: str


type ParamValue = Literal | Unresolved


def param_to_json(value: ParamValue) -> Any:
    match value:
        case Literal(value=literal):
            return literal
        case Unresolved(source=source):
            return {EXPR_KEY: source}


def params_to_json(params: dict[str, ParamValue] | None) -> dict[str, Any] | None:
    if params is None:
        return None
    return {key: param_to_json(value) for key, value in params.items()}


@dataclass(frozen=True, slots=True)
class MethodInfo:
    """Executor the query result is handed to: ``.get()``, ``.all()`` or ``.run()``."""

    method: str
    expects_multiple: bool


@dataclass(frozen=True, slots=True)
class CollectedQuery:
    id: str
    intent: str  # ${n} placeholders mark interpolations
    location: SourceLocation
    source_file: str
    params: dict[str, ParamValue] | None = None
    return_type: str | None = None
    method_info: MethodInfo | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "intent": self.intent,
            "location": self.location.to_dict(),
            "source_file": self.source_file,
        }
        if self.params is not None:
            data["params"] = params_to_json(self.params)
        if self.return_type is not None:
            data["return_type"] = self.return_type
        if self.method_info is not None:
            data["method_info"] = {
                "method": self.method_info.method,
                "expects_multiple": self.method_info.expects_multiple,
            }
        return data


class GeneratedQuery(BaseModel):
    """SQL produced for a collected query."""

    model_config = ConfigDict(frozen=True)

    id: str
    intent: str = ""
    sql: str
    parameters: list[str] = Field(default_factory=list)
    return_type: str | None = None
    hash: str = ""
    source_file: str | None = None

    @classmethod
    def from_collected(
        cls,
        collected: CollectedQuery,
        sql: str,
        parameters: list[str] | None = None,
    ) -> GeneratedQuery:
        """Build the result for ``collected``, stamped with its content hash."""
        from intentsql.queries.identity import content_hash

        return cls(
            id=collected.id,
            intent=collected.intent,
            sql=sql,
            parameters=parameters or [],
            return_type=collected.return_type,
            hash=content_hash(collected),
            source_file=collected.source_file,
        )
