"""Schema model recovered from a fluent-builder schema source.

All types are plain dataclasses produced once per build. ``to_dict``
gives a deterministic JSON-compatible form with unset optional fields
left out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

RelationType = Literal["one-to-one", "one-to-many", "many-to-many"]


@dataclass(frozen=True, slots=True)
class ColumnReference:
    """Foreign key target: ``references(() => users.id)``."""

    table: str
    column: str

    def to_dict(self) -> dict[str, str]:
        return {"table": self.table, "column": self.column}


@dataclass(slots=True)
class ColumnInfo:
    name: str  # Source-level property name
    type: str  # Canonical type tag
    db_name: str | None = None  # Physical name; equals name unless overridden
    nullable: bool = True
    default_value: Any = None
    enum_values: list[str] | None = None
    constraints: list[str] | None = None
    references: ColumnReference | None = None

    def __post_init__(self) -> None:
        if self.db_name is None:
            self.db_name = self.name

    @property
    def physical_name(self) -> str:
        return self.db_name or self.name

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "db_name": self.physical_name,
            "type": self.type,
            "nullable": self.nullable,
        }
        if self.default_value is not None:
            data["default_value"] = self.default_value
        if self.enum_values:
            data["enum_values"] = list(self.enum_values)
        if self.constraints:
            data["constraints"] = list(self.constraints)
        if self.references is not None:
            data["references"] = self.references.to_dict()
        return data


@dataclass(slots=True)
class TableInfo:
    name: str
    columns: list[ColumnInfo] = field(default_factory=list)
    primary_key: list[str] | None = None

    def column(self, name: str) -> ColumnInfo | None:
        """Look up a column by property name or physical name."""
        for col in self.columns:
            if name in (col.name, col.physical_name):
                return col
        return None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "columns": [col.to_dict() for col in self.columns],
        }
        if self.primary_key:
            data["primary_key"] = list(self.primary_key)
        return data


@dataclass(slots=True)
class RelationInfo:
    """Cross-table relation. Not populated by analysis yet; column references carry foreign keys."""

    table: str
    referenced_table: str
    columns: list[str]
    referenced_columns: list[str]
    type: RelationType

    def to_dict(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "referenced_table": self.referenced_table,
            "columns": list(self.columns),
            "referenced_columns": list(self.referenced_columns),
            "type": self.type,
        }


@dataclass(slots=True)
class SchemaInfo:
    tables: list[TableInfo] = field(default_factory=list)
    relations: list[RelationInfo] = field(default_factory=list)

    def table(self, name: str) -> TableInfo | None:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tables": [table.to_dict() for table in self.tables],
            "relations": [relation.to_dict() for relation in self.relations],
        }
