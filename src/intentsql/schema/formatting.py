"""Schema rendering for SQL generation prompts."""

from __future__ import annotations

import json

from intentsql.schema.models import ColumnInfo, SchemaInfo

SYSTEM_PROMPT = """You are a SQL query generator for Drizzle ORM with PostgreSQL.

CRITICAL RULES:
1. Use EXACT database column names as shown in the schema (e.g., created_at, NOT createdAt)
2. Table and column names are case-sensitive
3. Use parameterized queries with $1, $2, etc. for dynamic values
4. Return ONLY the SQL query without explanation or comments
5. Do NOT use column aliases unless necessary for clarity
6. Never include markdown formatting or code blocks

Common naming patterns:
- JavaScript property 'createdAt' -> DB column 'created_at'
- JavaScript property 'updatedAt' -> DB column 'updated_at'
- JavaScript property 'userId' -> DB column 'user_id'
- JavaScript property 'isActive' -> DB column 'is_active'

Generate optimized, valid PostgreSQL queries."""


def _format_default(value: object) -> str:
    # Function defaults are shown as written: defaultNow(), sql`now()`
    if isinstance(value, str) and "()" in value:
        return value
    return json.dumps(value, ensure_ascii=False)


def _format_column(col: ColumnInfo) -> str:
    line = f"  - {col.physical_name}: {col.type}"
    if not col.nullable:
        line += " NOT NULL"
    if col.default_value is not None:
        line += f" DEFAULT {_format_default(col.default_value)}"
    if col.enum_values:
        line += " ENUM(" + ", ".join(f"'{v}'" for v in col.enum_values) + ")"
    if col.constraints:
        line += f" [{', '.join(col.constraints)}]"
    if col.references is not None:
        line += f" REFERENCES {col.references.table}({col.references.column})"
    if col.physical_name != col.name:
        line += f" -- property: {col.name}"
    return line


def format_schema_for_llm(schema: SchemaInfo) -> str:
    """Multi-line description of every table, column and constraint."""
    lines = ["Database Schema:", ""]
    for table in schema.tables:
        lines.append(f"Table: {table.name}")
        lines.append("Columns:")
        lines.extend(_format_column(col) for col in table.columns)
        if table.primary_key:
            lines.append(f"  PRIMARY KEY: {', '.join(table.primary_key)}")
        lines.append("")
    return "\n".join(lines) + "\n"


def format_schema_compact(schema: SchemaInfo) -> str:
    """One line per table: ``users(id, role(admin|member))``."""
    lines = ["Tables and columns:"]
    for table in schema.tables:
        columns = []
        for col in table.columns:
            text = col.physical_name
            if col.enum_values:
                text += f"({'|'.join(col.enum_values)})"
            columns.append(text)
        lines.append(f"{table.name}({', '.join(columns)})")
    return "\n".join(lines) + "\n"
