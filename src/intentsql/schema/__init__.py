"""Schema analysis for fluent-builder schema sources."""

from intentsql.schema.analyzer import SchemaAnalyzer, resolve_schema_files
from intentsql.schema.chain import ChainCall, MethodChain, unwind_chain
from intentsql.schema.formatting import (
    SYSTEM_PROMPT,
    format_schema_compact,
    format_schema_for_llm,
)
from intentsql.schema.models import (
    ColumnInfo,
    ColumnReference,
    RelationInfo,
    SchemaInfo,
    TableInfo,
)

__all__ = [
    "SchemaAnalyzer",
    "resolve_schema_files",
    "ChainCall",
    "MethodChain",
    "unwind_chain",
    "SYSTEM_PROMPT",
    "format_schema_compact",
    "format_schema_for_llm",
    "ColumnInfo",
    "ColumnReference",
    "RelationInfo",
    "SchemaInfo",
    "TableInfo",
]
