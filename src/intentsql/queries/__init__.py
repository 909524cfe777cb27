"""Query site collection, identity and change categorization."""

from intentsql.queries.categorize import Categorization, categorize_queries, is_unchanged
from intentsql.queries.collector import QueryCollector, template_parts
from intentsql.queries.identity import (
    canonical_json,
    content_hash,
    intent_pattern,
    query_id,
    runtime_query_id,
)
from intentsql.queries.models import (
    CollectedQuery,
    GeneratedQuery,
    Literal,
    MethodInfo,
    ParamValue,
    SourceLocation,
    Unresolved,
)
from intentsql.queries.registry import QueryRegistry

__all__ = [
    "Categorization",
    "categorize_queries",
    "is_unchanged",
    "QueryCollector",
    "template_parts",
    "canonical_json",
    "content_hash",
    "intent_pattern",
    "query_id",
    "runtime_query_id",
    "CollectedQuery",
    "GeneratedQuery",
    "Literal",
    "MethodInfo",
    "ParamValue",
    "SourceLocation",
    "Unresolved",
    "QueryRegistry",
]
