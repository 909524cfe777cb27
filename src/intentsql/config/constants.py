"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable:
cache lifetime, on-disk naming, and the canonical column type table.

For configurable values, see models.py.
"""

# =============================================================================
# Cache
# =============================================================================

CACHE_TTL_SECONDS = 24 * 60 * 60
"""Age after which a cache entry is treated as absent (lazy expiration)."""

CACHE_FILE_SUFFIX = ".json"
"""Cache entries are stored one per file as ``<key>.json``."""

# =============================================================================
# Recognition defaults
# =============================================================================

DEFAULT_TABLE_FUNCTIONS = ("pgTable", "table")
"""Table-declaration functions recognized in schema sources."""

DEFAULT_QUERY_RECEIVERS = ("db", "llmDB")
"""Identifiers whose ``.llm(...)`` method marks a query site."""

DEFAULT_QUERY_METHOD = "llm"

DEFAULT_TEMPLATE_TAG = "llm"

PRIMARY_KEY_COMPOSER = "primaryKey"
"""Name of the composite primary key composer (``primaryKey(t.a, t.b)``)."""

# =============================================================================
# Schema DSL type tags
# =============================================================================
# Root type call name -> canonical column type. Names not listed here pass
# through unchanged.

COLUMN_TYPE_MAP: dict[str, str] = {
    "integer": "integer",
    "int": "integer",
    "smallint": "smallint",
    "serial": "serial",
    "smallserial": "smallserial",
    "bigint": "bigint",
    "bigserial": "bigserial",
    "boolean": "boolean",
    "text": "text",
    "varchar": "varchar",
    "char": "char",
    "uuid": "uuid",
    "timestamp": "timestamp",
    "date": "date",
    "time": "time",
    "json": "json",
    "jsonb": "jsonb",
    "real": "real",
    "double": "double",
    "doublePrecision": "double precision",
    "decimal": "decimal",
    "numeric": "numeric",
}

# =============================================================================
# Repository layout
# =============================================================================

CONFIG_DIR_NAME = ".intentsql"
CONFIG_FILE_NAME = "config.yaml"
