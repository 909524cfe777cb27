"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (INTENTSQL__SECTION__KEY)
3. Repo YAML (.intentsql/config.yaml)
4. Global YAML (~/.config/intentsql/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    INTENTSQL__<SECTION>__<KEY>=<VALUE>

Examples:
    INTENTSQL__LOGGING__LEVEL=DEBUG
    INTENTSQL__CACHE__ENABLED=false
    INTENTSQL__PATHS__SCHEMA=src/db/schema.ts
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from intentsql.config.constants import (
    DEFAULT_QUERY_METHOD,
    DEFAULT_QUERY_RECEIVERS,
    DEFAULT_TABLE_FUNCTIONS,
    DEFAULT_TEMPLATE_TAG,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        INTENTSQL__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every recognized table and query site.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class PathsConfig(BaseModel):
    """Source locations, relative to the repository root.

    Env vars:
        INTENTSQL__PATHS__SCHEMA: Schema file, directory, or glob
        INTENTSQL__PATHS__MANIFEST: Previously generated queries (JSON)
    """

    schema_path: str = Field(
        default="src/db/schema.ts",
        alias="schema",
        description="Schema source: a file, a directory of sources, or a glob.",
    )
    queries: list[str] = Field(
        default_factory=lambda: ["src/**/*.ts"],
        description="Glob patterns of files scanned for query sites.",
    )
    manifest: str = Field(
        default=".intentsql/generated.json",
        description="JSON manifest of previously generated queries.",
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("queries", mode="before")
    @classmethod
    def coerce_queries(cls, v: object) -> object:
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("queries")
    @classmethod
    def validate_queries(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one query pattern is required")
        return v


class CacheConfig(BaseModel):
    """Generated-query cache.

    Env vars:
        INTENTSQL__CACHE__ENABLED: Turn the cache on or off
        INTENTSQL__CACHE__DIRECTORY: Cache directory (relative to repo root)
    """

    enabled: bool = Field(
        default=True,
        description="Reuse generated SQL across builds. Disable to force regeneration.",
    )
    directory: str = Field(
        default=".intentsql-cache",
        description="Directory holding one JSON file per cached query.",
    )


class RecognitionConfig(BaseModel):
    """Syntactic patterns that mark tables and query sites.

    These rarely need changing; they exist for codebases that wrap the
    schema builder or the query client under different names.
    """

    table_functions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TABLE_FUNCTIONS),
        description="Functions whose call declares a table, e.g. pgTable.",
    )
    query_receivers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_QUERY_RECEIVERS),
        description="Objects whose .llm(...) method marks a query site.",
    )
    query_method: str = Field(default=DEFAULT_QUERY_METHOD)
    template_tag: str = Field(
        default=DEFAULT_TEMPLATE_TAG,
        description="Identifier used as the query template tag.",
    )

    @field_validator("table_functions", "query_receivers")
    @classmethod
    def validate_non_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("Must name at least one identifier")
        return v


class IntentSQLConfig(BaseModel):
    """Root configuration model (for type hints; loading uses pydantic-settings)."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    recognition: RecognitionConfig = Field(default_factory=RecognitionConfig)
