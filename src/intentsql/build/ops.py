"""Build orchestration: analyze, collect, categorize, generate.

``plan_build`` does everything up to deciding what needs SQL.
``run_build`` then asks a ``QueryGenerator`` for the missing SQL, using the
cache first, and assembles the complete set of generated queries.
"""

from __future__ import annotations

import glob
import json
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import structlog
from pydantic import TypeAdapter, ValidationError

from intentsql.cache.store import QueryCache
from intentsql.config.loader import resolve_path
from intentsql.config.models import IntentSQLConfig
from intentsql.core.errors import ConfigError
from intentsql.core.logging import clear_build_id, set_build_id
from intentsql.parsing.packs import get_pack_for_ext
from intentsql.queries.categorize import Categorization, categorize_queries
from intentsql.queries.collector import QueryCollector
from intentsql.queries.models import CollectedQuery, GeneratedQuery
from intentsql.queries.registry import QueryRegistry
from intentsql.schema.analyzer import SchemaAnalyzer
from intentsql.schema.models import SchemaInfo

log = structlog.get_logger()

_MANIFEST = TypeAdapter(list[GeneratedQuery])


class QueryGenerator(Protocol):
    """Turns collected queries into SQL, grounded in the schema."""

    def generate(
        self, queries: Sequence[CollectedQuery], schema: SchemaInfo
    ) -> list[GeneratedQuery]: ...


@dataclass(slots=True)
class BuildPlan:
    schema: SchemaInfo
    queries: list[CollectedQuery]
    categorization: Categorization
    query_files: list[Path] = field(default_factory=list)

    @property
    def to_generate(self) -> list[CollectedQuery]:
        return self.categorization.to_generate


@dataclass(slots=True)
class BuildResult:
    plan: BuildPlan
    queries: list[GeneratedQuery]
    registry: QueryRegistry
    generated: int = 0  # Produced by the generator in this build
    cached: int = 0  # Served from the cache


def resolve_query_files(patterns: Iterable[str], root: Path) -> list[Path]:
    """Expand glob patterns (relative to ``root``) into sorted, unique, absolute paths."""
    found: set[Path] = set()
    for pattern in patterns:
        for match in glob.glob(str(resolve_path(root, pattern)), recursive=True):
            path = Path(match)
            if path.is_file() and get_pack_for_ext(path.suffix) is not None:
                found.add(path.resolve())
    return sorted(found)


def load_manifest(path: Path) -> dict[str, GeneratedQuery]:
    """Previously generated queries by id; a missing manifest is empty.

    Raises:
        ConfigError: The manifest exists but is not a JSON list of queries.
    """
    if not path.exists():
        return {}
    try:
        queries = _MANIFEST.validate_json(path.read_bytes())
    except ValidationError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    return {query.id: query for query in queries}


def write_manifest(path: Path, queries: Iterable[GeneratedQuery]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    data = [query.model_dump(mode="json") for query in queries]
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def plan_build(
    config: IntentSQLConfig,
    existing: Mapping[str, GeneratedQuery],
    *,
    root: Path | None = None,
    analyzer: SchemaAnalyzer | None = None,
    collector: QueryCollector | None = None,
) -> BuildPlan:
    """Analyze the schema, collect query sites and categorize them.

    Raises:
        AnalysisError: The configured schema path resolves to nothing.
    """
    root = root or Path.cwd()
    analyzer = analyzer or SchemaAnalyzer(table_functions=config.recognition.table_functions)
    collector = collector or QueryCollector(
        receivers=config.recognition.query_receivers,
        method=config.recognition.query_method,
        template_tag=config.recognition.template_tag,
        root=root,
    )

    schema = analyzer.analyze_schema_path(config.paths.schema_path, root)
    files = resolve_query_files(config.paths.queries, root)
    queries = collector.collect_queries(files)
    categorization = categorize_queries(queries, existing)

    log.info(
        "build_planned",
        tables=len(schema.tables),
        files=len(files),
        queries=len(queries),
        valid=len(categorization.valid),
        changed=len(categorization.changed),
        new=len(categorization.new),
    )
    return BuildPlan(
        schema=schema,
        queries=queries,
        categorization=categorization,
        query_files=files,
    )


def run_build(
    config: IntentSQLConfig,
    generator: QueryGenerator,
    existing: Mapping[str, GeneratedQuery],
    *,
    root: Path | None = None,
    cache: QueryCache | None = None,
) -> BuildResult:
    """Plan, then generate SQL for every changed or new query."""
    root = root or Path.cwd()
    cache = cache or QueryCache(
        resolve_path(root, config.cache.directory), enabled=config.cache.enabled
    )

    build_id = set_build_id()
    log.info("build_started", build_id=build_id)
    try:
        plan = plan_build(config, existing, root=root)

        fresh: dict[str, GeneratedQuery] = {}
        misses: list[CollectedQuery] = []
        for query in plan.to_generate:
            hit = cache.get(query.id, query.intent, query.params)
            if hit is not None:
                fresh[query.id] = hit
            else:
                misses.append(query)

        generated: list[GeneratedQuery] = []
        if misses:
            generated = generator.generate(misses, plan.schema)
            by_id = {query.id: query for query in misses}
            for result in generated:
                source = by_id.get(result.id)
                if source is None:
                    log.warning("generated_query_unknown", query_id=result.id)
                    continue
                cache.set(source.id, source.intent, result, source.params)
                fresh[result.id] = result

        carried = {query.id: query for query in plan.categorization.carried_forward(existing)}
        ordered = [
            fresh.get(query.id) or carried[query.id]
            for query in plan.queries
            if query.id in fresh or query.id in carried
        ]
        missing = len(plan.queries) - len(ordered)
        if missing:
            log.warning("queries_without_sql", count=missing)

        registry = QueryRegistry(ordered)
        log.info(
            "build_finished",
            queries=len(ordered),
            generated=len(generated),
            cached=len(plan.to_generate) - len(misses),
        )
        return BuildResult(
            plan=plan,
            queries=ordered,
            registry=registry,
            generated=len(generated),
            cached=len(plan.to_generate) - len(misses),
        )
    finally:
        clear_build_id()
