"""Build planning and orchestration."""

from intentsql.build.ops import (
    BuildPlan,
    BuildResult,
    QueryGenerator,
    load_manifest,
    plan_build,
    resolve_query_files,
    run_build,
    write_manifest,
)

__all__ = [
    "BuildPlan",
    "BuildResult",
    "QueryGenerator",
    "load_manifest",
    "plan_build",
    "resolve_query_files",
    "run_build",
    "write_manifest",
]
