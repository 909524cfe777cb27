"""Fixtures for query collection tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from intentsql.queries import CollectedQuery, QueryCollector


@pytest.fixture
def collector(tmp_path: Path) -> QueryCollector:
    return QueryCollector(root=tmp_path)


@pytest.fixture
def collect(
    collector: QueryCollector, tmp_path: Path
) -> Callable[..., list[CollectedQuery]]:
    """Collect query sites from an in-memory source placed under the project root."""

    def _collect(source: str, name: str = "src/queries.ts") -> list[CollectedQuery]:
        return collector.collect_file(tmp_path / name, source.encode("utf-8"))

    return _collect
