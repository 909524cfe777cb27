"""Per-build registry of generated queries.

A running application only sees the literal parts of a tagged template,
not where it was written. The registry maps those parts back to the SQL
generated for them: first by exact intent, then by the runtime id derived
from the intent pattern alone.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from intentsql.queries.identity import intent_pattern, runtime_query_id
from intentsql.queries.models import GeneratedQuery


class QueryRegistry:
    def __init__(self, queries: Iterable[GeneratedQuery] = ()) -> None:
        self._by_id: dict[str, GeneratedQuery] = {}
        self._id_by_intent: dict[str, str] = {}
        self.register(queries)

    def register(self, queries: Iterable[GeneratedQuery]) -> None:
        for query in queries:
            self._by_id[query.id] = query
            if query.intent:
                self._id_by_intent[query.intent] = query.id

    def get(self, query_id: str) -> GeneratedQuery | None:
        return self._by_id.get(query_id)

    def resolve(self, strings: Sequence[str]) -> GeneratedQuery | None:
        """Find the query for a template invocation given its literal parts."""
        pattern = intent_pattern(strings)
        query_id = self._id_by_intent.get(pattern) or runtime_query_id(pattern)
        return self._by_id.get(query_id)

    def __contains__(self, query_id: object) -> bool:
        return query_id in self._by_id

    def __iter__(self) -> Iterator[GeneratedQuery]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)
