"""Change categorization: decide which query sites need new SQL.

A collected query is *valid* when previously generated output exists for
its id and still matches it, *changed* when output exists but no longer
matches, and *new* when there is none. Only changed and new queries go to
the generator.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

import structlog

from intentsql.queries.identity import content_hash
from intentsql.queries.models import CollectedQuery, GeneratedQuery

log = structlog.get_logger()


@dataclass(slots=True)
class Categorization:
    valid: list[CollectedQuery] = field(default_factory=list)
    changed: list[CollectedQuery] = field(default_factory=list)
    new: list[CollectedQuery] = field(default_factory=list)

    @property
    def to_generate(self) -> list[CollectedQuery]:
        return [*self.new, *self.changed]

    def carried_forward(self, existing: Mapping[str, GeneratedQuery]) -> list[GeneratedQuery]:
        """Prior output for every valid query."""
        return [existing[query.id] for query in self.valid if query.id in existing]


def is_unchanged(current: CollectedQuery, previous: GeneratedQuery) -> bool:
    """Trimmed intents equal, or with no recorded intent, content hashes equal.

    Params are not compared once an intent is recorded.
    """
    if previous.intent:
        return previous.intent.strip() == current.intent.strip()
    return bool(previous.hash) and previous.hash == content_hash(current)


def categorize_queries(
    current: Iterable[CollectedQuery],
    existing: Mapping[str, GeneratedQuery],
) -> Categorization:
    result = Categorization()
    for query in current:
        previous = existing.get(query.id)
        if previous is None:
            result.new.append(query)
        elif is_unchanged(query, previous):
            result.valid.append(query)
        else:
            result.changed.append(query)

    log.debug(
        "queries_categorized",
        valid=len(result.valid),
        changed=len(result.changed),
        new=len(result.new),
    )
    return result
