"""Content-addressed query identity.

Every hash here is SHA-256 over canonical JSON: sorted keys, compact
separators, UTF-8 text. ``Literal`` parameters canonicalize to their value
and ``Unresolved`` ones to ``{"$expr": source}``. Missing params or location
canonicalize to ``null``.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Sequence
from typing import Any

from intentsql.queries.models import (
    CollectedQuery,
    ParamValue,
    SourceLocation,
    params_to_json,
)


def canonical_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def sha256_hex(value: Any) -> str:
    # Lone surrogates are legal in JS strings
    return hashlib.sha256(canonical_json(value).encode("utf-8", "surrogatepass")).hexdigest()


def query_id(
    intent: str,
    params: dict[str, ParamValue] | None = None,
    location: SourceLocation | None = None,
) -> str:
    """Identity of a query site."""
    return sha256_hex(
        {
            "intent": intent,
            "params": params_to_json(params),
            "location": location.to_dict() if location is not None else None,
        }
    )


def runtime_query_id(pattern: str) -> str:
    """Identity of a query known only by its intent pattern (no params, no location)."""
    return query_id(pattern)


def intent_pattern(strings: Sequence[str]) -> str:
    """Rebuild ``"a ${0} b ${1}"`` from the literal parts of a template."""
    if not strings:
        return ""
    head, *rest = strings
    return head + "".join(f"${{{index}}}{part}" for index, part in enumerate(rest))


def content_hash(query: CollectedQuery) -> str:
    """Hash over what generation depends on: intent, params, return type."""
    return sha256_hex(
        {
            "intent": query.intent.strip(),
            "params": params_to_json(query.params) or {},
            "return_type": query.return_type,
        }
    )
