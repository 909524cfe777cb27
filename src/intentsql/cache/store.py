"""Content-addressed cache of generated queries.

One JSON file per entry, named by the cache key::

    <directory>/<sha256>.json  ->  {"hash": ..., "query": {...}, "timestamp": ...}

The key covers the query id, its trimmed intent and its params, so any of
them changing misses the cache. Entries older than the TTL read as absent
but stay on disk until ``prune`` or ``clear``.

Nothing here raises: I/O problems and corrupt files are logged and read
as misses.
"""

from __future__ import annotations

import os
import tempfile
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import structlog
from pydantic import BaseModel, ValidationError

from intentsql.config.constants import CACHE_FILE_SUFFIX, CACHE_TTL_SECONDS
from intentsql.queries.identity import sha256_hex
from intentsql.queries.models import GeneratedQuery, ParamValue, params_to_json

log = structlog.get_logger()


class CacheEntry(BaseModel):
    hash: str  # The entry's cache key
    query: GeneratedQuery
    timestamp: float  # Epoch seconds at write time


@dataclass(frozen=True, slots=True)
class CacheStats:
    count: int
    total_bytes: int


def cache_key(query_id: str, intent: str, params: dict[str, ParamValue] | None = None) -> str:
    return sha256_hex(
        {"id": query_id, "intent": intent.strip(), "params": params_to_json(params) or {}}
    )


class QueryCache:
    def __init__(
        self,
        directory: Path,
        enabled: bool = True,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.directory = directory
        self.enabled = enabled
        self.ttl = ttl
        self._clock = clock

    def get(
        self, query_id: str, intent: str, params: dict[str, ParamValue] | None = None
    ) -> GeneratedQuery | None:
        if not self.enabled:
            return None
        key = cache_key(query_id, intent, params)
        path = self._path(key)
        if not path.exists():
            return None

        entry = self._read(path)
        if entry is None or entry.hash != key:
            return None
        if self._is_expired(entry):
            log.debug("cache_expired", query_id=query_id)
            return None
        log.debug("cache_hit", query_id=query_id)
        return entry.query

    def has(
        self, query_id: str, intent: str, params: dict[str, ParamValue] | None = None
    ) -> bool:
        return self.get(query_id, intent, params) is not None

    def set(
        self,
        query_id: str,
        intent: str,
        query: GeneratedQuery,
        params: dict[str, ParamValue] | None = None,
    ) -> None:
        if not self.enabled:
            return
        key = cache_key(query_id, intent, params)
        entry = CacheEntry(hash=key, query=query, timestamp=self._clock())
        try:
            content = entry.model_dump_json(indent=2)
            self.directory.mkdir(parents=True, exist_ok=True)
            self._write(self._path(key), content)
        except (OSError, ValueError) as e:
            log.warning("cache_write_failed", query_id=query_id, error=str(e))
            return
        log.debug("cache_stored", query_id=query_id)

    def clear(self) -> int:
        """Delete every entry; returns how many were removed."""
        if not self.enabled:
            return 0
        removed = 0
        for path in self._entry_files():
            if self._unlink(path):
                removed += 1
        log.info("cache_cleared", removed=removed)
        return removed

    def prune(self) -> int:
        """Delete expired and unreadable entries; returns how many were removed."""
        if not self.enabled:
            return 0
        removed = 0
        for path in self._entry_files():
            entry = self._read(path)
            if (entry is None or self._is_expired(entry)) and self._unlink(path):
                removed += 1
        log.info("cache_pruned", removed=removed)
        return removed

    def stats(self) -> CacheStats:
        if not self.enabled:
            return CacheStats(count=0, total_bytes=0)
        count = 0
        total = 0
        for path in self._entry_files():
            try:
                total += path.stat().st_size
            except OSError as e:
                log.warning("cache_stat_failed", path=str(path), error=str(e))
                continue
            count += 1
        return CacheStats(count=count, total_bytes=total)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}{CACHE_FILE_SUFFIX}"

    def _entry_files(self) -> list[Path]:
        if not self.directory.is_dir():
            return []
        return sorted(self.directory.glob(f"*{CACHE_FILE_SUFFIX}"))

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.timestamp >= self.ttl

    def _read(self, path: Path) -> CacheEntry | None:
        try:
            return CacheEntry.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            log.warning("cache_entry_unreadable", path=str(path), error=str(e))
            return None

    def _write(self, path: Path, content: str) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".", suffix=".tmp")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

    def _unlink(self, path: Path) -> bool:
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            log.warning("cache_delete_failed", path=str(path), error=str(e))
            return False
        return True
