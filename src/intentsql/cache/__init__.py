"""Generated-query cache."""

from intentsql.cache.store import CacheEntry, CacheStats, QueryCache, cache_key

__all__ = ["CacheEntry", "CacheStats", "QueryCache", "cache_key"]
