"""Config module exports."""

from intentsql.config.loader import IntentSQLSettings, load_config, resolve_path
from intentsql.config.models import (
    CacheConfig,
    IntentSQLConfig,
    LoggingConfig,
    PathsConfig,
    RecognitionConfig,
)

__all__ = [
    "load_config",
    "resolve_path",
    "IntentSQLConfig",
    "IntentSQLSettings",
    "CacheConfig",
    "LoggingConfig",
    "PathsConfig",
    "RecognitionConfig",
]
