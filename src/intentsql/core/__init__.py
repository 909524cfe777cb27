"""Core module exports."""

from intentsql.core.errors import (
    AnalysisError,
    ConfigError,
    ErrorCode,
    IntentSQLError,
    InternalError,
)
from intentsql.core.logging import (
    clear_build_id,
    configure_logging,
    get_build_id,
    get_logger,
    set_build_id,
)
from intentsql.core.progress import progress, status

__all__ = [
    # Errors
    "AnalysisError",
    "ConfigError",
    "ErrorCode",
    "IntentSQLError",
    "InternalError",
    # Logging
    "clear_build_id",
    "configure_logging",
    "get_build_id",
    "get_logger",
    "set_build_id",
    # Progress
    "progress",
    "status",
]
