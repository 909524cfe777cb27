"""intentsql error types.

Every error carries an ``ErrorCode`` whose thousands digit names the area:

- 2xxx: configuration files and values
- 3xxx: analysis inputs (schema path, source file kinds)
- 9xxx: broken installation or internal faults

A declaration that is not a table or a call that is not a query site is a
recognition miss, not an error. Nothing here is raised for those.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    SCHEMA_NOT_FOUND = 3001
    UNSUPPORTED_SOURCE = 3002

    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class IntentSQLError(Exception):
    """Base error: a code, a one-line message and structured details."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": int(self.code),
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": dict(self.details),
        }

    def __str__(self) -> str:
        return f"[{int(self.code)}] {self.error_name}: {self.message}"


class ConfigError(IntentSQLError):
    """A config file that does not parse or a value that does not validate."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Cannot parse {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class AnalysisError(IntentSQLError):
    """The analyzers were pointed at something they cannot read."""

    @classmethod
    def schema_not_found(cls, path: str) -> "AnalysisError":
        return cls(
            code=ErrorCode.SCHEMA_NOT_FOUND,
            message=f"No schema source found at {path}",
            details={"path": path},
        )

    @classmethod
    def unsupported_source(cls, path: str, suffix: str) -> "AnalysisError":
        return cls(
            code=ErrorCode.UNSUPPORTED_SOURCE,
            message=f"Not a TypeScript or JavaScript source: {path}",
            details={"path": path, "suffix": suffix},
        )


class InternalError(IntentSQLError):
    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
