"""Tests for error types and codes."""

import pytest

from intentsql.core.errors import (
    AnalysisError,
    ConfigError,
    ErrorCode,
    IntentSQLError,
    InternalError,
)


class TestErrorCode:
    @pytest.mark.parametrize(
        ("code", "area"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2),
            (ErrorCode.CONFIG_INVALID_VALUE, 2),
            (ErrorCode.SCHEMA_NOT_FOUND, 3),
            (ErrorCode.UNSUPPORTED_SOURCE, 3),
            (ErrorCode.INTERNAL_ERROR, 9),
        ],
    )
    def test_thousands_digit_names_area(self, code: ErrorCode, area: int) -> None:
        assert code // 1000 == area


class TestIntentSQLError:
    """Base error behavior."""

    def test_given_error_when_serialized_then_all_fields_present(self) -> None:
        # Given
        error = IntentSQLError(
            code=ErrorCode.SCHEMA_NOT_FOUND,
            message="No schema",
            retryable=True,
            details={"path": "db.ts"},
        )

        # When
        data = error.to_dict()

        # Then
        assert data == {
            "code": 3001,
            "error": "SCHEMA_NOT_FOUND",
            "message": "No schema",
            "retryable": True,
            "details": {"path": "db.ts"},
        }

    def test_given_error_when_formatted_then_code_and_name_prefix(self) -> None:
        error = IntentSQLError(code=ErrorCode.INTERNAL_ERROR, message="Something broke")
        assert str(error) == "[9001] INTERNAL_ERROR: Something broke"

    def test_given_factory_error_when_raised_then_caught_as_base(self) -> None:
        with pytest.raises(IntentSQLError) as exc_info:
            raise AnalysisError.schema_not_found("src/db/schema.ts")
        assert isinstance(exc_info.value, AnalysisError)

    def test_errors_are_immutable(self) -> None:
        error = ConfigError.parse_error("a.yaml", "bad")
        with pytest.raises(AttributeError):
            error.message = "changed"  # type: ignore[misc]


class TestFactories:
    """Factory methods set code, message and details."""

    def test_config_parse_error(self) -> None:
        error = ConfigError.parse_error("/repo/.intentsql/config.yaml", "invalid syntax")
        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert error.details["path"] == "/repo/.intentsql/config.yaml"
        assert "invalid syntax" in error.message

    def test_config_invalid_value(self) -> None:
        error = ConfigError.invalid_value("cache.enabled", "maybe", "not a bool")
        assert error.code == ErrorCode.CONFIG_INVALID_VALUE
        assert error.details == {"field": "cache.enabled", "value": "maybe", "reason": "not a bool"}
        assert "cache.enabled" in error.message

    def test_schema_not_found(self) -> None:
        error = AnalysisError.schema_not_found("src/db/*.ts")
        assert error.code == ErrorCode.SCHEMA_NOT_FOUND
        assert error.details == {"path": "src/db/*.ts"}
        assert "src/db/*.ts" in error.message

    def test_unsupported_source(self) -> None:
        error = AnalysisError.unsupported_source("notes.md", ".md")
        assert error.code == ErrorCode.UNSUPPORTED_SOURCE
        assert error.details == {"path": "notes.md", "suffix": ".md"}
        assert "notes.md" in error.message

    def test_internal_unexpected_keeps_extras(self) -> None:
        error = InternalError.unexpected("grammar missing", grammar="tsx", attempt=2)
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.details == {"grammar": "tsx", "attempt": 2}
