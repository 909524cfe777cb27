"""Tests for CLI progress feedback."""

from intentsql.core.progress import is_console_suppressed, progress, suppress_console_logs


class TestProgress:
    def test_given_non_tty_when_iterated_then_all_items_yielded(self) -> None:
        assert list(progress(range(100), desc="Collecting")) == list(range(100))

    def test_given_generator_when_iterated_then_passes_through(self) -> None:
        assert list(progress(iter(["a", "b"]))) == ["a", "b"]


class TestConsoleSuppression:
    def test_given_context_when_active_then_suppressed(self) -> None:
        assert not is_console_suppressed()
        with suppress_console_logs():
            assert is_console_suppressed()
        assert not is_console_suppressed()
