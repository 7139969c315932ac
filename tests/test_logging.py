"""Tests for logging configuration."""

import json
import logging
import sys
from datetime import datetime, timezone

import pytest

from clarity.utils.config import reset_settings
from clarity.utils.logging_config import (
    JsonFormatter,
    StandardFormatter,
    get_logger,
    reset_logging,
    setup_logging,
)


def _our_handlers() -> list[logging.Handler]:
    return [
        h for h in logging.getLogger().handlers
        if isinstance(h, logging.StreamHandler) and h.stream == sys.stderr
    ]


def _record(level: int = logging.INFO, msg: str = "Test message", exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="test.module",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestLoggingSetup:
    """Test logging setup and configuration."""

    def setup_method(self) -> None:
        """Reset state before each test."""
        reset_logging()
        reset_settings()

    def teardown_method(self) -> None:
        """Clean up after each test."""
        reset_logging()
        reset_settings()

    def test_setup_logging_configures_root_logger(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that setup_logging configures the root logger."""
        monkeypatch.setenv("LOG_LEVEL", "INFO")

        setup_logging()

        assert logging.getLogger().level == logging.INFO
        assert len(_our_handlers()) == 1

    def test_setup_logging_prevents_duplicate_handlers(self) -> None:
        """Test that calling setup_logging multiple times doesn't create duplicate handlers."""
        setup_logging()
        setup_logging()
        setup_logging()

        assert len(_our_handlers()) == 1

    def test_setup_logging_with_force_reconfigure(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that force_reconfigure picks up a new level without duplicating handlers."""
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        setup_logging()

        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        reset_settings()
        setup_logging(force_reconfigure=True)

        assert logging.getLogger().level == logging.DEBUG
        assert len(_our_handlers()) == 1

    def test_arxiv_library_quieted_above_debug(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that the arxiv library's per-page INFO logs are muted."""
        monkeypatch.setenv("LOG_LEVEL", "INFO")

        setup_logging()

        assert logging.getLogger("arxiv").level == logging.WARNING

    def test_warning_level_filters_info_and_debug(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that INFO and DEBUG messages are filtered when LOG_LEVEL is WARNING."""
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        caplog.set_level(logging.DEBUG)
        setup_logging()
        logger = get_logger("test")

        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")

        messages = [record.message for record in caplog.records]
        assert "Debug message" not in messages
        assert "Info message" not in messages
        assert "Warning message" in messages

    def test_single_log_message_not_duplicated(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that multiple setup calls don't cause duplicate log records."""
        monkeypatch.setenv("LOG_LEVEL", "INFO")

        caplog.set_level(logging.INFO)
        setup_logging()
        setup_logging()
        get_logger("test").info("Unique message")

        count = sum(1 for record in caplog.records if record.message == "Unique message")
        assert count == 1


class TestLogFormatters:
    """Test different log formatters."""

    def setup_method(self) -> None:
        """Reset state before each test."""
        reset_settings()

    def teardown_method(self) -> None:
        """Clean up after each test."""
        reset_settings()

    def test_standard_formatter(self) -> None:
        """Test standard text formatter produces expected format."""
        formatted = StandardFormatter().format(_record())

        assert "INFO" in formatted
        assert "test.module" in formatted
        assert "Test message" in formatted
        assert formatted.startswith("[")

    def test_json_formatter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test JSON formatter produces valid JSON with expected fields."""
        monkeypatch.setenv("APP_NAME", "test-app")
        monkeypatch.setenv("ENVIRONMENT", "staging")

        log_data = json.loads(JsonFormatter().format(_record()))

        assert log_data["level"] == "INFO"
        assert log_data["name"] == "test.module"
        assert log_data["message"] == "Test message"
        assert log_data["app_name"] == "test-app"
        assert log_data["environment"] == "staging"
        assert "timestamp" in log_data

    def test_json_formatter_includes_extra_fields(self) -> None:
        """Test JSON formatter merges extra_fields into the payload."""
        record = _record()
        record.extra_fields = {"token": 3, "query": {"max_results": 20}}

        log_data = json.loads(JsonFormatter().format(record))

        assert log_data["token"] == 3
        assert log_data["query"] == {"max_results": 20}

    def test_json_formatter_with_exception(self) -> None:
        """Test JSON formatter includes exception info when present."""
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        log_data = json.loads(JsonFormatter().format(_record(logging.ERROR, "Error occurred", exc_info)))

        assert "ValueError: Test error" in log_data["exception"]

    def test_json_formatter_stringifies_non_json_values(self) -> None:
        """Datetimes and other objects in extra_fields are written as text."""
        record = _record()
        record.extra_fields = {"updated_at": datetime(2024, 1, 2, tzinfo=timezone.utc)}

        log_data = json.loads(JsonFormatter().format(record))

        assert log_data["updated_at"] == "2024-01-02 00:00:00+00:00"
