"""Tests for logging configuration."""

import json
import logging
import sys
from unittest.mock import patch

from src.config import Environment, Settings
from src.logging_config import (
    DevFormatter,
    JSONFormatter,
    MaxLevelFilter,
    get_logger,
    setup_logging,
)


def _record(level: int, msg: str = "Test message") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="/app/module.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestJSONFormatter:
    """Tests for JSON log formatter."""

    def test_format_basic_message(self) -> None:
        """Basic log message is formatted as JSON."""
        data = json.loads(JSONFormatter().format(_record(logging.INFO)))

        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert data["message"] == "Test message"
        assert "timestamp" in data

    def test_format_includes_file_info(self) -> None:
        """Log includes file and line information."""
        data = json.loads(JSONFormatter().format(_record(logging.ERROR)))
        assert data["file"] == "/app/module.py:42"

    def test_format_with_exception(self) -> None:
        """Exception info is included in output."""
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()

        record = _record(logging.ERROR, "Error")
        record.exc_info = exc_info
        data = json.loads(JSONFormatter().format(record))

        assert "ValueError" in data["exception"]


class TestDevFormatter:
    """Tests for development formatter."""

    def test_format_includes_level(self) -> None:
        """Development format includes level, logger and message."""
        output = DevFormatter().format(_record(logging.WARNING, "Warning message"))

        assert "WARNING" in output
        assert "test" in output
        assert "Warning message" in output


class TestMaxLevelFilter:
    """Tests for the stdout level filter."""

    def test_passes_records_below_level(self) -> None:
        """Records below the level pass."""
        assert MaxLevelFilter(logging.ERROR).filter(_record(logging.WARNING))

    def test_blocks_records_at_level(self) -> None:
        """Records at or above the level are blocked."""
        assert not MaxLevelFilter(logging.ERROR).filter(_record(logging.ERROR))


class TestSetupLogging:
    """Tests for logging setup."""

    def test_returns_root_logger(self) -> None:
        """setup_logging returns root logger."""
        logger = setup_logging(level="INFO", json_output=False)
        assert logger is logging.getLogger()

    def test_splits_stdout_and_stderr(self) -> None:
        """Errors go to stderr, everything else to stdout."""
        setup_logging(level="INFO", json_output=False)
        root = logging.getLogger()

        assert len(root.handlers) == 2
        out_handler, err_handler = root.handlers
        assert out_handler.stream is sys.stdout
        assert err_handler.stream is sys.stderr
        assert err_handler.level == logging.ERROR
        assert not out_handler.filter(_record(logging.ERROR))

    def test_uses_json_in_production(self) -> None:
        """JSON output is used in production environment."""
        mock_settings = Settings(environment=Environment.PRODUCTION)

        with patch("src.logging_config.get_settings", return_value=mock_settings):
            setup_logging()

        root = logging.getLogger()
        assert all(isinstance(h.formatter, JSONFormatter) for h in root.handlers)

    def test_uses_dev_formatter_in_development(self) -> None:
        """Dev formatter is used in development environment."""
        mock_settings = Settings(environment=Environment.DEVELOPMENT)

        with patch("src.logging_config.get_settings", return_value=mock_settings):
            setup_logging()

        root = logging.getLogger()
        assert all(isinstance(h.formatter, DevFormatter) for h in root.handlers)

    def test_level_override(self) -> None:
        """Log level can be overridden."""
        setup_logging(level="DEBUG", json_output=False)
        assert logging.getLogger().level == logging.DEBUG

    def test_quiets_client_libraries(self) -> None:
        """Client library loggers are raised to WARNING."""
        setup_logging(level="DEBUG", json_output=False)
        assert logging.getLogger("pymilvus").level == logging.WARNING


class TestGetLogger:
    """Tests for named logger retrieval."""

    def test_returns_named_logger(self) -> None:
        """get_logger returns a logger with the given name."""
        assert get_logger("myapp.module").name == "myapp.module"

    def test_logger_hierarchy(self) -> None:
        """Child loggers inherit from parent."""
        setup_logging(level="WARNING", json_output=False)
        child = get_logger("myapp.sub")
        assert child.getEffectiveLevel() == logging.WARNING
