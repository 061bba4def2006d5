"""Tests for logging configuration."""

import logging
import sys

import pytest

import colorlog

from src.helpers.logging import get_logger, loggers, set_log_level


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_returns_logger(self) -> None:
        """Test that get_logger returns a logger instance."""
        logger = get_logger("test_module")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "test_module"

    def test_get_logger_same_name_returns_same_instance(self) -> None:
        """Test that getting logger with same name returns same instance."""
        logger1 = get_logger("test_same")
        logger2 = get_logger("test_same")

        assert logger1 is logger2
        assert len(logger1.handlers) == 1

    @pytest.mark.parametrize(
        ("level_name", "level"),
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("CRITICAL", logging.CRITICAL),
        ],
    )
    def test_get_logger_levels(self, level_name: str, level: int) -> None:
        """Test get_logger with each supported level."""
        logger = get_logger(f"test_level_{level_name.lower()}", log_level=level_name)

        assert logger.level == level

    def test_get_logger_default_level(self) -> None:
        """Test get_logger with default level."""
        logger = get_logger("test_default")

        # Default should be INFO
        assert logger.level == logging.INFO

    def test_get_logger_invalid_level_raises(self) -> None:
        """Test that invalid log level raises ValueError."""
        with pytest.raises(ValueError, match="Invalid log level"):
            get_logger("test_invalid", log_level="INVALID")

    def test_get_logger_invalid_handler_raises(self) -> None:
        """Test that invalid handler raises ValueError."""
        with pytest.raises(ValueError, match="Invalid handler"):
            get_logger("test_invalid_handler", log_handler="syslog")

    def test_get_logger_stdout_handler(self) -> None:
        """Test get_logger with stdout handler."""
        logger = get_logger("test_stdout", log_handler="stdout")

        handler = logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stdout

    def test_get_logger_stderr_handler(self) -> None:
        """Test get_logger with stderr handler."""
        logger = get_logger("test_stderr", log_handler="stderr")

        handler = logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr

    def test_get_logger_with_color(self) -> None:
        """Test get_logger with color enabled."""
        logger = get_logger("test_color", log_color=True)

        assert isinstance(logger.handlers[0].formatter, colorlog.ColoredFormatter)

    def test_get_logger_without_color(self) -> None:
        """Test get_logger with color disabled."""
        logger = get_logger("test_no_color", log_color=False)

        assert not isinstance(
            logger.handlers[0].formatter, colorlog.ColoredFormatter
        )

    def test_logger_can_log_messages(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that configured logger can log messages."""
        logger = get_logger("test_log_messages", log_level="DEBUG")

        with caplog.at_level(logging.DEBUG, logger="test_log_messages"):
            logger.debug("Debug message")
            logger.warning("Warning message")

        assert any("Debug message" in record.message for record in caplog.records)
        assert any("Warning message" in record.message for record in caplog.records)


class TestSetLogLevel:
    """Tests for set_log_level function."""

    def test_changes_every_cached_logger(self) -> None:
        """Test that loggers and their handlers follow the new level."""
        logger = get_logger("test_set_level")
        saved = {name: cached.level for name, cached in loggers.items()}

        try:
            set_log_level("ERROR")

            assert logger.level == logging.ERROR
            assert all(h.level == logging.ERROR for h in logger.handlers)
        finally:
            for name, level in saved.items():
                loggers[name].setLevel(level)
                for handler in loggers[name].handlers:
                    handler.setLevel(level)

    def test_invalid_level_raises(self) -> None:
        """Test that an unknown level raises ValueError."""
        with pytest.raises(ValueError, match="Invalid log level"):
            set_log_level("LOUD")


class TestLoggingIntegration:
    """Integration tests for logging functionality."""

    def test_logger_caching(self) -> None:
        """Test that loggers are cached correctly."""
        # First call creates and caches logger
        logger1 = get_logger("cached_logger", log_level="DEBUG")

        # Second call should return cached logger
        logger2 = get_logger("cached_logger", log_level="INFO")

        # Should be the same instance
        assert logger1 is logger2
        # And should have the original level (DEBUG)
        assert logger1.level == logging.DEBUG
