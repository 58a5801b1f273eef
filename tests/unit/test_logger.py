"""Unit tests for logger configuration."""

import io

import pytest
from loguru import logger as _logger

from sink_dialects.config import LoggingConfig
from sink_dialects.dialects import GenericDialect, default_registry
from sink_dialects.logger import get_logger, setup_logger


@pytest.fixture
def output():
    """Capture log messages in memory."""
    buffer = io.StringIO()
    handler_id = _logger.add(buffer, format="{level} | {message}", level="DEBUG")
    yield buffer
    _logger.remove(handler_id)


def file_only(**kwargs) -> LoggingConfig:
    return LoggingConfig(console_enabled=False, format="{level} | {extra[name]} | {message}", **kwargs)


class TestSetupLogger:
    """Tests for setup_logger function."""

    def test_setup_logger_adds_handlers(self):
        """Test that setup_logger leaves a working logger."""
        setup_logger()

        output = io.StringIO()
        handler_id = _logger.add(output, format="{message}")
        _logger.info("Test")
        assert "Test" in output.getvalue()
        _logger.remove(handler_id)

    def test_setup_logger_with_log_file(self, tmp_path):
        """Test setup_logger writes to the given file."""
        log_file = tmp_path / "logs" / "test.log"

        setup_logger(file_only(level="DEBUG"), log_file=str(log_file))
        _logger.info("Test message")

        # Removing handlers flushes the queued file handler
        _logger.remove()

        content = log_file.read_text(encoding="utf-8")
        assert "Test message" in content
        assert "INFO" in content

    def test_file_path_from_config(self, tmp_path):
        """Test the configured file path is used when file logging is enabled."""
        log_file = tmp_path / "configured.log"

        setup_logger(file_only(file_enabled=True, file_path=str(log_file)))
        _logger.warning("from config")
        _logger.remove()

        assert "from config" in log_file.read_text(encoding="utf-8")

    def test_level_override(self, tmp_path):
        """Test the level argument overrides the configured level."""
        log_file = tmp_path / "test.log"

        setup_logger(file_only(level="DEBUG"), level="WARNING", log_file=str(log_file))
        _logger.info("quiet")
        _logger.warning("loud")
        _logger.remove()

        content = log_file.read_text(encoding="utf-8")
        assert "loud" in content
        assert "quiet" not in content

    def test_format_prints_module_name(self, tmp_path):
        """Test records show the name bound by get_logger."""
        log_file = tmp_path / "test.log"

        setup_logger(file_only(), log_file=str(log_file))
        get_logger("sink_dialects.dialects.registry").info("bound")
        _logger.info("unbound")
        _logger.remove()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert lines == [
            "INFO | sink_dialects.dialects.registry | bound",
            "INFO | sink_dialects | unbound",
        ]

    def test_default_format_uses_bound_name(self):
        """Test the default format prints the bound module name."""
        assert "{extra[name]}" in LoggingConfig().format


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_binds_name(self):
        """Test the name is bound into the record extras."""
        buffer = io.StringIO()
        handler_id = _logger.add(buffer, format="{extra[name]} {message}")
        get_logger("sink_dialects.test").info("bound")
        _logger.remove(handler_id)
        assert "sink_dialects.test bound" in buffer.getvalue()


class TestDialectLogging:
    """Tests for messages logged by dialects."""

    def test_registry_fallback_warns(self, output):
        """Test an unknown subprotocol logs a warning before falling back."""
        dialect = default_registry().create_dialect("jdbc:oracle:thin:@host:1521:db")

        assert isinstance(dialect, GenericDialect)
        assert "WARNING | No dialect registered for subprotocol 'oracle'" in output.getvalue()

    def test_registry_match_logs_info(self, output):
        """Test a matched subprotocol is logged."""
        default_registry().create_dialect("jdbc:gs://host:20001/cluster")
        assert "INFO | Using GriddbDialect for subprotocol 'gs'" in output.getvalue()
