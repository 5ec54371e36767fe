"""
Tests for structured logging setup.
"""

import io
import json
import logging

import pytest

from incall_plugins.framework.configuration.models import LoggingConfiguration
from incall_plugins.infrastructure.exceptions import PluginError
from incall_plugins.infrastructure.observability.logging import (
    ROOT_LOGGER_NAME,
    call_context,
    configure_logging,
    correlation_context,
    get_call_id,
    get_correlation_id,
)


@pytest.fixture
def stream():
    stream = io.StringIO()
    yield stream
    configure_logging(LoggingConfiguration(level="WARNING"), stream=io.StringIO())


class TestStructuredLogging:
    """Test configure_logging and the correlation context."""

    def test_json_output_carries_correlation_and_extra(self, stream):
        """Test JSON records include correlation IDs and extra fields."""
        configure_logging(LoggingConfiguration(level="DEBUG", format="json"), stream=stream)
        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.tests")

        with correlation_context("corr-1"), call_context("call-9"):
            logger.info("Plugin info aggregation completed", extra={"plugin_count": 2})

        record = json.loads(stream.getvalue().strip())
        assert record["message"] == "Plugin info aggregation completed"
        assert record["level"] == "INFO"
        assert record["correlation_id"] == "corr-1"
        assert record["call_id"] == "call-9"
        assert record["extra"] == {"plugin_count": 2}

    def test_text_output(self, stream):
        """Test the human-readable formatter."""
        configure_logging(LoggingConfiguration(level="INFO", format="text"), stream=stream)
        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.tests")

        with correlation_context("corr-2"):
            logger.warning("Invite lookup timed out", extra={"timeout_seconds": 1.0})

        line = stream.getvalue()
        assert "WARNING" in line
        assert "Invite lookup timed out" in line
        assert "[correlation_id=corr-2]" in line
        assert "timeout_seconds=1.0" in line

    def test_level_filters_records(self, stream):
        """Test records below the configured level are dropped."""
        configure_logging(LoggingConfiguration(level="ERROR"), stream=stream)
        logging.getLogger(f"{ROOT_LOGGER_NAME}.tests").info("hidden")

        assert stream.getvalue() == ""

    def test_reconfiguring_replaces_handlers(self, stream):
        """Test repeated configuration does not duplicate output."""
        configure_logging(LoggingConfiguration(), stream=stream)
        configure_logging(LoggingConfiguration(), stream=stream)
        logging.getLogger(f"{ROOT_LOGGER_NAME}.tests").info("once")

        assert len(stream.getvalue().strip().splitlines()) == 1

    def test_file_output(self, tmp_path, stream):
        """Test file output writes JSON lines."""
        log_file = tmp_path / "logs" / "incall.log"
        handlers = configure_logging(
            LoggingConfiguration(output="file", file_path=str(log_file)), stream=stream
        )
        logging.getLogger(f"{ROOT_LOGGER_NAME}.tests").info("to file")
        for handler in handlers:
            handler.flush()

        assert json.loads(log_file.read_text(encoding='utf-8').strip())["message"] == "to file"
        assert stream.getvalue() == ""

    def test_context_is_restored(self):
        """Test context managers reset the IDs on exit."""
        assert get_correlation_id() is None
        with correlation_context() as correlation_id:
            assert get_correlation_id() == correlation_id
            with call_context("call-1"):
                assert get_call_id() == "call-1"
            assert get_call_id() is None
        assert get_correlation_id() is None


class TestStructuredExceptions:
    """Test exceptions serialize for logging."""

    def test_to_dict(self):
        """Test exception serialization."""
        error = PluginError("Plugin not found", component="com.example/.A")
        data = error.to_dict()

        assert data["error_type"] == "PluginError"
        assert data["error_code"] == "PLUGIN_ERROR"
        assert data["context"] == {"component": "com.example/.A"}
        assert data["cause"] is None
        assert data["correlation_id"]
