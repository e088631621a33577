"""
Tests for structured logging and logging configuration.
"""
import json
import logging
import logging.handlers

import pytest

from versioning_core.config.config_manager import LoggingConfig, LogLevel
from versioning_core.monitoring.structured_logger import (
    JSONFormatter,
    LoggingContext,
    OperationLogger,
    configure_logging,
    correlation_id_context,
    get_logger,
)


@pytest.fixture
def configured_logger():
    name = "tests.configure_logging"
    logger = logging.getLogger(name)
    yield name, logger
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


class TestLoggingContext:
    def test_sets_and_restores_correlation_id(self):
        assert correlation_id_context.get() is None

        with LoggingContext("outer") as outer:
            assert correlation_id_context.get() == "outer"
            with LoggingContext() as inner:
                assert correlation_id_context.get() == inner.correlation_id
                assert inner.correlation_id != "outer"
            assert correlation_id_context.get() == outer.correlation_id

        assert correlation_id_context.get() is None


class TestOperationLogger:
    def test_logs_success_and_failure(self):
        logger = get_logger("tests.operation", component="tests")
        calls = []
        logger._log = lambda level, message, **kwargs: calls.append((level.value, message, kwargs))

        with OperationLogger(logger, "create_revision") as op:
            op.success(revision=1)

        with pytest.raises(RuntimeError):
            with OperationLogger(logger, "list_revisions"):
                raise RuntimeError("boom")

        levels = [level for level, _, _ in calls]
        assert levels == ["debug", "info", "debug", "error"]
        assert calls[1][2]["revision"] == 1
        assert calls[3][2]["error_type"] == "RuntimeError"
        assert calls[3][2]["operation_status"] == "error"


class TestConfigureLogging:
    def test_console_and_file_handlers(self, tmp_path, configured_logger):
        name, logger = configured_logger
        log_file = tmp_path / "versioning.log"
        config = LoggingConfig(level=LogLevel.DEBUG, file_path=str(log_file))

        configure_logging(config, logger_name=name)

        assert logger.level == logging.DEBUG
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers)
        assert any(type(h) is logging.StreamHandler for h in logger.handlers)

        logger.debug("written to file")
        for handler in logger.handlers:
            handler.flush()
        assert "written to file" in log_file.read_text()

    def test_replaces_existing_handlers(self, configured_logger):
        name, logger = configured_logger
        stale = logging.NullHandler()
        logger.addHandler(stale)

        configure_logging(LoggingConfig(), logger_name=name)

        assert stale not in logger.handlers
        assert len(logger.handlers) == 1

    def test_console_disabled(self, configured_logger):
        name, logger = configured_logger

        configure_logging(LoggingConfig(enable_console=False), logger_name=name)

        assert logger.handlers == []

    def test_json_format(self, configured_logger):
        name, logger = configured_logger

        configure_logging(LoggingConfig(json_format=True), logger_name=name)

        assert isinstance(logger.handlers[0].formatter, JSONFormatter)


class TestJSONFormatter:
    def test_includes_correlation_id(self):
        record = logging.LogRecord("tests", logging.INFO, __file__, 1, "hello %s", ("world",), None)

        with LoggingContext("abc-123"):
            entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "hello world"
        assert entry["level"] == "info"
        assert entry["correlation_id"] == "abc-123"
