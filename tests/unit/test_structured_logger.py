"""
Tests for structured logging and logging configuration.
"""
import json
import logging
import logging.handlers

import pytest

from vector_core.config.config_manager import LoggingConfig, LogLevel
from vector_core.monitoring.structured_logger import (
    CorrelationIdManager,
    JSONFormatter,
    LoggingContext,
    OperationLogger,
    configure_logging,
    get_logger,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestLoggingContext:
    """Test correlation ID handling."""

    def test_sets_and_restores_correlation_id(self):
        CorrelationIdManager.clear_context()
        with LoggingContext(correlation_id="outer"):
            assert CorrelationIdManager.get_correlation_id() == "outer"
            with LoggingContext(correlation_id="inner"):
                assert CorrelationIdManager.get_correlation_id() == "inner"
            assert CorrelationIdManager.get_correlation_id() == "outer"
        assert CorrelationIdManager.get_correlation_id() is None

    def test_generates_id_when_missing(self):
        with LoggingContext() as context:
            assert context.correlation_id
            assert CorrelationIdManager.get_correlation_id() == context.correlation_id


class TestJSONFormatter:
    """Test JSON formatting of standard log records."""

    def test_format(self):
        record = logging.LogRecord(
            name="vector_core.test", level=logging.WARNING, pathname=__file__, lineno=10,
            msg="disk %s", args=("full",), exc_info=None,
        )
        with LoggingContext(correlation_id="abc"):
            entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "warning"
        assert entry["logger"] == "vector_core.test"
        assert entry["message"] == "disk full"
        assert entry["correlation_id"] == "abc"
        assert entry["timestamp_iso"].endswith("Z")


class TestConfigureLogging:
    """Test root logger setup from LoggingConfig."""

    def test_console_handler(self, restore_root_logger):
        root = configure_logging(LoggingConfig(level=LogLevel.DEBUG))

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_rotating_file_handler(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "engine.log"
        config = LoggingConfig(file_path=str(log_file), json_format=True, enable_console=False,
                               max_file_size=1024, backup_count=2)
        root = configure_logging(config)

        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert isinstance(handler, logging.handlers.RotatingFileHandler)
        assert handler.maxBytes == 1024
        assert handler.backupCount == 2

        logging.getLogger("vector_core.test").info("stored %d documents", 3)
        handler.flush()
        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["message"] == "stored 3 documents"


class TestOperationLogger:
    """Test timed operation records."""

    def test_success_and_error_paths(self):
        logger = get_logger("vector_core.test", component="test")

        operation = OperationLogger(logger, "unit")
        operation.start(items=2)
        with operation:
            pass

        with pytest.raises(RuntimeError):
            with OperationLogger(logger, "failing"):
                raise RuntimeError("boom")

    def test_with_context_returns_new_logger(self):
        logger = get_logger("vector_core.test")
        bound = logger.with_context(collection="kb")
        assert bound is not logger
        assert bound.component == logger.component

    def test_operation_opens_correlation_scope(self):
        CorrelationIdManager.clear_context()
        logger = get_logger("vector_core.test")

        with OperationLogger(logger, "scoped") as operation:
            assert operation.correlation_id
            assert CorrelationIdManager.get_correlation_id() == operation.correlation_id
        assert CorrelationIdManager.get_correlation_id() is None

    def test_operation_reuses_enclosing_correlation_id(self):
        logger = get_logger("vector_core.test")
        with LoggingContext(correlation_id="outer"):
            with OperationLogger(logger, "nested") as operation:
                assert operation.correlation_id == "outer"
            assert CorrelationIdManager.get_correlation_id() == "outer"

    def test_scope_closed_after_failure(self):
        CorrelationIdManager.clear_context()
        logger = get_logger("vector_core.test")
        with pytest.raises(ValueError):
            with OperationLogger(logger, "failing"):
                raise ValueError("bad batch")
        assert CorrelationIdManager.get_correlation_id() is None
