"""Unit tests for structured logging helpers."""
import json
import logging
import sys

import pytest

from aiedu_analytics.core.logging import ContextLogger, JSONFormatter, LogTimer, get_logger, setup_logging


def _record(msg="hello %s", args=("world",), **extra):
    record = logging.LogRecord("aiedu.test", logging.INFO, __file__, 12, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Test JSONFormatter output."""

    def test_basic_fields(self):
        payload = json.loads(JSONFormatter().format(_record()))

        assert payload["message"] == "hello world"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "aiedu.test"
        assert payload["module"] == "test_logging"
        assert "timestamp" in payload

    def test_analytics_context(self):
        record = _record(operation="compute_metrics", record_count=8, rule="adoption_insight")
        payload = json.loads(JSONFormatter().format(record))

        assert payload["operation"] == "compute_metrics"
        assert payload["record_count"] == 8
        assert payload["rule"] == "adoption_insight"
        assert "duration_ms" not in payload

    def test_exception_info(self):
        try:
            raise ValueError("bad input")
        except ValueError:
            record = logging.LogRecord("aiedu.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

        payload = json.loads(JSONFormatter().format(record))
        assert payload["exception"]["type"] == "ValueError"
        assert payload["exception"]["message"] == "bad input"


class TestLogTimer:
    """Test LogTimer."""

    def test_logs_duration(self, caplog):
        logger = logging.getLogger("aiedu.timer")
        caplog.set_level(logging.DEBUG, logger="aiedu.timer")

        with LogTimer(logger, "build_dashboard") as timer:
            pass

        assert timer.duration_ms is not None
        record = caplog.records[-1]
        assert record.levelno == logging.DEBUG
        assert record.operation == "build_dashboard"
        assert "completed" in record.getMessage()

    def test_logs_and_propagates_error(self, caplog):
        logger = logging.getLogger("aiedu.timer")
        caplog.set_level(logging.DEBUG, logger="aiedu.timer")

        with pytest.raises(RuntimeError):
            with LogTimer(logger, "compute_metrics"):
                raise RuntimeError("boom")

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.error_type == "RuntimeError"


class TestLoggers:
    """Test get_logger, ContextLogger and setup_logging."""

    def test_plain_logger(self):
        assert isinstance(get_logger("aiedu.plain"), logging.Logger)

    def test_context_logger(self, caplog):
        caplog.set_level(logging.INFO, logger="aiedu.ctx")
        logger = get_logger("aiedu.ctx", {"operation": "ingest"})

        assert isinstance(logger, ContextLogger)
        logger.info("Normalizing rows", extra={"record_count": 3})

        record = caplog.records[-1]
        assert record.operation == "ingest"
        assert record.record_count == 3

    def test_context_logger_leaves_caller_extra_alone(self, caplog):
        """Test the adapter context is not written into the caller's extra dict."""
        caplog.set_level(logging.INFO, logger="aiedu.ctx")
        logger = get_logger("aiedu.ctx", {"operation": "ingest"})
        extra = {"record_count": 5}

        logger.info("First batch", extra=extra)
        logger.info("Second batch")

        assert extra == {"record_count": 5}
        assert not hasattr(caplog.records[-1], "record_count")

    def test_setup_logging(self):
        """Test the root logger gets exactly one JSON console handler."""
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configured = setup_logging("warning", json_format=True)

            assert configured is root
            assert root.level == logging.WARNING
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
