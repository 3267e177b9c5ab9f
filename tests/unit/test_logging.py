"""
Unit tests for structured logging utilities.
"""

import json
import logging
from io import StringIO

import pytest

from luaflow.utils.logging import (
    setup_logging,
    get_logger,
    JSONFormatter,
    LogContext,
    log_stage,
    log_error_with_context,
)


def capture(logger, level=logging.INFO) -> StringIO:
    """Attach a JSON handler writing to a string buffer."""
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.logger.addHandler(handler)
    logger.logger.setLevel(level)
    return stream


def test_json_formatter():
    """Test JSON formatter produces valid JSON output."""
    formatter = JSONFormatter()

    logger = logging.getLogger("test_json_formatter")
    logger.setLevel(logging.INFO)

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    logger.info("Test message", extra={"source_path": "main.lua", "stage": "parse"})

    log_data = json.loads(stream.getvalue())

    assert "timestamp" in log_data
    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test_json_formatter"
    assert log_data["message"] == "Test message"
    assert log_data["source_path"] == "main.lua"
    assert log_data["stage"] == "parse"
    assert "source" in log_data
    assert "context" not in log_data


def test_get_logger_with_context():
    """Test getting logger with context."""
    logger = get_logger("test_module", source_path="main.lua", run_id="abc")

    assert logger.extra["source_path"] == "main.lua"
    assert logger.extra["run_id"] == "abc"


def test_with_context_does_not_mutate_parent():
    """Test with_context returns an adapter with merged context."""
    logger = get_logger("test_module", source_path="main.lua")
    child = logger.with_context(run_id="abc")

    assert child.extra == {"source_path": "main.lua", "run_id": "abc"}
    assert logger.extra == {"source_path": "main.lua"}


def test_log_context_restores_extra():
    """Test LogContext adds fields only for the duration of the block."""
    logger = get_logger("test_log_context")
    stream = capture(logger)

    with LogContext(logger, stage="build"):
        logger.info("inside")
    logger.info("outside")

    inside, outside = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert inside["stage"] == "build"
    assert "stage" not in outside


def test_log_stage():
    """Test pipeline stage logging."""
    logger = get_logger("test_log_stage")
    stream = capture(logger)

    log_stage(logger, source_path="main.lua", stage="build", status="completed", nodes=3)

    log_data = json.loads(stream.getvalue())

    assert log_data["message"] == "Stage completed: build"
    assert log_data["source_path"] == "main.lua"
    assert log_data["stage"] == "build"
    assert log_data["context"]["status"] == "completed"
    assert log_data["context"]["nodes"] == 3


def test_log_error_with_context():
    """Test error logging includes exception details."""
    logger = get_logger("test_log_error")
    stream = capture(logger, logging.ERROR)

    try:
        raise ValueError("bad input")
    except ValueError as e:
        log_error_with_context(logger, "Failed", e, source_path="main.lua")

    log_data = json.loads(stream.getvalue())

    assert log_data["level"] == "ERROR"
    assert log_data["source_path"] == "main.lua"
    assert log_data["error"]["type"] == "ValueError"
    assert log_data["error"]["message"] == "bad input"
    assert "Traceback" in log_data["error"]["stack_trace"]


def test_setup_logging_writes_json_to_stream():
    """Test setup_logging installs a JSON handler on the root logger."""
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level
    stream = StringIO()

    try:
        setup_logging("INFO", stream=stream)
        logging.getLogger("test_setup").info("hello")
        logging.getLogger("test_setup").debug("hidden")
    finally:
        root_logger.handlers[:] = saved_handlers
        root_logger.setLevel(saved_level)

    lines = stream.getvalue().splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["message"] == "hello"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
