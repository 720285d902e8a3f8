"""
Tests for logging setup.
"""

import json
import logging
import sys

import pytest

from fidruawatch.utils.logger import ColorFormatter, JsonFormatter, log_exception, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def make_record(message: str = "batch started", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord("fidruawatch.test", level, __file__, 10, message, None, None)


def test_json_formatter():
    data = json.loads(JsonFormatter().format(make_record()))
    assert data["level"] == "INFO"
    assert data["logger"] == "fidruawatch.test"
    assert data["message"] == "batch started"
    assert "exception" not in data


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad record")
    except ValueError:
        record = logging.LogRecord("t", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

    data = json.loads(JsonFormatter().format(record))
    assert "ValueError: bad record" in data["exception"]


def test_color_formatter_wraps_level():
    formatter = ColorFormatter(fmt="%(levelname)s %(message)s")
    output = formatter.format(make_record(level=logging.WARNING))
    assert output.startswith("\033[33mWARNING\033[0m")


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "fidruawatch.log"
    setup_logging("DEBUG", str(log_file), "color")

    logging.getLogger("fidruawatch.test").info("upload completed")
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = log_file.read_text(encoding="utf-8")
    assert "upload completed" in content
    assert "\033[" not in content


def test_setup_logging_quiets_watchdog():
    setup_logging("DEBUG")
    assert logging.getLogger("watchdog").level == logging.WARNING
    assert logging.getLogger().level == logging.DEBUG


def test_unknown_level_falls_back_to_info():
    setup_logging("CHATTY")
    assert logging.getLogger().level == logging.INFO


def test_json_formatter_includes_batch_context():
    record = make_record()
    record.folder = "/uploads/day1"
    record.batch_id = "abc"

    data = json.loads(JsonFormatter().format(record))
    assert data["folder"] == "/uploads/day1"
    assert data["batch_id"] == "abc"
    assert "file_count" not in data


def test_log_exception_keeps_context(caplog):
    logger = logging.getLogger("fidruawatch.test")
    try:
        raise RuntimeError("listener failed")
    except RuntimeError as e:
        with caplog.at_level(logging.ERROR, logger="fidruawatch.test"):
            log_exception(logger, e, "Error in callback", extra={"folder": "/f"})

    record = caplog.records[-1]
    assert record.folder == "/f"
    assert "listener failed" in record.getMessage()
    assert record.exc_info[0] is RuntimeError
