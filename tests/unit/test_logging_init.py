from __future__ import annotations

import logging
from io import StringIO

from stream_loader.logging.init import (
    LabeledFormatter,
    enable_debug,
    get_logger,
    log_summary,
    quiet_vendor_loggers,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == "stream_loader"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    handler = logger.handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    assert isinstance(handler.formatter, LabeledFormatter)
    assert logger.propagate is False


def test_logging_labeled_prefixes():
    captured_output = StringIO()
    logger = logging.getLogger("test_stream_loader_labels")
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logging.addLevelName(25, "SUMMARY")
    handler = logging.StreamHandler(captured_output)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.debug("Test debug message")
    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(25, "Test summary message")

    lines = captured_output.getvalue().strip().split("\n")
    assert lines == [
        "DEBUG Test debug message",
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_module_loggers_propagate_to_app_logger(capsys):
    setup_logging()
    logging.getLogger("stream_loader.services.orchestrator").info("Rows Sent: 3")
    assert "INFO Rows Sent: 3" in capsys.readouterr().out


def test_get_logger_returns_configured_logger():
    setup_logger = setup_logging()
    assert get_logger() is setup_logger


def test_setup_logging_idempotent():
    logger1 = setup_logging()
    logger2 = setup_logging()
    assert logger1 is logger2
    assert len(logger1.handlers) == 1


def test_enable_debug(capsys):
    logger = setup_logging()
    logger.debug("hidden")
    enable_debug()
    logger.debug("visible")
    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "DEBUG visible" in out


def test_log_summary(capsys):
    setup_logging()
    log_summary("rows_sent=1")
    assert "SUMMARY rows_sent=1" in capsys.readouterr().out


def test_quiet_vendor_loggers(monkeypatch):
    vendor = logging.getLogger("snowflake")
    monkeypatch.setattr(vendor, "level", logging.NOTSET)
    quiet_vendor_loggers()
    assert vendor.level == logging.ERROR
