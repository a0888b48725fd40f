from __future__ import annotations

import logging
import sys

"""Logging initialization with labeled prefixes.

Every line written by the loader is prefixed with a label
(DEBUG|INFO|WARN|ERROR|SUMMARY) so that stdout stays grep-friendly for
operators and for the CLI contract tests.

Module loggers created with ``logging.getLogger(__name__)`` inside the
``stream_loader`` package propagate into the application logger configured
here.
"""

__all__ = [
    "setup_logging",
    "get_logger",
    "enable_debug",
    "quiet_vendor_loggers",
    "log_summary",
    "reset_logging",
]

APP_LOGGER_NAME = "stream_loader"

# Custom SUMMARY level (between INFO=20 and WARNING=30)
SUMMARY_LEVEL = 25

# Third-party SDK loggers that are too chatty outside debug mode
VENDOR_LOGGERS = ("snowflake",)

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formatter producing ``LABEL message`` lines."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        level_label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{level_label} {record.getMessage()}"


def setup_logging() -> logging.Logger:
    """Setup the application logger (idempotent).

    Returns:
        Configured ``stream_loader`` logger writing to stdout at INFO
    """
    global _logger

    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(logging.INFO)

    # Clear any existing handlers to avoid duplication
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.INFO)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)

    # Prevent propagation to root logger to avoid duplicate output
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured application logger, configuring it on first use."""
    if _logger is None:
        return setup_logging()
    return _logger


def enable_debug() -> None:
    """Lower the application logger and its handlers to DEBUG."""
    logger = get_logger()
    for h in logger.handlers:
        h.setLevel(logging.DEBUG)
    logger.setLevel(logging.DEBUG)


def quiet_vendor_loggers(level: int = logging.ERROR) -> None:
    """Raise vendor SDK loggers to ``level`` (used outside debug mode)."""
    for name in VENDOR_LOGGERS:
        logging.getLogger(name).setLevel(level)


def log_summary(message: str) -> None:
    """Log a message at SUMMARY level."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Reset the global logger state. Mainly for testing purposes."""
    global _logger
    _logger = None
