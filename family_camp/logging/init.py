from __future__ import annotations

import logging
import sys

"""Logging initialization with labeled prefixes.

Every line is prefixed with one of INFO|WARN|ERROR|SUMMARY. These lines are
the user-visible notices of the roster tools (load failures, export no-op,
import progress and the final import SUMMARY).

Module loggers are created with logging.getLogger(__name__) and live under
the "family_camp" namespace, so they share the handler configured here.
"""

# sits between INFO (20) and WARNING (30)
SUMMARY_LEVEL = 25
LOGGER_NAME = "family_camp"

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formats records as "LABEL message"."""

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


def _apply_level(logger: logging.Logger, level: int) -> None:
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure the application logger.

    The stdout handler is installed once; later calls only change the level,
    which is how the CLI switches to DEBUG for --debug.
    """
    global _logger

    if _logger is not None:
        _apply_level(_logger, level)
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    # notices and the SUMMARY line share one stream
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    _apply_level(logger, level)

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Return the application logger, configuring it at INFO on first use."""
    return _logger if _logger is not None else setup_logging()


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup_logging() starts clean."""
    global _logger
    _logger = None
