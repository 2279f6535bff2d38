"""Logging for the qqbar kernel.

Every module logs under the ``qqbar`` namespace. Isolation, box search and
candidate filtering log their progress at DEBUG; rejected user input is
logged at INFO by the API layer.
"""

import logging
import sys
from datetime import datetime
from typing import Optional, TextIO

from .config import LOG_LEVEL

LOGGER_NAME = "qqbar"


class KernelFormatter(logging.Formatter):
    """One line per record: ISO timestamp, level, short logger name, message."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).isoformat(timespec="milliseconds")
        name = record.name
        if name.startswith(LOGGER_NAME + "."):
            name = name[len(LOGGER_NAME) + 1 :]
        line = f"{stamp} {record.levelname:<7} {name}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: str = LOG_LEVEL,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the ``qqbar`` logger and return it.

    Calling this again replaces the handlers installed by the previous call.
    ``stream`` defaults to stderr; ``log_file`` adds a second handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(KernelFormatter())
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a kernel module, e.g. ``get_logger("real")`` gives ``qqbar.real``."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
