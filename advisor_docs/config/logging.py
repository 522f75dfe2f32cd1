"""Logging setup for the advisor document engine.

Modules log through ``logging.getLogger(__name__)``; every module name starts
with ``advisor_docs`` so one handler set on the package logger covers them
all. Parser libraries are noisy on malformed files and are capped at ERROR.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "advisor_docs"

# pypdf reports every recoverable xref problem as a warning
NOISY_LOGGERS = ("pypdf", "openpyxl", "mammoth")

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(module)s:%(funcName)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JSONExceptionFormatter(logging.Formatter):
    """One JSON object per record, with exception type, code and traceback.

    Package exceptions contribute their ``error_code`` so ingestion warnings
    and API errors can be filtered by code.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": record.filename,
                "function": record.funcName,
                "line": record.lineno,
            },
        }

        exc_type, exc_value, _ = record.exc_info or (None, None, None)
        if exc_type is not None:
            entry["exception"] = {
                "type": exc_type.__name__,
                "code": getattr(exc_value, "error_code", None),
                "message": str(exc_value) if exc_value else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str)


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_format: bool = False,
) -> logging.Logger:
    """(Re)configure the package logger.

    Calling it again replaces the previous handlers, so the API lifespan and
    the CLI callback can both call it safely.

    Args:
        level: Level name; unknown names fall back to INFO.
        log_file: Also write to this file, creating parent directories.
        json_format: Emit JSON lines instead of the pipe-separated text format.

    Returns:
        The ``advisor_docs`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    formatter: logging.Formatter = (
        JSONExceptionFormatter() if json_format else logging.Formatter(TEXT_FORMAT, DATE_FORMAT)
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.ERROR)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger for ``advisor_docs.<name>``, or the package logger itself."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}" if name else ROOT_LOGGER_NAME)
