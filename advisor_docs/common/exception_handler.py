"""Turning exceptions into structured data, log lines and HTTP responses.

Package errors already know how to render themselves (``to_dict``); foreign
exceptions are described from their traceback. Both produce the same shape:

    {"error": {"type", "code", "message"}, "location": {...}, "context"?, ...}
"""

import json
import logging
import traceback
from typing import Any

from ..core.domain.exceptions import (
    AdvisorDocsError,
    DocumentNotFoundError,
    ExtractionTimeoutError,
    FileTooLargeError,
    UnsupportedFileTypeError,
    ValidationError,
)

logger = logging.getLogger(__name__)

FOREIGN_ERROR_CODE = "PYTHON_ERR"

# Most specific first; the first isinstance match wins
_STATUS_BY_TYPE: list[tuple[type[Exception], int]] = [
    (FileTooLargeError, 413),
    (UnsupportedFileTypeError, 415),
    (ValidationError, 400),
    (DocumentNotFoundError, 404),
    (ExtractionTimeoutError, 504),
    (AdvisorDocsError, 500),
    (ValueError, 400),
    (TimeoutError, 503),
]


def _describe_foreign(exc: Exception, include_trace: bool) -> dict[str, Any]:
    frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    last = frames[-1] if frames else None

    result: dict[str, Any] = {
        "error": {
            "type": type(exc).__name__,
            "code": FOREIGN_ERROR_CODE,
            "message": str(exc),
        },
        "location": {
            "class": "<unknown>",
            "method": last.name if last else "<unknown>",
            "file": last.filename.replace("\\", "/").rsplit("/", 1)[-1] if last else "<unknown>",
            "line": last.lineno if last else 0,
        },
    }
    if include_trace:
        result["stack_trace"] = [
            line.strip()
            for line in traceback.format_exception(type(exc), exc, exc.__traceback__)
            if line.strip()
        ]
    return result


def format_exception_json(
    exc: Exception,
    include_trace: bool = False,
    extra_context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Structured description of any exception.

    Args:
        exc: A package error or any other exception.
        include_trace: Add the formatted stack trace.
        extra_context: Merged into the ``context`` entry (request path,
            filename and so on).
    """
    if isinstance(exc, AdvisorDocsError):
        result = exc.to_dict(include_trace=include_trace)
    else:
        result = _describe_foreign(exc, include_trace)

    if extra_context:
        result.setdefault("context", {}).update(extra_context)
    return result


def log_exception(
    exc: Exception,
    log: logging.Logger | None = None,
    level: int = logging.ERROR,
    extra_context: dict[str, Any] | None = None,
) -> None:
    """Log the structured description, trace included, as indented JSON."""
    details = format_exception_json(exc, include_trace=True, extra_context=extra_context)
    (log or logger).log(level, json.dumps(details, indent=2, default=str))


def get_error_code(exc: Exception) -> str:
    return exc.error_code if isinstance(exc, AdvisorDocsError) else FOREIGN_ERROR_CODE


def get_http_status_code(exc: Exception) -> int:
    """HTTP status for an exception; 500 when nothing more specific applies."""
    for exc_type, status in _STATUS_BY_TYPE:
        if isinstance(exc, exc_type):
            return status
    return 500


def error_response(exc: Exception, include_trace: bool = False) -> tuple[int, dict[str, Any]]:
    """Status code and body for returning ``exc`` to an HTTP client."""
    return get_http_status_code(exc), format_exception_json(exc, include_trace=include_trace)
