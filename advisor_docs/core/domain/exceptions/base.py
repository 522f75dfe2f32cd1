"""Root of the package's exception hierarchy.

Each error carries a stable ``error_code`` (``DOC_<family>_<nnn>``), the
place it was raised, an optional underlying cause and free-form context
such as the filename being processed. ``to_dict`` renders all of it for
logs and HTTP error bodies.
"""

import inspect
import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import FrameType
from typing import Any


@dataclass(frozen=True)
class ExceptionContext:
    """Where an exception was raised."""

    class_name: str
    method_name: str
    file_name: str
    line_number: int
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    @classmethod
    def from_frame(cls, frame: FrameType | None) -> "ExceptionContext":
        if frame is None:
            return cls("<unknown>", "<unknown>", "<unknown>", 0)
        owner = frame.f_locals.get("self")
        return cls(
            class_name=type(owner).__name__ if owner is not None else "<module>",
            method_name=frame.f_code.co_name,
            file_name=frame.f_code.co_filename.replace("\\", "/").rsplit("/", 1)[-1],
            line_number=frame.f_lineno,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "class": self.class_name,
            "method": self.method_name,
            "file": self.file_name,
            "line": self.line_number,
            "timestamp": self.timestamp,
        }


class AdvisorDocsError(Exception):
    """Base class for every error this package raises.

    Example:
        try:
            workbook = load_workbook(stream, read_only=True)
        except (BadZipFile, KeyError) as e:
            raise SpreadsheetExtractionError(
                "Workbook could not be opened",
                cause=e,
                context={"filename": filename},
            )
    """

    error_code: str = "DOC_ERR_001"

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.extra_context = context or {}
        self.location = ExceptionContext.from_frame(self._raise_site())
        # Only meaningful while the cause is being handled
        self.stack_trace = traceback.format_exc() if cause else None

    @staticmethod
    def _raise_site() -> FrameType | None:
        # _raise_site <- __init__ <- caller that constructed the error
        frame = inspect.currentframe()
        for _ in range(2):
            if frame is None:
                break
            frame = frame.f_back
        return frame

    def to_dict(self, include_trace: bool = False) -> dict[str, Any]:
        """Error type, code, message and location, plus context, cause and
        (when ``include_trace`` is set) the captured stack trace."""
        result: dict[str, Any] = {
            "error": {
                "type": type(self).__name__,
                "code": self.error_code,
                "message": self.message,
            },
            "location": self.location.to_dict(),
        }
        if self.extra_context:
            result["context"] = dict(self.extra_context)
        if include_trace and self.stack_trace:
            result["stack_trace"] = [line for line in self.stack_trace.splitlines() if line.strip()]
        if self.cause is not None:
            result["cause"] = {"type": type(self.cause).__name__, "message": str(self.cause)}
        return result
