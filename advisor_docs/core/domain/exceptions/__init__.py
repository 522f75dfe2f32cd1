"""Custom exception hierarchy for the advisor document engine.

All exceptions are re-exported here:

    from advisor_docs.core.domain.exceptions import AdvisorDocsError, FileTooLargeError
"""

from .base import AdvisorDocsError, ExceptionContext
from .extraction import (
    ExtractionError,
    ExtractionTimeoutError,
    PDFExtractionError,
    SlideDeckExtractionError,
    SpreadsheetExtractionError,
    WordExtractionError,
)
from .repository import DocumentNotFoundError, InvalidSnapshotError, RepositoryError
from .validation import (
    EmptyQueryError,
    FileTooLargeError,
    UnsupportedFileTypeError,
    ValidationError,
)

__all__ = [
    # Base
    "ExceptionContext",
    "AdvisorDocsError",
    # Validation
    "ValidationError",
    "FileTooLargeError",
    "UnsupportedFileTypeError",
    "EmptyQueryError",
    # Extraction
    "ExtractionError",
    "PDFExtractionError",
    "WordExtractionError",
    "SpreadsheetExtractionError",
    "SlideDeckExtractionError",
    "ExtractionTimeoutError",
    # Repository
    "RepositoryError",
    "DocumentNotFoundError",
    "InvalidSnapshotError",
]
