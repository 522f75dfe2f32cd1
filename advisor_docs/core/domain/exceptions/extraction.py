"""Extraction exceptions.

These never leave the ingestion pipeline: the normalizer turns them into
placeholder text so the upload is still stored.
"""

from .base import AdvisorDocsError


class ExtractionError(AdvisorDocsError):
    """A format-specific parser failed."""

    error_code = "DOC_EXT_001"


class PDFExtractionError(ExtractionError):
    """Failed to extract text from PDF."""

    error_code = "DOC_EXT_002"


class WordExtractionError(ExtractionError):
    """Failed to extract text from a Word document."""

    error_code = "DOC_EXT_003"


class SpreadsheetExtractionError(ExtractionError):
    """Failed to read a spreadsheet workbook."""

    error_code = "DOC_EXT_004"


class SlideDeckExtractionError(ExtractionError):
    """Failed to read a slide deck archive."""

    error_code = "DOC_EXT_005"


class ExtractionTimeoutError(ExtractionError):
    """Extraction did not finish within the configured deadline."""

    error_code = "DOC_EXT_006"
