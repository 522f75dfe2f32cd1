"""PDF text extraction with pypdf."""

import io
import logging

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ...core.domain import DocumentType
from ...core.domain.exceptions import PDFExtractionError
from ...core.ports import ExtractionResult, TextExtractorPort

logger = logging.getLogger(__name__)


class PDFExtractor(TextExtractorPort):
    """Extracts text page by page, each page introduced by a marker line."""

    doc_type = DocumentType.PDF

    def extract(self, content: bytes, filename: str) -> ExtractionResult:
        """Extract text from PDF bytes.

        Args:
            content: Raw PDF bytes.
            filename: Original filename, for error context.

        Returns:
            ExtractionResult with ``--- Page N ---`` separated text and the
            page count. Pages without text contribute no marker.

        Raises:
            PDFExtractionError: If the PDF cannot be parsed or decrypted.
        """
        try:
            reader = PdfReader(io.BytesIO(content))
            if reader.is_encrypted and not reader.decrypt(""):
                raise PDFExtractionError(
                    "PDF is password protected",
                    context={"filename": filename},
                )

            text_parts = []
            for number, page in enumerate(reader.pages, start=1):
                page_text = (page.extract_text() or "").strip()
                if page_text:
                    text_parts.append(f"--- Page {number} ---\n{page_text}")

            author = reader.metadata.author if reader.metadata else None
            page_count = len(reader.pages)
        except PDFExtractionError:
            raise
        except (PdfReadError, ValueError, KeyError, TypeError, OSError) as e:
            raise PDFExtractionError(str(e) or type(e).__name__, cause=e, context={"filename": filename})

        logger.debug(f"Extracted {page_count} pages from {filename}")
        return ExtractionResult(
            text="\n\n".join(text_parts),
            pages=page_count,
            author=author or None,
        )
