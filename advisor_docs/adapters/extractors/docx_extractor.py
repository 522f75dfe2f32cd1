"""Word document extraction with mammoth."""

import io
import logging
import zipfile

import mammoth

from ...core.domain import DocumentType
from ...core.domain.exceptions import WordExtractionError
from ...core.ports import ExtractionResult, TextExtractorPort

logger = logging.getLogger(__name__)


class DocxExtractor(TextExtractorPort):
    """Raw text through mammoth; conversion messages become warnings."""

    doc_type = DocumentType.DOCX

    def extract(self, content: bytes, filename: str) -> ExtractionResult:
        try:
            result = mammoth.extract_raw_text(io.BytesIO(content))
        except (zipfile.BadZipFile, KeyError, ValueError, AttributeError) as e:
            raise WordExtractionError(
                str(e) or "Document could not be opened",
                cause=e,
                context={"filename": filename},
            )

        warnings = [message.message for message in result.messages]
        for warning in warnings:
            logger.warning(f"Word extraction warning for {filename}: {warning}")

        return ExtractionResult(text=result.value or "", warnings=warnings)
