"""Format-specific text extractors, one per DocumentType.

    from advisor_docs.adapters.extractors import get_default_extractors
"""

from ...core.domain import DocumentType
from ...core.ports import TextExtractorPort
from .docx_extractor import DocxExtractor
from .pdf_extractor import PDFExtractor
from .pptx_extractor import LegacyPptExtractor, PptxExtractor
from .text_extractor import MarkdownExtractor, PlainTextExtractor
from .xlsx_extractor import XlsxExtractor

_EXTRACTOR_CLASSES: list[type[TextExtractorPort]] = [
    PlainTextExtractor,
    MarkdownExtractor,
    PDFExtractor,
    DocxExtractor,
    XlsxExtractor,
    PptxExtractor,
    LegacyPptExtractor,
]


def get_default_extractors() -> dict[DocumentType, TextExtractorPort]:
    """Fresh extractor instances keyed by the type they handle.

    Every DocumentType has exactly one entry.
    """
    extractors = {cls.doc_type: cls() for cls in _EXTRACTOR_CLASSES}
    missing = set(DocumentType) - set(extractors)
    if missing:
        raise RuntimeError(f"No extractor registered for: {sorted(t.value for t in missing)}")
    return extractors


__all__ = [
    "DocxExtractor",
    "LegacyPptExtractor",
    "MarkdownExtractor",
    "PDFExtractor",
    "PlainTextExtractor",
    "PptxExtractor",
    "XlsxExtractor",
    "get_default_extractors",
]
