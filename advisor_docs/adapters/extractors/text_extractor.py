"""Plain text and markdown extraction."""

from ...core.domain import DocumentType
from ...core.ports import ExtractionResult, TextExtractorPort


class PlainTextExtractor(TextExtractorPort):
    """Reads bytes as UTF-8 text verbatim."""

    doc_type = DocumentType.TEXT

    def extract(self, content: bytes, filename: str) -> ExtractionResult:
        """Decode the upload, replacing undecodable bytes."""
        return ExtractionResult(text=content.decode("utf-8", errors="replace"))


class MarkdownExtractor(PlainTextExtractor):
    """Markdown is kept as-is; the markup is useful context for the model."""

    doc_type = DocumentType.MARKDOWN
