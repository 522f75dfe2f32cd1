"""Document normalizer: uploaded file -> text, metadata and chunks.

Validation is the only stage that can reject a file. Every later failure,
whether a parser error or an extraction timeout, is converted into placeholder
text here and nowhere else, so a validated upload always yields a
ProcessedDocument.
"""

import asyncio
import logging

from ...common.utils import clean_text, count_words, format_file_size, strip_extension
from ...config.settings import Settings
from ..domain import DocumentMetadata, DocumentType, ProcessedDocument, UploadedFile
from ..domain.exceptions import (
    ExtractionError,
    ExtractionTimeoutError,
    FileTooLargeError,
    UnsupportedFileTypeError,
)
from ..ports import ExtractionResult, TextExtractorPort
from .chunking import chunk_text

logger = logging.getLogger(__name__)

MIME_TYPES: dict[str, DocumentType] = {
    "application/pdf": DocumentType.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DocumentType.DOCX,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": DocumentType.XLSX,
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": DocumentType.PPTX,
    "application/vnd.ms-powerpoint": DocumentType.PPT,
    "text/plain": DocumentType.TEXT,
    "text/markdown": DocumentType.MARKDOWN,
    "text/x-markdown": DocumentType.MARKDOWN,
}

EXTENSIONS: dict[str, DocumentType] = {
    "pdf": DocumentType.PDF,
    "docx": DocumentType.DOCX,
    "xlsx": DocumentType.XLSX,
    "pptx": DocumentType.PPTX,
    "ppt": DocumentType.PPT,
    "txt": DocumentType.TEXT,
    "md": DocumentType.MARKDOWN,
    "markdown": DocumentType.MARKDOWN,
}

GENERIC_CONTENT_TYPES = {"", "application/octet-stream", "binary/octet-stream"}


def _base_content_type(content_type: str | None) -> str:
    """``"Text/Plain; charset=utf-8"`` -> ``"text/plain"``."""
    return (content_type or "").split(";")[0].strip().lower()


def empty_placeholder(doc_type: DocumentType, filename: str) -> str:
    """Text stored when extraction succeeds but yields nothing usable."""
    if doc_type is DocumentType.PDF:
        return "[PDF contains no extractable text]"
    if doc_type is DocumentType.PPTX:
        return f"[PowerPoint file: {filename}] - No text content could be extracted from slides."
    if doc_type is DocumentType.XLSX:
        return f"[Excel file: {filename}] - No data found in any sheet."
    return f"[{filename} contains no extractable text]"


def failure_placeholder(doc_type: DocumentType, filename: str, message: str) -> str:
    """Text stored when extraction fails."""
    label = doc_type.label
    return f"[{label} file: {filename}] - {label} processing failed: {message}"


class DocumentNormalizer:
    """Validates uploads and turns them into ProcessedDocuments.

    Extraction strategies are injected as a ``DocumentType -> extractor``
    mapping; each runs in a worker thread under the configured deadline.
    """

    def __init__(self, extractors: dict[DocumentType, TextExtractorPort], settings: Settings):
        self.extractors = extractors
        self.settings = settings

    def infer_type(self, file: UploadedFile) -> DocumentType | None:
        """Resolve the document type of an upload.

        A known declared content type wins. Otherwise the extension decides,
        and as a last resort any ``text/*`` content type is read as plain text.

        Returns:
            The inferred DocumentType, or None if the file is unsupported.
        """
        content_type = _base_content_type(file.content_type)
        if content_type in MIME_TYPES:
            return MIME_TYPES[content_type]
        if file.extension in EXTENSIONS:
            return EXTENSIONS[file.extension]
        if content_type not in GENERIC_CONTENT_TYPES and content_type.startswith("text/"):
            return DocumentType.TEXT
        return None

    def validate(self, file: UploadedFile) -> DocumentType:
        """Check size and type before any extraction work.

        Returns:
            The inferred DocumentType.

        Raises:
            FileTooLargeError: If the upload exceeds ``max_upload_bytes``.
            UnsupportedFileTypeError: If no supported type can be inferred.
        """
        limit = self.settings.max_upload_bytes
        if file.size > limit:
            raise FileTooLargeError(
                f"File size exceeds {format_file_size(limit)} limit "
                f"({file.size / (1024 * 1024):.1f}MB)",
                context={"filename": file.filename, "size": file.size, "limit": limit},
            )

        doc_type = self.infer_type(file)
        if doc_type is None:
            declared = _base_content_type(file.content_type) or "none"
            raise UnsupportedFileTypeError(
                f"Unsupported file type: {declared} ({file.filename})",
                context={"filename": file.filename, "content_type": file.content_type},
            )
        return doc_type

    async def process(self, file: UploadedFile) -> ProcessedDocument:
        """Validate, extract, clean and chunk one upload.

        Raises:
            ValidationError: Only from validation; extraction never raises.
        """
        doc_type = self.validate(file)
        degraded = False

        try:
            result = await self._extract(doc_type, file)
        except Exception as e:
            # Single conversion point for every extraction failure
            message = e.message if isinstance(e, ExtractionError) else str(e) or type(e).__name__
            logger.warning(
                f"{doc_type.label} extraction failed for {file.filename}: {message}",
                exc_info=not isinstance(e, ExtractionError),
            )
            result = ExtractionResult(text=failure_placeholder(doc_type, file.filename, message))
            degraded = True

        text = clean_text(result.text, normalize=False).strip()
        if not text:
            text = empty_placeholder(doc_type, file.filename)
            result.warnings.append("No extractable text")

        metadata = DocumentMetadata(
            title=strip_extension(file.filename),
            word_count=count_words(text),
            size=file.size,
            doc_type=doc_type,
            pages=result.pages,
            slides=result.slides,
            sheets=result.sheets,
            author=result.author,
            extraction_warnings=list(result.warnings),
            degraded=degraded,
        )
        chunks = chunk_text(text, self.settings.chunk_size, self.settings.chunk_overlap)

        logger.info(
            f"Processed {file.filename} as {doc_type.label}: "
            f"{metadata.word_count} words, {len(chunks)} chunks"
        )
        return ProcessedDocument(text=text, metadata=metadata, chunks=chunks)

    async def _extract(self, doc_type: DocumentType, file: UploadedFile) -> ExtractionResult:
        extractor = self.extractors.get(doc_type)
        if extractor is None:
            raise ExtractionError(
                f"No extractor configured for {doc_type.label}",
                context={"filename": file.filename},
            )

        timeout = self.settings.extraction_timeout_seconds
        try:
            # A timed-out worker thread cannot be killed; it is abandoned
            return await asyncio.wait_for(
                asyncio.to_thread(extractor.extract, file.content, file.filename),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise ExtractionTimeoutError(
                f"Extraction timed out after {timeout:g}s",
                cause=e,
                context={"filename": file.filename},
            )
