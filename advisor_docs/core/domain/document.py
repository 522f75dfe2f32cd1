"""Document models: uploads, normalized documents, stored documents."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class DocumentType(Enum):
    """Closed set of file formats the normalizer understands.

    Attributes:
        PDF: Portable paginated document.
        DOCX: Word-processing document (Office Open XML).
        XLSX: Spreadsheet workbook (Office Open XML).
        PPTX: Slide deck (Office Open XML).
        PPT: Legacy binary slide deck; accepted but never parsed.
        TEXT: Plain text, or any text-like content.
        MARKDOWN: Lightweight markup.
    """

    PDF = "pdf"
    DOCX = "docx"
    XLSX = "xlsx"
    PPTX = "pptx"
    PPT = "ppt"
    TEXT = "txt"
    MARKDOWN = "md"

    @property
    def label(self) -> str:
        """Display name used in placeholders and listings."""
        return _TYPE_LABELS[self]


_TYPE_LABELS = {
    DocumentType.PDF: "PDF",
    DocumentType.DOCX: "Word",
    DocumentType.XLSX: "Excel",
    DocumentType.PPTX: "PowerPoint",
    DocumentType.PPT: "Legacy PPT",
    DocumentType.TEXT: "Text",
    DocumentType.MARKDOWN: "Markdown",
}


class DocumentCategory(Enum):
    """Business category an advisor document is filed under."""

    MEETING_MINUTES = "meeting-minutes"
    PROPOSAL = "proposal"
    REPORT = "report"
    LEGAL = "legal"
    FINANCIAL = "financial"
    STRATEGIC_PLAN = "strategic-plan"
    PRESENTATION = "presentation"
    CONTRACT = "contract"
    OTHER = "other"


class ConfidentialityLevel(Enum):
    """How widely a document may be shared."""

    PUBLIC = "public"
    INTERNAL = "internal"
    CONFIDENTIAL = "confidential"
    RESTRICTED = "restricted"


@dataclass(frozen=True)
class UploadedFile:
    """A file as received from the caller, before validation."""

    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        """Byte length of the upload."""
        return len(self.content)

    @property
    def extension(self) -> str:
        """Lower-cased extension without the dot, or empty string."""
        _, dot, ext = self.filename.rpartition(".")
        return ext.lower() if dot else ""


@dataclass
class DocumentMetadata:
    """Structural metadata derived from extracted text.

    Attributes:
        title: Filename with its extension stripped.
        word_count: Whitespace-delimited token count of the extracted text.
        size: Byte length of the original upload.
        doc_type: Format the text was extracted from.
        pages: Page count for PDFs.
        slides: Slide count for slide decks.
        sheets: Sheet count for spreadsheets.
        author: Author, when the format records one.
        extraction_warnings: Non-fatal messages reported by the parser.
        degraded: True when extraction failed and placeholder text was stored.
    """

    title: str
    word_count: int
    size: int
    doc_type: DocumentType
    pages: int | None = None
    slides: int | None = None
    sheets: int | None = None
    author: str | None = None
    extraction_warnings: list[str] = field(default_factory=list)
    degraded: bool = False


@dataclass
class ProcessedDocument:
    """Normalizer output: text, metadata and ordered chunks."""

    text: str
    metadata: DocumentMetadata
    chunks: list[str]


@dataclass
class Document:
    """A stored document.

    Only ``tags``, ``category`` and ``confidentiality`` change after creation,
    and only through the repository's metadata update.
    """

    id: str
    original_name: str
    filename: str
    file_path: str
    content_type: str
    size: int
    advisor_id: str
    user_id: str
    extracted_text: str
    metadata: DocumentMetadata
    tags: list[str]
    category: DocumentCategory
    confidentiality: ConfidentialityLevel
    uploaded_at: datetime
    updated_at: datetime


@dataclass
class SearchResult:
    """A keyword search hit.

    Attributes:
        document: The matched Document.
        score: Sum of query term occurrences plus the filename bonus.
        matched_chunks: Up to three cached chunks containing a query term.
    """

    document: Document
    score: float
    matched_chunks: list[str] = field(default_factory=list)


@dataclass
class DocumentStats:
    """Aggregate figures over a filtered set of documents."""

    total_count: int
    total_size_bytes: int
    by_category: dict[DocumentCategory, int]
    by_confidentiality: dict[ConfidentialityLevel, int]
    recent_uploads: int
