"""Text Extractor Port Interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..domain import DocumentType


@dataclass
class ExtractionResult:
    """Raw output of one extraction strategy."""

    text: str
    pages: int | None = None
    slides: int | None = None
    sheets: int | None = None
    author: str | None = None
    warnings: list[str] = field(default_factory=list)


class TextExtractorPort(ABC):
    """Abstract interface for format-specific text extraction.

    Implementations raise ``ExtractionError`` subclasses on failure; turning
    failures into placeholder text is the normalizer's job, not theirs.
    """

    doc_type: DocumentType

    @abstractmethod
    def extract(self, content: bytes, filename: str) -> ExtractionResult:
        """Extract text from raw file bytes."""
        ...
