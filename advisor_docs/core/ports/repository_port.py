"""Document Repository Port Interface."""

from abc import ABC, abstractmethod
from typing import Any

from ..domain import (
    ConfidentialityLevel,
    Document,
    DocumentCategory,
    DocumentStats,
    ProcessedDocument,
    SearchResult,
    UploadedFile,
)


class DocumentRepositoryPort(ABC):
    """Abstract interface for document storage.

    A durable backend can sit behind the same contract without the context
    service noticing.
    """

    @abstractmethod
    def store(
        self,
        file: UploadedFile,
        processed: ProcessedDocument,
        advisor_id: str,
        user_id: str,
        *,
        category: DocumentCategory | None = None,
        confidentiality: ConfidentialityLevel | None = None,
        tags: list[str] | None = None,
    ) -> Document:
        """Store a processed upload and its chunks."""
        ...

    @abstractmethod
    def get(self, document_id: str) -> Document | None:
        """Get a document by id."""
        ...

    @abstractmethod
    def get_chunks(self, document_id: str) -> list[str] | None:
        """Get the cached chunks of a document."""
        ...

    @abstractmethod
    def list_all(self) -> list[Document]:
        """Every document, newest first."""
        ...

    @abstractmethod
    def list_by_advisor(self, advisor_id: str) -> list[Document]:
        """Documents attached to an advisor, newest first."""
        ...

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Document]:
        """Documents uploaded by a user, newest first."""
        ...

    @abstractmethod
    def list_by_category(
        self, category: DocumentCategory, advisor_id: str | None = None
    ) -> list[Document]:
        """Documents in a category, newest first."""
        ...

    @abstractmethod
    def list_recent(
        self, limit: int = 10, advisor_id: str | None = None, user_id: str | None = None
    ) -> list[Document]:
        """The ``limit`` most recent uploads."""
        ...

    @abstractmethod
    def preview(self, document_id: str, max_length: int = 200) -> str:
        """Leading text of a document, empty if it does not exist."""
        ...

    @abstractmethod
    def search(
        self,
        query: str,
        advisor_id: str | None = None,
        user_id: str | None = None,
        *,
        category: DocumentCategory | None = None,
        confidentiality: ConfidentialityLevel | None = None,
        tags: list[str] | None = None,
    ) -> list[SearchResult]:
        """Keyword search over filtered documents."""
        ...

    @abstractmethod
    def update_metadata(
        self,
        document_id: str,
        *,
        tags: list[str] | None = None,
        category: DocumentCategory | None = None,
        confidentiality: ConfidentialityLevel | None = None,
    ) -> Document | None:
        """Partially update the editable metadata fields."""
        ...

    @abstractmethod
    def delete(self, document_id: str) -> bool:
        """Delete a document and its chunks."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove every document."""
        ...

    @abstractmethod
    def stats(self, advisor_id: str | None = None, user_id: str | None = None) -> DocumentStats:
        """Aggregate statistics over filtered documents."""
        ...

    @abstractmethod
    def export(self, advisor_id: str | None = None) -> dict[str, Any]:
        """Snapshot documents and chunks as plain data."""
        ...

    @abstractmethod
    def import_(self, data: dict[str, Any]) -> int:
        """Load a snapshot produced by ``export``."""
        ...
