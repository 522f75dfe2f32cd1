"""In-memory document repository.

Holds documents and their chunk caches for the lifetime of the process.
One instance is shared by every caller (see ``composition.container``); all
access goes through a single re-entrant lock.
"""

import copy
import logging
import re
import secrets
import string
import threading
import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from ...common.utils import sanitize_filename
from ...core.domain import (
    ConfidentialityLevel,
    Document,
    DocumentCategory,
    DocumentMetadata,
    DocumentStats,
    DocumentType,
    ProcessedDocument,
    SearchResult,
    UploadedFile,
)
from ...core.domain.exceptions import InvalidSnapshotError
from ...core.ports import DocumentRepositoryPort

logger = logging.getLogger(__name__)

ID_ALPHABET = string.digits + string.ascii_lowercase
ID_SUFFIX_LENGTH = 9
FILENAME_MATCH_BONUS = 5
MAX_MATCHED_CHUNKS = 3
MIN_QUERY_TERM_LENGTH = 3
RECENT_WINDOW = timedelta(days=7)
SNAPSHOT_VERSION = 1


def _utcnow() -> datetime:
    return datetime.now(UTC)


class InMemoryDocumentRepository(DocumentRepositoryPort):
    """Thread-safe dictionary-backed DocumentRepositoryPort.

    Args:
        clock: Returns the current time; injectable so tests can control
            upload timestamps.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._clock = clock
        self._lock = threading.RLock()
        self._documents: dict[str, Document] = {}
        self._chunks: dict[str, list[str]] = {}
        # Insertion order breaks ties between identical timestamps
        self._sequence: dict[str, int] = {}
        self._next_sequence = 0
        self._issued_ids: set[str] = set()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

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
        """Create a document from a processed upload.

        The chunk list is cached as-is and reused by search and context
        assembly; it is never recomputed from the stored text.
        """
        with self._lock:
            document_id = self._generate_id()
            timestamp = self._clock()
            document = Document(
                id=document_id,
                original_name=file.filename,
                filename=sanitize_filename(file.filename),
                file_path=f"documents/{user_id}/{advisor_id}/{document_id}/{file.filename}",
                content_type=file.content_type or "",
                size=file.size,
                advisor_id=advisor_id,
                user_id=user_id,
                extracted_text=processed.text,
                metadata=copy.deepcopy(processed.metadata),
                tags=list(tags or []),
                category=category or DocumentCategory.OTHER,
                confidentiality=confidentiality or ConfidentialityLevel.INTERNAL,
                uploaded_at=timestamp,
                updated_at=timestamp,
            )
            chunks = list(processed.chunks) or [processed.text]
            self._put(document, chunks)

        logger.info(f"Stored {document.filename} as {document_id} for advisor {advisor_id}")
        return copy.deepcopy(document)

    def update_metadata(
        self,
        document_id: str,
        *,
        tags: list[str] | None = None,
        category: DocumentCategory | None = None,
        confidentiality: ConfidentialityLevel | None = None,
    ) -> Document | None:
        """Apply the fields that are not None and refresh ``updated_at``."""
        with self._lock:
            document = self._documents.get(document_id)
            if document is None:
                return None
            if tags is not None:
                document.tags = list(tags)
            if category is not None:
                document.category = category
            if confidentiality is not None:
                document.confidentiality = confidentiality
            document.updated_at = self._clock()
            return copy.deepcopy(document)

    def delete(self, document_id: str) -> bool:
        with self._lock:
            document = self._documents.pop(document_id, None)
            self._chunks.pop(document_id, None)
            self._sequence.pop(document_id, None)

        if document is None:
            return False
        logger.info(f"Deleted document {document_id}")
        return True

    def clear(self) -> None:
        """Drop every document. Issued ids stay reserved."""
        with self._lock:
            self._documents.clear()
            self._chunks.clear()
            self._sequence.clear()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, document_id: str) -> Document | None:
        with self._lock:
            document = self._documents.get(document_id)
            return copy.deepcopy(document) if document else None

    def get_chunks(self, document_id: str) -> list[str] | None:
        with self._lock:
            chunks = self._chunks.get(document_id)
            return list(chunks) if chunks is not None else None

    def list_all(self) -> list[Document]:
        with self._lock:
            return self._newest_first(self._documents.values())

    def list_by_advisor(self, advisor_id: str) -> list[Document]:
        with self._lock:
            return self._newest_first(
                document for document in self._documents.values() if document.advisor_id == advisor_id
            )

    def list_by_user(self, user_id: str) -> list[Document]:
        with self._lock:
            return self._newest_first(
                document for document in self._documents.values() if document.user_id == user_id
            )

    def list_by_category(
        self, category: DocumentCategory, advisor_id: str | None = None
    ) -> list[Document]:
        with self._lock:
            return self._newest_first(self._filter(advisor_id=advisor_id, category=category))

    def list_recent(
        self, limit: int = 10, advisor_id: str | None = None, user_id: str | None = None
    ) -> list[Document]:
        with self._lock:
            return self._newest_first(self._filter(advisor_id=advisor_id, user_id=user_id))[:limit]

    def preview(self, document_id: str, max_length: int = 200) -> str:
        """First ``max_length`` characters of the text, ``...`` if cut."""
        with self._lock:
            document = self._documents.get(document_id)
            if document is None:
                return ""
            text = document.extracted_text
        return text[:max_length] + "..." if len(text) > max_length else text

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
        """Score filtered documents against the query terms.

        Terms are the query's whitespace tokens longer than two characters.
        A document scores one point per case-insensitive occurrence of each
        term in its filename, text, tags and title, plus a bonus when the
        filename contains the whole query. Zero-score documents are left out
        and results are ordered by score, highest first.
        """
        needle = query.strip().lower()
        if not needle:
            return []
        terms = [term for term in needle.split() if len(term) >= MIN_QUERY_TERM_LENGTH]
        patterns = [re.compile(re.escape(term)) for term in terms]

        results = []
        with self._lock:
            candidates = self._newest_first(
                self._filter(
                    advisor_id=advisor_id,
                    user_id=user_id,
                    category=category,
                    confidentiality=confidentiality,
                    tags=tags,
                )
            )
            for document in candidates:
                searchable = " ".join(
                    [
                        document.filename,
                        document.extracted_text,
                        " ".join(document.tags),
                        document.metadata.title,
                    ]
                ).lower()
                score = sum(len(pattern.findall(searchable)) for pattern in patterns)
                if needle in document.filename.lower():
                    score += FILENAME_MATCH_BONUS
                if score <= 0:
                    continue

                matched = [
                    chunk
                    for chunk in self._chunks.get(document.id, [])
                    if any(term in chunk.lower() for term in terms)
                ]
                results.append(
                    SearchResult(
                        document=document,
                        score=float(score),
                        matched_chunks=matched[:MAX_MATCHED_CHUNKS],
                    )
                )

        results.sort(key=lambda result: result.score, reverse=True)
        return results

    def stats(self, advisor_id: str | None = None, user_id: str | None = None) -> DocumentStats:
        with self._lock:
            documents = list(self._filter(advisor_id=advisor_id, user_id=user_id))
            cutoff = self._clock() - RECENT_WINDOW

        by_category: dict[DocumentCategory, int] = {}
        by_confidentiality: dict[ConfidentialityLevel, int] = {}
        for document in documents:
            by_category[document.category] = by_category.get(document.category, 0) + 1
            by_confidentiality[document.confidentiality] = (
                by_confidentiality.get(document.confidentiality, 0) + 1
            )

        return DocumentStats(
            total_count=len(documents),
            total_size_bytes=sum(document.size for document in documents),
            by_category=by_category,
            by_confidentiality=by_confidentiality,
            recent_uploads=sum(1 for document in documents if document.uploaded_at > cutoff),
        )

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def export(self, advisor_id: str | None = None) -> dict[str, Any]:
        """Plain-data snapshot of documents and chunks, oldest first."""
        with self._lock:
            documents = list(reversed(self._newest_first(self._filter(advisor_id=advisor_id))))
            return {
                "version": SNAPSHOT_VERSION,
                "documents": [_document_to_dict(document) for document in documents],
                "chunks": {document.id: list(self._chunks[document.id]) for document in documents},
            }

    def import_(self, data: dict[str, Any]) -> int:
        """Load a snapshot produced by ``export``.

        Documents with ids already present are replaced. The whole snapshot
        is parsed before anything is written.

        Returns:
            Number of documents imported.

        Raises:
            InvalidSnapshotError: If the snapshot is malformed.
        """
        try:
            raw_documents = data["documents"]
            raw_chunks = data.get("chunks", {})
            parsed = []
            for raw in raw_documents:
                document = _document_from_dict(raw)
                chunks = [str(chunk) for chunk in raw_chunks.get(document.id, [])]
                parsed.append((document, chunks or [document.extracted_text]))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise InvalidSnapshotError(f"Malformed snapshot: {e}", cause=e)

        with self._lock:
            for document, chunks in parsed:
                self._issued_ids.add(document.id)
                self._put(document, chunks)

        logger.info(f"Imported {len(parsed)} documents")
        return len(parsed)

    # ------------------------------------------------------------------
    # Internals (caller holds the lock)
    # ------------------------------------------------------------------

    def _put(self, document: Document, chunks: list[str]) -> None:
        self._documents[document.id] = document
        self._chunks[document.id] = chunks
        self._sequence[document.id] = self._next_sequence
        self._next_sequence += 1

    def _generate_id(self) -> str:
        while True:
            suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
            document_id = f"doc-{time.time_ns() // 1_000_000}-{suffix}"
            if document_id not in self._issued_ids:
                self._issued_ids.add(document_id)
                return document_id

    def _filter(
        self,
        advisor_id: str | None = None,
        user_id: str | None = None,
        category: DocumentCategory | None = None,
        confidentiality: ConfidentialityLevel | None = None,
        tags: list[str] | None = None,
    ):
        for document in self._documents.values():
            if advisor_id and document.advisor_id != advisor_id:
                continue
            if user_id and document.user_id != user_id:
                continue
            if category and document.category != category:
                continue
            if confidentiality and document.confidentiality != confidentiality:
                continue
            if tags and not any(tag in document.tags for tag in tags):
                continue
            yield document

    def _newest_first(self, documents) -> list[Document]:
        ordered = sorted(
            documents,
            key=lambda document: (document.uploaded_at, self._sequence[document.id]),
            reverse=True,
        )
        return [copy.deepcopy(document) for document in ordered]


def _document_to_dict(document: Document) -> dict[str, Any]:
    metadata = document.metadata
    return {
        "id": document.id,
        "original_name": document.original_name,
        "filename": document.filename,
        "file_path": document.file_path,
        "content_type": document.content_type,
        "size": document.size,
        "advisor_id": document.advisor_id,
        "user_id": document.user_id,
        "extracted_text": document.extracted_text,
        "metadata": {
            "title": metadata.title,
            "word_count": metadata.word_count,
            "size": metadata.size,
            "doc_type": metadata.doc_type.value,
            "pages": metadata.pages,
            "slides": metadata.slides,
            "sheets": metadata.sheets,
            "author": metadata.author,
            "extraction_warnings": list(metadata.extraction_warnings),
            "degraded": metadata.degraded,
        },
        "tags": list(document.tags),
        "category": document.category.value,
        "confidentiality": document.confidentiality.value,
        "uploaded_at": document.uploaded_at.isoformat(),
        "updated_at": document.updated_at.isoformat(),
    }


def _document_from_dict(raw: dict[str, Any]) -> Document:
    meta = raw["metadata"]
    return Document(
        id=str(raw["id"]),
        original_name=raw["original_name"],
        filename=raw["filename"],
        file_path=raw["file_path"],
        content_type=raw.get("content_type", ""),
        size=int(raw["size"]),
        advisor_id=raw["advisor_id"],
        user_id=raw["user_id"],
        extracted_text=raw["extracted_text"],
        metadata=DocumentMetadata(
            title=meta["title"],
            word_count=int(meta["word_count"]),
            size=int(meta["size"]),
            doc_type=DocumentType(meta["doc_type"]),
            pages=meta.get("pages"),
            slides=meta.get("slides"),
            sheets=meta.get("sheets"),
            author=meta.get("author"),
            extraction_warnings=list(meta.get("extraction_warnings", [])),
            degraded=bool(meta.get("degraded", False)),
        ),
        tags=list(raw.get("tags", [])),
        category=DocumentCategory(raw["category"]),
        confidentiality=ConfidentialityLevel(raw["confidentiality"]),
        uploaded_at=_parse_timestamp(raw["uploaded_at"]),
        updated_at=_parse_timestamp(raw["updated_at"]),
    )


def _parse_timestamp(value: str) -> datetime:
    """ISO timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
