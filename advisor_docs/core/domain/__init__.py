"""Domain models for the advisor document engine.

- document: uploads, metadata, stored documents, search results, stats
- context: scored chunks, context bundles, document references

All models are re-exported here:

    from advisor_docs.core.domain import Document, ContextBundle
"""

from .context import ContextBundle, DocumentReference, ReferenceType, ScoredChunk
from .document import (
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

__all__ = [
    # Document models
    "DocumentType",
    "DocumentCategory",
    "ConfidentialityLevel",
    "UploadedFile",
    "DocumentMetadata",
    "ProcessedDocument",
    "Document",
    "SearchResult",
    "DocumentStats",
    # Context models
    "ReferenceType",
    "ScoredChunk",
    "ContextBundle",
    "DocumentReference",
]
