"""Core services: normalization, ingestion and context assembly."""

from .chunking import chunk_text
from .context_service import ContextAssemblyService
from .ingestion import DocumentIngestionService, IngestionOutcome
from .normalizer import DocumentNormalizer

__all__ = [
    "chunk_text",
    "ContextAssemblyService",
    "DocumentIngestionService",
    "IngestionOutcome",
    "DocumentNormalizer",
]
