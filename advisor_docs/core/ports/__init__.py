"""Port interfaces the core services depend on."""

from .extractor_port import ExtractionResult, TextExtractorPort
from .repository_port import DocumentRepositoryPort
from .tokenizer_port import TokenEstimatorPort

__all__ = [
    "ExtractionResult",
    "TextExtractorPort",
    "DocumentRepositoryPort",
    "TokenEstimatorPort",
]
