"""Outbound adapters: storage and token estimation."""

from .memory_repository import InMemoryDocumentRepository
from .token_estimator import WordRatioTokenEstimator

__all__ = ["InMemoryDocumentRepository", "WordRatioTokenEstimator"]
