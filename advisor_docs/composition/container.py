"""Composition root wiring adapters to the core services.

The repository getter is cached, so every caller in the process shares one
store; tests call ``reset_container`` to start from an empty one.
"""

import logging
from functools import lru_cache

from ..adapters.extractors import get_default_extractors
from ..adapters.outbound.memory_repository import InMemoryDocumentRepository
from ..adapters.outbound.token_estimator import WordRatioTokenEstimator
from ..config.settings import Settings, settings
from ..core.services.context_service import ContextAssemblyService
from ..core.services.ingestion import DocumentIngestionService
from ..core.services.normalizer import DocumentNormalizer

logger = logging.getLogger(__name__)


def get_settings() -> Settings:
    return settings


@lru_cache
def get_repository() -> InMemoryDocumentRepository:
    logger.info("Initializing InMemoryDocumentRepository (composition root)...")
    return InMemoryDocumentRepository()


@lru_cache
def get_token_estimator() -> WordRatioTokenEstimator:
    return WordRatioTokenEstimator()


@lru_cache
def get_normalizer() -> DocumentNormalizer:
    logger.info("Initializing DocumentNormalizer...")
    return DocumentNormalizer(get_default_extractors(), get_settings())


@lru_cache
def get_ingestion_service() -> DocumentIngestionService:
    return DocumentIngestionService(get_normalizer(), get_repository())


@lru_cache
def get_context_service() -> ContextAssemblyService:
    logger.info("Initializing ContextAssemblyService...")
    return ContextAssemblyService(get_repository(), get_token_estimator(), get_settings())


def reset_container() -> None:
    """Forget every cached component."""
    for getter in (
        get_repository,
        get_token_estimator,
        get_normalizer,
        get_ingestion_service,
        get_context_service,
    ):
        getter.cache_clear()
