"""FastAPI dependency providers backed by the composition root."""

from ....composition import container
from ....core.ports import DocumentRepositoryPort
from ....core.services import ContextAssemblyService, DocumentIngestionService


def get_repository() -> DocumentRepositoryPort:
    return container.get_repository()


def get_ingestion_service() -> DocumentIngestionService:
    return container.get_ingestion_service()


def get_context_service() -> ContextAssemblyService:
    return container.get_context_service()
