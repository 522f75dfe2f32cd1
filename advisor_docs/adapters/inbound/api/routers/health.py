"""Health check endpoint."""

from fastapi import APIRouter, Depends

from ..... import __version__
from .....core.ports import DocumentRepositoryPort
from ..deps import get_repository
from ..models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    repository: DocumentRepositoryPort = Depends(get_repository),
) -> HealthResponse:
    """Basic health check with the in-memory document count."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        documents=len(repository.list_all()),
    )
