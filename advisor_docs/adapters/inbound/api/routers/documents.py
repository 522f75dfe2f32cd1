"""Document endpoints: upload, listing, search, stats and metadata updates."""

import logging

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from .....common.utils import format_file_size
from .....core.domain import ConfidentialityLevel, DocumentCategory, UploadedFile
from .....core.domain.exceptions import DocumentNotFoundError, EmptyQueryError
from .....core.ports import DocumentRepositoryPort
from .....core.services import DocumentIngestionService
from ..deps import get_ingestion_service, get_repository
from ..models import (
    DeleteResponse,
    DocumentListResponse,
    DocumentResponse,
    ErrorResponse,
    PreviewResponse,
    SearchResponse,
    SearchResultResponse,
    StatsResponse,
    UpdateDocumentRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/documents", tags=["documents"])


def _parse_tags(raw: str) -> list[str]:
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


@router.post(
    "",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        413: {"model": ErrorResponse, "description": "File too large"},
        415: {"model": ErrorResponse, "description": "Unsupported file type"},
    },
)
async def upload_document(
    file: UploadFile = File(...),
    advisor_id: str = Form(...),
    user_id: str = Form(...),
    category: DocumentCategory | None = Form(None),
    confidentiality: ConfidentialityLevel | None = Form(None),
    tags: str = Form("", description="Comma separated tags"),
    ingestion: DocumentIngestionService = Depends(get_ingestion_service),
) -> DocumentResponse:
    """Upload a file, extract its text and store it for an advisor.

    Files that fail extraction are still stored with placeholder text and
    ``metadata.degraded`` set; only validation rejects an upload.
    """
    content = await file.read()
    upload = UploadedFile(
        filename=file.filename or "upload",
        content=content,
        content_type=file.content_type,
    )
    document = await ingestion.ingest(
        upload,
        advisor_id,
        user_id,
        category=category,
        confidentiality=confidentiality,
        tags=_parse_tags(tags),
    )
    if document.metadata.degraded:
        logger.warning(f"Stored {document.filename} with degraded text")
    return DocumentResponse.from_domain(document)


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    advisor_id: str | None = None,
    user_id: str | None = None,
    category: DocumentCategory | None = None,
    limit: int | None = Query(None, gt=0),
    repository: DocumentRepositoryPort = Depends(get_repository),
) -> DocumentListResponse:
    """List documents newest first, by advisor, user or category."""
    if category is not None:
        documents = repository.list_by_category(category, advisor_id)
        if user_id:
            documents = [document for document in documents if document.user_id == user_id]
    elif advisor_id:
        documents = repository.list_by_advisor(advisor_id)
        if user_id:
            documents = [document for document in documents if document.user_id == user_id]
    elif user_id:
        documents = repository.list_by_user(user_id)
    else:
        documents = repository.list_all()

    if limit is not None:
        documents = documents[:limit]
    return DocumentListResponse(
        documents=[DocumentResponse.from_domain(document) for document in documents],
        count=len(documents),
    )


@router.get("/search", response_model=SearchResponse)
async def search_documents(
    q: str = Query(..., description="Free text query"),
    advisor_id: str | None = None,
    user_id: str | None = None,
    category: DocumentCategory | None = None,
    confidentiality: ConfidentialityLevel | None = None,
    tags: list[str] | None = Query(None),
    repository: DocumentRepositoryPort = Depends(get_repository),
) -> SearchResponse:
    """Keyword search; results carry up to three matching chunks."""
    if not q.strip():
        raise EmptyQueryError("Search query cannot be empty")

    results = repository.search(
        q,
        advisor_id,
        user_id,
        category=category,
        confidentiality=confidentiality,
        tags=tags,
    )
    return SearchResponse(
        query=q,
        results=[SearchResultResponse.from_domain(result) for result in results],
    )


@router.get("/stats", response_model=StatsResponse)
async def document_stats(
    advisor_id: str | None = None,
    user_id: str | None = None,
    repository: DocumentRepositoryPort = Depends(get_repository),
) -> StatsResponse:
    stats = repository.stats(advisor_id, user_id)
    return StatsResponse.from_domain(stats, format_file_size(stats.total_size_bytes))


@router.get(
    "/{document_id}",
    response_model=DocumentResponse,
    responses={404: {"model": ErrorResponse, "description": "Document not found"}},
)
async def get_document(
    document_id: str,
    repository: DocumentRepositoryPort = Depends(get_repository),
) -> DocumentResponse:
    document = repository.get(document_id)
    if document is None:
        raise DocumentNotFoundError(f"Document {document_id} not found", context={"id": document_id})
    return DocumentResponse.from_domain(document)


@router.get(
    "/{document_id}/preview",
    response_model=PreviewResponse,
    responses={404: {"model": ErrorResponse, "description": "Document not found"}},
)
async def preview_document(
    document_id: str,
    max_length: int = Query(300, gt=0),
    repository: DocumentRepositoryPort = Depends(get_repository),
) -> PreviewResponse:
    if repository.get(document_id) is None:
        raise DocumentNotFoundError(f"Document {document_id} not found", context={"id": document_id})
    return PreviewResponse(id=document_id, preview=repository.preview(document_id, max_length))


@router.patch(
    "/{document_id}",
    response_model=DocumentResponse,
    responses={404: {"model": ErrorResponse, "description": "Document not found"}},
)
async def update_document(
    document_id: str,
    request: UpdateDocumentRequest,
    repository: DocumentRepositoryPort = Depends(get_repository),
) -> DocumentResponse:
    """Update tags, category or confidentiality."""
    document = repository.update_metadata(
        document_id,
        tags=request.tags,
        category=request.category,
        confidentiality=request.confidentiality,
    )
    if document is None:
        raise DocumentNotFoundError(f"Document {document_id} not found", context={"id": document_id})
    return DocumentResponse.from_domain(document)


@router.delete(
    "/{document_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse, "description": "Document not found"}},
)
async def delete_document(
    document_id: str,
    repository: DocumentRepositoryPort = Depends(get_repository),
) -> DeleteResponse:
    if not repository.delete(document_id):
        raise DocumentNotFoundError(f"Document {document_id} not found", context={"id": document_id})
    return DeleteResponse(id=document_id, deleted=True)
