"""Context endpoint: the prompt section handed to the conversation orchestrator."""

import logging

from fastapi import APIRouter, Depends

from .....core.services import ContextAssemblyService
from ..deps import get_context_service
from ..models import ContextRequest, ContextResponse, ReferenceResponse, ScoredChunkResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["context"])


@router.post("/context", response_model=ContextResponse)
async def assemble_context(
    request: ContextRequest,
    service: ContextAssemblyService = Depends(get_context_service),
) -> ContextResponse:
    """Select and render document excerpts for the next model prompt.

    ``@name`` mentions in ``message`` are resolved against the advisor's
    documents and treated like ``referenced_ids``. Suggestions are computed
    over the whole conversation including the message.
    """
    history = list(request.conversation_history)
    if request.message:
        history.append(request.message)

    documents = service.repository.list_by_advisor(request.advisor_id)
    references = service.parse_references(request.message, documents) if request.message else []
    referenced_ids = list(dict.fromkeys(request.referenced_ids + [ref.id for ref in references]))

    bundle = service.get_context(
        request.advisor_id,
        history,
        referenced_ids,
        max_tokens=request.max_tokens,
    )
    suggestions = (
        service.suggest_relevant(" ".join(history), documents, request.suggestion_limit)
        if history and request.suggestion_limit
        else []
    )

    logger.info(
        f"Assembled context for advisor {request.advisor_id}: "
        f"{len(bundle.chunks)} chunks, {bundle.total_tokens}/{bundle.max_tokens} tokens"
    )
    return ContextResponse(
        advisor_id=request.advisor_id,
        document_count=len(bundle.documents),
        chunks=[ScoredChunkResponse.from_domain(chunk) for chunk in bundle.chunks],
        total_tokens=bundle.total_tokens,
        max_tokens=bundle.max_tokens,
        formatted=service.format_for_prompt(bundle),
        references=[ReferenceResponse.from_domain(ref) for ref in references],
        suggestions=[ReferenceResponse.from_domain(ref) for ref in suggestions],
    )
