"""Pydantic models for API requests and responses."""

from datetime import datetime

from pydantic import BaseModel, Field

from ....core.domain import (
    ConfidentialityLevel,
    Document,
    DocumentCategory,
    DocumentReference,
    DocumentStats,
    ScoredChunk,
    SearchResult,
)


class DocumentMetadataResponse(BaseModel):
    """Structural metadata of a stored document."""

    title: str
    word_count: int
    size: int
    doc_type: str = Field(..., description="Inferred format (pdf, docx, xlsx, pptx, ppt, txt, md)")
    pages: int | None = None
    slides: int | None = None
    sheets: int | None = None
    author: str | None = None
    extraction_warnings: list[str] = Field(default_factory=list)
    degraded: bool = Field(
        False, description="True when extraction failed and placeholder text was stored"
    )


class DocumentResponse(BaseModel):
    """A stored document without its full text."""

    id: str
    original_name: str
    filename: str
    file_path: str
    content_type: str
    size: int
    advisor_id: str
    user_id: str
    metadata: DocumentMetadataResponse
    tags: list[str]
    category: DocumentCategory
    confidentiality: ConfidentialityLevel
    uploaded_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, document: Document) -> "DocumentResponse":
        metadata = document.metadata
        return cls(
            id=document.id,
            original_name=document.original_name,
            filename=document.filename,
            file_path=document.file_path,
            content_type=document.content_type,
            size=document.size,
            advisor_id=document.advisor_id,
            user_id=document.user_id,
            metadata=DocumentMetadataResponse(
                title=metadata.title,
                word_count=metadata.word_count,
                size=metadata.size,
                doc_type=metadata.doc_type.value,
                pages=metadata.pages,
                slides=metadata.slides,
                sheets=metadata.sheets,
                author=metadata.author,
                extraction_warnings=metadata.extraction_warnings,
                degraded=metadata.degraded,
            ),
            tags=document.tags,
            category=document.category,
            confidentiality=document.confidentiality,
            uploaded_at=document.uploaded_at,
            updated_at=document.updated_at,
        )


class DocumentListResponse(BaseModel):
    documents: list[DocumentResponse]
    count: int


class PreviewResponse(BaseModel):
    id: str
    preview: str


class DeleteResponse(BaseModel):
    id: str
    deleted: bool


class UpdateDocumentRequest(BaseModel):
    """Partial metadata update; omitted fields are left unchanged."""

    tags: list[str] | None = None
    category: DocumentCategory | None = None
    confidentiality: ConfidentialityLevel | None = None


class SearchResultResponse(BaseModel):
    document: DocumentResponse
    score: float
    matched_chunks: list[str]

    @classmethod
    def from_domain(cls, result: SearchResult) -> "SearchResultResponse":
        return cls(
            document=DocumentResponse.from_domain(result.document),
            score=result.score,
            matched_chunks=result.matched_chunks,
        )


class SearchResponse(BaseModel):
    query: str
    results: list[SearchResultResponse]


class StatsResponse(BaseModel):
    """Aggregate figures; ``recent_uploads`` counts the last 7 days."""

    total_count: int
    total_size_bytes: int
    total_size: str = Field(..., description="Human readable total size")
    by_category: dict[str, int]
    by_confidentiality: dict[str, int]
    recent_uploads: int

    @classmethod
    def from_domain(cls, stats: DocumentStats, total_size: str) -> "StatsResponse":
        return cls(
            total_count=stats.total_count,
            total_size_bytes=stats.total_size_bytes,
            total_size=total_size,
            by_category={category.value: count for category, count in stats.by_category.items()},
            by_confidentiality={
                level.value: count for level, count in stats.by_confidentiality.items()
            },
            recent_uploads=stats.recent_uploads,
        )


class ContextRequest(BaseModel):
    """Request model for assembling document context."""

    advisor_id: str = Field(..., min_length=1)
    conversation_history: list[str] = Field(
        default_factory=list, description="Conversation messages, oldest first"
    )
    referenced_ids: list[str] = Field(
        default_factory=list, description="Ids of documents referenced directly"
    )
    message: str | None = Field(
        None,
        description="Latest user message; @name mentions in it count as direct references",
        json_schema_extra={"example": 'What does @"Q3 Board Report" say about churn?'},
    )
    max_tokens: int | None = Field(None, gt=0, description="Token budget override")
    suggestion_limit: int = Field(3, ge=0, le=20)


class ScoredChunkResponse(BaseModel):
    document_id: str
    document_name: str
    chunk_index: int
    content: str
    score: float = Field(..., ge=0, le=1)
    tokens: int
    truncated: bool

    @classmethod
    def from_domain(cls, chunk: ScoredChunk) -> "ScoredChunkResponse":
        return cls(
            document_id=chunk.document_id,
            document_name=chunk.document_name,
            chunk_index=chunk.chunk_index,
            content=chunk.content,
            score=chunk.score,
            tokens=chunk.tokens,
            truncated=chunk.truncated,
        )


class ReferenceResponse(BaseModel):
    id: str
    name: str
    type: str
    score: float | None = None

    @classmethod
    def from_domain(cls, reference: DocumentReference) -> "ReferenceResponse":
        return cls(
            id=reference.id,
            name=reference.name,
            type=reference.type.value,
            score=reference.score,
        )


class ContextResponse(BaseModel):
    """Selected excerpts plus the rendered prompt section."""

    advisor_id: str
    document_count: int
    chunks: list[ScoredChunkResponse]
    total_tokens: int
    max_tokens: int
    formatted: str = Field(..., description="Prompt section; empty when nothing was selected")
    references: list[ReferenceResponse] = Field(default_factory=list)
    suggestions: list[ReferenceResponse] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    documents: int = Field(..., description="Documents currently held in memory")


class ErrorDetail(BaseModel):
    """Structured error detail information."""

    type: str = Field(..., description="Exception type name")
    code: str = Field(..., description="Error code (e.g., DOC_VAL_002)")
    message: str = Field(..., description="Human-readable error message")


class ErrorResponse(BaseModel):
    """Body returned for every handled error."""

    error: ErrorDetail
    context: dict | None = None
