"""Context assembly models: scored chunks, bundles, references."""

from dataclasses import dataclass, field
from enum import Enum

from .document import Document


class ReferenceType(Enum):
    """How a document came to be attached to a conversation.

    Attributes:
        DIRECT: The user named it with an ``@`` reference.
        SUGGESTED: Its content scored above the suggestion threshold.
    """

    DIRECT = "direct"
    SUGGESTED = "suggested"


@dataclass
class ScoredChunk:
    """A chunk joined with its parent document and relevance.

    Attributes:
        document_id: Id of the parent document.
        document_name: Sanitized filename of the parent document.
        chunk_index: Position of the chunk in the document's chunk list.
        content: Chunk text, possibly truncated at the budget boundary.
        score: Relevance in [0, 1].
        tokens: Estimated token cost of ``content``.
        truncated: True for the single chunk cut to fit the budget.
    """

    document_id: str
    document_name: str
    chunk_index: int
    content: str
    score: float
    tokens: int
    truncated: bool = False


@dataclass
class ContextBundle:
    """Token-budgeted context selected for one conversation turn."""

    documents: list[Document]
    chunks: list[ScoredChunk]
    total_tokens: int
    max_tokens: int

    @property
    def is_empty(self) -> bool:
        """True when nothing was selected."""
        return not self.chunks

    @property
    def remaining_tokens(self) -> int:
        """Budget left after the selected chunks."""
        return self.max_tokens - self.total_tokens

    @classmethod
    def empty(cls, max_tokens: int) -> "ContextBundle":
        """Bundle for an advisor with nothing relevant to offer."""
        return cls(documents=[], chunks=[], total_tokens=0, max_tokens=max_tokens)


@dataclass
class DocumentReference:
    """A document attached to a conversation by name or by suggestion."""

    id: str
    name: str
    type: ReferenceType
    document: Document
    score: float | None = field(default=None)
