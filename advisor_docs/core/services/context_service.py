"""Context assembly: rank an advisor's chunks and pack them into a token budget."""

import logging
import re
from dataclasses import replace

from ...config.settings import Settings
from ..domain import ContextBundle, Document, DocumentReference, ReferenceType, ScoredChunk
from ..ports import DocumentRepositoryPort, TokenEstimatorPort

logger = logging.getLogger(__name__)

REFERENCE_RE = re.compile(r'@(?:"([^"]+)"|(\S+))')
REFERENCE_TRAILING_PUNCTUATION = ".,;:!?)\"'"

DIRECT_REFERENCE_BOOST = 0.5
KEYWORD_WEIGHT = 0.4
SECTION_BOOST = 0.2
EMPHASIS_BOOST = 0.1
MIN_CONVERSATION_WORD_LENGTH = 4

PROMPT_INSTRUCTION = (
    "Reference these documents when relevant to the conversation. "
    "If the user asks about specific documents, provide accurate information "
    "based on the content above."
)


def _conversation_words(conversation_text: str) -> list[str]:
    return [
        word
        for word in conversation_text.lower().split()
        if len(word) >= MIN_CONVERSATION_WORD_LENGTH
    ]


class ContextAssemblyService:
    """Selects document excerpts for a conversation turn.

    Each call is a pure function of the repository contents and the supplied
    conversation; nothing is remembered between calls.
    """

    def __init__(
        self,
        repository: DocumentRepositoryPort,
        token_estimator: TokenEstimatorPort,
        settings: Settings,
    ):
        self.repository = repository
        self.token_estimator = token_estimator
        self.settings = settings

    def get_context(
        self,
        advisor_id: str,
        conversation_history: list[str] | None = None,
        referenced_ids: list[str] | None = None,
        *,
        max_tokens: int | None = None,
    ) -> ContextBundle:
        """Build the token-budgeted context for an advisor's conversation.

        Args:
            advisor_id: Advisor whose documents are considered.
            conversation_history: Conversation messages, oldest first.
            referenced_ids: Ids of documents the user referenced directly.
            max_tokens: Budget override; defaults to ``max_context_tokens``.

        Returns:
            ContextBundle with every advisor document and the selected chunks
            in descending relevance. An advisor without documents yields an
            empty bundle.
        """
        budget = max_tokens if max_tokens is not None else self.settings.max_context_tokens
        documents = self.repository.list_by_advisor(advisor_id)
        if not documents:
            return ContextBundle.empty(budget)

        conversation_text = " ".join(conversation_history or [])
        referenced = set(referenced_ids or [])

        candidates = []
        for document in documents:
            chunks = self.repository.get_chunks(document.id) or []
            for index, chunk in enumerate(chunks):
                score = self.score_chunk(chunk, conversation_text, document.id in referenced)
                if score <= self.settings.min_relevance_score:
                    continue
                candidates.append(
                    ScoredChunk(
                        document_id=document.id,
                        document_name=document.filename,
                        chunk_index=index,
                        content=chunk,
                        score=score,
                        tokens=self.token_estimator.estimate(chunk),
                    )
                )

        # sort() is stable: equal scores keep document and chunk order
        candidates.sort(key=lambda chunk: chunk.score, reverse=True)
        selected = self._pack(candidates, budget)
        total = sum(chunk.tokens for chunk in selected)
        bundle = ContextBundle(
            documents=documents, chunks=selected, total_tokens=total, max_tokens=budget
        )

        logger.debug(
            f"Context for advisor {advisor_id}: {len(selected)}/{len(candidates)} chunks, "
            f"{total}/{budget} tokens ({bundle.remaining_tokens} left)"
        )
        return bundle

    def score_chunk(self, chunk: str, conversation_text: str, is_directly_referenced: bool) -> float:
        """Relevance of a chunk to the conversation, in [0, 1].

        Adds 0.5 for a directly referenced document, up to 0.4 for the share
        of conversation words (four or more characters) found in the chunk,
        0.2 for "summary" or "conclusion" and 0.1 for "key" or "important".
        """
        chunk_lower = chunk.lower()
        score = DIRECT_REFERENCE_BOOST if is_directly_referenced else 0.0

        words = _conversation_words(conversation_text)
        if words:
            matches = sum(1 for word in words if word in chunk_lower)
            score += matches / len(words) * KEYWORD_WEIGHT

        if "summary" in chunk_lower or "conclusion" in chunk_lower:
            score += SECTION_BOOST
        if "key" in chunk_lower or "important" in chunk_lower:
            score += EMPHASIS_BOOST

        return min(score, 1.0)

    def _pack(self, ranked: list[ScoredChunk], budget: int) -> list[ScoredChunk]:
        """Greedy fill that stops at the first chunk that does not fit.

        That chunk is truncated into the remaining budget when more than
        ``min_truncation_tokens`` are left, otherwise dropped.
        """
        selected: list[ScoredChunk] = []
        used = 0
        for chunk in ranked:
            if used + chunk.tokens <= budget:
                selected.append(chunk)
                used += chunk.tokens
                continue

            remaining = budget - used
            if remaining > self.settings.min_truncation_tokens:
                content = self.token_estimator.truncate(chunk.content, remaining)
                tokens = min(self.token_estimator.estimate(content), remaining)
                selected.append(replace(chunk, content=content, tokens=tokens, truncated=True))
            break
        return selected

    def format_for_prompt(self, bundle: ContextBundle) -> str:
        """Render the bundle as a prompt section.

        Documents appear in the order their first excerpt was selected.
        Returns an empty string when no chunk was selected, meaning the
        section should be omitted.
        """
        if bundle.is_empty:
            return ""

        grouped: dict[str, list[ScoredChunk]] = {}
        for chunk in bundle.chunks:
            grouped.setdefault(chunk.document_id, []).append(chunk)
        documents = {document.id: document for document in bundle.documents}

        parts = [
            "\n\n--- AVAILABLE DOCUMENTS ---\n",
            f"You have access to {len(bundle.documents)} documents in your knowledge base.\n\n",
        ]
        for document_id, chunks in grouped.items():
            document = documents.get(document_id)
            if document is None:
                continue
            parts.append(f"## {document.filename}\n")
            parts.append(
                f"Category: {document.category.value} | "
                f"Confidentiality: {document.confidentiality.value}\n\n"
            )
            for number, chunk in enumerate(chunks, start=1):
                percent = int(chunk.score * 100 + 0.5)
                parts.append(f"### Excerpt {number} (Relevance: {percent}%)\n")
                parts.append(f"{chunk.content}\n\n")

        parts.append(f"--- END DOCUMENTS ({bundle.total_tokens}/{bundle.max_tokens} tokens) ---\n\n")
        parts.append(f"{PROMPT_INSTRUCTION}\n\n")
        return "".join(parts)

    def parse_references(self, message: str, documents: list[Document]) -> list[DocumentReference]:
        """Resolve ``@name`` and ``@"quoted name"`` mentions to documents.

        A mention matches the first document whose filename or title contains
        it, case-insensitively. Unmatched mentions are ignored and each
        document is referenced at most once.
        """
        references = []
        seen: set[str] = set()
        for match in REFERENCE_RE.finditer(message):
            quoted, bare = match.groups()
            name = quoted if quoted is not None else bare.rstrip(REFERENCE_TRAILING_PUNCTUATION)
            needle = name.strip().lower()
            if not needle:
                continue

            document = next(
                (
                    doc
                    for doc in documents
                    if needle in doc.filename.lower() or needle in doc.metadata.title.lower()
                ),
                None,
            )
            if document is None or document.id in seen:
                continue
            seen.add(document.id)
            references.append(
                DocumentReference(id=document.id, name=name, type=ReferenceType.DIRECT, document=document)
            )
        return references

    def suggest_relevant(
        self, conversation_text: str, documents: list[Document], limit: int = 3
    ) -> list[DocumentReference]:
        """Documents whose average chunk relevance clears the suggestion threshold."""
        scored = []
        for document in documents:
            chunks = self.repository.get_chunks(document.id) or [document.extracted_text]
            average = sum(
                self.score_chunk(chunk, conversation_text, False) for chunk in chunks
            ) / len(chunks)
            if average > self.settings.suggestion_threshold:
                scored.append((average, document))

        scored.sort(key=lambda item: item[0], reverse=True)
        return [
            DocumentReference(
                id=document.id,
                name=document.filename,
                type=ReferenceType.SUGGESTED,
                document=document,
                score=average,
            )
            for average, document in scored[:limit]
        ]

    def get_document(self, document_id: str) -> Document | None:
        return self.repository.get(document_id)

    def preview(self, document_id: str, max_length: int = 300) -> str:
        return self.repository.preview(document_id, max_length)
