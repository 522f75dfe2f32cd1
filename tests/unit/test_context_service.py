"""Unit tests for context assembly: scoring, packing, formatting and references."""

import asyncio
import re

import pytest

from advisor_docs.common.utils import strip_extension
from advisor_docs.core.domain import ReferenceType
from advisor_docs.core.services.context_service import PROMPT_INSTRUCTION

pytestmark = pytest.mark.unit


@pytest.fixture
def store(repository, processed_factory, upload_factory):
    """Store a document whose chunks are given explicitly."""

    def _store(filename, chunks, advisor="adv-1"):
        text = " ".join(chunks)
        processed = processed_factory(text, chunks=chunks, title=strip_extension(filename))
        return repository.store(upload_factory(filename, text), processed, advisor, "user-1")

    return _store


def _words(*leading: str, filler: str = "alpha", total: int) -> str:
    return " ".join(list(leading) + [filler] * (total - len(leading)))


class TestScoreChunk:
    def test_unrelated_chunk_scores_zero(self, context_service):
        assert context_service.score_chunk("Plain text here", "", False) == 0.0

    def test_direct_reference_boost(self, context_service):
        assert context_service.score_chunk("Plain text", "", True) == pytest.approx(0.5)

    def test_keyword_share(self, context_service):
        score = context_service.score_chunk("Revenue rose", "revenue growth plan", False)
        assert score == pytest.approx(0.4 / 3)

    def test_short_conversation_words_are_ignored(self, context_service):
        assert context_service.score_chunk("the cat sat", "the cat sat", False) == 0.0

    def test_section_and_emphasis_boosts(self, context_service):
        assert context_service.score_chunk("Summary of key points", "", False) == pytest.approx(0.3)
        assert context_service.score_chunk("In conclusion", "", False) == pytest.approx(0.2)
        assert context_service.score_chunk("An important note", "", False) == pytest.approx(0.1)

    def test_score_is_capped_at_one(self, context_service):
        chunk = "Summary: key revenue figures"
        assert context_service.score_chunk(chunk, "revenue figures", True) == 1.0


class TestGetContext:
    def test_advisor_without_documents_gets_empty_bundle(self, context_service):
        bundle = context_service.get_context("adv-unknown", ["anything at all"])

        assert bundle.is_empty
        assert bundle.documents == []
        assert bundle.total_tokens == 0
        assert bundle.max_tokens == 8000
        assert context_service.format_for_prompt(bundle) == ""

    def test_chunks_at_or_below_threshold_are_skipped(self, context_service, store):
        store("notes.txt", ["The key figure.", "Quarterly summary.", "Nothing here."])

        bundle = context_service.get_context("adv-1")

        assert [chunk.content for chunk in bundle.chunks] == ["Quarterly summary."]
        assert bundle.chunks[0].chunk_index == 1

    def test_documents_lists_every_advisor_document(self, context_service, store, clock):
        store("a.txt", ["Nothing relevant."])
        clock.advance(minutes=1)
        store("b.txt", ["Summary of results."])
        store("other.txt", ["Summary elsewhere."], advisor="adv-2")

        bundle = context_service.get_context("adv-1")

        assert [document.filename for document in bundle.documents] == ["b.txt", "a.txt"]
        assert [chunk.document_name for chunk in bundle.chunks] == ["b.txt"]

    def test_chunks_are_ordered_by_score(self, context_service, store):
        store("a.txt", ["Some conclusion.", "Summary with key points.", "Important aside."])

        bundle = context_service.get_context("adv-1")

        assert [chunk.chunk_index for chunk in bundle.chunks] == [1, 0]
        assert bundle.chunks[0].score > bundle.chunks[1].score

    def test_equal_scores_keep_source_order(self, context_service, store):
        store("a.txt", ["First summary.", "Second summary.", "Third summary."])

        bundle = context_service.get_context("adv-1")

        assert [chunk.chunk_index for chunk in bundle.chunks] == [0, 1, 2]

    def test_direct_reference_selects_otherwise_irrelevant_chunks(self, context_service, store):
        document = store("a.txt", ["Nothing special here."])

        assert context_service.get_context("adv-1").is_empty
        bundle = context_service.get_context("adv-1", referenced_ids=[document.id])
        assert bundle.chunks[0].score == pytest.approx(0.5)

    def test_small_remaining_budget_drops_the_next_chunk(self, context_service, store):
        # 30 words each: 40 tokens per chunk
        store("a.txt", [_words("summary", total=30), _words("summary", total=30)])

        bundle = context_service.get_context("adv-1", max_tokens=50)

        assert len(bundle.chunks) == 1
        assert bundle.total_tokens == 40
        assert not bundle.chunks[0].truncated

    def test_large_remaining_budget_truncates_the_next_chunk(self, context_service, store):
        first = _words("summary", "key", total=75)
        second = _words("summary", filler="beta", total=300)
        store("a.txt", [first, second])

        bundle = context_service.get_context("adv-1", max_tokens=300)

        assert [chunk.chunk_index for chunk in bundle.chunks] == [0, 1]
        assert bundle.chunks[0].tokens == 100
        cut = bundle.chunks[1]
        assert cut.truncated is True
        assert cut.content.endswith("...")
        assert len(cut.content.split()) == 150
        assert cut.tokens == 200
        assert bundle.total_tokens == 300

    def test_total_never_exceeds_budget(self, context_service, store):
        store("a.txt", [_words("summary", total=n) for n in (40, 90, 130, 25, 200)])

        for budget in (10, 60, 150, 260, 500):
            bundle = context_service.get_context("adv-1", max_tokens=budget)
            assert bundle.total_tokens <= budget
            assert bundle.total_tokens == sum(chunk.tokens for chunk in bundle.chunks)
            assert sum(chunk.truncated for chunk in bundle.chunks) <= 1

    def test_long_document_conversation_selects_matching_chunk(
        self, context_service, normalizer, repository, upload_factory
    ):
        text = " ".join(
            f"Sentence marker{i:04d} covers routine operational details for the period."
            for i in range(200)
        )
        processed = asyncio.run(normalizer.process(upload_factory("long.txt", text)))
        assert processed.metadata.word_count == 1800
        chunks = processed.chunks
        assert len(chunks) >= 3
        assert all(len(chunk) <= 1000 for chunk in chunks)
        tail = " ".join(chunks[0].rstrip(".").split()[-10:])
        assert chunks[1].startswith(tail + ". ")

        repository.store(upload_factory("long.txt", text), processed, "adv-1", "user-1")
        markers = [set(re.findall(r"marker\d{4}", chunk)) for chunk in chunks]
        unique = sorted(markers[1] - markers[0] - markers[2])
        assert unique

        bundle = context_service.get_context("adv-1", ["Tell me about", " ".join(unique)])

        assert bundle.chunks[0].chunk_index == 1
        assert 0 not in [chunk.chunk_index for chunk in bundle.chunks]


class TestFormatForPrompt:
    def test_exact_layout(self, context_service, store):
        store("plan.txt", ["Summary of the plan."])

        bundle = context_service.get_context("adv-1")

        expected = (
            "\n\n--- AVAILABLE DOCUMENTS ---\n"
            "You have access to 1 documents in your knowledge base.\n\n"
            "## plan.txt\n"
            "Category: other | Confidentiality: internal\n\n"
            "### Excerpt 1 (Relevance: 20%)\n"
            "Summary of the plan.\n\n"
            "--- END DOCUMENTS (6/8000 tokens) ---\n\n"
            f"{PROMPT_INSTRUCTION}\n\n"
        )
        assert context_service.format_for_prompt(bundle) == expected

    def test_excerpts_grouped_by_document(self, context_service, store, clock):
        store("a.txt", ["Summary one.", "Nothing."])
        clock.advance(minutes=1)
        store("b.txt", ["Key summary.", "Conclusion two."])

        text = context_service.format_for_prompt(context_service.get_context("adv-1"))

        assert text.count("## b.txt") == 1
        assert text.index("## b.txt") < text.index("## a.txt")
        assert "### Excerpt 2 (Relevance: 20%)\nConclusion two." in text
        assert "You have access to 2 documents" in text


class TestParseReferences:
    @pytest.fixture
    def documents(self, repository, store):
        store("Budget Plan.txt", ["Budget details."])
        store("minutes.txt", ["Meeting minutes."])
        return repository.list_by_advisor("adv-1")

    def test_quoted_and_bare_references(self, context_service, documents):
        references = context_service.parse_references(
            'Compare @"Budget Plan" with @minutes, please', documents
        )

        assert [ref.name for ref in references] == ["Budget Plan", "minutes"]
        assert [ref.document.filename for ref in references] == ["Budget_Plan.txt", "minutes.txt"]
        assert all(ref.type is ReferenceType.DIRECT for ref in references)

    def test_sentence_final_mention_drops_the_period(self, context_service, documents):
        references = context_service.parse_references("Please review @budget.", documents)

        assert [ref.name for ref in references] == ["budget"]
        assert references[0].document.filename == "Budget_Plan.txt"

    def test_unmatched_reference_is_ignored(self, context_service, documents):
        assert context_service.parse_references("See @forecast", documents) == []

    def test_each_document_is_referenced_once(self, context_service, documents):
        references = context_service.parse_references("@minutes and @minutes.txt", documents)
        assert len(references) == 1

    def test_message_without_mentions(self, context_service, documents):
        assert context_service.parse_references("No mentions here", documents) == []


class TestSuggestRelevant:
    def test_threshold_and_ordering(self, context_service, repository, store):
        store("hiring.txt", ["Hiring budget review."])
        store("summary.txt", ["Summary of hiring budget review."])
        store("partial.txt", ["Hiring only."])
        store("other.txt", ["Unrelated content."])
        documents = repository.list_by_advisor("adv-1")

        suggestions = context_service.suggest_relevant("hiring budget review", documents)

        assert [ref.name for ref in suggestions] == ["summary.txt", "hiring.txt"]
        assert suggestions[0].score == pytest.approx(0.6)
        assert suggestions[1].score == pytest.approx(0.4)
        assert all(ref.type is ReferenceType.SUGGESTED for ref in suggestions)

    def test_limit(self, context_service, repository, store):
        for name in ("a.txt", "b.txt", "c.txt"):
            store(name, ["Hiring budget review."])
        documents = repository.list_by_advisor("adv-1")

        assert len(context_service.suggest_relevant("hiring budget review", documents, limit=2)) == 2


class TestLookups:
    def test_get_document_and_preview(self, context_service, store):
        document = store("long.txt", ["y" * 400])

        assert context_service.get_document(document.id) == document
        assert context_service.get_document("missing") is None
        assert context_service.preview(document.id) == "y" * 300 + "..."
