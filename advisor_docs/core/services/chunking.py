"""Sentence-based text chunking with word overlap."""

import re

_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def chunk_text(text: str, max_chunk_size: int = 1000, overlap: int = 100) -> list[str]:
    """Split text into overlapping chunks along sentence boundaries.

    Whitespace is collapsed first. Text that already fits is returned as a
    single chunk. Otherwise sentences are accumulated greedily (joined with
    ``". "``) until the next one would push the chunk past
    ``max_chunk_size``; the closed chunk gets a terminal period and the next
    chunk is seeded with its last ``overlap // 10`` words. Sentences longer
    than a chunk are hard-split on word boundaries first, so no chunk ever
    exceeds ``max_chunk_size``.

    The output depends only on the arguments, so re-chunking the same text
    always yields the same sequence.

    Args:
        text: Text to chunk.
        max_chunk_size: Maximum chunk length in characters (must be positive).
        overlap: Overlap budget in characters; every 10 characters carry one
            word into the next chunk (must be less than max_chunk_size).

    Returns:
        List of non-empty chunks in source order.

    Raises:
        ValueError: If max_chunk_size or overlap are invalid.
    """
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be positive")
    if overlap < 0:
        raise ValueError("overlap must be non-negative")
    if overlap >= max_chunk_size:
        raise ValueError("overlap must be less than max_chunk_size")

    clean = _WHITESPACE_RE.sub(" ", text or "").strip()
    if not clean:
        return []
    if len(clean) <= max_chunk_size:
        return [clean]

    # Room for the terminal period every closed chunk receives
    limit = max_chunk_size - 1
    overlap_words = overlap // 10

    chunks: list[str] = []
    current = ""
    for sentence in _split_sentences(clean, limit):
        candidate = f"{current}. {sentence}" if current else sentence
        if len(candidate) > limit and current:
            chunks.append(current + ".")
            current = _seed_next_chunk(current, sentence, overlap_words, limit)
        else:
            current = candidate

    if current:
        chunks.append(current if current.endswith(".") else current + ".")

    return [chunk for chunk in chunks if chunk.strip()]


def _split_sentences(text: str, limit: int) -> list[str]:
    """Sentences with terminators removed, none longer than ``limit``."""
    sentences: list[str] = []
    for raw in _SENTENCE_SPLIT_RE.split(text):
        sentence = raw.strip()
        if not sentence:
            continue
        if len(sentence) <= limit:
            sentences.append(sentence)
        else:
            sentences.extend(_hard_split(sentence, limit))
    return sentences


def _hard_split(sentence: str, limit: int) -> list[str]:
    """Break an over-long sentence into word-aligned pieces."""
    pieces: list[str] = []
    piece = ""
    for word in sentence.split(" "):
        while len(word) > limit:
            if piece:
                pieces.append(piece)
                piece = ""
            pieces.append(word[:limit])
            word = word[limit:]
        if not word:
            continue
        candidate = f"{piece} {word}" if piece else word
        if len(candidate) > limit:
            pieces.append(piece)
            piece = word
        else:
            piece = candidate
    if piece:
        pieces.append(piece)
    return pieces


def _seed_next_chunk(closed: str, sentence: str, overlap_words: int, limit: int) -> str:
    """Start a chunk with the tail of the previous one, if it fits."""
    if overlap_words <= 0:
        return sentence
    tail = " ".join(closed.split(" ")[-overlap_words:])
    seeded = f"{tail}. {sentence}"
    return seeded if len(seeded) <= limit else sentence
