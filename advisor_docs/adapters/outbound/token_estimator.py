"""Word-ratio token estimation."""

import math

from ...core.ports import TokenEstimatorPort


class WordRatioTokenEstimator(TokenEstimatorPort):
    """Approximates tokens as ``ceil(words / words_per_token)``.

    A model-agnostic heuristic; at the default ratio of 0.75 a 75-word chunk
    costs 100 tokens.
    """

    def __init__(self, words_per_token: float = 0.75):
        if words_per_token <= 0:
            raise ValueError("words_per_token must be positive")
        self.words_per_token = words_per_token

    def estimate(self, text: str) -> int:
        return math.ceil(len(text.split()) / self.words_per_token)

    def truncate(self, text: str, max_tokens: int) -> str:
        """Keep the first ``floor(max_tokens * ratio)`` words and append ``...``."""
        max_words = math.floor(max_tokens * self.words_per_token)
        words = text.split()
        if len(words) <= max_words:
            return text
        return " ".join(words[:max_words]) + "..."
