"""Token Estimator Port Interface."""

from abc import ABC, abstractmethod


class TokenEstimatorPort(ABC):
    """Abstract interface for prompt token estimation.

    The packing algorithm only needs a cost per text and a way to cut text
    down to a cost, so a model-specific tokenizer can replace the default
    heuristic without touching the context service.
    """

    @abstractmethod
    def estimate(self, text: str) -> int:
        """Estimated token cost of ``text``."""
        ...

    @abstractmethod
    def truncate(self, text: str, max_tokens: int) -> str:
        """Cut ``text`` so that its estimate does not exceed ``max_tokens``."""
        ...
