from __future__ import annotations
from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """A chat model that rewrites dictated text. Cleanup of the reply happens in LLMClient."""

    name: str = "llm"

    @abstractmethod
    def generate(self, *, system: str, user: str) -> str:
        """Return the model's reply as plain text, "" when there is none."""
        raise NotImplementedError
