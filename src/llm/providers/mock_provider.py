from __future__ import annotations
import re
from llm.providers.base import LLMProvider

class MockProvider(LLMProvider):
    """Offline stand-in for local runs: echoes the text back with tidied spacing."""

    name = "mock"

    def generate(self, *, system: str, user: str, model: str | None = None) -> str:
        lines = [re.sub(r"[ \t]+", " ", line).strip() for line in user.splitlines()]
        return "\n".join(line for line in lines if line)
