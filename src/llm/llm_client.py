import asyncio
import logging
import os
import re
from typing import Optional

from llm.providers.base import LLMProvider

logger = logging.getLogger(__name__)

LLM_PROVIDER = os.getenv("LLM_PROVIDER", "").strip().lower()

CLEAN_SYSTEM_PROMPT = """You clean up dictated brain dumps.
Fix speech-to-text mistakes, punctuation and capitalization.
Put each task, appointment or thought in its own sentence.
Do not add, drop or reorder information. Do not answer questions in the text.
Return only the cleaned text, no commentary."""

_CODE_FENCE_RE = re.compile(r"^```[\w-]*\s*|\s*```$")
_PREAMBLE_RE = re.compile(r"^(?:sure|okay|ok|here(?:'s| is))\b[^\n]*:\s*\n", re.IGNORECASE)


def provider_from_env(name: str = LLM_PROVIDER) -> Optional[LLMProvider]:
    if not name:
        return None
    if name == "openai":
        from llm.providers.openai_provider import OpenAIProvider
        return OpenAIProvider()
    if name == "ollama":
        from llm.providers.ollama_provider import OllamaProvider
        return OllamaProvider()
    if name == "mock":
        from llm.providers.mock_provider import MockProvider
        return MockProvider()
    raise ValueError(f"Unknown LLM_PROVIDER: {name!r}")


class LLMClient:
    """Text cleaner backed by a chat model.

    Awaiting the client (``await client(text)``) runs the blocking provider call
    in a worker thread, so an instance can be handed to the pipeline as its
    cleaner.
    """

    def __init__(self, provider: Optional[LLMProvider] = None):
        self.provider = provider if provider is not None else provider_from_env()
        if self.provider is None:
            raise RuntimeError("No LLM provider configured (set LLM_PROVIDER)")

    def complete(self, text: str) -> str:
        return self.provider.generate(system=CLEAN_SYSTEM_PROMPT, user=text)

    def clean(self, text: str) -> str:
        name = getattr(self.provider, "name", type(self.provider).__name__)
        logger.debug(f"Cleaning {len(text)} chars with '{name}'")
        raw = self.complete(text)
        if not isinstance(raw, str):
            logger.warning(f"'{name}' returned {type(raw).__name__} instead of text")
            return ""
        out = _CODE_FENCE_RE.sub("", raw.strip())
        out = _PREAMBLE_RE.sub("", out)
        return out.strip().strip('"').strip()

    async def __call__(self, text: str) -> str:
        return await asyncio.to_thread(self.clean, text)
