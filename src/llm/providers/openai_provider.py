from __future__ import annotations
import os
import httpx
from .base import LLMProvider

# Any OpenAI-compatible chat endpoint works (OpenAI, Groq, ...): point OPENAI_BASE_URL at it.
LLM_TIMEOUT_S = float(os.getenv("LLM_TIMEOUT_S", "20"))


class OpenAIProvider(LLMProvider):
    name = "openai"

    def __init__(self):
        self.api_key = os.getenv("OPENAI_API_KEY", "").strip()
        self.model = os.getenv("OPENAI_MODEL", "gpt-4o-mini").strip()
        self.base_url = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").strip().rstrip("/")

        if not self.api_key:
            raise RuntimeError("OPENAI_API_KEY is missing")

    def generate(self, *, system: str, user: str, model: str | None = None) -> str:
        payload = {
            "model": model or self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            # cleaning, not creative writing
            "temperature": 0,
        }

        with httpx.Client(timeout=LLM_TIMEOUT_S) as client:
            r = client.post(
                f"{self.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=payload,
            )
            r.raise_for_status()
            choices = r.json().get("choices") or []

        if not choices:
            return ""
        return choices[0].get("message", {}).get("content") or ""
