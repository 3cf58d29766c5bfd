from __future__ import annotations
import os
import httpx
from .base import LLMProvider

LLM_TIMEOUT_S = float(os.getenv("LLM_TIMEOUT_S", "20"))


class OllamaProvider(LLMProvider):
    name = "ollama"

    def __init__(self):
        self.model = os.getenv("OLLAMA_MODEL", "llama3.1").strip()
        self.base_url = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434").strip().rstrip("/")

    def generate(self, *, system: str, user: str, model: str | None = None) -> str:
        payload = {
            "model": model or self.model,
            "stream": False,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "options": {"temperature": 0},
        }

        with httpx.Client(timeout=LLM_TIMEOUT_S) as client:
            r = client.post(f"{self.base_url}/api/chat", json=payload)
            r.raise_for_status()
            message = r.json().get("message") or {}

        return message.get("content") or ""
