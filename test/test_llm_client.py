import asyncio

import pytest

from llm import llm_client
from llm.llm_client import CLEAN_SYSTEM_PROMPT, LLMClient, provider_from_env
from llm.providers.mock_provider import MockProvider


def test_clean_returns_provider_text(fake_provider_factory):
    provider = fake_provider_factory("Buy milk. Call mom.")
    client = LLMClient(provider=provider)
    assert client.clean("by milk call mom") == "Buy milk. Call mom."
    assert provider.calls == ["by milk call mom"]


def test_complete_sends_cleaning_prompt():
    seen = {}

    class RecordingProvider:
        def generate(self, *, system, user):
            seen["system"] = system
            return user

    LLMClient(provider=RecordingProvider()).complete("Buy milk")
    assert seen["system"] == CLEAN_SYSTEM_PROMPT


def test_client_is_awaitable_cleaner(fake_provider_factory):
    client = LLMClient(provider=fake_provider_factory("Buy milk."))
    assert asyncio.run(client("buy milk")) == "Buy milk."


def test_mock_provider_echoes_with_tidy_spacing():
    out = MockProvider().generate(system=CLEAN_SYSTEM_PROMPT, user="  buy   milk \n\n call\tmom ")
    assert out == "buy milk\ncall mom"


def test_provider_from_env():
    assert provider_from_env("") is None
    assert isinstance(provider_from_env("mock"), MockProvider)
    with pytest.raises(ValueError):
        provider_from_env("bogus")


def test_client_without_provider_fails(monkeypatch):
    monkeypatch.setattr(llm_client, "provider_from_env", lambda: None, raising=True)
    with pytest.raises(RuntimeError):
        LLMClient()
