import asyncio
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from orchestration.pipeline import process_text

TZ = "Asia/Kolkata"
NOW_ISO = "2024-01-15T10:00:00+05:30"  # a Monday


class FakeProvider:
    def __init__(self, response_text: str):
        self._response_text = response_text
        self.calls = []

    def generate(self, *, system: str, user: str) -> str:
        self.calls.append(user)
        return self._response_text


class ExplodingProvider:
    def generate(self, *, system: str, user: str) -> str:
        raise RuntimeError("model unavailable")


@pytest.fixture
def fake_provider_factory():
    def _make(response_text: str):
        return FakeProvider(response_text)
    return _make


@pytest.fixture
def exploding_provider():
    return ExplodingProvider()


@pytest.fixture
def now():
    return datetime(2024, 1, 15, 10, 0, tzinfo=ZoneInfo(TZ))


@pytest.fixture
def options():
    return {"userId": "user-1", "timezone": TZ, "nowISO": NOW_ISO}


@pytest.fixture
def run(options):
    """Synchronous wrapper around the async pipeline with a fixed clock."""
    def _run(text, cleaner=None, **overrides):
        return asyncio.run(process_text(text, {**options, **overrides}, cleaner=cleaner))
    return _run
