"""Shared fixtures and mocks for all tests."""

from __future__ import annotations

import json
from datetime import datetime
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest
import pytest_asyncio

from healthnlu.config.settings import Settings
from healthnlu.memory.store import EntryStore
from healthnlu.models.intent import IntentType
from healthnlu.models.result import ParseResult
from healthnlu.parser.extractor import RulesExtractor

TZ = "America/Los_Angeles"


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def mock_settings(monkeypatch, tmp_path):
    monkeypatch.delenv("HEALTHNLU_OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("HEALTHNLU_OPENAI_MODEL", "gpt-4o")
    monkeypatch.setenv("HEALTHNLU_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("HEALTHNLU_TIMEZONE", TZ)
    monkeypatch.setenv("HEALTHNLU_DB_PATH", str(tmp_path / "healthnlu.db"))
    return Settings()  # type: ignore[call-arg]


@pytest_asyncio.fixture
async def temp_store():
    store = EntryStore(db_path=":memory:")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def lunch_now():
    return datetime(2026, 3, 10, 12, 30, tzinfo=ZoneInfo(TZ))


@pytest.fixture
def morning_now():
    return datetime(2026, 3, 10, 8, 0, tzinfo=ZoneInfo(TZ))


@pytest.fixture
def extractor():
    return RulesExtractor()


@pytest.fixture
def food_result():
    result = ParseResult(raw_text="had oats for lunch", intent=IntentType.FOOD, confidence=0.85)
    result.set_slot("item", "oats")
    result.set_slot("meal_time", "lunch")
    result.meta.has_head_noun = True
    result.meta.minimal_core_food = True
    return result


@pytest.fixture
def reflux_missing_result():
    result = ParseResult(
        raw_text="acid reflux not feeling well", intent=IntentType.REFLUX, confidence=0.9
    )
    result.require("severity")
    return result


@pytest.fixture
def mock_openai_response():
    """Create a mock OpenAI chat completion response."""
    def _make(data: dict | str | None):
        message = MagicMock()
        message.content = data if data is None or isinstance(data, str) else json.dumps(data)
        choice = MagicMock()
        choice.message = message
        response = MagicMock()
        response.choices = [choice]
        return response
    return _make
