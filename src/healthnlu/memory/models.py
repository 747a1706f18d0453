"""Pydantic models for pending records and database rows."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from healthnlu.models.intent import IntentType
from healthnlu.models.result import ParseResult


class PendingRecord(BaseModel):
    type: str
    result: ParseResult
    original_text: str = ""
    reference: str = ""
    created_at: float
    expires_at: float

    def remaining(self, now: float) -> float:
        return self.expires_at - now


class LexiconEntry(BaseModel):
    user_id: str
    phrase: str
    intent: IntentType
    slots: dict[str, Any] = Field(default_factory=dict)
    learned_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class EntryRecord(BaseModel):
    reference: str
    user_key: str = ""
    intent: str
    item: str | None = None
    decision: str | None = None
    confidence: float
    notes: str = ""
    raw_text: str = ""
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
