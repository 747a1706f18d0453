"""Decision engine output: the tagged result plus side-effect intents."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from healthnlu.models.intent import ACCEPTED_DECISIONS, Decision, IntentType
from healthnlu.models.result import ParseResult


class EffectKind(str, enum.Enum):
    PERSIST = "persist"
    REQUEST_SLOTS = "request_slots"
    REPROMPT = "reprompt"
    REPARSE = "reparse"


class Effect(BaseModel):
    kind: EffectKind
    intent: IntentType | None = None
    missing: list[str] = Field(default_factory=list)
    text: str = ""


class DecisionOutcome(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    result: ParseResult
    decision: Decision
    effects: list[Effect] = Field(default_factory=list)
    reasoning: str = ""
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def accepted(self) -> bool:
        return self.decision in ACCEPTED_DECISIONS

    def effects_of(self, kind: EffectKind) -> list[Effect]:
        return [e for e in self.effects if e.kind == kind]
