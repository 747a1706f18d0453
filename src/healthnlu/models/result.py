"""ParseResult, the value object every extraction stage produces."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, TypeAdapter

from healthnlu.models.intent import REQUIRED_SLOTS, Decision, IntentType, RescueStrategy
from healthnlu.models.signals import Correction
from healthnlu.models.slots import SlotPayload

SECONDARY_KEY = "_secondary"

_SLOT_ADAPTER: TypeAdapter[SlotPayload] = TypeAdapter(SlotPayload)


class SecondarySlot(BaseModel):
    intent: IntentType = IntentType.DRINK
    item: str
    confidence: float = Field(default=0.85, ge=0.0, le=1.0)


class ParseMeta(BaseModel):
    has_head_noun: bool = False
    rescued_by: RescueStrategy | None = None
    minimal_core_food: bool = False
    secondary_detected: bool = False
    spelling_corrected: list[Correction] = Field(default_factory=list)
    noun_only_meal_pattern: bool = False
    time_inferred: bool = False
    stage: str = ""
    lexicon_hit: bool = False
    llm_used: bool = False


class ParseResult(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    raw_text: str = ""
    intent: IntentType = IntentType.OTHER
    confidence: float = Field(default=0.3, ge=0.0, le=1.0)
    slots: dict[str, Any] = Field(default_factory=dict)
    missing: list[str] = Field(default_factory=list)
    meta: ParseMeta = Field(default_factory=ParseMeta)
    decision: Decision | None = None
    decided_at: datetime | None = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def set_slot(self, name: str, value: Any) -> None:
        """Set a slot; empty values are dropped rather than stored as placeholders."""
        if value is None or value == "":
            self.slots.pop(name, None)
            return
        self.slots[name] = value
        if name in self.missing:
            self.missing.remove(name)

    def require(self, name: str) -> None:
        if name not in self.slots and name not in self.missing:
            self.missing.append(name)

    def required_slots(self) -> tuple[str, ...]:
        return REQUIRED_SLOTS.get(self.intent, ())

    def required_missing(self) -> list[str]:
        return [s for s in self.required_slots() if s not in self.slots]

    def has_required_missing(self) -> bool:
        return bool(self.required_missing())

    def has_time_context(self) -> bool:
        return bool(self.slots.get("meal_time") or self.slots.get("time"))

    @property
    def item(self) -> str | None:
        return self.slots.get("item")

    @property
    def secondary(self) -> SecondarySlot | None:
        raw = self.slots.get(SECONDARY_KEY)
        if not raw:
            return None
        return SecondarySlot.model_validate(raw)

    def set_secondary(self, secondary: SecondarySlot | None) -> None:
        if secondary is None:
            self.slots.pop(SECONDARY_KEY, None)
            self.meta.secondary_detected = False
            return
        self.slots[SECONDARY_KEY] = secondary.model_dump(mode="json")
        self.meta.secondary_detected = True

    def public_slots(self) -> dict[str, Any]:
        return {k: v for k, v in self.slots.items() if not k.startswith("_")}

    def typed_slots(self) -> SlotPayload:
        return _SLOT_ADAPTER.validate_python({**self.public_slots(), "intent": self.intent.value})
