"""Intent-tagged slot payloads."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class _SlotsBase(BaseModel):
    model_config = {"extra": "ignore"}

    time: str | None = None
    timestamp: str | None = None
    time_approx: str | None = None
    meal_time: str | None = None
    meal_time_note: str | None = None


class _MealSlots(_SlotsBase):
    item: str | None = None
    sides: str | None = None
    portion: str | None = None
    portion_g: int | None = None
    portion_ml: int | None = None
    portion_multiplier: float | None = None
    brand: str | None = None
    brand_variant: str | None = None
    dairy: bool = False
    non_dairy: bool = False
    caffeine: bool = False
    decaf: bool = False


class FoodSlots(_MealSlots):
    intent: Literal["food"] = "food"


class DrinkSlots(_MealSlots):
    intent: Literal["drink"] = "drink"


class SymptomSlots(_SlotsBase):
    intent: Literal["symptom"] = "symptom"
    symptom_type: str = "general"
    severity: int | None = Field(default=None, ge=1, le=10)
    severity_note: str | None = None


class RefluxSlots(_SlotsBase):
    intent: Literal["reflux"] = "reflux"
    severity: int | None = Field(default=None, ge=1, le=10)
    severity_note: str | None = None


class BmSlots(_SlotsBase):
    intent: Literal["bm"] = "bm"
    bristol: str | None = None
    bristol_note: str | None = None


class MoodSlots(_SlotsBase):
    intent: Literal["mood"] = "mood"
    mood: str | None = None
    note: str | None = None


class CheckinSlots(_SlotsBase):
    intent: Literal["checkin"] = "checkin"
    note: str | None = None


class ConversationSlots(BaseModel):
    model_config = {"extra": "ignore"}

    intent: Literal["greeting", "thanks", "chit_chat", "farewell"]


class OtherSlots(BaseModel):
    model_config = {"extra": "ignore"}

    intent: Literal["other"] = "other"


SlotPayload = Annotated[
    Union[
        FoodSlots,
        DrinkSlots,
        SymptomSlots,
        RefluxSlots,
        BmSlots,
        MoodSlots,
        CheckinSlots,
        ConversationSlots,
        OtherSlots,
    ],
    Field(discriminator="intent"),
]
