"""Value objects produced by the spell, time and portion normalizers."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Correction(BaseModel):
    original: str
    corrected: str
    score: float = Field(ge=0.0, le=1.0)


class SpellResult(BaseModel):
    corrected: str
    corrections: list[Correction] = Field(default_factory=list)


class TimeInfo(BaseModel):
    time: str | None = None
    timestamp: str | None = None
    meal_time: str | None = None
    approx: str | None = None
    source: str | None = None
    inferred: bool = False

    @property
    def is_explicit(self) -> bool:
        return self.source is not None and not self.inferred


class PortionInfo(BaseModel):
    raw: str | None = None
    normalized_g: int | None = None
    normalized_ml: int | None = None
    multiplier: float = 1.0
    unit: str | None = None
    quantity: float | None = None


class CategoryEstimate(BaseModel):
    portion_g: int
    category: str
    source: str = "density_map"
