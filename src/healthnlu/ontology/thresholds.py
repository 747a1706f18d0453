"""Confidence tier thresholds."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

STRICT = 0.80
LENIENT = 0.72
RESCUE = 0.65
REJECT = 0.50

SPELL = 0.88
SPELL_PROTECTED = 0.94

# Merged fallback results never claim more than this.
FALLBACK_CONFIDENCE_CAP = 0.85


class ConfidenceThresholds(BaseModel):
    model_config = {"frozen": True}

    strict: float = Field(default=STRICT, ge=0.0, le=1.0)
    lenient: float = Field(default=LENIENT, ge=0.0, le=1.0)
    rescue: float = Field(default=RESCUE, ge=0.0, le=1.0)
    reject: float = Field(default=REJECT, ge=0.0, le=1.0)
    spell: float = Field(default=SPELL, ge=0.0, le=1.0)
    spell_protected: float = Field(default=SPELL_PROTECTED, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_order(self) -> ConfidenceThresholds:
        if not self.reject <= self.rescue <= self.lenient <= self.strict:
            raise ValueError("thresholds must satisfy reject <= rescue <= lenient <= strict")
        if self.spell_protected < self.spell:
            raise ValueError("spell_protected must not be lower than spell")
        return self
