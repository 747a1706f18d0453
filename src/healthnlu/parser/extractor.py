"""Rules-based extraction: an ordered list of named stages plus postprocessing."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from datetime import datetime

from healthnlu.models.intent import IntentType
from healthnlu.models.result import ParseResult
from healthnlu.ontology import lexicons as lx
from healthnlu.ontology.thresholds import ConfidenceThresholds
from healthnlu.parser.stages.base import ExtractionStage, ExtractionState
from healthnlu.parser.stages.early import (
    BowelMovementStage,
    ConversationalStage,
    NegationStage,
    SpellCorrectionStage,
    TimeStage,
)
from healthnlu.parser.stages.forced import ForcedIntentStage
from healthnlu.parser.stages.meals import (
    BareItemStage,
    FoodDrinkStage,
    ItemStage,
    NounOnlyMealStage,
    TaggingStage,
)
from healthnlu.parser.stages.symptoms import MoodStage, RefluxStage, SymptomStage
from healthnlu.parser.timeparse import DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)

FALLBACK_STAGE = "fallback"

_LIST_SEP_RE = re.compile(r"\s*(?:,|&|\band\b|\+)\s*", re.I)


def default_stages() -> list[ExtractionStage]:
    return [
        ForcedIntentStage(),
        BowelMovementStage(),
        SpellCorrectionStage(),
        ConversationalStage(),
        NegationStage(),
        TimeStage(),
        RefluxStage(),
        SymptomStage(),
        MoodStage(),
        ItemStage(),
        TaggingStage(),
        FoodDrinkStage(),
        NounOnlyMealStage(),
        BareItemStage(),
    ]


def fallback_result(raw_text: str) -> ParseResult:
    result = ParseResult(raw_text=raw_text, intent=IntentType.OTHER, confidence=0.3)
    result.missing = [lx.CLARIFICATION_NEEDED]
    result.meta.stage = FALLBACK_STAGE
    return result


def _clamp_int(value, low: int, high: int) -> int | None:
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        return None
    return min(max(number, low), high)


def normalize_list(value: str) -> str:
    """Join list-like text with ", " and a final " & "."""
    parts = [p.strip() for p in _LIST_SEP_RE.split(value) if p and p.strip()]
    if len(parts) < 2:
        return value.strip()
    return ", ".join(parts[:-1]) + " & " + parts[-1]


def postprocess(result: ParseResult) -> ParseResult:
    slots = result.slots
    if "severity" in slots:
        result.set_slot("severity", _clamp_int(slots["severity"], 1, 10))
    if "bristol" in slots:
        bristol = _clamp_int(slots["bristol"], 1, 7)
        result.set_slot("bristol", str(bristol) if bristol is not None else None)
    sides = slots.get("sides")
    if isinstance(sides, str):
        sides = lx.MEAL_PHRASE_PATTERN.sub("", sides).strip(" ,.")
        result.set_slot("sides", normalize_list(sides) if sides else None)
    return result


class RulesExtractor:
    """Runs stages in order; the first stage to return a result wins."""

    def __init__(
        self,
        thresholds: ConfidenceThresholds | None = None,
        stages: Sequence[ExtractionStage] | None = None,
    ) -> None:
        self._thresholds = thresholds or ConfidenceThresholds()
        self._stages = list(stages) if stages is not None else default_stages()

    @property
    def stages(self) -> list[ExtractionStage]:
        return list(self._stages)

    def extract(
        self,
        text: str,
        timezone: str | None = DEFAULT_TIMEZONE,
        forced_intent: IntentType | None = None,
        now: datetime | None = None,
    ) -> ParseResult:
        if not text or not text.strip():
            return fallback_result(text or "")
        try:
            result = self._run(text, timezone, forced_intent, now)
        except Exception:
            logger.exception("extraction failed for %r", text)
            return fallback_result(text)
        return postprocess(result)

    def _run(
        self,
        text: str,
        timezone: str | None,
        forced_intent: IntentType | None,
        now: datetime | None,
    ) -> ParseResult:
        state = ExtractionState(
            text,
            timezone=timezone,
            now=now,
            forced_intent=forced_intent,
            thresholds=self._thresholds,
        )
        for stage in self._stages:
            try:
                finished = stage.run(state)
            except Exception:
                logger.exception("stage %s failed, skipping", stage.name)
                continue
            if finished is not None:
                if not finished.meta.stage:
                    finished.meta.stage = stage.name
                logger.debug(
                    "stage %s -> %s (%.2f)", stage.name, finished.intent.value, finished.confidence
                )
                return finished
        logger.debug("no stage matched %r", text)
        result = fallback_result(text)
        result.meta.spelling_corrected = state.result.meta.spelling_corrected
        return result
