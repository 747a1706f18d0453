"""Forced-intent reparse: extract only the slots of an intent the caller already knows."""

from __future__ import annotations

import logging
import re
from typing import Any

from healthnlu.models.intent import REQUIRED_SLOTS, IntentType
from healthnlu.models.result import ParseResult
from healthnlu.ontology import lookup
from healthnlu.parser.items import extract_item_and_sides, generic_noun, tidy_phrase
from healthnlu.parser.spell import correct_tokens
from healthnlu.parser.stages.base import ExtractionStage, ExtractionState
from healthnlu.parser.stages.early import extract_bristol
from healthnlu.parser.stages.meals import tag_portion_and_metadata
from healthnlu.parser.stages.symptoms import extract_severity, find_mood
from healthnlu.parser.timeparse import parse_time_info

logger = logging.getLogger(__name__)

FORCED_CONFIDENCE = 0.9

_BARE_INT_RE = re.compile(r"^\s*(\d{1,2})\s*$")


def _bare_int(text: str, low: int, high: int) -> int | None:
    m = _BARE_INT_RE.match(text)
    if m and low <= int(m.group(1)) <= high:
        return int(m.group(1))
    return None


def parse_slot_answer(slot: str, text: str) -> dict[str, Any]:
    """Read ``text`` as a direct answer to one missing slot.

    Returns the slots the answer fills, or an empty dict when the text does
    not answer that slot.
    """
    lowered = " ".join(text.lower().split())
    if not lowered:
        return {}
    if slot == "severity":
        value = _bare_int(lowered, 1, 10)
        if value is not None:
            return {"severity": value, "severity_note": "stated"}
        found = extract_severity(lowered)
        if found is not None:
            return {"severity": found[0], "severity_note": found[1]}
        return {}
    if slot == "bristol":
        value = _bare_int(lowered, 1, 7)
        if value is not None:
            return {"bristol": str(value), "bristol_note": "stated"}
        found = extract_bristol(lowered)
        if found is not None:
            return {"bristol": str(found[0]), "bristol_note": found[1]}
        return {}
    if slot == "item":
        items = extract_item_and_sides(lowered)
        item = items.item or generic_noun(lowered) or tidy_phrase(lowered)
        return {"item": item} if item else {}
    return {}


class ForcedIntentStage(ExtractionStage):
    """Runs first; a no-op unless the caller forced an intent."""

    name = "forced"

    def run(self, state: ExtractionState) -> ParseResult | None:
        intent = state.forced_intent
        if intent is None:
            return None
        result = state.result
        result.meta.stage = self.name
        logger.debug("forced %s reparse of %r", intent.value, state.raw_text)

        if intent in (IntentType.FOOD, IntentType.DRINK):
            self._meal(state, intent)
        elif intent in (IntentType.SYMPTOM, IntentType.REFLUX):
            if intent == IntentType.SYMPTOM:
                keyword = lookup.find_symptom_keyword(state.lowered)
                if keyword is not None:
                    result.set_slot("symptom_type", lookup.canonical_symptom(keyword))
            for name, value in parse_slot_answer("severity", state.lowered).items():
                result.set_slot(name, value)
        elif intent == IntentType.BM:
            for name, value in parse_slot_answer("bristol", state.lowered).items():
                result.set_slot(name, value)
        elif intent == IntentType.MOOD:
            result.set_slot("mood", find_mood(state.lowered))
            result.set_slot("note", state.raw_text.strip())
        elif intent == IntentType.CHECKIN:
            result.set_slot("note", state.raw_text.strip())

        for name in REQUIRED_SLOTS.get(intent, ()):
            result.require(name)
        return state.finish(intent, FORCED_CONFIDENCE)

    def _meal(self, state: ExtractionState, intent: IntentType) -> None:
        result = state.result
        try:
            spelled = correct_tokens(
                state.lowered,
                threshold=state.thresholds.spell,
                protected_threshold=state.thresholds.spell_protected,
            )
            state.cleaned = spelled.corrected.lower()
            result.meta.spelling_corrected = spelled.corrections
        except Exception:
            logger.exception("spell correction failed, keeping text as typed")

        items = extract_item_and_sides(state.cleaned)
        state.items = items
        item = items.item or generic_noun(state.cleaned) or tidy_phrase(state.cleaned)
        result.set_slot("item", item)
        result.set_slot("sides", items.sides)
        result.set_slot("brand", items.brand)
        result.meta.has_head_noun = items.has_head_noun
        if item:
            result.meta.minimal_core_food = lookup.is_minimal_core_food(item)
            tag_portion_and_metadata(state, "drink" if intent == IntentType.DRINK else "food")

        state.apply_time(parse_time_info(state.cleaned, state.timezone, state.now, infer=False))
        state.infer_time()

