"""Stages that run before intent detection: BM route, spelling, small talk, negation, time."""

from __future__ import annotations

import logging
import re

from healthnlu.models.intent import IntentType
from healthnlu.models.result import ParseResult
from healthnlu.ontology import lexicons as lx
from healthnlu.ontology import lookup
from healthnlu.parser.spell import correct_tokens
from healthnlu.parser.stages.base import ExtractionStage, ExtractionState
from healthnlu.parser.timeparse import parse_time_info

logger = logging.getLogger(__name__)

_EXPLICIT_BRISTOL_RE = re.compile(r"\b(?:bristol|type)\s*#?\s*(\d)\b", re.I)

_DAYPARTS: tuple[tuple[re.Pattern[str], str, str], ...] = (
    (re.compile(r"\bmorning\b"), "morning", "breakfast"),
    (re.compile(r"\bafternoon\b"), "afternoon", "lunch"),
    (re.compile(r"\b(?:evening|tonight)\b"), "evening", "dinner"),
)

_CONVERSATIONAL: tuple[tuple[re.Pattern[str], IntentType, float], ...] = (
    (lx.GREETING_PATTERN, IntentType.GREETING, 0.95),
    (lx.THANKS_PATTERN, IntentType.THANKS, 0.95),
    (lx.CHIT_CHAT_PATTERN, IntentType.CHIT_CHAT, 0.9),
    (lx.FAREWELL_PATTERN, IntentType.FAREWELL, 0.95),
)


def extract_bristol(text: str) -> tuple[int, str] | None:
    """Stated Bristol type first, then descriptive words."""
    m = _EXPLICIT_BRISTOL_RE.search(text)
    if m and 1 <= int(m.group(1)) <= 7:
        return int(m.group(1)), "stated"
    found = lookup.bristol_from_descriptors(text)
    if found is None:
        return None
    value, term = found
    return value, f"auto-detected from {term}"


class BowelMovementStage(ExtractionStage):
    """Routes on bowel-movement words in the raw text, before any spell correction."""

    name = "bm_early_route"

    def run(self, state: ExtractionState) -> ParseResult | None:
        text = state.lowered
        if not lookup.has_bm_keyword(text):
            return None
        logger.info("bm early route for %r", state.raw_text)
        result = state.result
        bristol = extract_bristol(text)
        if bristol is not None:
            result.set_slot("bristol", str(bristol[0]))
            result.set_slot("bristol_note", bristol[1])
        for pattern, approx, meal in _DAYPARTS:
            if pattern.search(text):
                result.set_slot("time_approx", approx)
                result.set_slot("meal_time", meal)
                break
        result.require("bristol")
        return state.finish(IntentType.BM, 0.90)


class SpellCorrectionStage(ExtractionStage):
    name = "spell"

    def run(self, state: ExtractionState) -> ParseResult | None:
        try:
            spelled = correct_tokens(
                state.lowered,
                threshold=state.thresholds.spell,
                protected_threshold=state.thresholds.spell_protected,
            )
        except Exception:
            logger.exception("spell correction failed, keeping text as typed")
            return None
        state.cleaned = spelled.corrected.lower()
        state.result.meta.spelling_corrected = spelled.corrections
        return None


class ConversationalStage(ExtractionStage):
    name = "conversational"

    def run(self, state: ExtractionState) -> ParseResult | None:
        if lookup.has_loggable_content(state.cleaned):
            return None
        for pattern, intent, confidence in _CONVERSATIONAL:
            if pattern.search(state.lowered):
                return state.finish(intent, confidence)
        return None


class NegationStage(ExtractionStage):
    name = "negation"

    def run(self, state: ExtractionState) -> ParseResult | None:
        if not lookup.has_negation(state.cleaned):
            return None
        if not lx.CHECKIN_PATTERN.search(state.lowered):
            return None
        state.result.set_slot("note", state.raw_text.strip())
        return state.finish(IntentType.CHECKIN, 0.85)


class TimeStage(ExtractionStage):
    name = "time"

    def run(self, state: ExtractionState) -> ParseResult | None:
        state.apply_time(parse_time_info(state.cleaned, state.timezone, state.now, infer=False))
        return None
