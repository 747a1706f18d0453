"""Reflux, symptom and mood detection."""

from __future__ import annotations

import re

from healthnlu.models.intent import IntentType
from healthnlu.models.result import ParseResult
from healthnlu.ontology import lexicons as lx
from healthnlu.ontology import lookup
from healthnlu.parser.stages.base import ExtractionStage, ExtractionState

ADJECTIVE_NOTE = "auto-detected from adjective"

_EXPLICIT_SEVERITY: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(\d{1,2})\s*/\s*10\b"),
    re.compile(r"\b(\d{1,2})\s+out\s+of\s+10\b", re.I),
    re.compile(r"\b(?:severity|level)\s*(?:of|is|=|:)?\s*(\d{1,2})\b", re.I),
)


def extract_severity(text: str) -> tuple[int, str] | None:
    """A stated 1-10 value wins over an adjective."""
    for pattern in _EXPLICIT_SEVERITY:
        m = pattern.search(text)
        if m and 1 <= int(m.group(1)) <= 10:
            return int(m.group(1)), "stated"
    found = lookup.severity_from_adjectives(text)
    if found is None:
        return None
    return found[0], ADJECTIVE_NOTE


def apply_severity(result: ParseResult, text: str) -> None:
    severity = extract_severity(text)
    if severity is not None:
        result.set_slot("severity", severity[0])
        result.set_slot("severity_note", severity[1])
    else:
        result.require("severity")


def find_mood(text: str) -> str | None:
    tokens = lookup.tokenize(text)
    words = [t for t in tokens if t in lx.MOOD_WORDS]
    if not words:
        return None
    cued = any(t in lx.MOOD_CUES for t in tokens)
    if not cued and len(tokens) > 2:
        return None
    return lx.MOOD_WORDS[words[0]]


class RefluxStage(ExtractionStage):
    name = "reflux"

    def run(self, state: ExtractionState) -> ParseResult | None:
        if not lookup.has_reflux_keyword(state.cleaned):
            return None
        apply_severity(state.result, state.cleaned)
        return state.finish(IntentType.REFLUX, 0.9)


class SymptomStage(ExtractionStage):
    name = "symptom"

    def run(self, state: ExtractionState) -> ParseResult | None:
        keyword = lookup.find_symptom_keyword(state.cleaned)
        if keyword is None:
            return None
        state.result.set_slot("symptom_type", lookup.canonical_symptom(keyword))
        apply_severity(state.result, state.cleaned)
        return state.finish(IntentType.SYMPTOM, 0.8)


class MoodStage(ExtractionStage):
    name = "mood"

    def run(self, state: ExtractionState) -> ParseResult | None:
        if lookup.has_head_noun(state.cleaned) or lookup.is_beverage(state.cleaned):
            return None
        mood = find_mood(state.cleaned)
        if mood is None:
            return None
        state.result.set_slot("mood", mood)
        state.result.set_slot("note", state.raw_text.strip())
        return state.finish(IntentType.MOOD, 0.8)
