"""Brutal tests for Notes token serialization."""

from __future__ import annotations

from healthnlu.memory.notes import NOTES_VERSION, build_notes, parse_notes
from healthnlu.models.intent import IntentType
from healthnlu.models.result import ParseResult


class TestBuildNotes:
    def test_food(self, food_result):
        assert build_notes(food_result) == "notes_v=2.1; meal=lunch; confidence=rules"

    def test_flags_and_portion(self):
        r = ParseResult(raw_text="x", intent=IntentType.DRINK, confidence=0.85)
        r.set_slot("item", "oat milk latte")
        r.set_slot("portion", "grande")
        r.set_slot("portion_ml", 473)
        r.set_slot("non_dairy", True)
        r.set_slot("caffeine", True)
        r.set_slot("dairy", False)
        notes = build_notes(r)
        assert "portion=grande" in notes
        assert "portion_ml=473" in notes
        assert "caffeine=true" in notes
        assert "non_dairy=true" in notes
        assert "; dairy=true" not in notes

    def test_llm_confidence_and_inferred_note_last(self):
        r = ParseResult(raw_text="x", intent=IntentType.FOOD)
        r.set_slot("meal_time", "lunch")
        r.set_slot("meal_time_note", "inferred from current time")
        r.meta.llm_used = True
        tokens = build_notes(r).split("; ")
        assert tokens[-2] == "confidence=llm"
        assert tokens[-1] == "meal_time_note=inferred from current time"

    def test_delimiters_escaped(self):
        r = ParseResult(raw_text="x", intent=IntentType.FOOD)
        r.set_slot("sides", "rice; a=b")
        assert "sides=rice, a:b" in build_notes(r)


class TestParseNotes:
    def test_round_trip_types(self):
        parsed = parse_notes("notes_v=2.1; bristol=6; portion_multiplier=2.005; caffeine=true")
        assert parsed["notes_v"] == 2.1
        assert parsed["bristol"] == 6
        assert parsed["portion_multiplier"] == 2.005
        assert parsed["caffeine"] is True

    def test_bare_token_is_flag(self):
        assert parse_notes("decaf; meal=lunch") == {"decaf": True, "meal": "lunch"}

    def test_empty(self):
        assert parse_notes("") == {}
        assert parse_notes(" ; ;") == {}

    def test_version_constant(self):
        assert NOTES_VERSION == "2.1"
