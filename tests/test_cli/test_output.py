"""Brutal tests for Rich display helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from io import StringIO

from rich.console import Console

from healthnlu.cli.output import (
    print_error,
    print_history,
    print_info,
    print_outcome,
    print_portion,
    print_report,
    print_result,
    print_spelling,
)
from healthnlu.memory.models import EntryRecord
from healthnlu.models.decision import DecisionOutcome, Effect, EffectKind
from healthnlu.models.intent import Decision, IntentType, RescueStrategy
from healthnlu.models.result import ParseResult
from healthnlu.models.signals import Correction, PortionInfo, SpellResult


def _capture(func, *args, **kwargs) -> str:
    """Capture Rich output by temporarily replacing the module console."""
    import healthnlu.cli.output as mod
    buf = StringIO()
    original = mod.console
    mod.console = Console(file=buf, force_terminal=True, width=120)
    try:
        func(*args, **kwargs)
    finally:
        mod.console = original
    return buf.getvalue()


class TestPrintResult:
    def test_displays_intent_and_slots(self, food_result):
        output = _capture(print_result, food_result)
        assert "food" in output
        assert "85%" in output
        assert "oats" in output
        assert "lunch" in output

    def test_missing_and_meta(self):
        result = ParseResult(raw_text="x", intent=IntentType.REFLUX, confidence=0.9)
        result.require("severity")
        result.meta.rescued_by = RescueStrategy.SWAP_SIDES
        result.meta.spelling_corrected = [Correction(original="cofee", corrected="coffee", score=0.96)]
        result.meta.stage = "reflux"
        output = _capture(print_result, result)
        assert "severity" in output
        assert "swap_sides" in output
        assert "cofee->coffee" in output
        assert "reflux" in output


class TestPrintOutcome:
    def test_accepted(self, food_result):
        outcome = DecisionOutcome(
            result=food_result,
            decision=Decision.STRICT,
            reasoning="confidence 0.85 >= 0.80",
            effects=[Effect(kind=EffectKind.PERSIST, intent=IntentType.FOOD)],
        )
        output = _capture(print_outcome, outcome)
        assert "Decision:" in output
        assert "strict" in output
        assert "persist" in output

    def test_clarification_lists_missing(self, reflux_missing_result):
        outcome = DecisionOutcome(
            result=reflux_missing_result,
            decision=Decision.NEEDS_CLARIFICATION,
            effects=[Effect(kind=EffectKind.REQUEST_SLOTS, missing=["severity"])],
        )
        output = _capture(print_outcome, outcome)
        assert "needs_clarification" in output
        assert "request_slots: severity" in output


class TestPrintPortion:
    def test_values(self):
        output = _capture(print_portion, PortionInfo(raw="16 oz", normalized_ml=473, multiplier=2.005))
        assert "16 oz" in output
        assert "473" in output
        assert "2.005" in output

    def test_empty(self):
        output = _capture(print_portion, PortionInfo())
        assert "-" in output


class TestPrintSpelling:
    def test_corrections(self):
        result = SpellResult(
            corrected="had coffee",
            corrections=[Correction(original="cofee", corrected="coffee", score=0.961)],
        )
        output = _capture(print_spelling, result)
        assert "had coffee" in output
        assert "cofee" in output
        assert "0.96" in output


class TestPrintHistory:
    def test_displays_entries(self):
        entries = [
            EntryRecord(
                reference="r1",
                intent="food",
                item="oats",
                decision="strict",
                confidence=0.85,
                notes="notes_v=2.1; meal=lunch",
                raw_text="had oats for lunch",
                created_at=datetime(2026, 3, 10, 19, 30, tzinfo=timezone.utc),
            )
        ]
        output = _capture(print_history, entries)
        assert "had oats for lunch" in output
        assert "2026-03-10 19:30" in output
        assert "strict" in output

    def test_empty(self):
        output = _capture(print_history, [])
        assert "Logged Entries" in output


class TestPrintReport:
    def test_report(self):
        report = {
            "total": 4,
            "decisions": {"strict": {"count": 3, "percent": 75.0}},
            "avg_confidence": {"food": 0.85},
            "fallback_calls": 1,
            "cache_hits": 0,
        }
        output = _capture(print_report, report)
        assert "Coverage (4 utterances)" in output
        assert "75.0" in output
        assert "0.85" in output
        assert "fallback calls: 1" in output
        assert "cache hits: 0" in output


class TestMessages:
    def test_error(self):
        assert "Something broke" in _capture(print_error, "Something broke")

    def test_info(self):
        assert "Logged." in _capture(print_info, "Logged.")
