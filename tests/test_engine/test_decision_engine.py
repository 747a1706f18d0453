"""Brutal tests for the decision engine and tier registry."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from healthnlu.engine.decision_engine import DecisionEngine
from healthnlu.engine.metrics import CoverageMetrics
from healthnlu.engine.tier_registry import TierRegistry
from healthnlu.engine.tiers.base import DecisionTier
from healthnlu.fallback.llm import FallbackResult, LLMFallback
from healthnlu.models.decision import DecisionOutcome, EffectKind
from healthnlu.models.intent import Decision, IntentType
from healthnlu.models.result import ParseResult, SecondarySlot


class _RejectEverything(DecisionTier):
    name = "reject_everything"

    async def evaluate(self, result):
        return DecisionOutcome(result=result, decision=Decision.REJECTED, reasoning="custom")


class TestTierRegistry:
    def test_default_order(self):
        names = [t.name for t in TierRegistry().tiers()]
        assert names == [
            "strict", "lenient", "minimal_core", "rescued",
            "external_fallback", "clarify", "reject",
        ]

    def test_get(self):
        registry = TierRegistry()
        assert registry.get("clarify") is not None
        assert registry.get("nope") is None

    def test_tiers_returns_copy(self):
        registry = TierRegistry()
        registry.tiers().clear()
        assert len(registry.tiers()) == 7

    def test_register_appends(self):
        registry = TierRegistry()
        registry.register(_RejectEverything())
        assert registry.tiers()[-1].name == "reject_everything"

    def test_register_before(self):
        registry = TierRegistry()
        registry.register(_RejectEverything(), before="strict")
        assert registry.tiers()[0].name == "reject_everything"

    def test_register_before_unknown(self):
        with pytest.raises(KeyError):
            TierRegistry().register(_RejectEverything(), before="nope")


class TestDecisionEngine:
    @pytest.mark.asyncio
    async def test_strict_food_persists(self, food_result):
        outcome = await DecisionEngine().decide(food_result)
        assert outcome.decision == Decision.STRICT
        assert outcome.accepted
        assert [e.kind for e in outcome.effects] == [EffectKind.PERSIST]
        assert outcome.effects[0].intent == IntentType.FOOD
        assert food_result.decision == Decision.STRICT
        assert food_result.decided_at is not None

    @pytest.mark.asyncio
    async def test_missing_slot_requests_it(self, reflux_missing_result):
        outcome = await DecisionEngine().decide(reflux_missing_result)
        assert outcome.decision == Decision.NEEDS_CLARIFICATION
        assert not outcome.accepted
        (effect,) = outcome.effects
        assert effect.kind == EffectKind.REQUEST_SLOTS
        assert effect.intent == IntentType.REFLUX
        assert effect.missing == ["severity"]

    @pytest.mark.asyncio
    async def test_low_confidence_reprompts(self):
        result = ParseResult(raw_text="pho", confidence=0.3)
        result.missing = ["clarification_needed"]
        outcome = await DecisionEngine().decide(result)
        assert outcome.decision == Decision.REJECTED
        (effect,) = outcome.effects
        assert effect.kind == EffectKind.REPROMPT
        assert effect.text == "pho"

    @pytest.mark.asyncio
    async def test_no_tier_matched_is_default(self):
        result = ParseResult(raw_text="egg bites", intent=IntentType.FOOD, confidence=0.7)
        result.set_slot("item", "egg bites")
        outcome = await DecisionEngine().decide(result)
        assert outcome.decision == Decision.DEFAULT
        assert outcome.accepted
        assert outcome.reasoning == "no tier matched"

    @pytest.mark.asyncio
    async def test_secondary_beverage_reparse(self):
        result = ParseResult(
            raw_text="egg bite and jasmine tea", intent=IntentType.FOOD, confidence=0.7
        )
        result.set_slot("item", "egg bites")
        result.set_secondary(SecondarySlot(item="jasmine tea"))
        outcome = await DecisionEngine().decide(result)
        kinds = [e.kind for e in outcome.effects]
        assert kinds == [EffectKind.PERSIST, EffectKind.REPARSE]
        reparse = outcome.effects_of(EffectKind.REPARSE)[0]
        assert reparse.intent == IntentType.DRINK
        assert reparse.text == "jasmine tea"

    @pytest.mark.asyncio
    async def test_small_talk_not_persisted(self):
        result = ParseResult(raw_text="hi", intent=IntentType.GREETING, confidence=0.95)
        outcome = await DecisionEngine().decide(result)
        assert outcome.decision == Decision.STRICT
        assert outcome.effects == []

    @pytest.mark.asyncio
    async def test_fallback_rescue(self):
        fallback = AsyncMock(spec=LLMFallback)
        fallback.extract.return_value = FallbackResult(
            intent=IntentType.FOOD, slots={"item": "bagel"}, confidence=0.99
        )
        result = ParseResult(raw_text="the usual", intent=IntentType.FOOD, confidence=0.7)
        result.set_slot("meal_time", "lunch")
        result.require("item")
        outcome = await DecisionEngine(fallback=fallback).decide(result)
        assert outcome.decision == Decision.RESCUED_LLM
        assert outcome.result.confidence == pytest.approx(0.85)
        assert outcome.result.decision == Decision.RESCUED_LLM
        assert outcome.effects_of(EffectKind.PERSIST)

    @pytest.mark.asyncio
    async def test_custom_registry(self, food_result):
        registry = TierRegistry()
        registry.register(_RejectEverything(), before="strict")
        outcome = await DecisionEngine(registry).decide(food_result)
        assert outcome.decision == Decision.REJECTED

    @pytest.mark.asyncio
    async def test_metrics_recorded(self, food_result, reflux_missing_result):
        metrics = CoverageMetrics()
        engine = DecisionEngine(metrics=metrics)
        await engine.decide(food_result)
        await engine.decide(reflux_missing_result)
        assert metrics.total == 2
        assert metrics.decisions["strict"] == 1
        assert metrics.decisions["needs_clarification"] == 1
