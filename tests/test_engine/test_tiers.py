"""Brutal tests for confidence tiers and the fallback merge."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from healthnlu.engine.metrics import CoverageMetrics
from healthnlu.engine.tiers.accept import LenientTier, MinimalCoreTier, RescuedTier, StrictTier
from healthnlu.engine.tiers.fallback import ExternalFallbackTier, merge_fallback
from healthnlu.engine.tiers.terminal import ClarifyTier, RejectTier
from healthnlu.fallback.llm import FallbackResult, LLMFallback
from healthnlu.models.intent import Decision, IntentType, RescueStrategy
from healthnlu.models.result import ParseResult


def _food(confidence: float, item: str | None = "bagel", meal: str | None = "lunch") -> ParseResult:
    result = ParseResult(raw_text="had a bagel", intent=IntentType.FOOD, confidence=confidence)
    result.set_slot("item", item)
    result.set_slot("meal_time", meal)
    if item is None:
        result.require("item")
    return result


def _fallback(answer: FallbackResult | None) -> AsyncMock:
    fallback = AsyncMock(spec=LLMFallback)
    fallback.extract.return_value = answer
    return fallback


class TestStrictTier:
    @pytest.mark.asyncio
    async def test_accepts_above_threshold(self, food_result):
        outcome = await StrictTier().evaluate(food_result)
        assert outcome.decision == Decision.STRICT
        assert "0.85" in outcome.reasoning

    @pytest.mark.asyncio
    async def test_missing_slot_blocks(self, reflux_missing_result):
        assert await StrictTier().evaluate(reflux_missing_result) is None

    @pytest.mark.asyncio
    async def test_below_threshold(self):
        assert await StrictTier().evaluate(_food(0.79)) is None


class TestLenientTier:
    @pytest.mark.asyncio
    async def test_head_noun_and_time(self):
        result = _food(0.75)
        result.meta.has_head_noun = True
        outcome = await LenientTier().evaluate(result)
        assert outcome.decision == Decision.LENIENT

    @pytest.mark.asyncio
    async def test_needs_head_noun(self):
        assert await LenientTier().evaluate(_food(0.75)) is None

    @pytest.mark.asyncio
    async def test_needs_time_context(self):
        result = _food(0.75, meal=None)
        result.meta.has_head_noun = True
        assert await LenientTier().evaluate(result) is None


class TestMinimalCoreTier:
    @pytest.mark.asyncio
    async def test_accepts_regardless_of_confidence(self):
        result = _food(0.4, item="rice")
        result.meta.minimal_core_food = True
        outcome = await MinimalCoreTier().evaluate(result)
        assert outcome.decision == Decision.MINIMAL_CORE
        assert "rice" in outcome.reasoning

    @pytest.mark.asyncio
    async def test_needs_time(self):
        result = _food(0.4, item="rice", meal=None)
        result.meta.minimal_core_food = True
        assert await MinimalCoreTier().evaluate(result) is None


class TestRescuedTier:
    @pytest.mark.asyncio
    async def test_swap_sides(self):
        result = _food(0.6, item="rice")
        result.meta.rescued_by = RescueStrategy.SWAP_SIDES
        outcome = await RescuedTier().evaluate(result)
        assert outcome.decision == Decision.RESCUED_SWAP_SIDES

    @pytest.mark.asyncio
    async def test_promote_beverage(self):
        result = _food(0.6, item="kombucha")
        result.meta.rescued_by = RescueStrategy.PROMOTE_BEVERAGE
        outcome = await RescuedTier().evaluate(result)
        assert outcome.decision == Decision.RESCUED_PROMOTE_BEVERAGE

    @pytest.mark.asyncio
    async def test_no_rescue(self):
        assert await RescuedTier().evaluate(_food(0.6)) is None


class TestTerminalTiers:
    @pytest.mark.asyncio
    async def test_clarify(self, reflux_missing_result):
        outcome = await ClarifyTier().evaluate(reflux_missing_result)
        assert outcome.decision == Decision.NEEDS_CLARIFICATION
        assert outcome.reasoning == "missing severity"

    @pytest.mark.asyncio
    async def test_clarify_ignores_complete(self, food_result):
        assert await ClarifyTier().evaluate(food_result) is None

    @pytest.mark.asyncio
    async def test_reject(self):
        result = ParseResult(raw_text="pho", confidence=0.3)
        outcome = await RejectTier().evaluate(result)
        assert outcome.decision == Decision.REJECTED

    @pytest.mark.asyncio
    async def test_reject_at_threshold_passes(self):
        result = ParseResult(raw_text="x", confidence=0.5)
        assert await RejectTier().evaluate(result) is None


class TestMergeFallback:
    def test_local_slots_win(self):
        local = _food(0.7, item=None)
        answer = FallbackResult(
            intent=IntentType.FOOD,
            slots={"item": "bagel", "meal_time": "dinner"},
            confidence=0.95,
        )
        merged = merge_fallback(local, answer)
        assert merged.slots["item"] == "bagel"
        assert merged.slots["meal_time"] == "lunch"
        assert merged.missing == []
        assert merged.confidence == pytest.approx(0.85)
        assert merged.meta.llm_used

    def test_original_untouched(self):
        local = _food(0.7, item=None)
        merge_fallback(local, FallbackResult(intent=IntentType.FOOD, slots={"item": "x"}, confidence=0.9))
        assert "item" not in local.slots
        assert local.missing == ["item"]

    def test_local_confidence_kept_when_higher(self):
        local = _food(0.8, item=None)
        merged = merge_fallback(
            local, FallbackResult(intent=IntentType.FOOD, slots={"item": "x"}, confidence=0.4)
        )
        assert merged.confidence == pytest.approx(0.8)


class TestExternalFallbackTier:
    @pytest.mark.asyncio
    async def test_rescues_missing_item(self):
        fallback = _fallback(
            FallbackResult(intent=IntentType.FOOD, slots={"item": "bagel"}, confidence=0.9)
        )
        metrics = CoverageMetrics()
        tier = ExternalFallbackTier(fallback, metrics=metrics)
        outcome = await tier.evaluate(_food(0.7, item=None))
        assert outcome.decision == Decision.RESCUED_LLM
        assert outcome.result.slots["item"] == "bagel"
        assert outcome.reasoning == "fallback filled item"
        fallback.extract.assert_awaited_once_with("had a bagel")
        assert metrics.fallback_calls == 1

    @pytest.mark.asyncio
    async def test_not_called_below_rescue(self):
        fallback = _fallback(None)
        tier = ExternalFallbackTier(fallback)
        assert await tier.evaluate(_food(0.6, item=None)) is None
        fallback.extract.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_called_when_complete(self, food_result):
        fallback = _fallback(None)
        assert await ExternalFallbackTier(fallback).evaluate(food_result) is None
        fallback.extract.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_called_for_small_talk(self):
        fallback = _fallback(None)
        result = ParseResult(raw_text="hi", intent=IntentType.GREETING, confidence=0.95)
        assert await ExternalFallbackTier(fallback).evaluate(result) is None
        fallback.extract.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_none_answer(self):
        tier = ExternalFallbackTier(_fallback(None))
        assert await tier.evaluate(_food(0.7, item=None)) is None

    @pytest.mark.asyncio
    async def test_answer_still_incomplete(self):
        fallback = _fallback(
            FallbackResult(intent=IntentType.FOOD, slots={"meal_time": "dinner"}, confidence=0.9)
        )
        assert await ExternalFallbackTier(fallback).evaluate(_food(0.7, item=None)) is None

    @pytest.mark.asyncio
    async def test_cache_hit_counted(self):
        fallback = _fallback(
            FallbackResult(
                intent=IntentType.FOOD, slots={"item": "bagel"}, confidence=0.9, cached=True
            )
        )
        metrics = CoverageMetrics()
        await ExternalFallbackTier(fallback, metrics=metrics).evaluate(_food(0.7, item=None))
        assert metrics.cache_hits == 1

    @pytest.mark.asyncio
    async def test_no_fallback_configured(self):
        assert await ExternalFallbackTier().evaluate(_food(0.7, item=None)) is None


class TestTierMonotonicity:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("confidence", [0.0, 0.25, 0.49])
    async def test_rejected_never_strict_or_lenient(self, confidence):
        result = _food(confidence)
        result.meta.has_head_noun = True
        assert await StrictTier().evaluate(result) is None
        assert await LenientTier().evaluate(result) is None
        outcome = await RejectTier().evaluate(result)
        assert outcome.decision == Decision.REJECTED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("confidence", [0.72, 0.8, 0.95])
    async def test_accepted_never_rejected(self, confidence):
        result = _food(confidence)
        result.meta.has_head_noun = True
        assert await LenientTier().evaluate(result) is not None
        assert await RejectTier().evaluate(result) is None
