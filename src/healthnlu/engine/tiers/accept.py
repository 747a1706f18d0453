"""Acceptance tiers: strict, lenient, minimal-core and rescued."""

from __future__ import annotations

from healthnlu.engine.tiers.base import DecisionTier
from healthnlu.models.decision import DecisionOutcome
from healthnlu.models.intent import RESCUE_DECISIONS, Decision
from healthnlu.models.result import ParseResult


class StrictTier(DecisionTier):
    name = "strict"

    async def evaluate(self, result: ParseResult) -> DecisionOutcome | None:
        if result.confidence < self._thresholds.strict or result.has_required_missing():
            return None
        return DecisionOutcome(
            result=result,
            decision=Decision.STRICT,
            reasoning=f"confidence {result.confidence:.2f} >= {self._thresholds.strict:.2f}",
        )


class LenientTier(DecisionTier):
    name = "lenient"

    async def evaluate(self, result: ParseResult) -> DecisionOutcome | None:
        if result.confidence < self._thresholds.lenient:
            return None
        if not (result.meta.has_head_noun and result.has_time_context()):
            return None
        if result.has_required_missing():
            return None
        return DecisionOutcome(
            result=result,
            decision=Decision.LENIENT,
            reasoning="head noun and time context above lenient threshold",
        )


class MinimalCoreTier(DecisionTier):
    name = "minimal_core"

    async def evaluate(self, result: ParseResult) -> DecisionOutcome | None:
        if not (result.meta.minimal_core_food and result.item and result.has_time_context()):
            return None
        return DecisionOutcome(
            result=result,
            decision=Decision.MINIMAL_CORE,
            reasoning=f"{result.item!r} is a minimal core food with time context",
        )


class RescuedTier(DecisionTier):
    name = "rescued"

    async def evaluate(self, result: ParseResult) -> DecisionOutcome | None:
        strategy = result.meta.rescued_by
        if strategy is None:
            return None
        return DecisionOutcome(
            result=result,
            decision=RESCUE_DECISIONS[strategy],
            reasoning=f"rescued by {strategy.value}",
        )
