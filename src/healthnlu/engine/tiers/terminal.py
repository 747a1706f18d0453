"""Tiers that stop a result from being logged: clarify and reject."""

from __future__ import annotations

from healthnlu.engine.tiers.base import DecisionTier
from healthnlu.models.decision import DecisionOutcome
from healthnlu.models.intent import Decision
from healthnlu.models.result import ParseResult


class ClarifyTier(DecisionTier):
    name = "clarify"

    async def evaluate(self, result: ParseResult) -> DecisionOutcome | None:
        missing = result.required_missing()
        if not missing:
            return None
        return DecisionOutcome(
            result=result,
            decision=Decision.NEEDS_CLARIFICATION,
            reasoning=f"missing {', '.join(missing)}",
        )


class RejectTier(DecisionTier):
    name = "reject"

    async def evaluate(self, result: ParseResult) -> DecisionOutcome | None:
        if result.confidence >= self._thresholds.reject:
            return None
        return DecisionOutcome(
            result=result,
            decision=Decision.REJECTED,
            reasoning=f"confidence {result.confidence:.2f} < {self._thresholds.reject:.2f}",
        )
