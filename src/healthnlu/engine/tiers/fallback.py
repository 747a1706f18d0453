"""External-fallback tier: ask the LLM for the slots the rules could not fill."""

from __future__ import annotations

import logging

from healthnlu.engine.metrics import CoverageMetrics
from healthnlu.engine.tiers.base import DecisionTier
from healthnlu.fallback.llm import FallbackResult, LLMFallback
from healthnlu.models.decision import DecisionOutcome
from healthnlu.models.intent import LOGGABLE_INTENTS, Decision
from healthnlu.models.result import ParseResult
from healthnlu.ontology.thresholds import FALLBACK_CONFIDENCE_CAP, ConfidenceThresholds

logger = logging.getLogger(__name__)


def merge_fallback(result: ParseResult, answer: FallbackResult) -> ParseResult:
    """Merge fallback slots into a copy of ``result``; locally derived slots win."""
    merged = result.model_copy(deep=True)
    for name, value in answer.slots.items():
        if name not in merged.slots:
            merged.set_slot(name, value)
    merged.missing = [m for m in merged.missing if m not in merged.slots]
    for name in merged.required_missing():
        merged.require(name)
    merged.confidence = round(
        min(max(result.confidence, answer.confidence), FALLBACK_CONFIDENCE_CAP), 4
    )
    merged.meta.llm_used = True
    return merged


class ExternalFallbackTier(DecisionTier):
    name = "external_fallback"

    def __init__(
        self,
        fallback: LLMFallback | None = None,
        thresholds: ConfidenceThresholds | None = None,
        metrics: CoverageMetrics | None = None,
    ) -> None:
        super().__init__(thresholds)
        self._fallback = fallback
        self._metrics = metrics

    async def evaluate(self, result: ParseResult) -> DecisionOutcome | None:
        if self._fallback is None:
            return None
        if result.confidence < self._thresholds.rescue:
            return None
        if result.intent not in LOGGABLE_INTENTS or not result.has_required_missing():
            return None

        answer = await self._fallback.extract(result.raw_text)
        if answer is None:
            return None
        if self._metrics is not None:
            self._metrics.record_fallback(cached=answer.cached)

        merged = merge_fallback(result, answer)
        if merged.has_required_missing():
            logger.info("fallback left %s missing", ", ".join(merged.required_missing()))
            return None
        return DecisionOutcome(
            result=merged,
            decision=Decision.RESCUED_LLM,
            reasoning=f"fallback filled {', '.join(result.required_missing())}",
        )
