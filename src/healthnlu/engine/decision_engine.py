"""Decision engine: assigns a confidence tier and the side effects the caller performs."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from healthnlu.engine.metrics import CoverageMetrics
from healthnlu.engine.tier_registry import TierRegistry
from healthnlu.fallback.llm import LLMFallback
from healthnlu.models.decision import DecisionOutcome, Effect, EffectKind
from healthnlu.models.intent import LOGGABLE_INTENTS, Decision
from healthnlu.models.result import ParseResult
from healthnlu.ontology.thresholds import ConfidenceThresholds

logger = logging.getLogger(__name__)


class DecisionEngine:
    def __init__(
        self,
        registry: TierRegistry | None = None,
        thresholds: ConfidenceThresholds | None = None,
        fallback: LLMFallback | None = None,
        metrics: CoverageMetrics | None = None,
    ) -> None:
        self._registry = registry or TierRegistry(thresholds, fallback, metrics)
        self._metrics = metrics

    async def decide(self, result: ParseResult) -> DecisionOutcome:
        outcome = None
        for tier in self._registry.tiers():
            outcome = await tier.evaluate(result)
            if outcome is not None:
                break
        if outcome is None:
            outcome = DecisionOutcome(
                result=result,
                decision=Decision.DEFAULT,
                reasoning="no tier matched",
            )

        final = outcome.result
        final.decision = outcome.decision
        final.decided_at = datetime.now(timezone.utc)
        outcome.effects = self._effects(outcome)
        logger.info(
            "%s -> %s (%s, %.2f)",
            final.raw_text,
            outcome.decision.value,
            final.intent.value,
            final.confidence,
        )
        if self._metrics is not None:
            self._metrics.record(outcome)
        return outcome

    def _effects(self, outcome: DecisionOutcome) -> list[Effect]:
        result = outcome.result
        effects: list[Effect] = []
        if outcome.decision == Decision.NEEDS_CLARIFICATION:
            effects.append(
                Effect(
                    kind=EffectKind.REQUEST_SLOTS,
                    intent=result.intent,
                    missing=result.required_missing(),
                )
            )
        elif outcome.decision == Decision.REJECTED:
            effects.append(Effect(kind=EffectKind.REPROMPT, text=result.raw_text))
        elif outcome.accepted:
            if result.intent in LOGGABLE_INTENTS:
                effects.append(Effect(kind=EffectKind.PERSIST, intent=result.intent))
            secondary = result.secondary
            if secondary is not None:
                effects.append(
                    Effect(kind=EffectKind.REPARSE, intent=secondary.intent, text=secondary.item)
                )
        return effects
