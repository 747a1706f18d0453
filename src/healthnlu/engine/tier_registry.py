"""Ordered registry of confidence tiers."""

from __future__ import annotations

from healthnlu.engine.metrics import CoverageMetrics
from healthnlu.engine.tiers.accept import LenientTier, MinimalCoreTier, RescuedTier, StrictTier
from healthnlu.engine.tiers.base import DecisionTier
from healthnlu.engine.tiers.fallback import ExternalFallbackTier
from healthnlu.engine.tiers.terminal import ClarifyTier, RejectTier
from healthnlu.fallback.llm import LLMFallback
from healthnlu.ontology.thresholds import ConfidenceThresholds


class TierRegistry:
    def __init__(
        self,
        thresholds: ConfidenceThresholds | None = None,
        fallback: LLMFallback | None = None,
        metrics: CoverageMetrics | None = None,
    ) -> None:
        thresholds = thresholds or ConfidenceThresholds()
        self._tiers: list[DecisionTier] = [
            StrictTier(thresholds),
            LenientTier(thresholds),
            MinimalCoreTier(thresholds),
            RescuedTier(thresholds),
            ExternalFallbackTier(fallback, thresholds, metrics),
            ClarifyTier(thresholds),
            RejectTier(thresholds),
        ]

    def tiers(self) -> list[DecisionTier]:
        return list(self._tiers)

    def get(self, name: str) -> DecisionTier | None:
        for tier in self._tiers:
            if tier.name == name:
                return tier
        return None

    def register(self, tier: DecisionTier, before: str | None = None) -> None:
        """Add a tier at the end, or just ahead of the tier named ``before``."""
        if before is None:
            self._tiers.append(tier)
            return
        for index, existing in enumerate(self._tiers):
            if existing.name == before:
                self._tiers.insert(index, tier)
                return
        raise KeyError(f"No tier named {before!r}")
