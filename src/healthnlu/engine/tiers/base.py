"""Abstract base for confidence tiers."""

from __future__ import annotations

import abc

from healthnlu.models.decision import DecisionOutcome
from healthnlu.models.result import ParseResult
from healthnlu.ontology.thresholds import ConfidenceThresholds


class DecisionTier(abc.ABC):
    name: str = ""

    def __init__(self, thresholds: ConfidenceThresholds | None = None) -> None:
        self._thresholds = thresholds or ConfidenceThresholds()

    @abc.abstractmethod
    async def evaluate(self, result: ParseResult) -> DecisionOutcome | None:
        """Return an outcome when this tier decides the result, else None."""
        ...  # pragma: no cover
