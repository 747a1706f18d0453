"""Decision coverage counters, owned by the caller's NLUContext."""

from __future__ import annotations

from collections import Counter, defaultdict
from typing import Any

from healthnlu.models.decision import DecisionOutcome


class CoverageMetrics:
    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.total = 0
        self.decisions: Counter[str] = Counter()
        self._confidence: defaultdict[str, list[float]] = defaultdict(lambda: [0.0, 0])
        self.fallback_calls = 0
        self.cache_hits = 0

    def record(self, outcome: DecisionOutcome) -> None:
        self.total += 1
        self.decisions[outcome.decision.value] += 1
        bucket = self._confidence[outcome.result.intent.value]
        bucket[0] += outcome.result.confidence
        bucket[1] += 1

    def record_fallback(self, cached: bool = False) -> None:
        self.fallback_calls += 1
        if cached:
            self.cache_hits += 1

    def average_confidence(self, intent: str) -> float:
        total, count = self._confidence.get(intent, (0.0, 0))
        return round(total / count, 3) if count else 0.0

    def report(self) -> dict[str, Any]:
        def pct(n: int) -> float:
            return round(100.0 * n / self.total, 1) if self.total else 0.0

        return {
            "total": self.total,
            "decisions": {
                name: {"count": count, "percent": pct(count)}
                for name, count in self.decisions.most_common()
            },
            "avg_confidence": {
                intent: self.average_confidence(intent) for intent in sorted(self._confidence)
            },
            "fallback_calls": self.fallback_calls,
            "cache_hits": self.cache_hits,
        }
