"""Extraction stage interface and the per-utterance state stages share."""

from __future__ import annotations

import abc
from datetime import datetime

from healthnlu.models.intent import IntentType
from healthnlu.models.result import ParseResult
from healthnlu.models.signals import TimeInfo
from healthnlu.ontology.thresholds import ConfidenceThresholds
from healthnlu.parser.items import ItemExtraction
from healthnlu.parser.timeparse import DEFAULT_TIMEZONE, infer_meal_window

INFERRED_NOTE = "inferred from current time"


class ExtractionState:
    def __init__(
        self,
        raw_text: str,
        timezone: str | None = DEFAULT_TIMEZONE,
        now: datetime | None = None,
        forced_intent: IntentType | None = None,
        thresholds: ConfidenceThresholds | None = None,
    ) -> None:
        self.raw_text = raw_text
        self.lowered = " ".join(raw_text.lower().split())
        self.cleaned = self.lowered
        self.timezone = timezone or DEFAULT_TIMEZONE
        self.now = now
        self.forced_intent = forced_intent
        self.thresholds = thresholds or ConfidenceThresholds()
        self.result = ParseResult(raw_text=raw_text)
        self.time_info = TimeInfo()
        self.items: ItemExtraction | None = None

    def apply_time(self, info: TimeInfo) -> None:
        self.time_info = info
        result = self.result
        result.set_slot("time", info.time)
        result.set_slot("timestamp", info.timestamp)
        result.set_slot("meal_time", info.meal_time)
        result.set_slot("time_approx", info.approx)
        if info.inferred:
            result.set_slot("meal_time_note", INFERRED_NOTE)
            result.meta.time_inferred = True

    def infer_time(self) -> None:
        """Fill meal_time from the clock when the text stated no time."""
        if self.result.has_time_context():
            return
        self.apply_time(infer_meal_window(self.timezone, self.now))

    def finish(self, intent: IntentType, confidence: float) -> ParseResult:
        self.result.intent = intent
        self.result.confidence = round(min(max(confidence, 0.0), 1.0), 4)
        return self.result


class ExtractionStage(abc.ABC):
    name: str = ""

    @abc.abstractmethod
    def run(self, state: ExtractionState) -> ParseResult | None:
        """Return a finished result to stop, or None to continue with the next stage."""
        ...  # pragma: no cover
