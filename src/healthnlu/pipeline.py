"""Pipeline orchestrator: lexicon lookup, rules extraction, then the decision engine."""

from __future__ import annotations

import logging
from datetime import datetime

from healthnlu.context import NLUContext
from healthnlu.engine.decision_engine import DecisionEngine
from healthnlu.memory.models import LexiconEntry
from healthnlu.models.decision import DecisionOutcome
from healthnlu.models.intent import IntentType
from healthnlu.models.result import ParseResult
from healthnlu.parser.extractor import RulesExtractor
from healthnlu.parser.stages.base import ExtractionState
from healthnlu.parser.timeparse import DEFAULT_TIMEZONE, parse_time_info

logger = logging.getLogger(__name__)

LEXICON_CONFIDENCE = 0.95
LEXICON_STAGE = "lexicon"


class NLUPipeline:
    def __init__(
        self,
        extractor: RulesExtractor | None = None,
        engine: DecisionEngine | None = None,
        context: NLUContext | None = None,
        timezone: str = DEFAULT_TIMEZONE,
    ) -> None:
        self.context = context or NLUContext()
        self._extractor = extractor or RulesExtractor()
        self._engine = engine or DecisionEngine(metrics=self.context.metrics)
        self._timezone = timezone

    def _from_lexicon(
        self, entry: LexiconEntry, text: str, timezone: str, now: datetime | None
    ) -> ParseResult:
        state = ExtractionState(text, timezone=timezone, now=now)
        for name, value in entry.slots.items():
            state.result.set_slot(name, value)
        state.result.meta.lexicon_hit = True
        state.result.meta.stage = LEXICON_STAGE
        state.apply_time(parse_time_info(state.lowered, timezone, now, infer=False))
        state.infer_time()
        result = state.finish(entry.intent, LEXICON_CONFIDENCE)
        for name in result.required_missing():
            result.require(name)
        return result

    def extract(
        self,
        text: str,
        timezone: str | None = None,
        forced_intent: IntentType | None = None,
        user_id: str | None = None,
        now: datetime | None = None,
    ) -> ParseResult:
        tz = timezone or self._timezone
        if forced_intent is None:
            entry = self.context.lexicon.lookup(user_id, text)
            if entry is not None:
                logger.debug("lexicon hit for user %s: %r", user_id, entry.phrase)
                return self._from_lexicon(entry, text, tz, now)
        return self._extractor.extract(text, timezone=tz, forced_intent=forced_intent, now=now)

    async def run(
        self,
        text: str,
        timezone: str | None = None,
        forced_intent: IntentType | None = None,
        user_id: str | None = None,
        now: datetime | None = None,
    ) -> DecisionOutcome:
        result = self.extract(text, timezone, forced_intent, user_id, now)
        return await self._engine.decide(result)

    async def understand(
        self,
        text: str,
        timezone: str | None = None,
        forced_intent: IntentType | None = None,
        user_id: str | None = None,
        now: datetime | None = None,
    ) -> ParseResult:
        outcome = await self.run(text, timezone, forced_intent, user_id, now)
        return outcome.result

    async def decide(self, result: ParseResult) -> DecisionOutcome:
        """Run the decision engine over an already extracted (or merged) result."""
        return await self._engine.decide(result)
