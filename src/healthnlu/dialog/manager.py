"""Multi-turn slot completion: idle -> awaiting_slot -> idle."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import datetime

from pydantic import BaseModel, Field

from healthnlu.dialog.pending import ContextScope, PendingStore, pending_key
from healthnlu.memory.lexicon import UserLexicon
from healthnlu.memory.models import PendingRecord
from healthnlu.memory.store import EntrySink
from healthnlu.models.decision import DecisionOutcome, EffectKind
from healthnlu.models.intent import LOGGABLE_INTENTS, Decision
from healthnlu.models.result import ParseResult
from healthnlu.ontology import lexicons as lx
from healthnlu.parser.stages.forced import FORCED_CONFIDENCE, parse_slot_answer
from healthnlu.pipeline import NLUPipeline

logger = logging.getLogger(__name__)

IDLE = "idle"
AWAITING_SLOT = "awaiting_slot"

SLOT_PROMPTS = {
    "severity": "How bad is it on a scale of 1 to 10?",
    "bristol": "What type was it on the Bristol scale (1-7)?",
    "item": "What did you have?",
}
REPROMPT = "Sorry, I didn't catch that. Could you say it another way?"
CANCELLED = "Okay, cancelled."


class DialogTurn(BaseModel):
    state: str = IDLE
    outcome: DecisionOutcome | None = None
    prompt: str = ""
    committed: bool = False
    awaiting: list[str] = Field(default_factory=list)
    secondary: DecisionOutcome | None = None


def is_cancel(text: str) -> bool:
    lowered = " ".join(text.lower().split()).strip(" .!")
    return lowered in lx.CANCEL_WORDS


class DialogManager:
    def __init__(
        self,
        pipeline: NLUPipeline,
        pending: PendingStore | None = None,
        sink: EntrySink | None = None,
        lexicon: UserLexicon | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._pending = pending if pending is not None else pipeline.context.pending
        self._sink = sink
        self._lexicon = lexicon if lexicon is not None else pipeline.context.lexicon
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @property
    def lexicon(self) -> UserLexicon:
        return self._lexicon

    @property
    def pending(self) -> PendingStore:
        return self._pending

    @contextlib.asynccontextmanager
    async def _turn(self, key: str):
        """Serialise turns per key; the lock is dropped once no turn holds or awaits it."""
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    async def handle(
        self,
        text: str,
        scope: ContextScope,
        timezone: str | None = None,
        now: datetime | None = None,
    ) -> DialogTurn:
        key = pending_key(scope)
        async with self._turn(key):
            record = self._pending.get_soft(key)
            if record is not None:
                if is_cancel(text):
                    self._pending.clear(key)
                    logger.info("pending %s cancelled by user", key)
                    return DialogTurn(state=IDLE, prompt=CANCELLED)
                return await self._continue(key, record, text, scope, timezone, now)

            outcome = await self._pipeline.run(
                text, timezone=timezone, user_id=scope.user_id, now=now
            )
            return await self._dispatch(key, outcome, scope, timezone, now)

    async def _dispatch(
        self,
        key: str,
        outcome: DecisionOutcome,
        scope: ContextScope,
        timezone: str | None,
        now: datetime | None,
    ) -> DialogTurn:
        result = outcome.result
        if outcome.decision == Decision.NEEDS_CLARIFICATION:
            self._pending.set(key, result, original_text=result.raw_text)
            missing = result.required_missing()
            return DialogTurn(
                state=AWAITING_SLOT,
                outcome=outcome,
                prompt=SLOT_PROMPTS.get(missing[0], REPROMPT),
                awaiting=missing,
            )
        if outcome.decision == Decision.REJECTED:
            return DialogTurn(state=IDLE, outcome=outcome, prompt=REPROMPT)

        committed = False
        if outcome.effects_of(EffectKind.PERSIST):
            committed = await self._commit(result.id, result, scope)
        secondary = None
        for effect in outcome.effects_of(EffectKind.REPARSE):
            secondary = await self._pipeline.run(
                effect.text,
                timezone=timezone,
                forced_intent=effect.intent,
                user_id=scope.user_id,
                now=now,
            )
            if secondary.accepted and secondary.result.intent in LOGGABLE_INTENTS:
                await self._commit(f"{result.id}:secondary", secondary.result, scope)
        return DialogTurn(state=IDLE, outcome=outcome, committed=committed, secondary=secondary)

    async def _continue(
        self,
        key: str,
        record: PendingRecord,
        text: str,
        scope: ContextScope,
        timezone: str | None,
        now: datetime | None,
    ) -> DialogTurn:
        result = record.result.model_copy(deep=True)
        missing = result.required_missing()
        filled = parse_slot_answer(missing[0], text) if missing else {}
        if not filled:
            reparsed = self._pipeline.extract(
                text, timezone=timezone, forced_intent=result.intent, now=now
            )
            filled = {k: v for k, v in reparsed.public_slots().items() if k not in result.slots}
        for name, value in filled.items():
            result.set_slot(name, value)

        missing = result.required_missing()
        if missing:
            record.result = result
            return DialogTurn(
                state=AWAITING_SLOT,
                prompt=SLOT_PROMPTS.get(missing[0], REPROMPT),
                awaiting=missing,
            )

        # The user answered the question directly.
        result.confidence = max(result.confidence, FORCED_CONFIDENCE)
        outcome = await self._pipeline.decide(result)
        committed = False
        if outcome.accepted:
            committed = await self._commit(record.reference, outcome.result, scope)
            await self._lexicon.learn(scope.user_id, record.original_text, outcome.result)
        self._pending.clear(key)
        return DialogTurn(state=IDLE, outcome=outcome, committed=committed)

    async def _commit(self, reference: str, result: ParseResult, scope: ContextScope) -> bool:
        if self._sink is None:
            return False
        if await self._sink.has_committed(reference):
            logger.info("entry %s already committed, skipping", reference)
            return False
        return await self._sink.commit(reference, result, user_key=scope.user_id or "")
