"""Per-user phrase lexicon learned from completed clarifications."""

from __future__ import annotations

import logging
import re

from healthnlu.memory.models import LexiconEntry
from healthnlu.memory.store import EntryStore
from healthnlu.models.result import ParseResult

logger = logging.getLogger(__name__)

# Time and measurement slots describe one occasion, not the phrase.
TIME_SLOTS = frozenset({"time", "timestamp", "meal_time", "time_approx", "meal_time_note"})
MEASUREMENT_SLOTS = frozenset({"severity", "severity_note", "bristol", "bristol_note"})
OCCASION_SLOTS = TIME_SLOTS | MEASUREMENT_SLOTS

_PUNCT_RE = re.compile(r"[^\w\s'/%.-]")


def phrase_key(text: str) -> str:
    return " ".join(_PUNCT_RE.sub(" ", text.lower()).split())


class UserLexicon:
    def __init__(self, store: EntryStore | None = None) -> None:
        self._store = store
        self._entries: dict[str, dict[str, LexiconEntry]] = {}

    def __len__(self) -> int:
        return sum(len(phrases) for phrases in self._entries.values())

    async def load(self) -> int:
        if self._store is None:
            return 0
        entries = await self._store.load_phrases()
        for entry in entries:
            self._entries.setdefault(entry.user_id, {})[entry.phrase] = entry
        logger.debug("loaded %d learned phrases", len(entries))
        return len(entries)

    async def learn(self, user_id: str, phrase: str, result: ParseResult) -> LexiconEntry | None:
        key = phrase_key(phrase)
        if not user_id or not key:
            return None
        slots = {k: v for k, v in result.public_slots().items() if k not in OCCASION_SLOTS}
        if not slots:
            logger.debug("nothing durable to learn from %r", key)
            return None
        entry = LexiconEntry(
            user_id=user_id,
            phrase=key,
            intent=result.intent,
            slots=slots,
        )
        self._entries.setdefault(user_id, {})[key] = entry
        if self._store is not None:
            await self._store.save_phrase(entry)
        logger.info("learned %r as %s for user %s", key, entry.intent.value, user_id)
        return entry

    def lookup(self, user_id: str | None, text: str) -> LexiconEntry | None:
        if not user_id:
            return None
        return self._entries.get(user_id, {}).get(phrase_key(text))
