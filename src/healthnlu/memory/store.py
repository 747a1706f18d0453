"""SQLite-backed entry store and learned-phrase persistence."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

import aiosqlite

from healthnlu.exceptions import StoreUnavailableError
from healthnlu.memory.migrations import TABLES
from healthnlu.memory.models import EntryRecord, LexiconEntry
from healthnlu.memory.notes import build_notes
from healthnlu.models.result import ParseResult

logger = logging.getLogger(__name__)


class EntrySink(Protocol):
    async def has_committed(self, reference: str) -> bool: ...

    async def commit(self, reference: str, result: ParseResult, user_key: str = "") -> bool: ...


class EntryStore:
    """Committed entries and learned phrases.

    Until ``initialize()`` succeeds, and after any database error, reads
    return empty results and writes are dropped.
    """

    def __init__(self, db_path: Path | str = ":memory:") -> None:
        self.db_path = str(db_path)
        self._db: aiosqlite.Connection | None = None

    @property
    def available(self) -> bool:
        return self._db is not None

    async def initialize(self) -> None:
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._db = await aiosqlite.connect(self.db_path)
            for table_sql in TABLES:
                await self._db.execute(table_sql)
            await self._db.commit()
        except (OSError, aiosqlite.Error) as exc:
            logger.warning("entry store unavailable at %s: %s", self.db_path, exc)
            self._db = None

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    def _require_db(self, operation: str) -> aiosqlite.Connection:
        if self._db is None:
            raise StoreUnavailableError("EntryStore not initialized", operation=operation)
        return self._db

    async def has_committed(self, reference: str) -> bool:
        try:
            db = self._require_db("has_committed")
            cursor = await db.execute(
                "SELECT 1 FROM entries WHERE reference = ?", (reference,)
            )
            return await cursor.fetchone() is not None
        except (StoreUnavailableError, aiosqlite.Error) as exc:
            logger.debug("has_committed no-op: %s", exc)
            return False

    async def commit(self, reference: str, result: ParseResult, user_key: str = "") -> bool:
        """Insert once per reference; returns False for a duplicate or a dropped write."""
        record = EntryRecord(
            reference=reference,
            user_key=user_key,
            intent=result.intent.value,
            item=result.item,
            decision=result.decision.value if result.decision else None,
            confidence=result.confidence,
            notes=build_notes(result),
            raw_text=result.raw_text,
        )
        try:
            db = self._require_db("commit")
            cursor = await db.execute(
                "INSERT OR IGNORE INTO entries "
                "(reference, user_key, intent, item, decision, confidence, notes, raw_text, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    record.reference,
                    record.user_key,
                    record.intent,
                    record.item,
                    record.decision,
                    record.confidence,
                    record.notes,
                    record.raw_text,
                    record.created_at.isoformat(),
                ),
            )
            await db.commit()
        except (StoreUnavailableError, aiosqlite.Error) as exc:
            logger.warning("commit of %s dropped: %s", reference, exc)
            return False
        inserted = cursor.rowcount == 1
        if not inserted:
            logger.info("entry %s already committed", reference)
        return inserted

    async def recent_entries(self, limit: int = 20) -> list[EntryRecord]:
        try:
            db = self._require_db("recent_entries")
            cursor = await db.execute(
                "SELECT reference, user_key, intent, item, decision, confidence, notes, "
                "raw_text, created_at FROM entries ORDER BY created_at DESC LIMIT ?",
                (limit,),
            )
            rows = await cursor.fetchall()
        except (StoreUnavailableError, aiosqlite.Error) as exc:
            logger.debug("recent_entries no-op: %s", exc)
            return []
        return [
            EntryRecord(
                reference=r[0],
                user_key=r[1],
                intent=r[2],
                item=r[3],
                decision=r[4],
                confidence=r[5],
                notes=r[6],
                raw_text=r[7],
                created_at=r[8],
            )
            for r in rows
        ]

    async def save_phrase(self, entry: LexiconEntry) -> None:
        try:
            db = self._require_db("save_phrase")
            await db.execute(
                "INSERT OR REPLACE INTO lexicon (user_id, phrase, intent, slots, learned_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    entry.user_id,
                    entry.phrase,
                    entry.intent.value,
                    json.dumps(entry.slots),
                    entry.learned_at.isoformat(),
                ),
            )
            await db.commit()
        except (StoreUnavailableError, aiosqlite.Error) as exc:
            logger.debug("save_phrase no-op: %s", exc)

    async def load_phrases(self) -> list[LexiconEntry]:
        try:
            db = self._require_db("load_phrases")
            cursor = await db.execute(
                "SELECT user_id, phrase, intent, slots, learned_at FROM lexicon"
            )
            rows = await cursor.fetchall()
        except (StoreUnavailableError, aiosqlite.Error) as exc:
            logger.debug("load_phrases no-op: %s", exc)
            return []
        return [
            LexiconEntry(
                user_id=r[0],
                phrase=r[1],
                intent=r[2],
                slots=json.loads(r[3] or "{}"),
                learned_at=r[4],
            )
            for r in rows
        ]
