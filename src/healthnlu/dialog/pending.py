"""TTL-keyed store of clarifications awaiting a reply."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from pydantic import BaseModel

from healthnlu.exceptions import ContextKeyError
from healthnlu.memory.models import PendingRecord
from healthnlu.models.result import ParseResult

logger = logging.getLogger(__name__)

AWAITING_SLOT = "awaiting_slot"


class ContextScope(BaseModel):
    guild_id: str | None = None
    channel_id: str | None = None
    user_id: str | None = None


def pending_key(scope: ContextScope) -> str:
    """Composite key; a missing channel or user id is a caller bug."""
    if not scope.channel_id or not scope.user_id:
        raise ContextKeyError(
            f"channel_id and user_id are required (got channel={scope.channel_id!r}, "
            f"user={scope.user_id!r})"
        )
    return f"pending:{scope.guild_id or 'dm'}:{scope.channel_id}:{scope.user_id}"


class PendingStore:
    def __init__(
        self,
        ttl_seconds: float = 120.0,
        min_remaining_seconds: float = 10.0,
        extend_by_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._min_remaining = min_remaining_seconds
        self._extend_by = extend_by_seconds
        self._clock = clock
        self._records: dict[str, PendingRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def set(
        self,
        key: str,
        result: ParseResult,
        original_text: str = "",
        ttl: float | None = None,
        type: str = AWAITING_SLOT,
        reference: str = "",
    ) -> PendingRecord:
        now = self._clock()
        record = PendingRecord(
            type=type,
            result=result,
            original_text=original_text or result.raw_text,
            reference=reference or result.id,
            created_at=now,
            expires_at=now + (self._ttl if ttl is None else ttl),
        )
        self._records[key] = record
        logger.debug("pending set %s (missing %s)", key, result.missing)
        return record

    def get(self, key: str) -> PendingRecord | None:
        record = self._records.get(key)
        if record is None:
            return None
        if record.expires_at <= self._clock():
            del self._records[key]
            logger.info("pending %s expired", key)
            return None
        return record

    def get_soft(
        self,
        key: str,
        min_remaining: float | None = None,
        extend_by: float | None = None,
    ) -> PendingRecord | None:
        """Like ``get``, but pushes the expiry out when the record is about to lapse."""
        record = self.get(key)
        if record is None:
            return None
        min_remaining = self._min_remaining if min_remaining is None else min_remaining
        extend_by = self._extend_by if extend_by is None else extend_by
        if record.remaining(self._clock()) < min_remaining:
            record.expires_at += extend_by
            logger.debug("pending %s soft-extended by %.0fs", key, extend_by)
        return record

    def clear(self, key: str) -> bool:
        removed = self._records.pop(key, None) is not None
        if removed:
            logger.debug("pending %s cleared", key)
        return removed

    def sweep(self) -> int:
        now = self._clock()
        expired = [k for k, r in self._records.items() if r.expires_at <= now]
        for key in expired:
            del self._records[key]
        if expired:
            logger.info("swept %d expired pending record(s)", len(expired))
        return len(expired)

    async def run_sweeper(self, interval: float = 30.0) -> None:
        """Sweep forever; cancel the task to stop."""
        while True:
            await asyncio.sleep(interval)
            self.sweep()
