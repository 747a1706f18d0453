"""Brutal tests for the pending clarification store."""

from __future__ import annotations

import asyncio

import pytest

from healthnlu.dialog.pending import ContextScope, PendingStore, pending_key
from healthnlu.exceptions import ContextKeyError


class TestPendingKey:
    def test_guild_scope(self):
        scope = ContextScope(guild_id="g1", channel_id="c1", user_id="u1")
        assert pending_key(scope) == "pending:g1:c1:u1"

    def test_direct_message_scope(self):
        assert pending_key(ContextScope(channel_id="c1", user_id="u1")) == "pending:dm:c1:u1"

    @pytest.mark.parametrize(
        "scope",
        [ContextScope(user_id="u1"), ContextScope(channel_id="c1"), ContextScope()],
    )
    def test_missing_ids_raise(self, scope):
        with pytest.raises(ContextKeyError):
            pending_key(scope)


class TestPendingStore:
    def test_set_get(self, clock, reflux_missing_result):
        store = PendingStore(clock=clock)
        record = store.set("k", reflux_missing_result)
        assert record.original_text == "acid reflux not feeling well"
        assert record.reference == reflux_missing_result.id
        assert record.expires_at == clock.now + 120
        assert store.get("k") is record
        assert len(store) == 1

    def test_custom_ttl_and_reference(self, clock, reflux_missing_result):
        store = PendingStore(clock=clock)
        record = store.set("k", reflux_missing_result, ttl=5, reference="ref-9")
        assert record.expires_at == clock.now + 5
        assert record.reference == "ref-9"

    def test_lazy_expiry(self, clock, reflux_missing_result):
        store = PendingStore(ttl_seconds=10, clock=clock)
        store.set("k", reflux_missing_result)
        clock.advance(10)
        assert store.get("k") is None
        assert len(store) == 0

    def test_get_soft_extends_near_expiry(self, clock, reflux_missing_result):
        store = PendingStore(ttl_seconds=30, clock=clock)
        store.set("k", reflux_missing_result)
        clock.advance(25)
        record = store.get_soft("k")
        assert record.remaining(clock.now) == pytest.approx(65)

    def test_get_soft_leaves_fresh_record(self, clock, reflux_missing_result):
        store = PendingStore(ttl_seconds=30, clock=clock)
        store.set("k", reflux_missing_result)
        record = store.get_soft("k")
        assert record.remaining(clock.now) == pytest.approx(30)

    def test_get_soft_overrides(self, clock, reflux_missing_result):
        store = PendingStore(ttl_seconds=30, clock=clock)
        store.set("k", reflux_missing_result)
        record = store.get_soft("k", min_remaining=60, extend_by=5)
        assert record.remaining(clock.now) == pytest.approx(35)

    def test_get_soft_expired(self, clock, reflux_missing_result):
        store = PendingStore(ttl_seconds=30, clock=clock)
        store.set("k", reflux_missing_result)
        clock.advance(31)
        assert store.get_soft("k") is None

    def test_clear(self, clock, reflux_missing_result):
        store = PendingStore(clock=clock)
        store.set("k", reflux_missing_result)
        assert store.clear("k")
        assert not store.clear("k")

    def test_sweep(self, clock, reflux_missing_result, food_result):
        store = PendingStore(clock=clock)
        store.set("old", reflux_missing_result, ttl=5)
        store.set("new", food_result, ttl=50)
        clock.advance(10)
        assert store.sweep() == 1
        assert store.get("new") is not None

    @pytest.mark.asyncio
    async def test_sweeper_task_cancels(self, clock, reflux_missing_result):
        store = PendingStore(clock=clock)
        store.set("k", reflux_missing_result, ttl=1)
        clock.advance(2)
        task = asyncio.create_task(store.run_sweeper(interval=0.01))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(store) == 0
