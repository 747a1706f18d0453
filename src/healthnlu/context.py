"""Caller-owned mutable state shared across utterances."""

from __future__ import annotations

from healthnlu.config.settings import Settings
from healthnlu.dialog.pending import PendingStore
from healthnlu.engine.metrics import CoverageMetrics
from healthnlu.memory.lexicon import UserLexicon
from healthnlu.memory.store import EntryStore


class NLUContext:
    """Coverage metrics, pending clarifications and learned phrases for one process."""

    def __init__(
        self,
        metrics: CoverageMetrics | None = None,
        pending: PendingStore | None = None,
        lexicon: UserLexicon | None = None,
    ) -> None:
        self.metrics = metrics or CoverageMetrics()
        self.pending = pending if pending is not None else PendingStore()
        self.lexicon = lexicon if lexicon is not None else UserLexicon()

    @classmethod
    def from_settings(cls, settings: Settings, store: EntryStore | None = None) -> NLUContext:
        return cls(
            pending=PendingStore(
                ttl_seconds=settings.pending_ttl_seconds,
                min_remaining_seconds=settings.soft_extend_min_remaining_seconds,
                extend_by_seconds=settings.soft_extend_by_seconds,
            ),
            lexicon=UserLexicon(store),
        )
