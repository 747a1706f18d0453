"""Entry point and dependency wiring."""

from __future__ import annotations

from healthnlu.cli.app import app
from healthnlu.config.settings import Settings
from healthnlu.context import NLUContext
from healthnlu.dialog.manager import DialogManager
from healthnlu.engine.decision_engine import DecisionEngine
from healthnlu.engine.tier_registry import TierRegistry
from healthnlu.fallback.llm import LLMFallback
from healthnlu.memory.store import EntryStore
from healthnlu.parser.extractor import RulesExtractor
from healthnlu.pipeline import NLUPipeline


def build_pipeline(
    settings: Settings | None = None,
    store: EntryStore | None = None,
) -> NLUPipeline:
    settings = settings or Settings()  # type: ignore[call-arg]

    context = NLUContext.from_settings(settings, store=store)
    thresholds = settings.thresholds()
    extractor = RulesExtractor(thresholds)
    fallback = LLMFallback(settings)
    registry = TierRegistry(thresholds, fallback=fallback, metrics=context.metrics)
    engine = DecisionEngine(registry, metrics=context.metrics)

    return NLUPipeline(
        extractor=extractor,
        engine=engine,
        context=context,
        timezone=settings.timezone,
    )


def build_dialog_manager(
    settings: Settings | None = None,
    store: EntryStore | None = None,
) -> DialogManager:
    settings = settings or Settings()  # type: ignore[call-arg]
    store = store or EntryStore(db_path=settings.db_path)
    pipeline = build_pipeline(settings, store=store)
    return DialogManager(pipeline, sink=store)


if __name__ == "__main__":
    app()
