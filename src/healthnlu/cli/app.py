"""Typer CLI commands."""

from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from healthnlu.cli.output import (
    print_error,
    print_history,
    print_info,
    print_outcome,
    print_portion,
    print_report,
    print_spelling,
)
from healthnlu.cli.prompts import ask_message
from healthnlu.config.log import configure_logging
from healthnlu.dialog.pending import ContextScope
from healthnlu.exceptions import HealthNLUError
from healthnlu.models.intent import IntentType
from healthnlu.parser.portion import parse_portion
from healthnlu.parser.spell import correct_tokens

console = Console()
app = typer.Typer(name="healthnlu", help="Turn informal health-log messages into structured entries.")


def _get_settings():
    from healthnlu.config.settings import Settings
    return Settings()  # type: ignore[call-arg]


def _get_pipeline(settings=None):
    from healthnlu.main import build_pipeline
    return build_pipeline(settings=settings)


def _get_dialog_manager(settings=None, store=None):
    from healthnlu.main import build_dialog_manager
    return build_dialog_manager(settings=settings, store=store)


def _get_store(settings):
    from healthnlu.memory.store import EntryStore
    return EntryStore(db_path=settings.db_path)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Health-log natural-language understanding."""
    level = "DEBUG" if verbose else None
    if level is None:
        try:
            level = _get_settings().log_level
        except Exception:
            level = "INFO"
    configure_logging(level)


@app.command()
def parse(
    text: str = typer.Argument(..., help="Message to parse"),
    tz: Optional[str] = typer.Option(None, "--tz", help="IANA timezone of the sender"),
    intent: Optional[IntentType] = typer.Option(None, "--intent", help="Force an intent"),
) -> None:
    """Parse one message and show the decision."""
    async def _run():
        pipeline = _get_pipeline()
        try:
            outcome = await pipeline.run(text, timezone=tz, forced_intent=intent)
        except HealthNLUError as exc:
            print_error(str(exc))
            raise typer.Exit(1)
        print_outcome(outcome)

    asyncio.run(_run())


@app.command()
def portion(
    text: str = typer.Argument(..., help="Portion text, e.g. '1/2 cup' or '16oz'"),
    item_type: str = typer.Option("food", "--type", help="food or drink"),
) -> None:
    """Normalize a portion expression."""
    if item_type not in ("food", "drink"):
        print_error("--type must be 'food' or 'drink'")
        raise typer.Exit(1)
    print_portion(parse_portion(text, item_type))


@app.command()
def spell(
    text: str = typer.Argument(..., help="Text to spell-correct"),
) -> None:
    """Show the spell corrector's substitutions."""
    settings = _get_settings()
    print_spelling(
        correct_tokens(
            text,
            threshold=settings.spell_threshold,
            protected_threshold=settings.spell_protected_threshold,
        )
    )


@app.command()
def chat(
    user: str = typer.Option("local", "--user", help="User id for pending state and lexicon"),
    tz: Optional[str] = typer.Option(None, "--tz", help="IANA timezone of the sender"),
) -> None:
    """Interactive logging with follow-up questions for missing details."""
    async def _run():
        settings = _get_settings()
        store = _get_store(settings)
        await store.initialize()
        manager = _get_dialog_manager(settings, store)
        await manager.lexicon.load()
        scope = ContextScope(channel_id="cli", user_id=user)
        sweeper = asyncio.create_task(
            manager.pending.run_sweeper(settings.sweep_interval_seconds)
        )
        prompt = ""
        try:
            while True:
                text = ask_message(prompt)
                if text is None:
                    break
                if not text.strip():
                    continue
                turn = await manager.handle(text, scope, timezone=tz)
                if turn.outcome is not None:
                    print_outcome(turn.outcome)
                if turn.committed:
                    print_info("Logged.")
                prompt = turn.prompt
        finally:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper
            await store.close()

    asyncio.run(_run())


@app.command()
def history(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of records"),
) -> None:
    """Show recently logged entries."""
    async def _run():
        store = _get_store(_get_settings())
        await store.initialize()
        try:
            entries = await store.recent_entries(limit=limit)
            if not entries:
                print_info("No entries logged yet.")
            else:
                print_history(entries)
        finally:
            await store.close()

    asyncio.run(_run())


@app.command()
def bench(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="One message per line"),
    tz: Optional[str] = typer.Option(None, "--tz", help="IANA timezone of the sender"),
) -> None:
    """Parse every line of a file and report decision coverage."""
    lines = [line.strip() for line in file.read_text(encoding="utf-8").splitlines()]
    lines = [line for line in lines if line and not line.startswith("#")]

    async def _run():
        pipeline = _get_pipeline()
        for line in lines:
            await pipeline.run(line, timezone=tz)
        print_report(pipeline.context.metrics.report())

    asyncio.run(_run())


@app.command(name="config")
def show_config() -> None:
    """Show current configuration."""
    try:
        settings = _get_settings()
    except Exception as exc:
        print_error(f"Failed to load settings: {exc}")
        raise typer.Exit(1)

    table_data = {
        "Model": settings.openai_model,
        "Fallback": "enabled" if settings.openai_api_key else "disabled (no API key)",
        "Fallback Timeout": f"{settings.fallback_timeout_ms} ms",
        "Timezone": settings.timezone,
        "DB Path": str(settings.db_path),
        "Log Level": settings.log_level,
        "Thresholds": (
            f"strict {settings.strict_threshold:.2f} / lenient {settings.lenient_threshold:.2f}"
            f" / rescue {settings.rescue_threshold:.2f} / reject {settings.reject_threshold:.2f}"
        ),
        "Spelling": (
            f"{settings.spell_threshold:.2f} (protected {settings.spell_protected_threshold:.2f})"
        ),
        "Pending TTL": f"{settings.pending_ttl_seconds:g}s",
    }

    table = Table(title="Configuration", show_header=False)
    table.add_column("Setting", style="bold cyan")
    table.add_column("Value")
    for k, v in table_data.items():
        table.add_row(k, v)
    console.print(table)
