"""Rich display helpers for CLI output."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from healthnlu.memory.models import EntryRecord
from healthnlu.models.decision import DecisionOutcome
from healthnlu.models.result import ParseResult
from healthnlu.models.signals import PortionInfo, SpellResult

console = Console()


def _fmt(value: Any) -> str:
    if isinstance(value, dict):
        return ", ".join(f"{k}={v}" for k, v in value.items())
    return str(value)


def print_result(result: ParseResult) -> None:
    table = Table(title="Parse Result", show_header=False, expand=True)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Intent", result.intent.value)
    table.add_row("Confidence", f"{result.confidence:.0%}")
    for name, value in result.slots.items():
        table.add_row(name, _fmt(value))
    if result.missing:
        table.add_row("Missing", "[yellow]" + ", ".join(result.missing) + "[/]")
    if result.meta.rescued_by:
        table.add_row("Rescued by", result.meta.rescued_by.value)
    if result.meta.spelling_corrected:
        fixes = ", ".join(f"{c.original}->{c.corrected}" for c in result.meta.spelling_corrected)
        table.add_row("Spelling", fixes)
    if result.meta.stage:
        table.add_row("Stage", result.meta.stage)
    console.print(table)


def print_outcome(outcome: DecisionOutcome) -> None:
    print_result(outcome.result)
    style = "green" if outcome.accepted else "yellow"
    console.print(f"Decision: [{style}]{outcome.decision.value}[/] [dim]({outcome.reasoning})[/]")
    for effect in outcome.effects:
        detail = ", ".join(effect.missing) or effect.text
        console.print(f"  -> {effect.kind.value}" + (f": {detail}" if detail else ""))


def print_portion(portion: PortionInfo) -> None:
    table = Table(title="Portion", show_header=False)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Raw", portion.raw or "-")
    table.add_row("Grams", "-" if portion.normalized_g is None else str(portion.normalized_g))
    table.add_row("Millilitres", "-" if portion.normalized_ml is None else str(portion.normalized_ml))
    table.add_row("Multiplier", f"{portion.multiplier:g}")
    console.print(table)


def print_spelling(result: SpellResult) -> None:
    console.print(f"[bold]{result.corrected}[/]")
    for c in result.corrections:
        console.print(f"  {c.original} -> [cyan]{c.corrected}[/] ({c.score:.2f})")


def print_history(entries: list[EntryRecord]) -> None:
    table = Table(title="Logged Entries", expand=True)
    table.add_column("Time")
    table.add_column("Text")
    table.add_column("Intent")
    table.add_column("Item")
    table.add_column("Decision")
    table.add_column("Notes", overflow="fold")

    for entry in entries:
        table.add_row(
            entry.created_at.strftime("%Y-%m-%d %H:%M"),
            entry.raw_text,
            entry.intent,
            entry.item or "",
            entry.decision or "",
            entry.notes,
        )

    console.print(table)


def print_report(report: dict[str, Any]) -> None:
    table = Table(title=f"Coverage ({report['total']} utterances)", expand=True)
    table.add_column("Decision", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("%", justify="right")
    for name, row in report["decisions"].items():
        table.add_row(name, str(row["count"]), f"{row['percent']:.1f}")
    console.print(table)

    conf = Table(title="Average confidence by intent", show_header=False)
    conf.add_column("Intent", style="bold cyan")
    conf.add_column("Confidence", justify="right")
    for intent, value in report["avg_confidence"].items():
        conf.add_row(intent, f"{value:.2f}")
    console.print(conf)
    console.print(
        f"[dim]fallback calls: {report['fallback_calls']}, cache hits: {report['cache_hits']}[/]",
        highlight=False,
    )


def print_error(message: str) -> None:
    console.print(Panel(f"[red]{message}[/]", title="Error", border_style="red"))


def print_info(message: str) -> None:
    console.print(f"[dim]{message}[/]")
