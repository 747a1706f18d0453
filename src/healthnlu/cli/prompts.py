"""Interactive prompts for the chat command."""

from __future__ import annotations

from rich.console import Console
from rich.prompt import Prompt

console = Console()

EXIT_WORDS = frozenset({"quit", "exit", ":q"})


def ask_message(prompt: str = "") -> str | None:
    """Read one chat line; None when the user wants to leave."""
    if prompt:
        console.print(f"[bold yellow]{prompt}[/]")
    try:
        text = Prompt.ask("[bold cyan]you[/]")
    except (EOFError, KeyboardInterrupt):
        return None
    if text.strip().lower() in EXIT_WORDS:
        return None
    return text
