"""Brutal tests for CLI prompts."""

from __future__ import annotations

from io import StringIO
from unittest.mock import patch

from rich.console import Console

from healthnlu.cli.prompts import ask_message


class TestAskMessage:
    def test_returns_text(self):
        with patch("healthnlu.cli.prompts.Prompt.ask", return_value="had oats"):
            assert ask_message() == "had oats"

    def test_exit_words(self):
        for word in ("quit", "EXIT", " :q "):
            with patch("healthnlu.cli.prompts.Prompt.ask", return_value=word):
                assert ask_message() is None

    def test_eof(self):
        with patch("healthnlu.cli.prompts.Prompt.ask", side_effect=EOFError):
            assert ask_message() is None

    def test_keyboard_interrupt(self):
        with patch("healthnlu.cli.prompts.Prompt.ask", side_effect=KeyboardInterrupt):
            assert ask_message() is None

    def test_prints_follow_up_question(self):
        import healthnlu.cli.prompts as mod
        buf = StringIO()
        original = mod.console
        mod.console = Console(file=buf, force_terminal=True, width=120)
        try:
            with patch("healthnlu.cli.prompts.Prompt.ask", return_value="6"):
                assert ask_message("How bad is it on a scale of 1 to 10?") == "6"
        finally:
            mod.console = original
        assert "How bad is it" in buf.getvalue()
