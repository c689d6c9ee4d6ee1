"""Interactive console prompts backed by Rich."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt


class ConsoleUI:
    """Asks questions on the terminal during a removal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def confirm(self, prompt: str, default: bool = True) -> bool:
        return Confirm.ask(escape(prompt), default=default, console=self.console)

    def choose_one(self, prompt: str, labels: Sequence[str]) -> tuple[str | None, int]:
        """Print a 1-based menu and read the answer.

        Returns:
            ``(label, zero_based_index)``; ``(None, -1)`` if the answer is
            not a number, ``(None, index)`` if it is out of range.
        """
        self.console.print(prompt, markup=False)
        for number, label in enumerate(labels, start=1):
            self.console.print(f" {number}. {label}", markup=False)

        answer = Prompt.ask(">", console=self.console)
        try:
            index = int(answer.strip()) - 1
        except ValueError:
            return None, -1

        if 0 <= index < len(labels):
            return labels[index], index
        return None, index

    def notify(self, message: str = "") -> None:
        self.console.print(message, markup=False, highlight=False)
