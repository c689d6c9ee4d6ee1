"""Protocol for talking to whoever runs a removal."""

from __future__ import annotations

from typing import Protocol, Sequence


class UserInteraction(Protocol):
    """Protocol for prompts and messages shown during removal."""

    def confirm(self, prompt: str, default: bool = True) -> bool:
        """Ask a yes/no question."""
        ...

    def choose_one(self, prompt: str, labels: Sequence[str]) -> tuple[str | None, int]:
        """Offer ``labels`` as a menu.

        Returns:
            The chosen label and its zero-based index, or ``(None, i)``
            with an out-of-range ``i`` when the answer matches nothing.
        """
        ...

    def notify(self, message: str = "") -> None:
        """Show an informational message."""
        ...
