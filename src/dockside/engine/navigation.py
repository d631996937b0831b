from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ListNavigation:
    """Selected row of a list; `None` means nothing is selected."""

    selected: int | None = None

    def select(self, index: int | None) -> None:
        self.selected = index

    def increment(self, length: int) -> None:
        if length <= 0:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        elif self.selected < length - 1:
            self.selected += 1

    def decrement(self, length: int) -> None:
        if length <= 0:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        elif self.selected > 0:
            self.selected -= 1

    def top(self, length: int) -> None:
        self.selected = 0 if length > 0 else None

    def bottom(self, length: int) -> None:
        self.selected = length - 1 if length > 0 else None

    def clamp(self, length: int) -> None:
        """Keep the selection inside a list of `length` rows."""
        if length <= 0:
            self.selected = None
        elif self.selected is not None and self.selected >= length:
            self.selected = length - 1
        elif self.selected is not None and self.selected < 0:
            self.selected = 0
