from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PageHelp:
    name: str
    inputs: tuple[tuple[str, str], ...]

    def render(self, separator: str = "  ") -> str:
        return separator.join(f"<{key}> {label}" for key, label in self.inputs)


class PageHelpBuilder:
    def __init__(self, name: str) -> None:
        self._name = name
        self._inputs: list[tuple[str, str]] = []

    def add_input(self, key: str, label: str) -> "PageHelpBuilder":
        self._inputs.append((key, label))
        return self

    def build(self) -> PageHelp:
        return PageHelp(name=self._name, inputs=tuple(self._inputs))
