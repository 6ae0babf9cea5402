"""Single-choice prompting, swappable for non-interactive use."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from typing import Protocol


class Chooser(Protocol):
    async def choose(self, message: str, section: str, labels: Sequence[str]) -> int:
        """Return the index of the selected label."""
        ...


class PromptChooser:
    """Numbered-list prompt on the terminal."""

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ) -> None:
        self._input = input_fn
        self._output = output_fn

    def _ask(self, message: str, section: str, labels: Sequence[str]) -> int:
        self._output(f"? {message}")
        self._output(section)
        for idx, label in enumerate(labels, start=1):
            self._output(f"  {idx}) {label}")

        while True:
            answer = self._input(f"Answer [1-{len(labels)}]: ").strip()
            if answer.isdecimal() and 1 <= int(answer) <= len(labels):
                return int(answer) - 1
            self._output(f"Please enter a number between 1 and {len(labels)}")

    async def choose(self, message: str, section: str, labels: Sequence[str]) -> int:
        if not labels:
            raise ValueError("nothing to choose from")
        return await asyncio.to_thread(self._ask, message, section, labels)
