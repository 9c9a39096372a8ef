"""Nested prompt management."""

from __future__ import annotations

from typing import TYPE_CHECKING

from iox import ansi
from iox.utils import visible_width

if TYPE_CHECKING:
    from iox.terminal import Terminal


class PromptStackUnderflow(RuntimeError):
    """``pop()`` was called with nothing left to restore."""


class PromptStack:
    """The active prompt plus a stack of prompts to return to.

    Prompts may carry color escapes; they are rendered through
    :func:`iox.ansi.write`.
    """

    def __init__(self, prompt: str = "") -> None:
        self._current = prompt
        self._stack: list[str] = []

    @property
    def current(self) -> str:
        return self._current

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def length(self) -> int:
        """Display width of the rendered prompt, trailing space included."""
        return visible_width(str(self))

    def dup(self) -> None:
        """Save a copy of the active prompt, leaving it active."""
        self._stack.append(self._current)

    def push(self, prompt: str) -> None:
        self._stack.append(self._current)
        self._current = prompt

    def pop(self) -> None:
        if not self._stack:
            raise PromptStackUnderflow("prompt stack is empty")
        self._current = self._stack.pop()

    def render(self, terminal: Terminal) -> None:
        if self._current:
            ansi.write(terminal, str(self))

    def __str__(self) -> str:
        return f"{self._current} " if self._current else ""
