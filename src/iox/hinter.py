"""Inline completion hints ("ghost text") for single-line raw reads.

While the user types a word, the first known name that extends it is
drawn after the cursor in a dim color. Tab accepts it; any non-word
character finishes the word. The line is kept as a list of finished
segments plus the word being typed, which is what Backspace operates on.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

from iox import ansi
from iox.colors import DARK_GRAY, DEFAULT, WHITE, Color
from iox.keys import Key
from iox.language import Evaluator
from iox.terminal import Terminal
from iox.utils import visible_width

logger = logging.getLogger(__name__)

# Characters that start a new expression for completion purposes
_EXPRESSION_DELIMITERS = re.compile(r"[ ()\[\]{}]")

RESERVED_MARKER = "__"


def is_reserved(name: str) -> bool:
    return name.startswith(RESERVED_MARKER) or name.endswith(RESERVED_MARKER)


def trailing_expression(text: str) -> str:
    """The part of *text* after the last space or bracket."""
    return _EXPRESSION_DELIMITERS.split(text)[-1]


def suggest(candidates: Iterable[str], typed: str) -> str | None:
    """First candidate strictly longer than *typed* that starts with it."""
    if not typed:
        return None
    for candidate in candidates:
        if len(candidate) > len(typed) and candidate.startswith(typed):
            return candidate
    return None


class CompletionSource:
    """Completion candidates for the text of a line.

    After ``obj.`` the candidates are the members of ``obj`` (evaluated
    best-effort); otherwise they are the identifiers in scope.
    """

    def __init__(self, evaluator: Evaluator) -> None:
        self._evaluator = evaluator
        self._cache: dict[str, list[str]] = {}

    def reset(self) -> None:
        self._cache.clear()

    def __call__(self, text: str) -> Sequence[str]:
        expression = trailing_expression(text)
        owner = expression[: expression.rindex(".")] if "." in expression else ""
        cached = self._cache.get(owner)
        if cached is not None:
            return cached

        source = self._evaluator.try_evaluate(owner) if owner else None
        if source is None:
            if owner:
                logger.debug("No members for %r, completing identifiers", owner)
            source = self._evaluator.identifiers()
        names = sorted(
            name
            for name in source.list_members()
            if isinstance(name, str) and not is_reserved(name)
        )
        self._cache[owner] = names
        return names


@dataclass
class HintState:
    typed_prefix: str = ""
    accepted_segments: list[str] = field(default_factory=list)
    active_suggestion: str | None = None

    @property
    def committed(self) -> str:
        return "".join(self.accepted_segments)

    @property
    def text(self) -> str:
        return self.committed + self.typed_prefix

    @property
    def ghost(self) -> str:
        if self.active_suggestion is None:
            return ""
        return self.active_suggestion[len(self.typed_prefix) :]

    def commit(self, *, accept: bool = True) -> None:
        """Finish the current word, taking the suggestion if *accept*."""
        segment = self.typed_prefix
        if accept and self.active_suggestion is not None:
            segment = self.active_suggestion
        if segment:
            self.accepted_segments.append(segment)
        self.typed_prefix = ""
        self.active_suggestion = None


class HintEngine:
    """Reads one line key by key, drawing completion hints as it goes."""

    def __init__(
        self,
        terminal: Terminal,
        candidates: Callable[[str], Sequence[str]],
        *,
        hint_color: Color = DARK_GRAY,
        word_pattern: str = r"\w",
    ) -> None:
        self.terminal = terminal
        self.candidates = candidates
        self.hint_color = hint_color
        self._word_re = re.compile(word_pattern)
        self._origin = (0, 0)

    def read_line(self) -> str:
        """Read keys until Enter and return the finished line."""
        if isinstance(self.candidates, CompletionSource):
            self.candidates.reset()
        state = HintState()
        self._origin = self.terminal.get_cursor()

        while True:
            key = self.terminal.read_key()

            if key.name == Key.enter:
                break
            if key.name == Key.ctrl("c"):
                raise KeyboardInterrupt
            if key.name == Key.ctrl("d") and not state.text:
                raise EOFError

            if key.name == Key.backspace:
                if state.typed_prefix:
                    state.typed_prefix = state.typed_prefix[:-1]
                    self._update_suggestion(state)
                    self._render_word(state)
                elif state.accepted_segments:
                    state.accepted_segments.pop()
                    self._render_line(state)
                continue

            if key.name == Key.tab:
                state.commit()
                self._render_line(state)
                continue

            char = key.char
            if not char:
                continue
            # "_" continues a word so Python identifiers complete as one
            is_word = char.isalnum() or char == "_"
            if is_word and not self._word_re.fullmatch(char):
                continue

            state.typed_prefix += char
            self._update_suggestion(state)
            if is_word:
                self._render_word(state)
            else:
                state.commit()
                self._render_line(state)

        state.commit()
        self._render_line(state)
        self.terminal.write("\n")
        return state.text

    # -- private ------------------------------------------------------------

    def _update_suggestion(self, state: HintState) -> None:
        names = self.candidates(state.text)
        state.active_suggestion = suggest(names, state.typed_prefix)

    def _clear_from(self, column: int) -> None:
        row = self._origin[1]
        self.terminal.set_cursor(column, row)
        self.terminal.write(" " * max(0, self.terminal.columns - column))
        self.terminal.set_cursor(column, row)

    def _render_word(self, state: HintState) -> None:
        column, row = self._origin
        start = column + visible_width(state.committed)
        self._clear_from(start)
        color = WHITE if state.active_suggestion is not None else DEFAULT
        ansi.write(self.terminal, f"{color}{state.typed_prefix}")
        if state.typed_prefix and state.ghost:
            ansi.write(self.terminal, f"{self.hint_color}{state.ghost}")
        self.terminal.set_cursor(start + visible_width(state.typed_prefix), row)

    def _render_line(self, state: HintState) -> None:
        self._clear_from(self._origin[0])
        self.terminal.write(state.committed)
        if state.typed_prefix:
            self._render_word(state)
