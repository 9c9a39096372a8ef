"""Multi-line, bracket-aware input.

Lines are read until every opened ``(``, ``[`` or ``{`` has been closed.
Each continuation line is indented by the number of groups left open,
and a line that closes a group is redrawn one level further left once
that is known, which only happens after the line was entered. The redraw
is purely visual; the source handed back contains the text exactly as
typed.

Only brackets keep a read open. A Python compound statement such as
``def f():`` or ``for x in y:`` has no open group, so it completes on
its own line; such statements have to be entered as one-liners
(``for x in y: print(x)``) or wrapped in brackets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from iox import ansi
from iox.colors import DARK_GRAY
from iox.errors import GroupingMismatchError, TokenizeError
from iox.language import Token, Tokenizer
from iox.prompt import PromptStack
from iox.terminal import Terminal
from iox.utils import visible_width

logger = logging.getLogger(__name__)

INDENT = "  "

_OPENERS = "([{"
_CLOSERS = ")]}"


def fold_delta(tokens: list[Token]) -> int:
    """Opened minus closed groups on one line."""
    delta = 0
    for token in tokens:
        if token.kind.is_open:
            delta += 1
        elif token.kind.is_close:
            delta -= 1
    return delta


def first_unmatched(tokens: list[Token], depth: int = 0) -> Token | None:
    """The first closer that takes the running depth below zero, if any."""
    for token in tokens:
        if token.kind.is_open:
            depth += 1
        elif token.kind.is_close:
            depth -= 1
            if depth < 0:
                return token
    return None


def closes_before_opens(line: str) -> bool:
    """True for lines like ``} else {`` that close a group, then open one.

    This looks at raw characters, so brackets inside string literals or
    comments count too.
    """
    grouping = [ch for ch in line if ch in _OPENERS or ch in _CLOSERS]
    if len(grouping) < 2:
        return False
    first_close = next((i for i, ch in enumerate(line) if ch in _CLOSERS), -1)
    first_open = next((i for i, ch in enumerate(line) if ch in _OPENERS), -1)
    return 0 <= first_close < first_open


def continuation_prompt(line_number: int, width: int) -> str:
    return f"{DARK_GRAY}{str(line_number).rjust(width)}"


@dataclass
class EditorSession:
    """State of one multi-line read."""

    lines: list[str] = field(default_factory=list)
    last_line_text: str = ""
    last_prompt: str = ""
    line_number: int = 0
    indent_level: int = 0
    total_fold_depth: int = 0
    correction_pending: bool = False
    correction_extra_unindent: bool = False

    @property
    def source(self) -> str:
        return "\n".join(self.lines)

    @property
    def correction_indent(self) -> int:
        """Indent level the last line should be redrawn at."""
        extra = 1 if self.correction_extra_unindent else 0
        return max(0, self.indent_level - extra)

    def accept_line(self, text: str, tokens: list[Token], prompt: str = "") -> bool:
        """Record an entered line; returns True once the input is complete.

        Raises ``GroupingMismatchError`` (after discarding everything read
        so far) when the line closes a group that was never opened.
        """
        self.line_number += 1

        unmatched = first_unmatched(tokens, self.total_fold_depth)
        if unmatched is not None:
            self.discard()
            raise GroupingMismatchError(self.line_number, unmatched)

        self.lines.append(text)
        self.last_line_text = text
        self.last_prompt = prompt

        delta = fold_delta(tokens)
        self.total_fold_depth += delta
        if delta > 0:
            self.indent_level += 1
        elif delta < 0:
            self.correction_pending = True
            self.indent_level = max(0, self.indent_level - 1)
        if self.total_fold_depth == 0:
            self.indent_level = 0

        if closes_before_opens(text):
            self.correction_pending = True
            self.correction_extra_unindent = True

        return self.total_fold_depth == 0

    def correction_done(self) -> None:
        self.correction_pending = False
        self.correction_extra_unindent = False

    def discard(self) -> None:
        self.lines.clear()
        self.last_line_text = ""
        self.last_prompt = ""


class MultilineEditor:
    """Reads one complete unit of source from the terminal."""

    def __init__(
        self,
        terminal: Terminal,
        prompts: PromptStack,
        tokenizer: Tokenizer,
        *,
        read_line: Callable[[], str] | None = None,
        source_name: str = "<stdin>",
    ) -> None:
        self.terminal = terminal
        self.prompts = prompts
        self.tokenizer = tokenizer
        self.read_line = read_line or terminal.read_line
        self.source_name = source_name

    def read(self) -> str:
        """Read lines until all groups are closed; return them joined."""
        session = EditorSession()
        width = visible_width(self.prompts.current)
        self.prompts.dup()
        try:
            while True:
                if session.line_number > 0:
                    self.prompts.pop()
                    self.prompts.push(continuation_prompt(session.line_number + 1, width))
                if session.correction_pending:
                    self._redraw_previous_line(session)

                prompt = str(self.prompts)
                ansi.write(self.terminal, prompt + INDENT * session.indent_level)
                text = self.read_line()

                if session.accept_line(text, self._tokenize(text), prompt):
                    if session.correction_pending:
                        self._redraw_previous_line(session)
                    return session.source
        finally:
            self.prompts.pop()

    def _tokenize(self, text: str) -> list[Token]:
        try:
            return self.tokenizer.tokenize(text, self.source_name)
        except TokenizeError as exc:
            logger.debug("Counting line as fold-neutral: %s", exc)
            return []

    def _redraw_previous_line(self, session: EditorSession) -> None:
        _, row = self.terminal.get_cursor()
        if row > 0:
            self.terminal.set_cursor(0, row - 1)
            self.terminal.write(" " * self.terminal.columns)
            self.terminal.set_cursor(0, row - 1)
            ansi.write(
                self.terminal,
                session.last_prompt
                + INDENT * session.correction_indent
                + session.last_line_text,
            )
            self.terminal.set_cursor(0, row)
        session.correction_done()
