"""ANSI escape-sequence rendering and stripping.

Text handed to :func:`write` may contain SGR sequences (``ESC[<n>m``).
They are not passed through to the terminal: the scanner interprets them
and drives the terminal's foreground/background palette slots instead,
so the same strings render identically on every terminal implementation.

Only single-parameter SGR codes are understood:

* ``0``  reset everything to the colors saved at call entry
* ``1``  bold on (nests; every ``1`` needs its own ``22``)
* ``22`` bold off
* ``30``-``37`` / ``39`` set / restore the foreground
* ``40``-``47`` / ``49`` set / restore the background

While bold is active, colors select the bright half of the palette.
Anything else is dropped without affecting the surrounding text.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from iox.terminal import Terminal

ESC = "\x1b"
RESET = f"{ESC}[0m"

_BOLD_OFFSET = 8


# ---------------------------------------------------------------------------
# Scan state
# ---------------------------------------------------------------------------


@dataclass
class EscapeScanState:
    """Styling state for a single render call."""

    foreground: int
    background: int
    saved_foreground: int
    saved_background: int
    bold: bool = False
    bold_depth: int = 0

    @classmethod
    def capture(cls, terminal: Terminal) -> EscapeScanState:
        return cls(
            foreground=terminal.foreground,
            background=terminal.background,
            saved_foreground=terminal.foreground,
            saved_background=terminal.background,
        )

    def apply(self, code: int) -> None:
        """Apply one SGR code. Unknown codes are ignored."""
        if code == 0:
            self.bold = False
            self.bold_depth = 0
            self.foreground = self.saved_foreground
            self.background = self.saved_background
        elif code == 1:
            self.bold = True
            self.bold_depth += 1
        elif code == 22:
            if self.bold_depth > 0:
                self.bold_depth -= 1
            self.bold = self.bold and self.bold_depth != 0
        elif 30 <= code <= 37:
            self.foreground = self._slot(code - 30)
        elif code == 39:
            self.foreground = self.saved_foreground
        elif 40 <= code <= 47:
            self.background = self._slot(code - 40)
        elif code == 49:
            self.background = self.saved_background

    def _slot(self, base: int) -> int:
        return base + (_BOLD_OFFSET if self.bold else 0)


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


class _Mode(enum.Enum):
    NORMAL = "normal"
    ESCAPE_SEEN = "escape-seen"
    IN_SEQUENCE = "in-sequence"


def _is_final_byte(ch: str) -> bool:
    return 0x40 <= ord(ch) <= 0x7E


def scan(text: str) -> Iterator[str | int]:
    """Split *text* into literal runs (``str``) and SGR codes (``int``).

    Malformed, unrecognized or truncated sequences yield nothing.
    """
    mode = _Mode.NORMAL
    literal: list[str] = []
    params: list[str] = []

    for ch in text:
        if mode is _Mode.IN_SEQUENCE:
            if ch == "m":
                mode = _Mode.NORMAL
                sequence = "".join(params)
                if sequence.isascii() and sequence.isdigit():
                    if literal:
                        yield "".join(literal)
                        literal.clear()
                    yield int(sequence)
            elif ch.isdigit() or ch == ";" or not _is_final_byte(ch):
                params.append(ch)
            else:
                # Some other CSI command (cursor movement, erase...)
                mode = _Mode.NORMAL
            continue

        if mode is _Mode.ESCAPE_SEEN:
            mode = _Mode.NORMAL
            if ch == "[":
                mode = _Mode.IN_SEQUENCE
                params.clear()
                continue

        if ch == ESC:
            mode = _Mode.ESCAPE_SEEN
            continue

        literal.append(ch)

    if literal:
        yield "".join(literal)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def sanitize(text: str) -> str:
    """Wrap *text* in resets so its styling cannot leak in or out."""
    return f"{RESET}{text}{RESET}"


def purify(text: str) -> str:
    """Return *text* with every escape sequence removed."""
    return "".join(part for part in scan(text) if isinstance(part, str))


def contains_escapes(text: str) -> bool:
    return purify(text) != text


def write(terminal: Terminal, text: str) -> None:
    """Render *text* onto *terminal*, interpreting SGR color codes.

    The terminal's colors are restored to their values at call entry
    before returning, even if writing fails halfway.
    """
    state = EscapeScanState.capture(terminal)
    try:
        for part in scan(sanitize(text)):
            if isinstance(part, str):
                terminal.write(part)
                continue
            state.apply(part)
            if terminal.foreground != state.foreground:
                terminal.foreground = state.foreground
            if terminal.background != state.background:
                terminal.background = state.background
    finally:
        if terminal.foreground != state.saved_foreground:
            terminal.foreground = state.saved_foreground
        if terminal.background != state.saved_background:
            terminal.background = state.saved_background


def write_line(terminal: Terminal, text: str = "") -> None:
    write(terminal, text)
    terminal.write("\n")
