"""Powerline-style prompt segments."""

from __future__ import annotations

from iox.ansi import ESC, sanitize
from iox.colors import DEFAULT, Color

# Private-use glyph from the powerline font patch
PL_ARROW = "\ue0b0"


class PowerlineBuilder:
    """Chain colored segments joined by powerline arrows.

    Each segment's arrow takes the previous segment's background as its
    foreground, so adjacent blocks blend into one another.
    """

    def __init__(self, console: Color = DEFAULT) -> None:
        self._parts: list[str] = []
        self._last_fg = Color(console.foreground_base())
        self._last_bg = Color(console.background_base())
        self._first = True

    def segment(
        self,
        text: str,
        fg: Color | None = None,
        bg: Color | None = None,
    ) -> PowerlineBuilder:
        fg = fg or self._last_fg
        bg = bg or self._last_bg
        if not self._first:
            self._parts.append(f"{bg.bg}{self._last_bg.fg}{PL_ARROW}")
        self._parts.append(f"{bg.bg}{fg.fg} {text}")
        self._last_fg = fg
        self._last_bg = bg
        self._first = False
        return self

    def to_ansi_string(self) -> str:
        return sanitize(f"{''.join(self._parts)}{self._last_bg.fg}{ESC}[49m{PL_ARROW}")

    def __str__(self) -> str:
        return self.to_ansi_string()


def powerline() -> PowerlineBuilder:
    return PowerlineBuilder()
