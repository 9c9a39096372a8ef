"""Terminal color model.

Colors live in a 16-slot palette: eight base hues, each in a normal and a
bright variant (slot = hue + 8 when bright). Bright colors are expressed
through the bold channel (``ESC[1m ESC[3Xm ESC[22m``) rather than the
``9X`` codes, which is what :mod:`iox.ansi` understands.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from iox.ansi import ESC

if TYPE_CHECKING:
    from iox.terminal import Terminal

PALETTE_SIZE = 16

# Native colors of a terminal that has not been told otherwise.
DEFAULT_FOREGROUND = 7
DEFAULT_BACKGROUND = 0


class BaseColor(enum.IntEnum):
    DARK = 0  # Black / DarkGray
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    LIGHT = 7  # Gray / White


def _check_slot(index: int) -> int:
    if not 0 <= index < PALETTE_SIZE:
        raise ValueError(f"palette slot out of range: {index}")
    return index


def _fold(index: int) -> tuple[BaseColor, bool]:
    return BaseColor(index % 8), index >= 8


@dataclass(frozen=True)
class Color:
    """A base hue (optionally bright), or a pair of native palette slots."""

    base: BaseColor = BaseColor.DARK
    bright: bool = False
    native: tuple[int, int] | None = None

    @classmethod
    def from_native(cls, foreground: int, background: int) -> Color:
        return cls(native=(_check_slot(foreground), _check_slot(background)))

    @classmethod
    def from_palette(cls, index: int) -> Color:
        base, bright = _fold(_check_slot(index))
        return cls(base, bright)

    @classmethod
    def default_for(cls, terminal: Terminal) -> Color:
        """Capture the colors *terminal* currently uses."""
        return cls.from_native(terminal.foreground, terminal.background)

    # -- conversion ----------------------------------------------------------

    def to_palette(self) -> int:
        """Palette slot of the color (the foreground slot for native colors)."""
        if self.native is not None:
            return self.native[0]
        return int(self.base) + (8 if self.bright else 0)

    def foreground_base(self) -> BaseColor:
        if self.native is not None:
            return _fold(self.native[0])[0]
        return self.base

    def background_base(self) -> BaseColor:
        if self.native is not None:
            return _fold(self.native[1])[0]
        return self.base

    # -- escape strings ------------------------------------------------------

    def foreground(self) -> str:
        return self._escape(foreground=True)

    def background(self) -> str:
        return self._escape(foreground=False)

    @property
    def fg(self) -> str:
        return self.foreground()

    @property
    def bg(self) -> str:
        return self.background()

    def _escape(self, *, foreground: bool) -> str:
        if self.native is not None:
            base, bright = _fold(self.native[0 if foreground else 1])
        else:
            base, bright = self.base, self.bright
        code = f"{ESC}[{3 if foreground else 4}{int(base)}m"
        if not bright:
            return code
        return f"{ESC}[1m{code}{ESC}[22m"

    def __str__(self) -> str:
        return self.foreground()


BLACK = Color(BaseColor.DARK)
DARK_RED = Color(BaseColor.RED)
DARK_GREEN = Color(BaseColor.GREEN)
DARK_YELLOW = Color(BaseColor.YELLOW)
DARK_BLUE = Color(BaseColor.BLUE)
DARK_MAGENTA = Color(BaseColor.MAGENTA)
DARK_CYAN = Color(BaseColor.CYAN)
GRAY = Color(BaseColor.LIGHT)
DARK_GRAY = Color(BaseColor.DARK, bright=True)
RED = Color(BaseColor.RED, bright=True)
GREEN = Color(BaseColor.GREEN, bright=True)
YELLOW = Color(BaseColor.YELLOW, bright=True)
BLUE = Color(BaseColor.BLUE, bright=True)
MAGENTA = Color(BaseColor.MAGENTA, bright=True)
CYAN = Color(BaseColor.CYAN, bright=True)
WHITE = Color(BaseColor.LIGHT, bright=True)

DEFAULT = Color.from_native(DEFAULT_FOREGROUND, DEFAULT_BACKGROUND)

NAMED_COLORS: dict[str, Color] = {
    "black": BLACK,
    "dark_red": DARK_RED,
    "dark_green": DARK_GREEN,
    "dark_yellow": DARK_YELLOW,
    "dark_blue": DARK_BLUE,
    "dark_magenta": DARK_MAGENTA,
    "dark_cyan": DARK_CYAN,
    "gray": GRAY,
    "dark_gray": DARK_GRAY,
    "red": RED,
    "green": GREEN,
    "yellow": YELLOW,
    "blue": BLUE,
    "magenta": MAGENTA,
    "cyan": CYAN,
    "white": WHITE,
    "default": DEFAULT,
}
