"""Raw keyboard input decoding.

Turns the bytes a terminal delivers in raw mode into :class:`KeyEvent`
values. Only legacy (xterm/VT) sequences are handled; the line editor
needs printable characters, a handful of editing keys and ctrl
combinations, nothing more.
"""

from __future__ import annotations

from dataclasses import dataclass

ESC = "\x1b"


class Key:
    """Named key constants."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key press.

    ``char`` is the text the key produces (a single printable character),
    or ``""`` for keys that produce none.
    """

    name: str
    char: str = ""

    @property
    def is_printable(self) -> bool:
        return bool(self.char)


LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[4~": "end",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1bOP": "f1",
    "\x1bOQ": "f2",
    "\x1bOR": "f3",
    "\x1bOS": "f4",
    "\x1b[Z": "shift+tab",
}


def split_keys(data: str) -> list[str]:
    """Split a chunk of raw input into one string per key press.

    A paste or a fast typist can deliver several keys in one read; escape
    sequences are kept whole.
    """
    keys: list[str] = []
    i = 0
    n = len(data)
    while i < n:
        ch = data[i]
        if ch == ESC and i + 1 < n:
            nxt = data[i + 1]
            if nxt == "[":
                j = i + 2
                while j < n and not 0x40 <= ord(data[j]) <= 0x7E:
                    j += 1
                keys.append(data[i : j + 1])
                i = j + 1
                continue
            if nxt == "O" and i + 2 < n:
                keys.append(data[i : i + 3])
                i += 3
                continue
            keys.append(data[i : i + 2])
            i += 2
            continue
        if ch == "\r" and i + 1 < n and data[i + 1] == "\n":
            keys.append("\r")
            i += 2
            continue
        keys.append(ch)
        i += 1
    return keys


def parse_key(data: str) -> KeyEvent | None:
    """Decode one key press, or return ``None`` if it is not recognized."""
    if not data:
        return None

    name = LEGACY_KEY_SEQUENCES.get(data)
    if name is not None:
        return KeyEvent(name)

    if data == ESC:
        return KeyEvent(Key.escape)
    if data in ("\r", "\n"):
        return KeyEvent(Key.enter)
    if data == "\t":
        return KeyEvent(Key.tab)
    if data == " ":
        return KeyEvent(Key.space, " ")
    if data in ("\x7f", "\x08"):
        return KeyEvent(Key.backspace)
    if data == "\x00":
        return KeyEvent(Key.ctrl("space"))

    # Ctrl + letter (0x01 - 0x1a)
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return KeyEvent(Key.ctrl(chr(ord(data) + ord("a") - 1)))

    # Alt + key (ESC prefix)
    if len(data) == 2 and data[0] == ESC:
        ch = data[1]
        if ch in ("\x7f", "\x08"):
            return KeyEvent(Key.alt("backspace"))
        if ch.isprintable():
            return KeyEvent(Key.alt(ch.lower()))
        return None

    if len(data) == 1 and data.isprintable():
        return KeyEvent(data, data)

    return None
