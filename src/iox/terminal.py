"""Terminal abstraction for the interactive shell.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
backed by ``sys.stdin``/``sys.stdout``. Cursor positions are zero-based
``(column, row)`` pairs; colors are palette slots 0-15 (see
:mod:`iox.colors`).
"""

from __future__ import annotations

import codecs
import contextlib
import os
import re
import select
import sys
import termios
import tty
from collections import deque
from typing import Iterator, Protocol

from iox.colors import DEFAULT_BACKGROUND, DEFAULT_FOREGROUND
from iox.keys import KeyEvent, parse_key, split_keys

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_QUERY_CURSOR = "\x1b[6n"
_SET_CURSOR_FMT = "\x1b[{};{}H"
_CURSOR_REPORT_RE = re.compile(r"\x1b\[(\d+);(\d+)R")

_FOREGROUND_DEFAULT = "\x1b[39m"
_BACKGROUND_DEFAULT = "\x1b[49m"

# Seconds to wait for the rest of an escape sequence / a cursor report
_ESCAPE_TIMEOUT = 0.01
_REPORT_TIMEOUT = 0.2


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal I/O operations."""

    @property
    def columns(self) -> int: ...

    @property
    def foreground(self) -> int: ...

    @foreground.setter
    def foreground(self, slot: int) -> None: ...

    @property
    def background(self) -> int: ...

    @background.setter
    def background(self, slot: int) -> None: ...

    def get_cursor(self) -> tuple[int, int]: ...

    def set_cursor(self, column: int, row: int) -> None: ...

    def write(self, data: str) -> None: ...

    def read_line(self) -> str: ...

    def read_key(self) -> KeyEvent: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


def _sgr_for_slot(slot: int, *, foreground: bool) -> str:
    if slot >= 8:
        return f"\x1b[{(90 if foreground else 100) + slot - 8}m"
    return f"\x1b[{(30 if foreground else 40) + slot}m"


class ProcessTerminal:
    """Concrete terminal implementation backed by ``sys.stdin``/``sys.stdout``.

    Key reads switch stdin to raw mode for the duration of the read only,
    so ordinary output keeps its newline translation. The cursor position
    is queried from the terminal (DSR) and falls back to the last known
    position when no report arrives.
    """

    def __init__(self) -> None:
        self._foreground = DEFAULT_FOREGROUND
        self._background = DEFAULT_BACKGROUND
        self._pending: deque[KeyEvent] = deque()
        self._last_cursor: tuple[int, int] = (0, 0)
        self._write_log_path: str = os.environ.get("IOX_WRITE_LOG", "")
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def foreground(self) -> int:
        return self._foreground

    @foreground.setter
    def foreground(self, slot: int) -> None:
        self._foreground = slot
        if slot == DEFAULT_FOREGROUND:
            self._raw_write(_FOREGROUND_DEFAULT)
        else:
            self._raw_write(_sgr_for_slot(slot, foreground=True))

    @property
    def background(self) -> int:
        return self._background

    @background.setter
    def background(self, slot: int) -> None:
        self._background = slot
        if slot == DEFAULT_BACKGROUND:
            self._raw_write(_BACKGROUND_DEFAULT)
        else:
            self._raw_write(_sgr_for_slot(slot, foreground=False))

    # -- cursor -------------------------------------------------------------

    def get_cursor(self) -> tuple[int, int]:
        """Ask the terminal where the cursor is."""
        with self._raw_mode() as fd:
            if fd is None:
                return self._last_cursor
            self._raw_write(_QUERY_CURSOR)
            report = ""
            while True:
                chunk = self._read_chunk(fd, _REPORT_TIMEOUT)
                if not chunk:
                    return self._last_cursor
                report += chunk
                match = _CURSOR_REPORT_RE.search(report)
                if match:
                    # Keys typed ahead of the report are kept for read_key
                    leftover = report[: match.start()] + report[match.end() :]
                    self._queue_keys(leftover)
                    row, column = int(match.group(1)), int(match.group(2))
                    self._last_cursor = (column - 1, row - 1)
                    return self._last_cursor

    def set_cursor(self, column: int, row: int) -> None:
        self._last_cursor = (column, row)
        self._raw_write(_SET_CURSOR_FMT.format(row + 1, column + 1))

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write data to stdout and optionally to the write log."""
        self._raw_write(data)

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a") as f:
                    f.write(data)
            except OSError:
                pass

    # -- input --------------------------------------------------------------

    def read_line(self) -> str:
        """Read one line in cooked mode; raises ``EOFError`` at end of input."""
        line = sys.stdin.readline()
        if not line:
            raise EOFError
        return line.rstrip("\r\n")

    def read_key(self) -> KeyEvent:
        """Block until a recognized key arrives; raises ``EOFError`` on end of input."""
        while not self._pending:
            with self._raw_mode() as fd:
                if fd is None:
                    raise EOFError
                data = self._read_chunk(fd, None)
                if not data:
                    raise EOFError
                # A lone ESC may be the start of a sequence still in flight
                while data.endswith("\x1b") or data.endswith("\x1b["):
                    more = self._read_chunk(fd, _ESCAPE_TIMEOUT)
                    if not more:
                        break
                    data += more
            self._queue_keys(data)
        return self._pending.popleft()

    # -- private ------------------------------------------------------------

    def _queue_keys(self, data: str) -> None:
        for raw in split_keys(data):
            event = parse_key(raw)
            if event is not None:
                self._pending.append(event)

    @contextlib.contextmanager
    def _raw_mode(self) -> Iterator[int | None]:
        """Put stdin in raw mode, yielding its fd (``None`` if not a tty)."""
        try:
            fd = sys.stdin.fileno()
            saved = termios.tcgetattr(fd)
        except (ValueError, OSError, termios.error):
            yield None
            return
        tty.setraw(fd)
        try:
            yield fd
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)

    def _read_chunk(self, fd: int, timeout: float | None) -> str:
        while True:
            ready, _, _ = select.select([fd], [], [], timeout)
            if not ready:
                return ""
            try:
                raw = os.read(fd, 64)
            except OSError:
                return ""
            if not raw:
                return ""
            text = self._decoder.decode(raw)
            if text:
                return text
            # Only part of a multi-byte character arrived

    def _raw_write(self, data: str) -> None:
        """Write directly to stdout, bypassing buffering."""
        try:
            sys.stdout.write(data)
            sys.stdout.flush()
        except OSError:
            pass
