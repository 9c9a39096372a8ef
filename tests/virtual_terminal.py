"""Virtual terminal for testing -- implements the Terminal protocol in-memory.

This module provides a ``VirtualTerminal`` class that satisfies the
``iox.terminal.Terminal`` protocol without performing any real I/O.
Writes land on a character grid, and every written run is recorded
together with the palette slots it was written in.
"""

from __future__ import annotations

from collections import deque

from iox.colors import DEFAULT_BACKGROUND, DEFAULT_FOREGROUND
from iox.keys import KeyEvent, parse_key, split_keys


class VirtualTerminal:
    """In-memory terminal that records all writes for test inspection.

    Parameters
    ----------
    columns:
        Number of terminal columns; writes past the last column are
        clipped.
    """

    def __init__(self, columns: int = 80) -> None:
        self._columns = columns
        self._grid: list[list[str]] = [[]]
        self._column = 0
        self._row = 0
        self._foreground = DEFAULT_FOREGROUND
        self._background = DEFAULT_BACKGROUND
        self._buffer: list[str] = []
        self.spans: list[tuple[str, int, int]] = []
        self._keys: deque[KeyEvent] = deque()
        self._lines: deque[str] = deque()

    # -- Terminal protocol: properties --------------------------------------

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def foreground(self) -> int:
        return self._foreground

    @foreground.setter
    def foreground(self, slot: int) -> None:
        self._foreground = slot

    @property
    def background(self) -> int:
        return self._background

    @background.setter
    def background(self, slot: int) -> None:
        self._background = slot

    # -- Terminal protocol: cursor ------------------------------------------

    def get_cursor(self) -> tuple[int, int]:
        return (self._column, self._row)

    def set_cursor(self, column: int, row: int) -> None:
        self._column = column
        self._row = row
        self._ensure_row(row)

    # -- Terminal protocol: output ------------------------------------------

    def write(self, data: str) -> None:
        """Put *data* on the grid at the cursor."""
        self._buffer.append(data)
        self.spans.append((data, self._foreground, self._background))
        for ch in data:
            if ch == "\n":
                self._row += 1
                self._column = 0
                self._ensure_row(self._row)
            elif ch == "\r":
                self._column = 0
            else:
                if self._column < self._columns:
                    row = self._grid[self._row]
                    while len(row) <= self._column:
                        row.append(" ")
                    row[self._column] = ch
                self._column += 1

    # -- Terminal protocol: input -------------------------------------------

    def read_line(self) -> str:
        """Return the next scripted line, echoing it like a cooked terminal."""
        if not self._lines:
            raise EOFError
        line = self._lines.popleft()
        self.write(line + "\n")
        return line

    def read_key(self) -> KeyEvent:
        if not self._keys:
            raise EOFError
        return self._keys.popleft()

    # -- Test helpers -------------------------------------------------------

    def feed_lines(self, *lines: str) -> None:
        self._lines.extend(lines)

    def feed_keys(self, data: str) -> None:
        """Queue raw terminal input, decoded the way a real terminal's is."""
        for raw in split_keys(data):
            event = parse_key(raw)
            if event is not None:
                self._keys.append(event)

    def line(self, row: int) -> str:
        """Visible text of *row*, without trailing blanks."""
        if row >= len(self._grid):
            return ""
        return "".join(self._grid[row]).rstrip()

    @property
    def lines(self) -> list[str]:
        return [self.line(row) for row in range(len(self._grid))]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def output(self) -> str:
        """Return everything written to the terminal as a single string."""
        return "".join(self._buffer)

    def written_in(self, foreground: int) -> str:
        """Concatenation of every run written with the given foreground slot."""
        return "".join(text for text, fg, _ in self.spans if fg == foreground)

    def _ensure_row(self, row: int) -> None:
        while len(self._grid) <= row:
            self._grid.append([])
