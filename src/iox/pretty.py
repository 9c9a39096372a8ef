"""Colored formatting of evaluation results.

The color scheme follows the node REPL: literals in yellow, strings in
green, ``None`` dimmed, errors in red.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from iox import ansi
from iox.colors import CYAN, DARK_GRAY, DARK_GREEN, DARK_YELLOW, RED, WHITE, Color

if TYPE_CHECKING:
    from iox.terminal import Terminal

_STOP = ansi.RESET

# Containers currently being formatted, to cut self-references short
_in_progress: set[int] = set()

COLOR_SCHEME: dict[type, Color] = {
    type(None): DARK_GRAY,
    bool: DARK_YELLOW,
    int: DARK_YELLOW,
    float: DARK_YELLOW,
    complex: DARK_YELLOW,
    bytes: CYAN,
    str: DARK_GREEN,
    BaseException: RED,
}


def _lookup(table: dict[type, Any], value: Any) -> Any:
    for cls in type(value).__mro__:
        if cls in table:
            return table[cls]
    return None


def _format_literal(value: Any, start: str, stop: str) -> str:
    return f"{start}{value!r}{stop}"


def _format_list(value: list, start: str, stop: str) -> str:
    return f"[ {', '.join(format_value(item) for item in value)} ]"


def _format_tuple(value: tuple, start: str, stop: str) -> str:
    return f"( {', '.join(format_value(item) for item in value)} )"


def _format_bytes(value: bytes, start: str, stop: str) -> str:
    return f"{start}{len(value)}b{stop} {format_value(list(value))}"


def _format_dict(value: dict, start: str, stop: str) -> str:
    items = ", ".join(f"{format_value(k)} : {format_value(v)}" for k, v in value.items())
    return f"{{ {items} }}"


def _format_exception(value: BaseException, start: str, stop: str) -> str:
    return f"{start}{type(value).__name__}{stop}: {value}"


def _format_range(value: range, start: str, stop: str) -> str:
    return (
        f"range (start: {format_value(value.start)} "
        f"stop: {format_value(value.stop)} "
        f"step: {format_value(value.step)})"
    )


FORMATTERS: dict[type, Callable[[Any, str, str], str]] = {
    type(None): _format_literal,
    bool: _format_literal,
    int: _format_literal,
    float: _format_literal,
    complex: _format_literal,
    str: _format_literal,
    list: _format_list,
    tuple: _format_tuple,
    bytes: _format_bytes,
    dict: _format_dict,
    range: _format_range,
    BaseException: _format_exception,
}


def format_value(value: Any) -> str:
    """Format *value* for display; the result is sanitized."""
    color: Color | None = _lookup(COLOR_SCHEME, value)
    formatter = _lookup(FORMATTERS, value)
    if formatter is not None:
        key = id(value)
        if key in _in_progress:
            return "..."
        _in_progress.add(key)
        try:
            start = color.fg if color is not None else ""
            return ansi.sanitize(formatter(value, start, _STOP))
        finally:
            _in_progress.discard(key)
    return ansi.sanitize(f"{color or WHITE}{value!r}")


def write_value(terminal: Terminal, value: Any) -> None:
    ansi.write_line(terminal, format_value(value))
