"""Interfaces to the scripting-language collaborators.

The shell core never looks inside the language it hosts. It needs a
tokenizer to count grouping tokens, an evaluator to compile and run
complete input, and something that can list member names for
completion. :mod:`iox.backend` implements all three for Python.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable, Protocol, runtime_checkable


class TokenClass(enum.Enum):
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    OPEN_BRACE = "{"
    CLOSE_BRACE = "}"
    OPEN_BRACKET = "["
    CLOSE_BRACKET = "]"
    OTHER = "other"

    @property
    def is_open(self) -> bool:
        return self in _OPENERS

    @property
    def is_close(self) -> bool:
        return self in _CLOSERS


_OPENERS = frozenset({TokenClass.OPEN_PAREN, TokenClass.OPEN_BRACE, TokenClass.OPEN_BRACKET})
_CLOSERS = frozenset({TokenClass.CLOSE_PAREN, TokenClass.CLOSE_BRACE, TokenClass.CLOSE_BRACKET})

GROUPING_CLASSES: dict[str, TokenClass] = {
    cls.value: cls for cls in TokenClass if cls is not TokenClass.OTHER
}


@dataclass(frozen=True)
class Token:
    kind: TokenClass
    text: str
    column: int = 0


class Tokenizer(Protocol):
    def tokenize(self, text: str, source: str) -> list[Token]:
        """Tokenize one line; raise ``TokenizeError`` if that is impossible."""
        ...


@runtime_checkable
class MemberSource(Protocol):
    """Anything that can enumerate names for completion."""

    def list_members(self) -> Iterable[str]: ...


class NameTable:
    """A plain identifier table, e.g. the names visible at top level."""

    def __init__(self, *scopes: Iterable[str]) -> None:
        self._names: set[str] = set()
        for scope in scopes:
            self._names.update(scope)

    def list_members(self) -> Iterable[str]:
        return set(self._names)


class ValueMembers:
    """Member names of a runtime value."""

    def __init__(self, value: Any) -> None:
        self.value = value

    def list_members(self) -> Iterable[str]:
        try:
            return set(dir(self.value))
        except Exception:
            # __dir__ is user code
            return set()


class Evaluator(Protocol):
    def compile(self, source: str) -> Any:
        """Compile *source*; raise ``CompileError`` on syntax errors."""
        ...

    def invoke(self, unit: Any) -> Any:
        """Run a compiled unit; raise ``ExecutionError`` if it fails."""
        ...

    def try_evaluate(self, source: str) -> MemberSource | None:
        """Best-effort evaluation; never raises."""
        ...

    def identifiers(self) -> MemberSource: ...
