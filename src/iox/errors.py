"""Exception types raised by iox."""

from __future__ import annotations

import traceback
from dataclasses import dataclass

from iox.language import Token


class IoxError(Exception):
    """Base class for all iox errors."""


class TokenizeError(IoxError):
    """The tokenizer could not make sense of a line."""


@dataclass
class SyntaxErrorDetail:
    """One syntax error reported by the evaluator.

    ``line`` and ``column`` are zero-based. ``token`` is the offending
    token text, or ``None`` when the error has no associated token.
    """

    line: int
    column: int
    message: str
    token: str | None = None
    filename: str | None = None

    @property
    def token_length(self) -> int:
        return len(self.token) if self.token else 0


class CompileError(IoxError):
    """Source could not be compiled."""

    def __init__(self, errors: list[SyntaxErrorDetail]) -> None:
        self.errors = errors
        super().__init__("; ".join(err.message for err in errors))


class ExecutionError(IoxError):
    """A compiled unit raised while running."""

    def __init__(
        self,
        original: BaseException,
        stack: list[traceback.FrameSummary] | None = None,
    ) -> None:
        self.original = original
        self.stack = stack or []
        super().__init__(f"{type(original).__name__}: {original}")


class GroupingMismatchError(IoxError):
    """A closing bracket appeared without a matching opener."""

    def __init__(self, line_number: int, token: Token | None = None) -> None:
        self.line_number = line_number
        self.token = token
        if token is not None:
            message = f"Mismatched grouping: unexpected '{token.text}' on line {line_number}"
        else:
            message = f"Mismatched grouping on line {line_number}"
        super().__init__(message)
