"""Python implementation of the language collaborators.

``PythonTokenizer`` classifies grouping characters in one line of Python
source, ignoring those inside string literals and comments.
``PythonEvaluator`` compiles and runs input in a persistent namespace,
REPL style: when the last statement is an expression, its value is the
result of the unit.
"""

from __future__ import annotations

import ast
import builtins
import logging
import re
import traceback
from dataclasses import dataclass
from types import CodeType
from typing import Any

from iox.errors import CompileError, ExecutionError, SyntaxErrorDetail, TokenizeError
from iox.language import (
    GROUPING_CLASSES,
    MemberSource,
    NameTable,
    Token,
    TokenClass,
    ValueMembers,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

_STRING_PREFIX = r"(?:[rRbBuUfF]|[bB][rR]|[rR][bB]|[fF][rR]|[rR][fF])?"

_TOKEN_RE = re.compile(
    r"(?P<comment>#.*)"
    r"|(?P<string>" + _STRING_PREFIX + r"(?:"
    r"'''(?:\\.|[^\\])*?'''"
    r'|"""(?:\\.|[^\\])*?"""'
    r"|'(?:\\.|[^'\\\n])*'"
    r'|"(?:\\.|[^"\\\n])*"'
    r"))"
    r"|(?P<quote>" + _STRING_PREFIX + r"(?:'''|\"\"\"|'|\"))"
    r"|(?P<group>[()\[\]{}])"
    r"|(?P<word>\w+)"
    r"|(?P<space>\s+)"
    r"|(?P<other>.)",
    re.DOTALL,
)


class PythonTokenizer:
    """Line tokenizer for fold counting.

    Only grouping characters get their own classes; everything else is
    ``OTHER``. A string literal left open at the end of the line is an
    error, since its contents cannot be told apart from code.
    """

    def tokenize(self, text: str, source: str = "<stdin>") -> list[Token]:
        tokens: list[Token] = []
        for match in _TOKEN_RE.finditer(text):
            kind = match.lastgroup
            if kind == "space":
                continue
            if kind == "quote":
                raise TokenizeError(
                    f"{source}: unterminated string literal at column {match.start()}"
                )
            if kind == "group":
                tokens.append(Token(GROUPING_CLASSES[match.group()], match.group(), match.start()))
            else:
                tokens.append(Token(TokenClass.OTHER, match.group(), match.start()))
        return tokens


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------


@dataclass
class CompiledUnit:
    """Statements to execute, then an optional expression giving the result."""

    body: CodeType | None
    result: CodeType | None


class PythonEvaluator:
    def __init__(
        self,
        namespace: dict[str, Any] | None = None,
        filename: str = "<stdin>",
    ) -> None:
        if namespace is None:
            namespace = {"__name__": "__main__", "__builtins__": builtins}
        self.namespace = namespace
        self.filename = filename

    def compile(self, source: str) -> CompiledUnit:
        try:
            tree = ast.parse(source, self.filename, "exec")
            result = None
            if tree.body and isinstance(tree.body[-1], ast.Expr):
                last = tree.body.pop()
                result = compile(ast.Expression(last.value), self.filename, "eval")
            body = compile(tree, self.filename, "exec") if tree.body else None
        except SyntaxError as exc:
            raise CompileError([self._detail(exc)]) from exc
        except ValueError as exc:
            raise CompileError([SyntaxErrorDetail(0, 0, str(exc))]) from exc
        return CompiledUnit(body, result)

    def invoke(self, unit: CompiledUnit) -> Any:
        try:
            if unit.body is not None:
                exec(unit.body, self.namespace)
            value = eval(unit.result, self.namespace) if unit.result is not None else None
        except Exception as exc:
            # Drop this frame; keep the user's
            stack = traceback.extract_tb(exc.__traceback__)[1:]
            raise ExecutionError(exc, list(stack)) from exc
        if value is not None:
            self.namespace["_"] = value
        return value

    def try_evaluate(self, source: str) -> MemberSource | None:
        try:
            value = eval(compile(source, self.filename, "eval"), self.namespace)
        except Exception:
            logger.debug("Completion evaluation of %r failed", source, exc_info=True)
            return None
        return ValueMembers(value)

    def identifiers(self) -> MemberSource:
        return NameTable(self.namespace, dir(builtins))

    def _detail(self, exc: SyntaxError) -> SyntaxErrorDetail:
        lineno = exc.lineno or 1
        offset = exc.offset or 1
        token = None
        end_offset = getattr(exc, "end_offset", None)
        end_lineno = getattr(exc, "end_lineno", None)
        if exc.text and end_offset and end_offset > offset and end_lineno in (None, lineno):
            token = exc.text[offset - 1 : end_offset - 1] or None
        filename = exc.filename if exc.filename and exc.filename != self.filename else None
        return SyntaxErrorDetail(
            line=lineno - 1,
            column=max(0, offset - 1),
            message=exc.msg,
            token=token,
            filename=filename,
        )
