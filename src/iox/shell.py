"""The read-evaluate-print loop.

Ties the editor, the hint engine and the evaluator together and takes
care of showing results and errors.
"""

from __future__ import annotations

import logging
import platform
import traceback
from pathlib import Path

from iox import __version__, ansi, pretty
from iox.backend import PythonEvaluator, PythonTokenizer
from iox.colors import DARK_CYAN, DARK_RED, DEFAULT, RED, WHITE
from iox.config import Config
from iox.editor import MultilineEditor
from iox.errors import CompileError, ExecutionError, GroupingMismatchError, SyntaxErrorDetail
from iox.hinter import CompletionSource, HintEngine
from iox.language import Evaluator, Tokenizer
from iox.powerline import powerline
from iox.prompt import PromptStack
from iox.terminal import Terminal

logger = logging.getLogger(__name__)


class Shell:
    def __init__(
        self,
        terminal: Terminal,
        config: Config | None = None,
        evaluator: Evaluator | None = None,
        tokenizer: Tokenizer | None = None,
    ) -> None:
        self.terminal = terminal
        self.config = config or Config()
        self.evaluator = evaluator or PythonEvaluator(filename=self.config.source_name)
        self.tokenizer = tokenizer or PythonTokenizer()
        self.prompts = PromptStack(self._initial_prompt())
        self.hinter: HintEngine | None = None
        if self.config.hints:
            self.hinter = HintEngine(
                terminal,
                CompletionSource(self.evaluator),
                hint_color=self.config.hint_color,
            )
        self.editor = MultilineEditor(
            terminal,
            self.prompts,
            self.tokenizer,
            read_line=self.hinter.read_line if self.hinter else None,
            source_name=self.config.source_name,
        )
        # Last complete input, for error highlighting
        self.buffered_input = ""

    def _initial_prompt(self) -> str:
        if self.config.use_powerline:
            return powerline().segment(f"IoX {__version__} ", fg=DARK_CYAN, bg=WHITE).to_ansi_string()
        return self.config.prompt

    # -- loop ---------------------------------------------------------------

    def banner(self) -> None:
        python = platform.python_version()
        if self.config.use_powerline:
            ansi.write_line(
                self.terminal,
                powerline()
                .segment(f"IoX {__version__} ", fg=DARK_CYAN, bg=WHITE)
                .segment(f" Python {python}", fg=WHITE, bg=DARK_CYAN)
                .to_ansi_string(),
            )
        else:
            ansi.write_line(self.terminal, f"iox {__version__} (Python {python})\n")

    def run(self) -> None:
        """Run until end of input."""
        logger.info("Shell started")
        self.banner()
        while True:
            try:
                self.run_iteration()
            except KeyboardInterrupt:
                self.terminal.write("\n")
                ansi.write_line(self.terminal, f"{RED}KeyboardInterrupt")
            except EOFError:
                self.terminal.write("\n")
                break
        logger.info("Shell stopped")

    def run_iteration(self) -> None:
        """Read one complete input, evaluate it and print the result."""
        try:
            source = self.editor.read()
        except GroupingMismatchError as exc:
            logger.debug("Discarding input: %s", exc)
            ansi.write_line(self.terminal, f"{RED}{exc}")
            return

        self.buffered_input = source.strip()
        if not self.buffered_input:
            return

        try:
            unit = self.evaluator.compile(self.buffered_input)
            result = self.evaluator.invoke(unit)
        except CompileError as exc:
            self.present_syntax_error(exc)
            return
        except ExecutionError as exc:
            self.present_runtime_error(exc)
            return

        if result is not None:
            try:
                text = pretty.format_value(result)
            except Exception as exc:
                # repr() is user code too
                self.present_runtime_error(ExecutionError(exc))
                return
            ansi.write_line(self.terminal, text)

    # -- error presentation -------------------------------------------------

    def present_syntax_error(self, exc: CompileError) -> None:
        for err in exc.errors:
            if err.filename:
                # The error came from somewhere else
                path = Path(err.filename).stem
                ansi.write_line(
                    self.terminal,
                    f"Error at {WHITE}{path}{DEFAULT} ({err.line + 1}:{err.column}): {err.message}",
                )
                continue
            self._highlight(err)
            location = f" at line {err.line + 1}" if err.line != 0 else ""
            ansi.write_line(self.terminal, f"\n{WHITE}SyntaxError{location}: {RED}{err.message}")

    def _highlight(self, err: SyntaxErrorDetail) -> None:
        lines = self.buffered_input.split("\n")
        line = lines[err.line].rstrip() if 0 <= err.line < len(lines) else ""
        if not line:
            return
        start = min(err.column, len(line) - 1)
        length = max(1, err.token_length)
        self.terminal.write(line[:start])
        ansi.write(self.terminal, f"{DARK_RED.bg}{WHITE}{line[start : start + length]}")
        self.terminal.write(line[start + length :] + "\n")
        ansi.write_line(self.terminal, f"{WHITE}{' ' * start}{'^' * length}")

    def present_runtime_error(self, exc: ExecutionError) -> None:
        pretty.write_value(self.terminal, exc.original)
        if any(frame.filename != self.config.source_name for frame in exc.stack):
            for entry in traceback.format_list(exc.stack):
                self.terminal.write(entry)
