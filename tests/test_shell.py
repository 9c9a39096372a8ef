"""Tests for iox.shell -- the read-evaluate-print loop."""

from __future__ import annotations

import pytest

from iox import __version__
from iox.backend import PythonEvaluator
from iox.colors import RED
from iox.config import Config
from iox.errors import CompileError, SyntaxErrorDetail
from iox.powerline import PL_ARROW
from iox.shell import Shell

from .virtual_terminal import VirtualTerminal


def _shell(*lines: str, **config) -> tuple[Shell, VirtualTerminal]:
    vt = VirtualTerminal()
    vt.feed_lines(*lines)
    config.setdefault("hints", False)
    return Shell(vt, Config(**config)), vt


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


class TestRunIteration:
    def test_prints_result(self) -> None:
        shell, vt = _shell("1 + 2")
        shell.run_iteration()
        assert vt.lines[:2] == ["λ 1 + 2", "3"]

    def test_none_not_printed(self) -> None:
        shell, vt = _shell("x = 1", "x")
        shell.run_iteration()
        shell.run_iteration()
        assert vt.lines[:3] == ["λ x = 1", "λ x", "1"]

    def test_multi_line_input(self) -> None:
        shell, vt = _shell("[1,", "2]")
        shell.run_iteration()
        assert vt.line(2) == "[ 1, 2 ]"
        assert shell.buffered_input == "[1,\n2]"

    def test_blank_input(self) -> None:
        shell, vt = _shell("   ")
        shell.run_iteration()
        assert shell.buffered_input == ""
        assert vt.lines[1:] == [""]

    def test_grouping_mismatch(self) -> None:
        shell, vt = _shell("}", "1")
        shell.run_iteration()
        assert vt.line(1) == "Mismatched grouping: unexpected '}' on line 1"
        assert "Mismatched" in vt.written_in(RED.to_palette())
        shell.run_iteration()
        assert vt.line(3) == "1"

    def test_grouping_mismatch_is_not_compiled(self) -> None:
        class RecordingEvaluator(PythonEvaluator):
            def __init__(self) -> None:
                super().__init__()
                self.compiled: list[str] = []

            def compile(self, source: str):
                self.compiled.append(source)
                return super().compile(source)

        vt = VirtualTerminal()
        vt.feed_lines("}{")
        evaluator = RecordingEvaluator()
        Shell(vt, Config(hints=False), evaluator=evaluator).run_iteration()
        assert evaluator.compiled == []
        assert vt.line(1).startswith("Mismatched grouping")

    def test_syntax_error(self) -> None:
        shell, vt = _shell("1 +")
        shell.run_iteration()
        assert any(line.startswith("SyntaxError: ") for line in vt.lines)

    def test_runtime_error(self) -> None:
        shell, vt = _shell("1 / 0")
        shell.run_iteration()
        assert vt.line(1) == "ZeroDivisionError: division by zero"
        assert "File" not in vt.text

    def test_runtime_error_shows_foreign_stack(self) -> None:
        shell, vt = _shell("import json; json.loads('{')")
        shell.run_iteration()
        assert vt.line(1).startswith("JSONDecodeError: ")
        assert "decoder.py" in vt.output

    def test_hints_enabled(self) -> None:
        vt = VirtualTerminal()
        vt.feed_keys("le\t('ab')\r")
        shell = Shell(vt, Config())
        shell.run_iteration()
        assert vt.lines[:2] == ["λ len('ab')", "2"]


# ---------------------------------------------------------------------------
# Error presentation
# ---------------------------------------------------------------------------


class TestPresentSyntaxError:
    def test_token_highlighted(self) -> None:
        shell, vt = _shell()
        shell.buffered_input = "x = 1\ny = = 2"
        shell.present_syntax_error(
            CompileError([SyntaxErrorDetail(1, 4, "invalid syntax", token="=")])
        )
        assert vt.lines[:4] == [
            "y = = 2",
            "    ^",
            "",
            "SyntaxError at line 2: invalid syntax",
        ]
        assert ("=", 15, 1) in vt.spans

    def test_column_highlighted_without_token(self) -> None:
        shell, vt = _shell()
        shell.buffered_input = "abcdef"
        shell.present_syntax_error(CompileError([SyntaxErrorDetail(0, 2, "oops")]))
        assert vt.lines[:4] == ["abcdef", "  ^", "", "SyntaxError: oops"]
        assert ("c", 15, 1) in vt.spans

    def test_column_past_end_of_line(self) -> None:
        shell, vt = _shell()
        shell.buffered_input = "abc"
        shell.present_syntax_error(CompileError([SyntaxErrorDetail(0, 9, "eof")]))
        assert vt.lines[:2] == ["abc", "  ^"]

    def test_error_from_other_file(self) -> None:
        shell, vt = _shell()
        shell.buffered_input = "import broken"
        shell.present_syntax_error(
            CompileError([SyntaxErrorDetail(2, 5, "bad", filename="/tmp/broken.py")])
        )
        assert vt.line(0) == "Error at broken (3:5): bad"
        assert "broken" in vt.written_in(15)


# ---------------------------------------------------------------------------
# Loop
# ---------------------------------------------------------------------------


class TestRun:
    def test_broken_repr_does_not_end_session(self) -> None:
        shell, vt = _shell("type('A', (), {'__repr__': lambda s: 1/0})()", "1 + 1")
        shell.run()
        assert "ZeroDivisionError: division by zero" in vt.lines
        assert "2" in vt.lines

    def test_unprintable_int_does_not_end_session(self) -> None:
        shell, vt = _shell("10 ** 5000", "1 + 1")
        shell.run()
        assert "2" in vt.lines

    def test_exit_ends_session(self) -> None:
        shell, vt = _shell("exit()", "1 + 1")
        with pytest.raises(SystemExit):
            shell.run()
        assert "2" not in vt.lines

    def test_runs_until_eof(self) -> None:
        shell, vt = _shell("1", "2")
        shell.run()
        assert f"iox {__version__}" in vt.line(0)
        assert "1" in vt.lines
        assert "2" in vt.lines

    def test_keyboard_interrupt_restarts_read(self) -> None:
        shell, vt = _shell("raise KeyboardInterrupt", "40 + 2")
        shell.run()
        assert "KeyboardInterrupt" in vt.lines
        assert "42" in vt.lines

    def test_powerline_prompt(self) -> None:
        shell, vt = _shell("1", use_powerline=True)
        assert PL_ARROW in shell.prompts.current
        shell.run()
        assert f"IoX {__version__}" in vt.line(0)
        assert any(line.startswith(f" IoX {__version__} {PL_ARROW} 1") for line in vt.lines)
