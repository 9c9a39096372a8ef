"""Tests for iox.prompt -- the prompt stack."""

from __future__ import annotations

import pytest

from iox.colors import DARK_GRAY
from iox.prompt import PromptStack, PromptStackUnderflow

from .virtual_terminal import VirtualTerminal


class TestPromptStack:
    def test_push_pop_restores(self) -> None:
        prompts = PromptStack(">")
        prompts.push("a")
        prompts.push("b")
        prompts.pop()
        assert prompts.current == "a"
        prompts.pop()
        assert prompts.current == ">"
        assert prompts.depth == 0

    def test_pop_empty_raises(self) -> None:
        prompts = PromptStack(">")
        with pytest.raises(PromptStackUnderflow):
            prompts.pop()

    def test_dup_keeps_current(self) -> None:
        prompts = PromptStack(">")
        prompts.dup()
        assert prompts.current == ">"
        assert prompts.depth == 1
        prompts.pop()
        assert prompts.current == ">"

    def test_str_adds_space(self) -> None:
        assert str(PromptStack("λ")) == "λ "
        assert str(PromptStack("")) == ""

    def test_length_ignores_escapes(self) -> None:
        assert PromptStack(f"{DARK_GRAY}12").length == 3
        assert PromptStack("λ").length == 2
        assert PromptStack("").length == 0

    def test_render(self) -> None:
        vt = VirtualTerminal()
        PromptStack(f"{DARK_GRAY}>>>").render(vt)
        assert vt.line(0) == ">>>"
        assert vt.get_cursor() == (4, 0)
        assert (">>> ", 8, 0) in vt.spans
