"""Tests for iox.terminal -- the stdin/stdout terminal."""

from __future__ import annotations

import io
import os

import pytest

from iox.terminal import ProcessTerminal, _sgr_for_slot


class TestSgrForSlot:
    def test_normal_slots(self) -> None:
        assert _sgr_for_slot(1, foreground=True) == "\x1b[31m"
        assert _sgr_for_slot(4, foreground=False) == "\x1b[44m"

    def test_bright_slots(self) -> None:
        assert _sgr_for_slot(9, foreground=True) == "\x1b[91m"
        assert _sgr_for_slot(15, foreground=False) == "\x1b[107m"


class TestProcessTerminal:
    def test_colors_written_as_sgr(self, capsys) -> None:
        terminal = ProcessTerminal()
        terminal.foreground = 1
        terminal.background = 12
        assert terminal.foreground == 1
        assert capsys.readouterr().out == "\x1b[31m\x1b[104m"

    def test_default_slots_restore_terminal_defaults(self, capsys) -> None:
        terminal = ProcessTerminal()
        terminal.foreground = 7
        terminal.background = 0
        assert capsys.readouterr().out == "\x1b[39m\x1b[49m"

    def test_set_cursor(self, capsys) -> None:
        terminal = ProcessTerminal()
        terminal.set_cursor(3, 4)
        assert capsys.readouterr().out == "\x1b[5;4H"

    def test_cursor_without_tty_falls_back(self, monkeypatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        terminal = ProcessTerminal()
        terminal.set_cursor(3, 4)
        assert terminal.get_cursor() == (3, 4)

    def test_read_line(self, monkeypatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("abc\r\nlast"))
        terminal = ProcessTerminal()
        assert terminal.read_line() == "abc"
        assert terminal.read_line() == "last"
        with pytest.raises(EOFError):
            terminal.read_line()

    def test_read_key_without_tty(self, monkeypatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("a"))
        with pytest.raises(EOFError):
            ProcessTerminal().read_key()

    def test_write_log(self, monkeypatch, tmp_path, capsys) -> None:
        log = tmp_path / "out.log"
        monkeypatch.setenv("IOX_WRITE_LOG", str(log))
        terminal = ProcessTerminal()
        terminal.write("hi")
        terminal.write(" there")
        assert capsys.readouterr().out == "hi there"
        assert log.read_text() == "hi there"

    def test_split_multibyte_character(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            terminal = ProcessTerminal()
            encoded = "λ".encode()
            os.write(write_fd, b"a" + encoded[:1])
            assert terminal._read_chunk(read_fd, 0.5) == "a"
            os.write(write_fd, encoded[1:])
            assert terminal._read_chunk(read_fd, 0.5) == "λ"
        finally:
            os.close(read_fd)
            os.close(write_fd)
