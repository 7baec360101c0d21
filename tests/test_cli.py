"""Tests for the tuipick command line."""

from __future__ import annotations

from contextlib import contextmanager

import pytest
from click.testing import CliRunner

from tuipick import cli

from .virtual_terminal import ScriptedTerminal

KEY_DOWN = "\x1b[B"
KEY_ENTER = "\r"
KEY_ESCAPE = "\x1b"
KEY_CTRL_C = "\x03"

LINES = "alpha\nbeta\nalphabet\n"


@pytest.fixture
def script(monkeypatch):
    """Replace the tty with a terminal that types the given keys."""
    terminals: list[ScriptedTerminal] = []

    def use(*keys: str) -> list[ScriptedTerminal]:
        @contextmanager
        def fake_open_terminal():
            terminal = ScriptedTerminal(keys, rows=10, columns=40)
            terminals.append(terminal)
            yield terminal

        monkeypatch.setattr(cli, "_open_terminal", fake_open_terminal)
        return terminals

    return use


class TestSelection:
    def test_prints_selected_line(self, script) -> None:
        script(KEY_DOWN, KEY_ENTER)
        result = CliRunner().invoke(cli.main, [], input=LINES)
        assert result.exit_code == 0
        assert result.stdout == "beta\n"

    def test_search_then_confirm(self, script) -> None:
        script("/", "b", "e", "t", KEY_ENTER)
        result = CliRunner().invoke(cli.main, [], input=LINES)
        assert result.exit_code == 0
        assert result.stdout == "beta\n"

    def test_quick_select_digit(self, script) -> None:
        script("3")
        result = CliRunner().invoke(cli.main, [], input=LINES)
        assert result.stdout == "alphabet\n"

    def test_initial_query(self, script) -> None:
        script(KEY_ENTER)
        result = CliRunner().invoke(cli.main, ["--query", "bet"], input=LINES)
        assert result.stdout == "beta\n"

    def test_start_in_search_mode(self, script) -> None:
        script("b", "e", KEY_ENTER)
        result = CliRunner().invoke(cli.main, ["--search"], input=LINES)
        assert result.stdout == "beta\n"

    def test_raw_option(self, script) -> None:
        script("b", "e", KEY_ENTER)
        result = CliRunner().invoke(
            cli.main, ["-o", "picker_start_in_search_mode=true"], input=LINES
        )
        assert result.stdout == "beta\n"

    def test_case_option(self, script) -> None:
        script(KEY_ENTER)
        result = CliRunner().invoke(
            cli.main, ["--case", "respect", "--query", "Beta"], input="beta\nBeta\n"
        )
        assert result.stdout == "Beta\n"

    def test_reads_source_file(self, script, tmp_path) -> None:
        source = tmp_path / "lines.txt"
        source.write_text("one\ntwo\n")
        script(KEY_DOWN, KEY_ENTER)
        result = CliRunner().invoke(cli.main, [str(source), "--no-color"])
        assert result.exit_code == 0
        assert result.stdout == "two\n"

    def test_draws_on_terminal_not_stdout(self, script) -> None:
        terminals = script(KEY_ENTER)
        result = CliRunner().invoke(cli.main, ["--no-color"], input=LINES)
        assert result.stdout == "alpha\n"
        assert "> alpha" in terminals[0].output


class TestExitCodes:
    def test_cancel_with_ctrl_c(self, script) -> None:
        script(KEY_CTRL_C)
        result = CliRunner().invoke(cli.main, [], input=LINES)
        assert result.exit_code == cli.EXIT_CANCELLED
        assert result.stdout == ""

    def test_cancel_with_escape(self, script) -> None:
        script(KEY_ESCAPE)
        result = CliRunner().invoke(cli.main, [], input=LINES)
        assert result.exit_code == cli.EXIT_CANCELLED

    def test_empty_input(self, script) -> None:
        terminals = script()
        result = CliRunner().invoke(cli.main, [], input="")
        assert result.exit_code == cli.EXIT_NOTHING_TO_PICK
        assert terminals == []

    def test_malformed_option(self, script) -> None:
        script(KEY_ENTER)
        result = CliRunner().invoke(cli.main, ["-o", "no-equals-sign"], input=LINES)
        assert result.exit_code == 2
