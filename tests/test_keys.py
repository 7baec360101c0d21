"""Tests for tuipick.keys -- keyboard input matching."""

from __future__ import annotations

import pytest

from tuipick.keys import (
    BRACKETED_PASTE_START,
    LEGACY_KEY_SEQUENCES,
    MODIFIERS,
    is_printable,
    matches_key,
    parse_key_id,
    raw_ctrl_char,
)


# ---------------------------------------------------------------------------
# parse_key_id
# ---------------------------------------------------------------------------


class TestParseKeyId:
    def test_plain_key(self) -> None:
        assert parse_key_id("a") == (0, "a")

    def test_modifiers_combine(self) -> None:
        assert parse_key_id("ctrl+shift+a") == (MODIFIERS["ctrl"] | MODIFIERS["shift"], "a")

    def test_plus_key(self) -> None:
        assert parse_key_id("+") == (0, "+")
        assert parse_key_id("ctrl++") == (MODIFIERS["ctrl"], "+")

    def test_unknown_modifier(self) -> None:
        assert parse_key_id("hyper+a") is None

    def test_empty(self) -> None:
        assert parse_key_id("") is None
        assert parse_key_id("ctrl+") is None


# ---------------------------------------------------------------------------
# matches_key
# ---------------------------------------------------------------------------


class TestMatchesKey:
    @pytest.mark.parametrize(
        ("data", "key_id"),
        [
            ("\x1b[A", "up"),
            ("\x1bOA", "up"),
            ("\x1b[B", "down"),
            ("\x1b[5~", "pageUp"),
            ("\x1b[6~", "pageDown"),
            ("\x1b[3~", "delete"),
            ("\x1b[H", "home"),
            ("\x1b[4~", "end"),
            ("\r", "enter"),
            ("\n", "enter"),
            ("\x1b", "escape"),
            ("\t", "tab"),
            ("\x1b[Z", "shift+tab"),
            ("\x7f", "backspace"),
            ("\x03", "ctrl+c"),
            ("\x15", "ctrl+u"),
            ("\x10", "ctrl+p"),
            ("\x1b[1;5A", "ctrl+up"),
            ("\x1b[1;2B", "shift+down"),
            ("/", "/"),
            ("j", "j"),
            ("J", "shift+j"),
            ("\x1bj", "alt+j"),
            (" ", "space"),
        ],
    )
    def test_matches(self, data: str, key_id: str) -> None:
        assert matches_key(data, key_id)

    @pytest.mark.parametrize(
        ("data", "key_id"),
        [
            ("\x1b[A", "down"),
            ("\x1b[1;5A", "up"),
            ("\t", "shift+tab"),
            ("j", "k"),
            ("J", "j"),
            ("\x1b", "alt+escape"),
            ("\x03", "ctrl+d"),
            ("a", "hyper+a"),
        ],
    )
    def test_does_not_match(self, data: str, key_id: str) -> None:
        assert not matches_key(data, key_id)

    def test_every_legacy_sequence_matches_its_name(self) -> None:
        for data, name in LEGACY_KEY_SEQUENCES.items():
            assert matches_key(data, name), (data, name)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestRawCtrlChar:
    def test_letters(self) -> None:
        assert raw_ctrl_char("a") == "\x01"
        assert raw_ctrl_char("Z") == "\x1a"

    def test_symbols(self) -> None:
        assert raw_ctrl_char("[") == "\x1b"
        assert raw_ctrl_char("1") is None

    def test_multi_char(self) -> None:
        assert raw_ctrl_char("up") is None


class TestIsPrintable:
    def test_text(self) -> None:
        assert is_printable("a")
        assert is_printable("日本")
        assert is_printable("é")

    def test_control_sequences(self) -> None:
        assert not is_printable("")
        assert not is_printable("\x1b[A")
        assert not is_printable("\x03")
        assert not is_printable(BRACKETED_PASTE_START)
