"""Tests for tuipick.render -- scrolling, prompt and row layout."""

from __future__ import annotations

from tuipick.render import (
    ELLIPSIS,
    NO_MATCHES,
    DefaultPickerTheme,
    PlainPickerTheme,
    clamp_scroll,
    render_no_matches,
    render_prompt,
    render_row,
)
from tuipick.utils import visible_width

FAMILY = "\U0001F468\u200D\U0001F469\u200D\U0001F467"


# ---------------------------------------------------------------------------
# Test themes
# ---------------------------------------------------------------------------


class _IdentityTheme:
    """Theme that returns text unmodified, satisfying the PickerTheme protocol."""

    @staticmethod
    def hint(text: str) -> str:
        return text

    @staticmethod
    def cursor(text: str) -> str:
        return text

    @staticmethod
    def selected_marker(text: str) -> str:
        return text

    @staticmethod
    def selected_text(text: str) -> str:
        return text

    @staticmethod
    def match(text: str) -> str:
        return text

    @staticmethod
    def ellipsis(text: str) -> str:
        return text

    @staticmethod
    def counter(text: str) -> str:
        return text

    @staticmethod
    def no_match(text: str) -> str:
        return text


class _BracketTheme(_IdentityTheme):
    """Marks matched runs with brackets and the cursor with a bar."""

    @staticmethod
    def match(text: str) -> str:
        return f"[{text}]"

    @staticmethod
    def cursor(text: str) -> str:
        return f"|{text}"


THEME = _IdentityTheme()


# ---------------------------------------------------------------------------
# clamp_scroll
# ---------------------------------------------------------------------------


class TestClampScroll:
    def test_scrolls_down_minimally(self) -> None:
        assert clamp_scroll(0, 7, 10, 4) == 4

    def test_scrolls_up_to_selection(self) -> None:
        assert clamp_scroll(5, 2, 10, 4) == 2

    def test_keeps_offset_when_selection_visible(self) -> None:
        assert clamp_scroll(3, 5, 10, 4) == 3

    def test_clamps_offset_past_end(self) -> None:
        assert clamp_scroll(8, 9, 10, 4) == 6

    def test_empty_list(self) -> None:
        assert clamp_scroll(5, None, 0, 4) == 0

    def test_no_visible_rows(self) -> None:
        assert clamp_scroll(5, 7, 10, 0) == 0

    def test_short_list_never_scrolls(self) -> None:
        assert clamp_scroll(2, 1, 3, 10) == 0


# ---------------------------------------------------------------------------
# render_row
# ---------------------------------------------------------------------------


class TestRenderRow:
    def test_unselected_prefix(self) -> None:
        assert render_row("abc", set(), False, 20, THEME) == "  abc"

    def test_selected_prefix(self) -> None:
        assert render_row("abc", set(), True, 20, THEME) == "> abc"

    def test_matched_runs_are_styled(self) -> None:
        assert render_row("abcd", {0, 2, 3}, False, 20, _BracketTheme()) == "  [a]b[cd]"

    def test_elides_long_text(self) -> None:
        line = render_row("abcdefghijklmnop", set(), False, 12, THEME)
        assert line == "  abcd" + ELLIPSIS
        assert visible_width(line) == 12

    def test_text_that_fits_exactly_is_not_elided(self) -> None:
        assert render_row("abcdefghij", set(), False, 12, THEME) == "  abcdefghij"

    def test_wide_characters_are_measured_in_cells(self) -> None:
        line = render_row("日本語テキスト", set(), False, 10, THEME)
        assert line == "  日" + ELLIPSIS
        assert visible_width(line) == 10

    def test_narrow_row_truncates_without_ellipsis(self) -> None:
        assert render_row("abcdefghij", set(), False, 6, THEME) == "  abcd"

    def test_control_characters_render_as_spaces(self) -> None:
        assert render_row("a\tb\x1bc", set(), False, 20, THEME) == "  a b c"

    def test_emoji_sequence_takes_two_cells(self) -> None:
        assert render_row(FAMILY + "ab", set(), False, 6, THEME) == "  " + FAMILY + "ab"

    def test_emoji_sequence_is_never_split(self) -> None:
        assert render_row(FAMILY * 5, set(), False, 12, THEME) == "  " + FAMILY * 5
        line = render_row(FAMILY * 5, set(), False, 11, THEME)
        assert line == "  " + FAMILY + ELLIPSIS
        assert visible_width(line) == 10

    def test_tiny_widths(self) -> None:
        assert render_row("abc", set(), True, 1, THEME) == ">"
        assert render_row("abc", set(), False, 1, THEME) == " "
        assert render_row("abc", set(), True, 0, THEME) == ""

    def test_default_theme_output_fits(self) -> None:
        line = render_row("abcdefghijklmnop", {0, 1}, True, 12, DefaultPickerTheme())
        assert visible_width(line) == 12


# ---------------------------------------------------------------------------
# render_prompt
# ---------------------------------------------------------------------------


class TestRenderPrompt:
    def test_hint_when_not_searching(self) -> None:
        line = render_prompt("", 0, False, "3/3", 40, THEME)
        assert line.startswith("  (press / to search)")
        assert line.endswith("3/3")
        assert visible_width(line) == 40

    def test_query_with_cursor_at_end(self) -> None:
        assert render_prompt("ab", 2, True, "1/1", 10, THEME) == "  ab   1/1"

    def test_cursor_cell(self) -> None:
        assert render_prompt("abc", 1, True, "", 20, _BracketTheme()) == "  a|bc"

    def test_counter_dropped_when_it_does_not_fit(self) -> None:
        assert render_prompt("ab", 2, True, "1/1", 6, THEME) == "  ab "

    def test_long_query_scrolls_to_keep_cursor_visible(self) -> None:
        assert render_prompt("abcdefghij", 10, True, "", 6, THEME) == "  hij "

    def test_query_shown_without_cursor_in_normal_mode(self) -> None:
        assert render_prompt("abc", 3, False, "", 20, _BracketTheme()) == "  abc"

    def test_control_characters_in_query_render_as_spaces(self) -> None:
        assert render_prompt("a\tb", 3, True, "", 20, THEME) == "  a b "
        assert render_prompt("a\x1bb", 3, False, "", 20, THEME) == "  a b"

    def test_zero_width(self) -> None:
        assert render_prompt("abc", 3, True, "1/1", 0, THEME) == ""

    def test_never_wider_than_columns(self) -> None:
        for cols in range(1, 30):
            line = render_prompt("日本語 query", 4, True, "12/345", cols, PlainPickerTheme())
            assert visible_width(line) <= cols


class TestRenderNoMatches:
    def test_text(self) -> None:
        assert render_no_matches(40, THEME) == NO_MATCHES

    def test_truncated(self) -> None:
        assert render_no_matches(5, THEME) == NO_MATCHES[:5]
