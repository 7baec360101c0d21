"""Layout helpers that turn picker state into terminal lines.

Every function here is pure: it takes the state it needs and returns a string
(or a new scroll offset) without touching the picker.
"""

from __future__ import annotations

from typing import AbstractSet, Callable, Protocol

from tuipick.utils import (
    grapheme_width,
    graphemes,
    is_control_char,
    take_columns,
    take_last_columns,
    visible_width,
)

PROMPT_INDENT = "  "
ROW_PREFIX_WIDTH = 2
SEARCH_HINT = "(press / to search)"
ELLIPSIS = " [...]"
NO_MATCHES = "  No matches"


class PickerTheme(Protocol):
    hint: Callable[[str], str]
    cursor: Callable[[str], str]
    selected_marker: Callable[[str], str]
    selected_text: Callable[[str], str]
    match: Callable[[str], str]
    ellipsis: Callable[[str], str]
    counter: Callable[[str], str]
    no_match: Callable[[str], str]


def _sgr(on: int, off: int) -> Callable[[str], str]:
    def style(text: str) -> str:
        return f"\x1b[{on}m{text}\x1b[{off}m"

    return style


def _plain(text: str) -> str:
    return text


class DefaultPickerTheme:
    """ANSI colors: dim hints, green cursor, yellow selection, cyan matches."""

    hint = staticmethod(_sgr(90, 39))
    cursor = staticmethod(_sgr(42, 49))
    selected_marker = staticmethod(_sgr(33, 39))
    selected_text = staticmethod(_sgr(33, 39))
    match = staticmethod(_sgr(36, 39))
    ellipsis = staticmethod(_sgr(90, 39))
    counter = staticmethod(_sgr(90, 39))
    no_match = staticmethod(_sgr(90, 39))


class PlainPickerTheme:
    """No colors at all; the cursor cell is shown in reverse video."""

    hint = staticmethod(_plain)
    cursor = staticmethod(_sgr(7, 27))
    selected_marker = staticmethod(_plain)
    selected_text = staticmethod(_plain)
    match = staticmethod(_plain)
    ellipsis = staticmethod(_plain)
    counter = staticmethod(_plain)
    no_match = staticmethod(_plain)


def clamp_scroll(
    scroll_offset: int,
    selected_index: int | None,
    count: int,
    visible_rows: int,
) -> int:
    """Return the scroll offset that keeps the selection on screen.

    The offset is first clamped to the list, then moved by the smallest
    amount that brings the selection into the window.
    """
    if visible_rows <= 0 or count == 0:
        return 0

    offset = min(max(scroll_offset, 0), max(0, count - visible_rows))
    if selected_index is None:
        return offset
    if selected_index < offset:
        return selected_index
    if selected_index > offset + visible_rows - 1:
        return selected_index - visible_rows + 1
    return offset


def _printable(text: str) -> str:
    return "".join(" " if is_control_char(ch) else ch for ch in text)


def _query_with_cursor(
    query: str, cursor: int, width: int, theme: PickerTheme
) -> tuple[str, int]:
    before = query[:cursor]
    after = query[cursor:]
    clusters = graphemes(after)
    at = clusters[0] if clusters else " "
    after = after[len(at):] if clusters else ""

    at_width = visible_width(at)
    if at_width > width:
        return "", 0

    before_width = visible_width(before)
    if before_width + at_width > width:
        before = take_last_columns(before, width - at_width)
        before_width = visible_width(before)
    after = take_columns(after, width - before_width - at_width)

    text = before + theme.cursor(at) + after
    return text, before_width + at_width + visible_width(after)


def render_prompt(
    query: str,
    cursor: int,
    searching: bool,
    counter: str,
    cols: int,
    theme: PickerTheme,
) -> str:
    """Render the prompt line: the query (or a hint) plus a match counter."""
    if cols <= 0:
        return ""

    indent = PROMPT_INDENT[:cols]
    width = cols - len(indent)

    if not searching and not query:
        shown = take_columns(SEARCH_HINT, width)
        body = theme.hint(shown) if shown else ""
        body_width = visible_width(shown)
    elif searching:
        body, body_width = _query_with_cursor(_printable(query), cursor, width, theme)
    else:
        body = take_columns(_printable(query), width)
        body_width = visible_width(body)

    line_width = len(indent) + body_width
    line = indent + body
    if counter and line_width + 1 + len(counter) <= cols:
        line += " " * (cols - line_width - len(counter)) + theme.counter(counter)
    return line


def render_row(
    text: str,
    positions: AbstractSet[int],
    selected: bool,
    cols: int,
    theme: PickerTheme,
) -> str:
    """Render one result row, eliding text that does not fit in *cols*."""
    if cols <= 0:
        return ""
    if cols < ROW_PREFIX_WIDTH:
        return theme.selected_marker(">") if selected else " "

    prefix = theme.selected_marker(">") + " " if selected else "  "
    available = cols - ROW_PREFIX_WIDTH

    shown = _printable(text)
    elide = visible_width(shown) > available
    budget = available
    if elide:
        if available >= len(ELLIPSIS):
            budget = available - len(ELLIPSIS)
        else:
            elide = False

    used = 0
    cut = 0
    for cluster in graphemes(shown):
        w = grapheme_width(cluster)
        if used + w > budget:
            break
        used += w
        cut += len(cluster)

    styles: dict[bool, Callable[[str], str]] = {
        True: theme.match,
        False: theme.selected_text if selected else _plain,
    }
    body: list[str] = []
    run_start = 0
    for i in range(1, cut + 1):
        if i == cut or (i in positions) != (run_start in positions):
            body.append(styles[run_start in positions](shown[run_start:i]))
            run_start = i

    line = prefix + "".join(body)
    if elide:
        line += theme.ellipsis(ELLIPSIS)
    return line


def render_no_matches(cols: int, theme: PickerTheme) -> str:
    shown = take_columns(NO_MATCHES, cols)
    return theme.no_match(shown) if shown else ""
