"""Fuzzy picker widget: query editing, ranking, selection and rendering.

The host owns the event loop and the terminal. It feeds the picker entries
(``extend``/``clear``) and events (``update``), asks it to ``render`` when
``needs_redraw`` is set, and acts on the ``Select``/``Cancel`` responses.

Typical host loop::

    picker = Picker[int]()
    picker.load(host_config)
    picker.extend(Entry(text=f"{n + 1}: {name}", payload=n) for n, name in enumerate(tabs))

    def on_event(event):
        response = picker.update(event)
        if isinstance(response, Select):
            go_to_tab(response.payload)
        elif isinstance(response, Cancel):
            close()
        return picker.needs_redraw()
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Generic, Iterable, Mapping, TypeVar

from tuipick.config import PickerConfig, load_config
from tuipick.entries import Entry, EntryStore
from tuipick.events import Cancel, Event, KeyEvent, Response, Select
from tuipick.fuzzy import CaseMatching, Scorer, fuzzy_match
from tuipick.keybindings import PickerKeybindingsManager, get_picker_keybindings
from tuipick.keys import BRACKETED_PASTE_END, BRACKETED_PASTE_START, is_printable
from tuipick.ranking import MatchResult, rerank
from tuipick.render import (
    DefaultPickerTheme,
    PickerTheme,
    clamp_scroll,
    render_no_matches,
    render_prompt,
    render_row,
)
from tuipick.utils import graphemes, is_control_char

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InputMode(str, Enum):
    NORMAL = "normal"
    SEARCH = "search"


class Picker(Generic[T]):
    """A fuzzy finder over host-supplied entries."""

    def __init__(
        self,
        config: PickerConfig | None = None,
        *,
        theme: PickerTheme | None = None,
        keybindings: PickerKeybindingsManager | None = None,
        scorer: Scorer = fuzzy_match,
    ) -> None:
        self._defaults = config or PickerConfig()
        self._config = self._defaults
        self._theme: PickerTheme = theme or DefaultPickerTheme()
        self._keybindings = keybindings
        self._scorer = scorer

        self._store: EntryStore[T] = EntryStore()
        self._query = ""
        self._cursor = 0
        self._results: list[MatchResult] = []
        self._selected: int | None = None
        self._remembered: str | None = None
        self._scroll_offset = 0
        self._page_size = 1

        self._input_mode = self._start_mode()
        self._active = True
        self._needs_redraw = True

    # -- configuration ------------------------------------------------------

    @property
    def config(self) -> PickerConfig:
        return self._config

    def load(self, overrides: Mapping[str, str]) -> PickerConfig:
        """Merge host *overrides* into the construction-time defaults.

        Call once while the host loads. Malformed values fall back to the
        default for that option only.
        """
        self._config = load_config(overrides, self._defaults)
        self._input_mode = self._start_mode()
        self._search(keep_selection=True)
        return self._config

    def set_case_matching(self, case_matching: CaseMatching) -> None:
        self._config = replace(self._config, case_matching=CaseMatching(case_matching))
        self._search(keep_selection=True)

    def set_match_paths(self, enabled: bool) -> None:
        self._config = replace(self._config, match_paths=enabled)
        self._search(keep_selection=True)

    def _start_mode(self) -> InputMode:
        return InputMode.SEARCH if self._config.start_in_search_mode else InputMode.NORMAL

    # -- entries ------------------------------------------------------------

    def entries(self) -> list[Entry[T]]:
        """Return the current entries in insertion order."""
        return self._store.entries()

    def append(self, entry: Entry[T]) -> None:
        self._store.append(entry)
        self._search(keep_selection=True)

    def extend(self, entries: Iterable[Entry[T]]) -> None:
        """Add new entries to the end of the list."""
        self._store.extend(entries)
        self._search(keep_selection=True)

    def clear(self) -> None:
        """Remove all entries."""
        self._store.clear()
        self._search(keep_selection=True)

    # -- state accessors ----------------------------------------------------

    @property
    def query(self) -> str:
        return self._query

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def input_mode(self) -> InputMode:
        return self._input_mode

    @property
    def active(self) -> bool:
        """False once a response was returned, until ``reset`` is called."""
        return self._active

    @property
    def results(self) -> list[MatchResult]:
        return list(self._results)

    @property
    def selected_index(self) -> int | None:
        return self._selected

    @property
    def scroll_offset(self) -> int:
        return self._scroll_offset

    def selected_entry(self) -> Entry[T] | None:
        if self._selected is None:
            return None
        return self._store[self._results[self._selected].entry_index]

    def needs_redraw(self) -> bool:
        """True if anything visible changed since the last ``render``."""
        return self._needs_redraw

    # -- commands -----------------------------------------------------------

    def select(self, index: int) -> None:
        """Force a specific result to be selected (clamped to the list)."""
        self._set_selected(index)

    def set_query(self, query: str) -> None:
        self._query = query
        self._cursor = len(query)
        self._search()

    def enter_search_mode(self) -> None:
        """Focus the query (equivalent to pressing ``/`` in normal mode)."""
        if self._input_mode is not InputMode.SEARCH:
            self._input_mode = InputMode.SEARCH
            self._needs_redraw = True

    def enter_normal_mode(self) -> None:
        """Focus the list (equivalent to pressing Escape while searching)."""
        if self._input_mode is not InputMode.NORMAL:
            self._input_mode = InputMode.NORMAL
            self._needs_redraw = True

    def reset(self) -> None:
        """Clear the query and make the picker accept input again."""
        self._query = ""
        self._cursor = 0
        self._input_mode = self._start_mode()
        self._active = True
        self._search()

    # -- input --------------------------------------------------------------

    def update(self, event: Event) -> Response[T] | None:
        """Handle one host event.

        Returns ``Select`` or ``Cancel`` when the user finished with the
        picker, otherwise ``None``. Events other than key input are ignored.
        """
        if isinstance(event, KeyEvent):
            return self.handle_input(event.data)
        return None

    def handle_input(self, data: str) -> Response[T] | None:
        if not self._active:
            return None

        if BRACKETED_PASTE_START in data:
            self._handle_paste(data)
            return None

        kb = self._keybindings or get_picker_keybindings()

        if kb.matches(data, "selectConfirm"):
            return self._confirm()

        if kb.matches(data, "selectCancel"):
            return self._finish(Cancel())

        if kb.matches(data, "exitSearch"):
            if self._input_mode is InputMode.SEARCH:
                self.enter_normal_mode()
                return None
            return self._finish(Cancel())

        if kb.matches(data, "selectUp"):
            self._move_selection(-1)
            return None

        if kb.matches(data, "selectDown"):
            self._move_selection(1)
            return None

        if kb.matches(data, "selectPageUp"):
            self._move_selection(-self._page_size)
            return None

        if kb.matches(data, "selectPageDown"):
            self._move_selection(self._page_size)
            return None

        if self._input_mode is InputMode.SEARCH:
            self._handle_search_key(data, kb)
            return None
        return self._handle_normal_key(data, kb)

    def _handle_normal_key(
        self, data: str, kb: PickerKeybindingsManager
    ) -> Response[T] | None:
        if kb.matches(data, "listDown"):
            self._move_selection(1)
        elif kb.matches(data, "listUp"):
            self._move_selection(-1)
        elif kb.matches(data, "enterSearch"):
            self.enter_search_mode()
        elif len(data) == 1 and "1" <= data <= "8":
            position = int(data) - 1
            if position < len(self._results):
                return self._finish(Select(self._entry_at(position)))
        elif data == "9" and self._results:
            return self._finish(Select(self._entry_at(len(self._results) - 1)))
        return None

    def _handle_search_key(self, data: str, kb: PickerKeybindingsManager) -> None:
        if kb.matches(data, "deleteCharBackward"):
            self._delete_backward()
        elif kb.matches(data, "deleteCharForward"):
            self._delete_forward()
        elif kb.matches(data, "clearQuery"):
            self._query = ""
            self._cursor = 0
            self._search()
        elif kb.matches(data, "cursorLeft"):
            if self._cursor > 0:
                last = graphemes(self._query[: self._cursor])[-1]
                self._move_cursor(self._cursor - len(last))
        elif kb.matches(data, "cursorRight"):
            if self._cursor < len(self._query):
                first = graphemes(self._query[self._cursor :])[0]
                self._move_cursor(self._cursor + len(first))
        elif kb.matches(data, "cursorLineStart"):
            self._move_cursor(0)
        elif kb.matches(data, "cursorLineEnd"):
            self._move_cursor(len(self._query))
        elif is_printable(data):
            self._insert(data)

    def _handle_paste(self, data: str) -> None:
        start = data.find(BRACKETED_PASTE_START) + len(BRACKETED_PASTE_START)
        end = data.find(BRACKETED_PASTE_END, start)
        pasted = data[start:] if end == -1 else data[start:end]
        clean = "".join(ch for ch in pasted if not is_control_char(ch))
        if not clean:
            return
        self.enter_search_mode()
        self._insert(clean)

    def _insert(self, text: str) -> None:
        self._query = self._query[: self._cursor] + text + self._query[self._cursor :]
        self._cursor += len(text)
        self._search()

    def _delete_backward(self) -> None:
        if self._cursor == 0:
            return
        last = graphemes(self._query[: self._cursor])[-1]
        start = self._cursor - len(last)
        self._query = self._query[:start] + self._query[self._cursor :]
        self._cursor = start
        self._search()

    def _delete_forward(self) -> None:
        if self._cursor >= len(self._query):
            return
        first = graphemes(self._query[self._cursor :])[0]
        self._query = self._query[: self._cursor] + self._query[self._cursor + len(first) :]
        self._search()

    def _move_cursor(self, position: int) -> None:
        position = max(0, min(position, len(self._query)))
        if position != self._cursor:
            self._cursor = position
            self._needs_redraw = True

    def _confirm(self) -> Response[T] | None:
        if self._selected is None:
            return None
        return self._finish(Select(self._entry_at(self._selected)))

    def _finish(self, response: Response[T]) -> Response[T]:
        self._active = False
        logger.debug("picker finished with %s", type(response).__name__)
        return response

    # -- selection ----------------------------------------------------------

    def _entry_at(self, position: int) -> Entry[T]:
        return self._store[self._results[position].entry_index]

    def _set_selected(self, index: int | None) -> None:
        if not self._results:
            selected = None
        else:
            selected = max(0, min(index or 0, len(self._results) - 1))
        if selected is not None:
            self._remembered = self._entry_at(selected).text
        if selected != self._selected:
            self._selected = selected
            self._needs_redraw = True

    def _move_selection(self, delta: int) -> None:
        if self._selected is None:
            return
        self._set_selected(self._selected + delta)

    def _search(self, keep_selection: bool = False) -> None:
        self._results = rerank(self._query, self._store.entries(), self._config, self._scorer)
        self._needs_redraw = True

        if not self._results:
            self._selected = None
            self._scroll_offset = 0
            return

        if keep_selection and self._remembered is not None:
            for position, result in enumerate(self._results):
                if self._store[result.entry_index].text == self._remembered:
                    self._set_selected(position)
                    return

        self._selected = None
        self._scroll_offset = 0
        self._set_selected(0)

    # -- rendering ----------------------------------------------------------

    def render(self, rows: int, cols: int) -> list[str]:
        """Lay out the picker in a ``rows`` x ``cols`` grid.

        Returns at most ``rows`` lines: the prompt followed by the visible
        results. Only the scroll offset is adjusted; everything else is read.
        """
        self._needs_redraw = False
        if rows <= 0:
            return []

        visible_rows = rows - 1
        if visible_rows > 0:
            self._page_size = visible_rows
        self._scroll_offset = clamp_scroll(
            self._scroll_offset, self._selected, len(self._results), visible_rows
        )

        counter = f"{len(self._results)}/{len(self._store)}"
        lines = [
            render_prompt(
                self._query,
                self._cursor,
                self._input_mode is InputMode.SEARCH,
                counter,
                cols,
                self._theme,
            )
        ]

        if visible_rows <= 0:
            return lines

        if not self._results:
            if self._query and len(self._store):
                lines.append(render_no_matches(cols, self._theme))
            return lines

        end = min(self._scroll_offset + visible_rows, len(self._results))
        for position in range(self._scroll_offset, end):
            result = self._results[position]
            lines.append(
                render_row(
                    self._store[result.entry_index].text,
                    result.positions,
                    position == self._selected,
                    cols,
                    self._theme,
                )
            )
        return lines
