"""Picker entries and the append-only store that holds them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")


@dataclass
class Entry(Generic[T]):
    """An entry in the picker.

    ``text`` is displayed and matched against the query. ``payload`` is extra
    data owned by the host; it is handed back unchanged when the entry is
    selected and never inspected by the picker.
    """

    text: str
    payload: T = None  # type: ignore[assignment]


class EntryStore(Generic[T]):
    """Ordered collection of entries supporting append and clear only.

    Callers that need to refresh the set clear it and append again; there is
    no update or removal by index.
    """

    def __init__(self, entries: Iterable[Entry[T]] = ()) -> None:
        self._entries: list[Entry[T]] = list(entries)

    def append(self, entry: Entry[T]) -> None:
        self._entries.append(entry)

    def extend(self, entries: Iterable[Entry[T]]) -> None:
        self._entries.extend(entries)

    def clear(self) -> None:
        self._entries.clear()

    def entries(self) -> list[Entry[T]]:
        """Return a copy of the entries in insertion order."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry[T]]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> Entry[T]:
        return self._entries[index]
