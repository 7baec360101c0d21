"""Events consumed by the picker and the responses it returns."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from tuipick.entries import Entry

T = TypeVar("T")


@dataclass(frozen=True)
class KeyEvent:
    """Raw terminal input: one key sequence or one bracketed paste."""

    data: str


@dataclass(frozen=True)
class ExternalEvent:
    """Any host event the picker does not handle itself."""

    payload: Any = None


Event = Union[KeyEvent, ExternalEvent]


@dataclass(frozen=True)
class Select(Generic[T]):
    """The user selected a specific entry."""

    entry: Entry[T]

    @property
    def payload(self) -> T:
        return self.entry.payload


@dataclass(frozen=True)
class Cancel:
    """The user closed the picker without selecting an entry."""


Response = Union[Select[T], Cancel]
