"""StdinBuffer splits raw terminal input into single key sequences.

Reads from a tty can carry several keys at once ("abc" typed quickly) or end
in the middle of an escape sequence. The buffer emits one callback per
complete sequence and one per bracketed paste, holding back an unfinished
escape sequence until more data arrives or a short timeout expires.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from tuipick.keys import BRACKETED_PASTE_END, BRACKETED_PASTE_START

logger = logging.getLogger(__name__)

ESC = "\x1b"


def _sequence_length(data: str) -> int | None:
    """Length of the escape sequence at the start of *data*.

    Returns ``None`` when *data* ends before the sequence is complete.
    """
    if len(data) < 2:
        return None

    introducer = data[1]

    # CSI: ESC [ params final-byte
    if introducer == "[":
        for i in range(2, len(data)):
            if 0x40 <= ord(data[i]) <= 0x7E:
                return i + 1
        return None

    # SS3: ESC O <char>
    if introducer == "O":
        return 3 if len(data) >= 3 else None

    # OSC / DCS / APC: terminated by BEL or ST
    if introducer in "]P_":
        for i in range(2, len(data)):
            if data[i] == "\x07":
                return i + 1
            if data[i] == ESC and i + 1 < len(data) and data[i + 1] == "\\":
                return i + 2
        return None

    # ESC ESC [ ... is alt + a CSI key; otherwise meta + one character
    if introducer == ESC and len(data) > 2 and data[2] in "[O":
        inner = _sequence_length(data[1:])
        return None if inner is None else inner + 1
    return 2


def split_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences.

    Returns ``(sequences, remainder)`` where the remainder is an escape
    sequence that has not finished arriving.
    """
    sequences: list[str] = []
    pos = 0
    while pos < len(buffer):
        if buffer[pos] != ESC:
            sequences.append(buffer[pos])
            pos += 1
            continue
        length = _sequence_length(buffer[pos:])
        if length is None:
            return sequences, buffer[pos:]
        sequences.append(buffer[pos : pos + length])
        pos += length
    return sequences, ""


class StdinBuffer:
    """Buffers stdin input and emits complete sequences."""

    def __init__(self, *, timeout: float = 0.01) -> None:
        self._buffer = ""
        self._timeout = timeout
        self._timeout_handle: asyncio.TimerHandle | None = None
        self._paste_mode = False
        self._paste_buffer = ""

        self._on_data: Callable[[str], None] | None = None
        self._on_paste: Callable[[str], None] | None = None

    def on_data(self, callback: Callable[[str], None]) -> None:
        """Set callback for complete sequences."""
        self._on_data = callback

    def on_paste(self, callback: Callable[[str], None]) -> None:
        """Set callback for paste content."""
        self._on_paste = callback

    def _emit_data(self, data: str) -> None:
        if self._on_data:
            self._on_data(data)

    def _emit_paste(self, data: str) -> None:
        if self._on_paste:
            self._on_paste(data)

    def process(self, data: str) -> None:
        """Feed input data into the buffer."""
        self._cancel_timeout()

        if self._paste_mode:
            self._paste_buffer += data
            self._finish_paste()
            return

        self._buffer += data

        start = self._buffer.find(BRACKETED_PASTE_START)
        if start != -1:
            before = self._buffer[:start]
            after = self._buffer[start + len(BRACKETED_PASTE_START) :]
            self._buffer = ""

            sequences, remainder = split_sequences(before)
            if remainder:
                sequences.append(remainder)
            for sequence in sequences:
                self._emit_data(sequence)

            self._paste_mode = True
            self._paste_buffer = after
            self._finish_paste()
            return

        sequences, self._buffer = split_sequences(self._buffer)
        for sequence in sequences:
            self._emit_data(sequence)

        if self._buffer:
            self._schedule_flush()

    def _finish_paste(self) -> None:
        end = self._paste_buffer.find(BRACKETED_PASTE_END)
        if end == -1:
            return
        pasted = self._paste_buffer[:end]
        remaining = self._paste_buffer[end + len(BRACKETED_PASTE_END) :]
        self._paste_mode = False
        self._paste_buffer = ""
        self._emit_paste(pasted)
        if remaining:
            self.process(remaining)

    def _schedule_flush(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop - flush immediately
            for sequence in self.flush():
                self._emit_data(sequence)
            return
        self._timeout_handle = loop.call_later(self._timeout, self._flush_timeout)

    def _cancel_timeout(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None

    def _flush_timeout(self) -> None:
        self._timeout_handle = None
        for sequence in self.flush():
            self._emit_data(sequence)

    def flush(self) -> list[str]:
        """Return and drop whatever is buffered, complete or not."""
        self._cancel_timeout()
        if not self._buffer:
            return []
        logger.debug("flushing incomplete input %r", self._buffer)
        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    def clear(self) -> None:
        self._cancel_timeout()
        self._buffer = ""
        self._paste_mode = False
        self._paste_buffer = ""

    def get_buffer(self) -> str:
        return self._buffer
