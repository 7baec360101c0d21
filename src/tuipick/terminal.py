"""Terminal abstraction for raw-mode tty interaction.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
implementation that manages raw mode, bracketed paste, the alternate screen,
cursor visibility and resize notifications via ANSI escape sequences.
"""

from __future__ import annotations

import asyncio
import os
import signal
import sys
import termios
import tty
from typing import Callable, Protocol

from tuipick.keys import BRACKETED_PASTE_END, BRACKETED_PASTE_START
from tuipick.stdin_buffer import StdinBuffer

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_BRACKETED_PASTE_ENABLE = "\x1b[?2004h"
_BRACKETED_PASTE_DISABLE = "\x1b[?2004l"

_ALT_SCREEN_ENABLE = "\x1b[?1049h"
_ALT_SCREEN_DISABLE = "\x1b[?1049l"

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_SCREEN = "\x1b[2J\x1b[H"


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal I/O operations."""

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None: ...

    def stop(self) -> None: ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def clear_screen(self) -> None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Terminal backed by a tty file descriptor.

    By default input is read from ``sys.stdin`` and output goes to
    ``sys.stdout``. Passing *fd* uses that descriptor for both, which lets a
    host read its data from a pipe while drawing on ``/dev/tty``.
    """

    def __init__(self, fd: int | None = None, *, alternate_screen: bool = True) -> None:
        self._input_fd = fd if fd is not None else sys.stdin.fileno()
        self._output_fd = fd if fd is not None else sys.stdout.fileno()
        self._alternate_screen = alternate_screen
        self._input_handler: Callable[[str], None] | None = None
        self._resize_handler: Callable[[], None] | None = None
        self._stdin_buffer: StdinBuffer | None = None
        self._reader_active = False
        self._original_termios: list | None = None
        self._prev_sigwinch_handler: signal.Handlers | None = None

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._output_fd).columns
        except (ValueError, OSError):
            return 80

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(self._output_fd).lines
        except (ValueError, OSError):
            return 24

    # -- start / stop -------------------------------------------------------

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None:
        """Enable raw mode and bracketed paste, and begin reading input.

        Must be called while an asyncio event loop is running.
        """
        self._input_handler = on_input
        self._resize_handler = on_resize

        self._original_termios = termios.tcgetattr(self._input_fd)
        tty.setraw(self._input_fd)

        if self._alternate_screen:
            self._raw_write(_ALT_SCREEN_ENABLE)
        self._raw_write(_BRACKETED_PASTE_ENABLE)

        self._prev_sigwinch_handler = signal.getsignal(signal.SIGWINCH)
        signal.signal(signal.SIGWINCH, self._on_sigwinch)

        self._stdin_buffer = StdinBuffer(timeout=0.01)
        self._stdin_buffer.on_data(self._forward_input)
        self._stdin_buffer.on_paste(
            lambda text: self._forward_input(BRACKETED_PASTE_START + text + BRACKETED_PASTE_END)
        )

        asyncio.get_running_loop().add_reader(self._input_fd, self._on_readable)
        self._reader_active = True

    def stop(self) -> None:
        """Restore terminal state and clean up all handlers."""
        if self._reader_active:
            try:
                asyncio.get_running_loop().remove_reader(self._input_fd)
            except RuntimeError:
                pass
            self._reader_active = False

        if self._stdin_buffer is not None:
            self._stdin_buffer.clear()
            self._stdin_buffer = None

        self._raw_write(_BRACKETED_PASTE_DISABLE)
        if self._alternate_screen:
            self._raw_write(_ALT_SCREEN_DISABLE)

        if self._prev_sigwinch_handler is not None:
            signal.signal(signal.SIGWINCH, self._prev_sigwinch_handler)
            self._prev_sigwinch_handler = None

        if self._original_termios is not None:
            termios.tcsetattr(self._input_fd, termios.TCSADRAIN, self._original_termios)
            self._original_termios = None

        self._input_handler = None
        self._resize_handler = None

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        self._raw_write(data)

    def hide_cursor(self) -> None:
        self._raw_write(_HIDE_CURSOR)

    def show_cursor(self) -> None:
        self._raw_write(_SHOW_CURSOR)

    def clear_screen(self) -> None:
        self._raw_write(_CLEAR_SCREEN)

    # -- private ------------------------------------------------------------

    def _forward_input(self, data: str) -> None:
        if self._input_handler is not None:
            self._input_handler(data)

    def _on_readable(self) -> None:
        """Callback invoked by the event loop when input has data."""
        try:
            raw = os.read(self._input_fd, 4096)
        except OSError:
            return
        if not raw:
            return

        data = raw.decode("utf-8", errors="replace")
        if self._stdin_buffer is not None:
            self._stdin_buffer.process(data)
        else:
            self._forward_input(data)

    def _on_sigwinch(self, signum: int, frame: object) -> None:
        if self._resize_handler is not None:
            self._resize_handler()

    def _raw_write(self, data: str) -> None:
        """Write directly to the output descriptor, bypassing buffering."""
        encoded = data.encode("utf-8")
        try:
            while encoded:
                written = os.write(self._output_fd, encoded)
                encoded = encoded[written:]
        except OSError:
            pass
