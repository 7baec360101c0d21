"""Minimal asyncio host that runs a picker full-screen on a terminal."""

from __future__ import annotations

import asyncio
import logging
from typing import Generic, TypeVar

from tuipick.events import KeyEvent, Response
from tuipick.picker import Picker
from tuipick.terminal import Terminal

logger = logging.getLogger(__name__)

T = TypeVar("T")

_HOME = "\x1b[H"
_CLEAR_EOL = "\x1b[0m\x1b[K"
_CLEAR_BELOW = "\x1b[J"


class PickerSession(Generic[T]):
    """Drive a ``Picker`` from terminal input until it returns a response.

    Parameters
    ----------
    picker:
        The picker to run. It must be active.
    terminal:
        Anything implementing the ``Terminal`` protocol.
    height:
        Rows to use for the picker; defaults to the full terminal height.
    """

    def __init__(self, picker: Picker[T], terminal: Terminal, height: int | None = None) -> None:
        self._picker = picker
        self._terminal = terminal
        self._height = height
        self._future: asyncio.Future[Response[T]] | None = None
        self._paint_requested = False

    async def run(self) -> Response[T]:
        loop = asyncio.get_running_loop()
        self._future = loop.create_future()

        self._terminal.start(self._on_input, self._on_resize)
        try:
            self._terminal.hide_cursor()
            self._paint()
            response = await self._future
        finally:
            self._terminal.show_cursor()
            self._terminal.stop()
            self._future = None

        logger.debug("session ended with %s", type(response).__name__)
        return response

    def _on_input(self, data: str) -> None:
        if self._future is None or self._future.done():
            return
        response = self._picker.update(KeyEvent(data))
        if response is not None:
            self._future.set_result(response)
            return
        if self._picker.needs_redraw():
            self._paint()

    def _on_resize(self) -> None:
        logger.debug(
            "terminal resized to %dx%d", self._terminal.columns, self._terminal.rows
        )
        self.request_paint()

    def request_paint(self) -> None:
        """Schedule a repaint on the next loop iteration.

        Repeated requests before that iteration collapse into one paint.
        """
        if self._paint_requested:
            return
        self._paint_requested = True
        try:
            loop = asyncio.get_running_loop()
            loop.call_soon(self._do_paint_tick)
        except RuntimeError:
            self._do_paint_tick()

    def _do_paint_tick(self) -> None:
        self._paint_requested = False
        if self._future is None or self._future.done():
            return
        self._paint()

    def _paint(self) -> None:
        rows = self._terminal.rows
        if self._height is not None:
            rows = min(rows, self._height)
        lines = self._picker.render(rows, self._terminal.columns)
        frame = "\r\n".join(line + _CLEAR_EOL for line in lines)
        self._terminal.write(_HOME + frame + _CLEAR_BELOW)
