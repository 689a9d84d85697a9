"""Typewriter animation as a cursor-driven state machine on a single ticker task."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

# Delays in seconds.
FAST_CHAR_DELAY = 0.015
CHAR_DELAY = 0.025
LINE_DELAY = 0.1
LONG_LINE_CHARS = 50

BANNER_FAST_DELAY = 0.2
BANNER_DELAY = 0.3
BANNER_LONG_LINE_CHARS = 30

LineCallback = Callable[[str], None]
Sleep = Callable[[float], Awaitable[None]]


class Typewriter:
    """Reveals text through two callbacks.

    ``on_line_added`` fires once per output line (with an empty string in
    character mode), ``on_line_updated`` fires with the growing prefix of the
    current line.  :meth:`step` advances the cursors and returns the delay
    before the next step, or ``None`` when everything has been shown.
    """

    def __init__(
        self,
        on_line_added: LineCallback,
        on_line_updated: LineCallback,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._on_line_added = on_line_added
        self._on_line_updated = on_line_updated
        self._sleep = sleep
        self._lines: list[str] = []
        self._whole_lines = False
        self.line_index = 0
        self.char_index = 0
        self._task: asyncio.Task[None] | None = None
        self._cancel_requested = False

    def load(self, text: str) -> None:
        """Queue *text* for character-by-character output."""
        self._reset(text.split("\n"), whole_lines=False)

    def load_lines(self, lines: list[str]) -> None:
        """Queue *lines* to appear one whole line at a time (welcome banner pacing)."""
        self._reset(list(lines), whole_lines=True)

    def _reset(self, lines: list[str], whole_lines: bool) -> None:
        if self.running:
            raise RuntimeError("typewriter is already running")
        self._lines = lines
        self._whole_lines = whole_lines
        self.line_index = 0
        self.char_index = 0

    @property
    def finished(self) -> bool:
        return self.line_index >= len(self._lines)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def step(self) -> float | None:
        if self.finished:
            return None

        line = self._lines[self.line_index]

        if self._whole_lines:
            self._on_line_added(line)
            self.line_index += 1
            return BANNER_FAST_DELAY if len(line) > BANNER_LONG_LINE_CHARS else BANNER_DELAY

        if self.char_index == 0:
            self._on_line_added("")

        if self.char_index <= len(line):
            self._on_line_updated(line[: self.char_index])
            self.char_index += 1
            return FAST_CHAR_DELAY if len(line) > LONG_LINE_CHARS else CHAR_DELAY

        self.line_index += 1
        self.char_index = 0
        return LINE_DELAY

    async def run(self) -> None:
        """Drive :meth:`step` until the queued text is fully shown or cancelled."""
        self._cancel_requested = False
        self._task = asyncio.create_task(self._tick())
        try:
            await self._task
        except asyncio.CancelledError:
            # only a stop requested through cancel() ends quietly
            if not self._cancel_requested:
                raise
            logger.debug("typewriter cancelled", extra={"line_index": self.line_index})
        finally:
            self._task = None

    async def _tick(self) -> None:
        while (delay := self.step()) is not None:
            await self._sleep(delay)

    def cancel(self) -> None:
        """Stop the ticker and drop whatever has not been shown yet."""
        if self._task is not None and not self._task.done():
            self._cancel_requested = True
            self._task.cancel()
        self.line_index = len(self._lines)
        self.char_index = 0
