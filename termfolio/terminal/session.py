"""Terminal session: input history, output lines and the command state machine."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Literal, Protocol

from termfolio.terminal.client import write_csv_download
from termfolio.terminal.commands import Sentinel, parse_sentinel
from termfolio.terminal.dispatcher import CommandDispatcher
from termfolio.terminal.portfolio import PortfolioProfile
from termfolio.terminal.preferences import PreferenceStore
from termfolio.terminal.typewriter import Sleep, Typewriter

logger = logging.getLogger(__name__)

LineKind = Literal["input", "output", "system"]
ScrapeCallback = Callable[[str], Awaitable[dict[str, Any]]]


class TerminalState(str, Enum):
    IDLE = "idle"
    AWAITING_INPUT = "awaiting_input"
    PROCESSING = "processing"
    TYPING_OUTPUT = "typing_output"
    SNAKE = "snake"
    PYTHON_COMPILER = "python_compiler"


class CommandInProgressError(RuntimeError):
    """Raised when input is submitted while the terminal is not awaiting input."""

    def __init__(self, state: TerminalState) -> None:
        self.state = state
        super().__init__(f"cannot accept input while {state.value}")


@dataclass
class TerminalLine:
    kind: LineKind
    content: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Display(Protocol):
    def line_added(self, line: TerminalLine) -> None: ...

    def line_updated(self, line: TerminalLine) -> None: ...

    def cleared(self) -> None: ...


def welcome_lines(profile: PortfolioProfile) -> list[str]:
    handle = profile.about.name.lower().replace(" ", "")
    return [
        f"{handle}@portfolio:~$ welcome",
        "",
        f"Hi, I'm {profile.about.name}, a {profile.about.role}.",
        'Welcome to my interactive "AI powered" portfolio terminal!',
        "",
        'Type "help" to see available commands.',
        "",
    ]


def scrape_started_message(url: str) -> str:
    return f"""🔄 Starting web scraping process...

Target URL: {url}
Status: Fetching data...
Processing: Extracting and converting to CSV format

📥 The CSV file will be saved automatically when complete
⏱️ This may take a few moments depending on the data size
📊 Results will be limited to first 100 records for performance"""


class TerminalSession:
    """One visitor's terminal.

    Only one command is ever in flight: :meth:`submit` raises
    :class:`CommandInProgressError` unless the session is awaiting input.
    """

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        profile: PortfolioProfile,
        preferences: PreferenceStore,
        display: Display | None = None,
        scraper: ScrapeCallback | None = None,
        downloads_dir: str | Path = ".",
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._dispatcher = dispatcher
        self._profile = profile
        self._preferences = preferences
        self._display = display
        self._scraper = scraper
        self._downloads_dir = Path(downloads_dir)
        self._typewriter = Typewriter(self._add_typed_line, self._update_last_line, sleep=sleep)

        self.state = TerminalState.IDLE
        self.lines: list[TerminalLine] = []
        self.history: list[str] = []
        self.history_index = -1

    @property
    def theme(self) -> str:
        return self._preferences.theme

    @property
    def high_score(self) -> int:
        return self._preferences.high_score

    # -- line bookkeeping ---------------------------------------------------

    def add_line(self, content: str, kind: LineKind = "output") -> TerminalLine:
        line = TerminalLine(kind=kind, content=content)
        self.lines.append(line)
        if self._display is not None:
            self._display.line_added(line)
        return line

    def _add_typed_line(self, content: str) -> None:
        kind: LineKind = "system" if self.state is TerminalState.IDLE else "output"
        self.add_line(content, kind)

    def _update_last_line(self, content: str) -> None:
        if not self.lines:
            return
        line = self.lines[-1]
        line.content = content
        if self._display is not None:
            self._display.line_updated(line)

    def clear(self) -> None:
        self.lines.clear()
        if self._display is not None:
            self._display.cleared()

    # -- lifecycle ------------------------------------------------------------

    async def start(self) -> None:
        """Type the welcome banner, then wait for input."""
        if self.state is not TerminalState.IDLE:
            return
        self._typewriter.load_lines(welcome_lines(self._profile))
        await self._typewriter.run()
        self.state = TerminalState.AWAITING_INPUT

    def close(self) -> None:
        """Stop any animation in progress."""
        self._typewriter.cancel()
        self.state = TerminalState.IDLE

    async def _type(self, text: str) -> None:
        self.state = TerminalState.TYPING_OUTPUT
        self._typewriter.load(text)
        await self._typewriter.run()

    # -- input ------------------------------------------------------------------

    async def submit(self, raw: str) -> None:
        """Run one command through the dispatcher and present its result."""
        if self.state is not TerminalState.AWAITING_INPUT:
            raise CommandInProgressError(self.state)

        command = raw.strip()
        if not command:
            return

        self.history.append(command)
        self.history_index = -1
        self.add_line(f"$ {command}", "input")
        self.state = TerminalState.PROCESSING

        try:
            output = await self._dispatcher.dispatch(command)
            await self._present(output)
        except Exception:
            logger.exception("command failed", extra={"command": command})
            self.add_line("Error: Failed to process command")
        finally:
            if self.state in (TerminalState.PROCESSING, TerminalState.TYPING_OUTPUT):
                self.state = TerminalState.AWAITING_INPUT

    async def _present(self, output: str) -> None:
        parsed = parse_sentinel(output)
        if parsed is None:
            await self._type(output)
            return

        sentinel, argument = parsed
        if sentinel is Sentinel.CLEAR_SCREEN:
            self.clear()
        elif sentinel is Sentinel.SNAKE_GAME_START:
            self.state = TerminalState.SNAKE
        elif sentinel is Sentinel.PYTHON_COMPILER_START:
            self.state = TerminalState.PYTHON_COMPILER
        elif sentinel is Sentinel.TOGGLE_THEME:
            new_theme = self._preferences.toggle_theme()
            self.add_line(f"Theme switched to {new_theme} mode")
        elif sentinel is Sentinel.SCRAPE_URL:
            await self._scrape(argument or "")

    async def _scrape(self, url: str) -> None:
        await self._type(scrape_started_message(url))
        self.state = TerminalState.PROCESSING

        if self._scraper is None:
            await self._type("❌ Scraping failed: scraper not configured")
            return

        try:
            result = await self._scraper(url)
        except Exception as exc:
            logger.warning("scrape request failed", extra={"url": url}, exc_info=True)
            await self._type(
                f"❌ Network error during scraping: {exc or 'Unknown error'}\n"
                "💡 Please check your internet connection and try again"
            )
            return

        if result.get("success") and result.get("csvContent"):
            path = write_csv_download(result["csvContent"], self._downloads_dir)
            await self._type(
                "✅ Scraping completed successfully!\n"
                f"📊 Total items scraped: {result.get('totalItems', 0)}\n"
                f"📥 CSV file saved: {path}"
            )
        else:
            await self._type(
                f"❌ Scraping failed: {result.get('error') or 'Unknown error'}\n"
                "💡 Try a different URL or check if the website allows scraping"
            )

    # -- history ----------------------------------------------------------------

    def history_previous(self) -> str:
        """Step back through submitted commands (up arrow)."""
        if not self.history:
            return ""
        if self.history_index == -1:
            self.history_index = len(self.history) - 1
        else:
            self.history_index = max(0, self.history_index - 1)
        return self.history[self.history_index]

    def history_next(self) -> str:
        """Step forward (down arrow); past the newest entry the input is cleared."""
        if self.history_index < 0:
            return ""
        next_index = self.history_index + 1
        if next_index >= len(self.history):
            self.history_index = -1
            return ""
        self.history_index = next_index
        return self.history[next_index]

    # -- sub-apps -----------------------------------------------------------------

    def finish_snake(self, score: int) -> None:
        if self.state is not TerminalState.SNAKE:
            raise RuntimeError("snake game is not running")
        self._preferences.record_score(score)
        self.add_line(f"Game Over! Final Score: {score}")
        self.add_line("")
        self.state = TerminalState.AWAITING_INPUT

    def close_compiler(self) -> None:
        if self.state is not TerminalState.PYTHON_COMPILER:
            raise RuntimeError("python compiler is not open")
        self.add_line("Python compiler closed.")
        self.add_line("")
        self.state = TerminalState.AWAITING_INPUT
