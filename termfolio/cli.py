"""Console front-end: ``termfolio`` (interactive terminal) and ``termfolio serve`` (API)."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from rich.console import Console

from termfolio.config import Settings, get_settings
from termfolio.logging_config import setup_logging
from termfolio.terminal.client import PortfolioApiClient
from termfolio.terminal.commands import build_default_registry
from termfolio.terminal.dispatcher import CommandDispatcher, parse_input
from termfolio.terminal.portfolio import load_profile
from termfolio.terminal.preferences import PreferenceStore
from termfolio.terminal.session import TerminalLine, TerminalSession, TerminalState

logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"exit", "quit", "logout"}

LINE_STYLES = {
    "dark": {"input": "bold cyan", "system": "bold green", "output": "green"},
    "light": {"input": "bold blue", "system": "bold magenta", "output": ""},
}


class ConsoleDisplay:
    """Renders session lines incrementally so typed output animates in place."""

    def __init__(self, console: Console, theme: str = "light") -> None:
        self._console = console
        self.theme = theme
        self._shown = 0
        self._open = False

    def _write(self, text: str, kind: str) -> None:
        style = LINE_STYLES.get(self.theme, LINE_STYLES["light"]).get(kind, "")
        self._console.print(text, end="", style=style or None, markup=False, highlight=False)

    def _close_line(self) -> None:
        if self._open:
            self._console.print()
            self._open = False

    def line_added(self, line: TerminalLine) -> None:
        self._close_line()
        if line.kind == "input":
            # already echoed by the prompt
            return
        self._write(line.content, line.kind)
        self._shown = len(line.content)
        self._open = True

    def line_updated(self, line: TerminalLine) -> None:
        if len(line.content) > self._shown:
            self._write(line.content[self._shown:], line.kind)
        self._shown = len(line.content)

    def cleared(self) -> None:
        self._console.clear()
        self._open = False
        self._shown = 0

    def finish(self) -> None:
        self._close_line()


PROMPT = HTML("<ansigreen><b>$</b></ansigreen> ")


async def _no_delay(_: float) -> None:
    return None


def _replace_input(buffer: Buffer, text: str) -> None:
    buffer.document = Document(text)


def history_key_bindings(session: TerminalSession) -> KeyBindings:
    """Bind ↑/↓ to the session's command history."""
    bindings = KeyBindings()

    @bindings.add("up")
    def _previous(event: KeyPressEvent) -> None:
        if session.history:
            _replace_input(event.current_buffer, session.history_previous())

    @bindings.add("down")
    def _next(event: KeyPressEvent) -> None:
        # nothing to step forward from while the draft is fresh
        if session.history_index >= 0:
            _replace_input(event.current_buffer, session.history_next())

    return bindings


async def run_terminal(settings: Settings, console: Console, animate: bool = True) -> None:
    profile = load_profile(settings.portfolio_path)
    client = PortfolioApiClient(settings.api_url)
    dispatcher = CommandDispatcher(build_default_registry(profile), profile, on_ai_chat=client.ask)
    preferences = PreferenceStore(settings.preferences_path)
    display = ConsoleDisplay(console, theme=preferences.theme)
    session = TerminalSession(
        dispatcher,
        profile,
        preferences,
        display=display,
        scraper=client.scrape,
        downloads_dir=settings.downloads_dir,
        sleep=asyncio.sleep if animate else _no_delay,
    )
    prompt: PromptSession[str] = PromptSession(key_bindings=history_key_bindings(session))

    await session.start()
    try:
        while True:
            display.finish()
            try:
                raw = await prompt.prompt_async(PROMPT)
            except (EOFError, KeyboardInterrupt):
                break

            await session.submit(raw)
            display.theme = session.theme

            if session.state is TerminalState.SNAKE:
                display.finish()
                console.print("Snake is only playable in the browser terminal.", style="dim")
                session.finish_snake(0)
            elif session.state is TerminalState.PYTHON_COMPILER:
                display.finish()
                console.print("The Python compiler is only available in the browser terminal.", style="dim")
                session.close_compiler()

            if parse_input(raw)[0] in EXIT_COMMANDS:
                break
    finally:
        session.close()
        display.finish()


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("termfolio.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="termfolio", description="Terminal-style portfolio")
    parser.add_argument("--api-url", default="", help="Base URL of the termfolio API (default from API_URL)")
    parser.add_argument("--no-animation", action="store_true", help="Print output without the typewriter effect")
    sub = parser.add_subparsers(dest="command")

    p_srv = sub.add_parser("serve", help="Run the HTTP API")
    p_srv.add_argument("--host", default="127.0.0.1", help="Host to bind")
    p_srv.add_argument("--port", type=int, default=8000, help="Port to bind")
    p_srv.add_argument("--reload", action="store_true", help="Reload on code changes")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "serve":
        return _serve(args)

    settings = get_settings()
    if args.api_url:
        settings = settings.model_copy(update={"api_url": args.api_url})

    setup_logging(settings.log_level, log_file=settings.console_log_path)
    console = Console()
    try:
        asyncio.run(run_terminal(settings, console, animate=not args.no_animation))
    except KeyboardInterrupt:
        # Ctrl-C while a command was running; the session is already closed
        console.print()
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
