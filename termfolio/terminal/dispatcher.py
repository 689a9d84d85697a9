"""Resolves raw terminal input into command output."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from termfolio.terminal.commands import SCRAPE_URL_PREFIX, CommandRegistry
from termfolio.terminal.portfolio import PortfolioProfile

logger = logging.getLogger(__name__)

AIChatCallback = Callable[[str], Awaitable[str]]

EMPTY_INPUT_MESSAGE = "Please enter a command. Type 'help' for available commands."

INVALID_SCRAPE_URL_MESSAGE = """Invalid URL format. Please provide a complete URL starting with http:// or https://

Example: scrape https://jsonplaceholder.typicode.com/posts"""

AI_UNAVAILABLE_MESSAGE = """AI Chat not available. The AI integration is currently being set up.

In the meantime, try these commands:
• about - Learn about my background
• skills - View my technical skills
• projects - Explore my work
• contact - Get in touch directly"""

AI_ERROR_MESSAGE = "AI Error: Unable to process your question right now. Please try again later."

NOT_FOUND_MESSAGE = """Command not found: "{name}"

Did you mean to ask me something? Try:
   ask {text}

Or type 'help' to see all available commands.

The AI can answer questions about my experience,
skills, projects, and much more!"""


def parse_input(raw: str) -> tuple[str, str]:
    """Split trimmed input into a lower-cased command name and its argument string."""
    parts = raw.strip().split(None, 1)
    if not parts:
        return "", ""
    name = parts[0].lower()
    args = parts[1].strip() if len(parts) > 1 else ""
    return name, args


class CommandDispatcher:
    """Applies the resolution order: contact socials, scrape, ask, registry, not found."""

    def __init__(
        self,
        registry: CommandRegistry,
        profile: PortfolioProfile,
        on_ai_chat: AIChatCallback | None = None,
    ) -> None:
        self._registry = registry
        self._on_ai_chat = on_ai_chat
        contact = profile.contact
        self._socials: dict[str, str] = {
            "linkedin": f"Opening LinkedIn profile: {contact.linkedin}",
            "li": f"Opening LinkedIn profile: {contact.linkedin}",
            "github": f"Opening GitHub profile: {contact.github}",
            "git": f"Opening GitHub profile: {contact.github}",
            "instagram": f"Instagram: {contact.instagram}",
            "insta": f"Instagram: {contact.instagram}",
        }

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    async def dispatch(self, raw: str) -> str:
        trimmed = raw.strip()
        if not trimmed:
            return EMPTY_INPUT_MESSAGE

        name, args = parse_input(trimmed)

        if name == "contact" and args:
            social = args.lower()
            return self._socials.get(
                social,
                f'Social platform "{social}" not found. Available: linkedin, github, insta',
            )

        if name == "scrape" and args:
            if not args.startswith(("http://", "https://")):
                return INVALID_SCRAPE_URL_MESSAGE
            return f"{SCRAPE_URL_PREFIX}{args}"

        if name == "ask" and args:
            return await self._ask(args)

        command = self._registry.get(name)
        if command is not None:
            return command.handler()

        logger.debug("unknown command", extra={"command": name})
        return NOT_FOUND_MESSAGE.format(name=name, text=trimmed)

    async def _ask(self, question: str) -> str:
        if self._on_ai_chat is None:
            return AI_UNAVAILABLE_MESSAGE
        try:
            return await self._on_ai_chat(question)
        except Exception:
            logger.exception("ai chat callback failed")
            return AI_ERROR_MESSAGE
