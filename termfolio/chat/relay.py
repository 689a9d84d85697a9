"""Chat relay: persona prompt + one chat-completion call against Groq."""

from __future__ import annotations

import logging

import openai
from openai import AsyncOpenAI

from termfolio.chat.prompts import (
    ERROR_RESPONSE,
    REPLY_PREFIX,
    UNAVAILABLE_RESPONSE,
    format_demo_response,
    format_persona_prompt,
)
from termfolio.config import Settings
from termfolio.terminal.portfolio import PortfolioProfile

logger = logging.getLogger(__name__)


class ChatRelay:
    """Relays a single visitor message to the chat model.

    Never raises: upstream failures map to one of the canned replies so the
    caller always has something to show.
    """

    def __init__(self, settings: Settings, profile: PortfolioProfile) -> None:
        self._settings = settings
        self._system_prompt = format_persona_prompt(profile)

    @property
    def demo_mode(self) -> bool:
        return not self._settings.groq_api_key

    async def reply(self, message: str) -> str:
        if self.demo_mode:
            logger.info("chat answered in demo mode", extra={"message_length": len(message)})
            return format_demo_response(message)

        client = AsyncOpenAI(
            api_key=self._settings.groq_api_key,
            base_url=self._settings.groq_api_url,
            max_retries=0,
        )
        try:
            completion = await client.chat.completions.create(
                model=self._settings.chat_model,
                messages=[
                    {"role": "system", "content": self._system_prompt},
                    {"role": "user", "content": message},
                ],
                max_tokens=self._settings.chat_max_tokens,
                temperature=self._settings.chat_temperature,
            )
        except openai.APIStatusError as exc:
            logger.error(
                "chat upstream returned an error status",
                extra={"status_code": exc.status_code, "model": self._settings.chat_model},
            )
            return UNAVAILABLE_RESPONSE
        except Exception:
            logger.exception("chat request failed", extra={"model": self._settings.chat_model})
            return ERROR_RESPONSE

        content = None
        if completion.choices:
            content = completion.choices[0].message.content
        if not content:
            logger.error("chat completion had no content", extra={"model": self._settings.chat_model})
            return ERROR_RESPONSE

        usage = completion.usage
        logger.info(
            "chat completed",
            extra={
                "model": self._settings.chat_model,
                "total_tokens": usage.total_tokens if usage else 0,
            },
        )
        return f"{REPLY_PREFIX}{content}"
