"""Chat relay tests with a mocked OpenAI-compatible client."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from termfolio.chat.prompts import ERROR_RESPONSE, UNAVAILABLE_RESPONSE, format_persona_prompt
from termfolio.chat.relay import ChatRelay
from termfolio.config import Settings


def _live_settings() -> Settings:
    return Settings(groq_api_key="gsk-test")  # type: ignore[call-arg]


def _completion(content):
    completion = MagicMock()
    choice = MagicMock()
    choice.message.content = content
    completion.choices = [choice]
    completion.usage.total_tokens = 42
    return completion


def _mock_client(create: AsyncMock) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = create
    return client


# --- Persona prompt (sync) ---


def test_persona_prompt_carries_profile(profile):
    prompt = format_persona_prompt(profile)
    assert "Suraj Yadav" in prompt
    assert "Technical Skills:" in prompt
    assert profile.contact.email in prompt
    assert profile.projects[0].name in prompt


# --- Relay (async) ---


@pytest.mark.asyncio
async def test_demo_mode_makes_no_upstream_call(profile):
    relay = ChatRelay(Settings(groq_api_key=""), profile)  # type: ignore[call-arg]

    with patch("termfolio.chat.relay.AsyncOpenAI") as client_cls:
        reply = await relay.reply("what do you do?")

    assert relay.demo_mode
    client_cls.assert_not_called()
    assert reply.startswith("🤖 AI Assistant (Demo Mode)")
    assert 'Based on your question: "what do you do?"' in reply


@pytest.mark.asyncio
async def test_success_prefixes_reply(profile):
    create = AsyncMock(return_value=_completion("Hello"))

    with patch("termfolio.chat.relay.AsyncOpenAI", return_value=_mock_client(create)) as client_cls:
        reply = await ChatRelay(_live_settings(), profile).reply("hi")

    assert reply == "🤖 Hello"
    assert client_cls.call_args.kwargs["api_key"] == "gsk-test"
    assert client_cls.call_args.kwargs["base_url"] == "https://api.groq.com/openai/v1"

    kwargs = create.call_args.kwargs
    assert kwargs["model"] == "llama-3.1-8b-instant"
    assert kwargs["max_tokens"] == 300
    assert kwargs["temperature"] == 0.7
    system, user = kwargs["messages"]
    assert system["role"] == "system"
    assert "Suraj Yadav" in system["content"]
    assert user == {"role": "user", "content": "hi"}


@pytest.mark.asyncio
async def test_upstream_status_error_maps_to_unavailable(profile):
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    error = openai.APIStatusError(
        "service unavailable",
        response=httpx.Response(503, request=request),
        body=None,
    )
    create = AsyncMock(side_effect=error)

    with patch("termfolio.chat.relay.AsyncOpenAI", return_value=_mock_client(create)):
        reply = await ChatRelay(_live_settings(), profile).reply("hi")

    assert reply == UNAVAILABLE_RESPONSE
    create.assert_awaited_once()


@pytest.mark.asyncio
async def test_unexpected_error_maps_to_error_reply(profile):
    create = AsyncMock(side_effect=RuntimeError("boom"))

    with patch("termfolio.chat.relay.AsyncOpenAI", return_value=_mock_client(create)):
        reply = await ChatRelay(_live_settings(), profile).reply("hi")

    assert reply == ERROR_RESPONSE


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [None, ""])
async def test_empty_completion_maps_to_error_reply(profile, content):
    create = AsyncMock(return_value=_completion(content))

    with patch("termfolio.chat.relay.AsyncOpenAI", return_value=_mock_client(create)):
        reply = await ChatRelay(_live_settings(), profile).reply("hi")

    assert reply == ERROR_RESPONSE


@pytest.mark.asyncio
async def test_no_choices_maps_to_error_reply(profile):
    completion = _completion("unused")
    completion.choices = []
    create = AsyncMock(return_value=completion)

    with patch("termfolio.chat.relay.AsyncOpenAI", return_value=_mock_client(create)):
        reply = await ChatRelay(_live_settings(), profile).reply("hi")

    assert reply == ERROR_RESPONSE
