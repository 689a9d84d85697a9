"""POST /api/ai-chat, /api/scrape, /api/ai-analyze and /api/command endpoint handlers."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from termfolio.api.schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    ChatRequest,
    ChatResponse,
    CommandRequest,
    CommandResponse,
    ScrapeRequest,
    ScrapeResponse,
)
from termfolio.api.service import analyze, has_web_scheme, run_command, scrape_to_csv
from termfolio.chat.relay import ChatRelay
from termfolio.scrape import ContentFetcher
from termfolio.terminal.dispatcher import CommandDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

INVALID_CHAT_MESSAGE = "Invalid request. Message is required and must be between 1-1000 characters."
INVALID_SCRAPE_URL = "Invalid URL provided. Please provide a valid URL."
SCRAPE_SCHEME_REQUIRED = "URL must start with http:// or https://"
INVALID_ANALYZE_REQUEST = "Invalid content or URL provided."
INVALID_COMMAND_REQUEST = "Invalid request. Input is required."


def _get_fetcher(request: Request) -> ContentFetcher:
    return request.app.state.fetcher


def _get_relay(request: Request) -> ChatRelay:
    return request.app.state.relay


def _get_dispatcher(request: Request) -> CommandDispatcher:
    return request.app.state.dispatcher


async def _parse_body(request: Request, schema: type[BaseModel]) -> Any:
    """Validate the JSON body against *schema*; ``None`` when it does not fit."""
    try:
        return schema.model_validate(await request.json())
    except (ValidationError, ValueError) as exc:
        logger.info("request rejected", extra={"path": request.url.path, "error": str(exc)[:200]})
        return None


def _bad_request(payload: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=400, content=payload)


@router.post("/ai-chat", response_model=ChatResponse, response_model_exclude_none=True)
async def ai_chat(request: Request, relay: ChatRelay = Depends(_get_relay)):
    body = await _parse_body(request, ChatRequest)
    if body is None:
        return _bad_request({"error": INVALID_CHAT_MESSAGE})
    return ChatResponse(response=await relay.reply(body.message))


@router.post("/scrape", response_model=ScrapeResponse, response_model_exclude_none=True)
async def scrape_endpoint(request: Request, fetcher: ContentFetcher = Depends(_get_fetcher)):
    body = await _parse_body(request, ScrapeRequest)
    if body is None:
        return _bad_request({"success": False, "error": INVALID_SCRAPE_URL})
    if not has_web_scheme(body.url):
        return _bad_request({"success": False, "error": SCRAPE_SCHEME_REQUIRED})
    return await scrape_to_csv(fetcher, body)


@router.post("/ai-analyze", response_model=AnalyzeResponse, response_model_exclude_none=True)
async def ai_analyze(request: Request):
    body = await _parse_body(request, AnalyzeRequest)
    if body is None:
        return _bad_request({"success": False, "error": INVALID_ANALYZE_REQUEST})
    return analyze(body)


@router.post("/command", response_model=CommandResponse)
async def command(request: Request, dispatcher: CommandDispatcher = Depends(_get_dispatcher)):
    body = await _parse_body(request, CommandRequest)
    if body is None:
        return _bad_request({"error": INVALID_COMMAND_REQUEST})
    return await run_command(dispatcher, body.input)
