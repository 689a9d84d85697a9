"""FastAPI app entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from termfolio.api.routes import router
from termfolio.chat.relay import ChatRelay
from termfolio.config import Settings, get_settings
from termfolio.logging_config import setup_logging
from termfolio.scrape import ContentFetcher
from termfolio.terminal.commands import build_default_registry
from termfolio.terminal.dispatcher import CommandDispatcher
from termfolio.terminal.portfolio import load_profile

logger = logging.getLogger(__name__)


def init_state(app: FastAPI, settings: Settings) -> None:
    """Build the shared services and attach them to ``app.state`` for dependency injection."""
    profile = load_profile(settings.portfolio_path)
    relay = ChatRelay(settings, profile)
    registry = build_default_registry(profile)

    app.state.settings = settings
    app.state.profile = profile
    app.state.fetcher = ContentFetcher(
        user_agent=settings.scraper_user_agent,
        timeout=settings.scrape_timeout_seconds,
    )
    app.state.relay = relay
    app.state.registry = registry
    app.state.dispatcher = CommandDispatcher(registry, profile, on_ai_chat=relay.reply)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # Initialize logging FIRST so all subsequent operations produce JSON logs
    setup_logging(settings.log_level)
    logger.info("starting termfolio api")

    init_state(app, settings)

    logger.info(
        "termfolio api ready",
        extra={
            "chat_model": settings.chat_model,
            "demo_mode": app.state.relay.demo_mode,
            "commands": len(app.state.registry),
            "scrape_timeout_seconds": settings.scrape_timeout_seconds,
        },
    )

    yield

    logger.info("shutting down termfolio api")


app = FastAPI(title="Termfolio", lifespan=lifespan)
app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}
