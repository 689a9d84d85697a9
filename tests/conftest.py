"""Fixtures: portfolio profile, settings, test app with a mock upstream."""

from typing import Callable

import httpx
import pytest
from fastapi import FastAPI

from termfolio.api.routes import router
from termfolio.config import Settings
from termfolio.main import init_state
from termfolio.scrape import ContentFetcher
from termfolio.terminal.commands import build_default_registry
from termfolio.terminal.dispatcher import CommandDispatcher
from termfolio.terminal.portfolio import PortfolioProfile, load_profile

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def profile() -> PortfolioProfile:
    return load_profile()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        groq_api_key="",
        preferences_path=str(tmp_path / "preferences.json"),
        downloads_dir=str(tmp_path),
    )  # type: ignore[call-arg]


@pytest.fixture
def dispatcher(profile: PortfolioProfile) -> CommandDispatcher:
    return CommandDispatcher(build_default_registry(profile), profile)


def mock_fetcher(handler: Handler) -> ContentFetcher:
    return ContentFetcher(user_agent="test-agent/1.0", transport=httpx.MockTransport(handler))


@pytest.fixture
def make_app(settings: Settings) -> Callable[..., FastAPI]:
    """Build the API without the lifespan; *handler* stands in for scrape targets."""

    def _make_app(handler: Handler | None = None) -> FastAPI:
        app = FastAPI()
        app.include_router(router)
        init_state(app, settings)
        if handler is not None:
            app.state.fetcher = mock_fetcher(handler)
        return app

    return _make_app
