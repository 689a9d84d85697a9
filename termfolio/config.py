"""Pydantic Settings: loads configuration from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore"}

    # Chat relay (Groq exposes an OpenAI-compatible API)
    groq_api_key: str = ""
    groq_api_url: str = "https://api.groq.com/openai/v1"
    chat_model: str = "llama-3.1-8b-instant"
    chat_max_tokens: int = 300
    chat_temperature: float = 0.7

    # Scraper
    scraper_user_agent: str = "Mozilla/5.0 (compatible; DataScrapingBot/1.0)"
    scrape_timeout_seconds: float | None = 30.0

    # Portfolio content override (JSON file); empty uses the bundled profile
    portfolio_path: str = ""

    log_level: str = "INFO"

    # Console terminal
    api_url: str = "http://localhost:8000"
    preferences_path: str = "~/.termfolio/preferences.json"
    downloads_dir: str = "."
    console_log_path: str = "~/.termfolio/termfolio.log"


@lru_cache
def get_settings() -> Settings:
    return Settings()
