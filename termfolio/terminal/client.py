"""HTTP client used by the console terminal to reach the API."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)

CHAT_ERROR_TEMPLATE = """🤖 AI Chat Error

Sorry, I couldn't process your message right now: {error}

You can still explore my portfolio using these commands:
• about - Learn about my background
• skills - View my technical skills
• projects - Explore my featured work
• contact - Get in touch directly

Please try again later!"""


class PortfolioApiClient:
    def __init__(
        self,
        base_url: str,
        timeout: float | None = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def ask(self, message: str) -> str:
        """Send *message* to the chat endpoint; failures become a readable reply."""
        try:
            async with self._client() as client:
                resp = await client.post("/api/ai-chat", json={"message": message})
                if not resp.is_success:
                    raise RuntimeError(f"HTTP {resp.status_code}: {resp.reason_phrase}")
                data = resp.json()
        except (httpx.HTTPError, RuntimeError, ValueError) as exc:
            logger.warning("chat request failed", extra={"error": str(exc)})
            return CHAT_ERROR_TEMPLATE.format(error=str(exc) or "Unknown error occurred")

        if data.get("error"):
            return CHAT_ERROR_TEMPLATE.format(error=data["error"])
        return data.get("response", "")

    async def scrape(self, url: str, data_type: str = "html") -> dict[str, Any]:
        """POST to the scrape endpoint and return its JSON payload.

        Validation failures (HTTP 400) still carry a ``success: false`` payload,
        so only transport errors raise.
        """
        async with self._client() as client:
            resp = await client.post("/api/scrape", json={"url": url, "dataType": data_type})
        return resp.json()


def csv_filename(today: date | None = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    return f"scraped_data_{today.isoformat()}.csv"


def write_csv_download(content: str, directory: str | Path = ".", today: date | None = None) -> Path:
    """Save scraped CSV under the dated download name; returns the written path."""
    target_dir = Path(directory).expanduser()
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / csv_filename(today)
    path.write_text(content, encoding="utf-8")
    logger.info("csv saved", extra={"path": str(path), "bytes": len(content.encode("utf-8"))})
    return path
