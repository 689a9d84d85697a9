"""Outbound HTTP fetch for the scraper: one GET, no retries."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
JSON_ACCEPT = "application/json, text/plain, */*"


class FetchError(Exception):
    """Base class for failures while fetching a scrape target."""


class UpstreamNetworkError(FetchError):
    """The target could not be reached (DNS, connect, TLS, timeout...)."""


class UpstreamStatusError(FetchError):
    """The target answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str) -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"HTTP {status_code}: {reason}")


class ContentFetcher:
    """Performs a single GET against a scrape target.

    ``timeout`` of ``None`` (or ``<= 0``) disables the client timeout so a hung
    upstream holds the request open.  ``transport`` lets callers swap in an
    ``httpx.MockTransport`` or a custom transport.
    """

    def __init__(
        self,
        user_agent: str,
        timeout: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._user_agent = user_agent
        self._timeout = timeout if timeout and timeout > 0 else None
        self._transport = transport

    async def fetch(self, url: str, accept: str | None = None) -> httpx.Response:
        """GET *url* and return the response, raising ``FetchError`` on failure."""
        headers = {"User-Agent": self._user_agent}
        if accept:
            headers["Accept"] = accept

        logger.debug("fetching scrape target", extra={"url": url, "accept": accept})
        try:
            async with httpx.AsyncClient(
                follow_redirects=True,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("scrape fetch failed", extra={"url": url}, exc_info=True)
            raise UpstreamNetworkError(str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            logger.info(
                "scrape target returned error status",
                extra={"url": url, "status_code": response.status_code},
            )
            raise UpstreamStatusError(response.status_code, response.reason_phrase)

        logger.debug(
            "scrape target fetched",
            extra={"url": url, "status_code": response.status_code, "bytes": len(response.content)},
        )
        return response
