"""Scrape pipeline: record shaping and fetch error handling."""

import httpx
import pytest

from termfolio.scrape import ContentFetcher, build_page_records, scrape
from termfolio.scrape.fetcher import (
    HTML_ACCEPT,
    UpstreamNetworkError,
    UpstreamStatusError,
)
from termfolio.scrape.html_extract import extract_page

DIRECTORY_PAGE = """
<html><head><title>Marketplace</title>
<meta name="description" content="Things for sale"></head><body>
<h1>Listings</h1><h2>Featured</h2>
<div class="listing"><h3>Bike</h3><p>A sturdy city bike in good shape.</p><span class="price">$120</span></div>
<div class="listing"><h3>Chair</h3><span class="tag">Furniture</span></div>
<div class="listing"><img src="/nothing.png"></div>
</body></html>
"""


def _fetcher(handler) -> ContentFetcher:
    return ContentFetcher(user_agent="pipeline-test", transport=httpx.MockTransport(handler))


class TestBuildPageRecords:
    def test_one_record_per_card_with_shared_page_fields(self) -> None:
        page = extract_page(DIRECTORY_PAGE)
        records = build_page_records("https://shop.test", DIRECTORY_PAGE, page)

        assert len(records) == 2
        assert [r["id"] for r in records] == [1, 2]
        assert [r["itemTitle"] for r in records] == ["Bike", "Chair"]
        assert records[0]["itemPrice"] == "$120"
        assert records[1]["itemTags"] == 'class="tag">Furniture<, Furniture'

        shared = ("url", "title", "description", "totalHeadings", "contentLength", "contentQuality")
        for key in shared:
            assert records[0][key] == records[1][key]
        assert records[0]["title"] == "Marketplace"
        assert records[0]["totalStructuredItems"] == 2

    def test_content_quality(self) -> None:
        page = extract_page(DIRECTORY_PAGE)
        quality = build_page_records("https://shop.test", DIRECTORY_PAGE, page)[0]["contentQuality"]

        assert quality["hasStructuredData"] is True
        assert quality["hasMainContent"] is False
        assert quality["hasArticles"] is False
        assert quality["hasAIInsights"] is True
        # 4 headings (h1, h2 and both card h3s) + 1 paragraph + 2 cards
        assert quality["contentRichness"] == 7

    def test_scraped_at_is_utc_iso(self) -> None:
        page = extract_page("<p>Just one paragraph that is long enough.</p>")
        record = build_page_records("https://x.test", "", page)[0]
        assert record["type"] == "website_summary"
        assert record["scrapedAt"].endswith("Z")
        assert "T" in record["scrapedAt"]


@pytest.mark.asyncio
async def test_scrape_html_sends_html_accept() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=DIRECTORY_PAGE)

    outcome = await scrape("https://shop.test/", "html", _fetcher(handler))

    assert outcome.success
    assert len(outcome.records) == 2
    assert seen[0].headers["accept"] == HTML_ACCEPT
    assert seen[0].headers["user-agent"] == "pipeline-test"


@pytest.mark.asyncio
async def test_fetch_status_error_message() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(503))

    with pytest.raises(UpstreamStatusError) as exc_info:
        await fetcher.fetch("https://down.test/")

    assert exc_info.value.status_code == 503
    assert str(exc_info.value) == "HTTP 503: Service Unavailable"


@pytest.mark.asyncio
async def test_fetch_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out")

    with pytest.raises(UpstreamNetworkError, match="timed out"):
        await _fetcher(handler).fetch("https://slow.test/")


@pytest.mark.asyncio
async def test_fetch_follows_redirects() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"location": "https://moved.test/new"})
        return httpx.Response(200, text="moved")

    response = await _fetcher(handler).fetch("https://moved.test/old")
    assert response.text == "moved"


def test_zero_timeout_disables_client_timeout() -> None:
    assert ContentFetcher(user_agent="ua", timeout=0)._timeout is None
    assert ContentFetcher(user_agent="ua", timeout=None)._timeout is None
    assert ContentFetcher(user_agent="ua", timeout=12.5)._timeout == 12.5
