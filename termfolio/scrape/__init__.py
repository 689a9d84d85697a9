"""Scrape pipeline: fetch → JSON or HTML extraction → records."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from termfolio.analysis.insights import generate_content_insights

from .csv_export import records_to_csv
from .fetcher import HTML_ACCEPT, JSON_ACCEPT, ContentFetcher, FetchError
from .html_extract import PageContent, extract_page
from .json_extract import select_items, to_records, wants_json
from .models import ScrapedRecord, ScrapeOutcome

__all__ = [
    "ContentFetcher",
    "FetchError",
    "ScrapeOutcome",
    "ScrapedRecord",
    "build_page_records",
    "records_to_csv",
    "scrape",
]

logger = logging.getLogger(__name__)

NO_DATA_ERROR = "No data found to scrape from the provided URL"


def _iso_timestamp() -> str:
    """UTC timestamp with millisecond precision and a ``Z`` suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_page_records(url: str, html: str, page: PageContent) -> list[ScrapedRecord]:
    """Shape extracted page content into output records.

    Every record repeats the page-level fields so that each CSV row stands
    alone.  One ``structured_item`` record is emitted per card, or a single
    ``website_summary`` record when the page has no cards.
    """
    insights = generate_content_insights(page.text, url)
    content_richness = (
        len(page.headings)
        + len(page.paragraphs)
        + len(page.articles)
        + len(page.list_items)
        + len(page.cards)
    )

    base: dict[str, Any] = {
        "url": url,
        "title": page.title,
        "description": page.description,
        "headings": page.headings[:15],
        "paragraphs": page.paragraphs[:10],
        "articles": page.articles,
        "listItems": page.list_items[:15],
        "contentDivs": page.content_divs,
        "mainContent": page.main_content,
        "links": page.links[:20],
        "images": page.images[:10],
        "structuredData": page.structured_data,
        "aiInsights": insights.as_record(),
        "scrapedAt": _iso_timestamp(),
        "contentLength": len(html),
        "totalHeadings": len(page.headings),
        "totalParagraphs": len(page.paragraphs),
        "totalLinks": len(page.links),
        "totalImages": len(page.images),
        "totalArticles": len(page.articles),
        "totalListItems": len(page.list_items),
        "totalStructuredItems": len(page.cards),
        "contentQuality": {
            "hasStructuredData": len(page.cards) > 0,
            "hasMainContent": len(page.main_content) > 0,
            "hasArticles": len(page.articles) > 0,
            "hasAIInsights": len(insights.keywords) > 0,
            "contentRichness": content_richness,
            "relevanceScore": insights.relevance_score,
            "contentType": insights.content_type,
        },
    }

    if not page.cards:
        return [{**base, "type": "website_summary"}]

    return [
        {
            **base,
            "id": index,
            "itemTitle": extracted.card.title,
            "itemDescription": extracted.card.description,
            "itemTags": ", ".join(extracted.card.tags),
            "itemPrice": extracted.card.price,
            "itemLocation": extracted.card.location,
            "itemUrl": extracted.card.url,
            "itemImage": extracted.card.image,
            "extractionMethod": extracted.extraction_method,
            "type": "structured_item",
        }
        for index, extracted in enumerate(page.cards, start=1)
    ]


async def _scrape_json(url: str, fetcher: ContentFetcher) -> ScrapeOutcome:
    try:
        response = await fetcher.fetch(url, accept=JSON_ACCEPT)
        data = response.json()
    except (FetchError, ValueError) as exc:
        return ScrapeOutcome(error=f"Failed to fetch API data: {exc or 'Unknown error'}")

    items = select_items(data)
    logger.debug("json items selected", extra={"url": url, "item_count": len(items)})
    return ScrapeOutcome(records=to_records(items))


async def _scrape_html(url: str, fetcher: ContentFetcher) -> ScrapeOutcome:
    try:
        response = await fetcher.fetch(url, accept=HTML_ACCEPT)
    except FetchError as exc:
        return ScrapeOutcome(error=f"Failed to scrape HTML: {exc or 'Unknown error'}")

    html = response.text
    page = extract_page(html)
    logger.debug(
        "html page extracted",
        extra={
            "url": url,
            "cards": len(page.cards),
            "headings": len(page.headings),
            "paragraphs": len(page.paragraphs),
        },
    )
    return ScrapeOutcome(records=build_page_records(url, html, page))


async def scrape(url: str, data_type: str, fetcher: ContentFetcher) -> ScrapeOutcome:
    """Fetch *url* and extract records, choosing the JSON or HTML path.

    Fetch and parse failures come back as ``ScrapeOutcome.error`` rather than
    exceptions, as does a page that yields no records.
    """
    if wants_json(url, data_type):
        outcome = await _scrape_json(url, fetcher)
    else:
        outcome = await _scrape_html(url, fetcher)

    if outcome.success and not outcome.records:
        return ScrapeOutcome(error=NO_DATA_ERROR)
    return outcome
