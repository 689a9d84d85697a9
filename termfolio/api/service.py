"""Service layer: orchestrates scrape, analyze and command operations for the API routes."""

from __future__ import annotations

import logging

from termfolio.analysis.analyzer import analyze_content
from termfolio.api.schemas import (
    Analysis,
    AnalyzeRequest,
    AnalyzeResponse,
    CommandResponse,
    ScrapeRequest,
    ScrapeResponse,
)
from termfolio.scrape import ContentFetcher, records_to_csv, scrape
from termfolio.terminal.commands import parse_sentinel
from termfolio.terminal.dispatcher import CommandDispatcher

logger = logging.getLogger(__name__)

PREVIEW_RECORDS = 5
ALLOWED_SCHEMES = ("http://", "https://")


def has_web_scheme(url: str) -> bool:
    return url.startswith(ALLOWED_SCHEMES)


async def scrape_to_csv(fetcher: ContentFetcher, body: ScrapeRequest) -> ScrapeResponse:
    """Scrape ``body.url`` and package the records as a preview plus CSV."""
    logger.info("scrape started", extra={"url": body.url, "data_type": body.data_type})
    try:
        outcome = await scrape(body.url, body.data_type, fetcher)
        if not outcome.success:
            logger.info("scrape failed", extra={"url": body.url, "error": outcome.error})
            return ScrapeResponse(success=False, error=outcome.error)

        csv_content = records_to_csv(outcome.records)
    except Exception as exc:
        logger.exception("scrape crashed", extra={"url": body.url})
        return ScrapeResponse(success=False, error=f"Scraping failed: {exc or 'Unknown error'}")

    logger.info(
        "scrape completed",
        extra={"url": body.url, "total_items": len(outcome.records), "csv_bytes": len(csv_content)},
    )
    return ScrapeResponse(
        success=True,
        data=outcome.records[:PREVIEW_RECORDS],
        csv_content=csv_content,
        total_items=len(outcome.records),
    )


def analyze(body: AnalyzeRequest) -> AnalyzeResponse:
    try:
        result = analyze_content(body.content, body.url)
    except Exception as exc:
        logger.exception("analysis crashed", extra={"url": body.url})
        return AnalyzeResponse(success=False, error=f"Analysis failed: {exc or 'Unknown error'}")

    return AnalyzeResponse(
        success=True,
        analysis=Analysis(
            summary=result.summary,
            entities=result.entities,
            insights=result.insights,
            keywords=result.keywords,
            relevance_score=result.relevance_score,
            content_type=result.content_type,
        ),
    )


async def run_command(dispatcher: CommandDispatcher, raw: str) -> CommandResponse:
    """Dispatch *raw* and split control sentinels out of the printable output."""
    output = await dispatcher.dispatch(raw)
    parsed = parse_sentinel(output)
    if parsed is None:
        return CommandResponse(output=output)
    sentinel, argument = parsed
    return CommandResponse(output="", action=sentinel.value, argument=argument)
