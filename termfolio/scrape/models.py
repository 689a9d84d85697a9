"""Data models for the scrape submodule."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# A single output row: the JSON preview item and the CSV row are the same dict.
ScrapedRecord = dict[str, Any]


@dataclass
class CardData:
    """Fields pulled out of one repeated HTML content unit ("card")."""

    title: str = ""
    description: str = ""
    tags: list[str] = field(default_factory=list)
    price: str = ""
    location: str = ""
    url: str = ""
    image: str = ""


@dataclass
class ExtractedCard:
    """A card that passed the title-or-description filter."""

    card: CardData
    extraction_method: str


@dataclass
class ScrapeOutcome:
    """Result of one scrape run, before it is shaped into a response."""

    records: list[ScrapedRecord] = field(default_factory=list)
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None
