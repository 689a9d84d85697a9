"""Content insights attached to every scraped HTML page."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .text import STOP_WORDS, rank_keywords, round_half_up, split_sentences, tokenize

MAX_KEYWORDS = 10
MAX_SUMMARY_LENGTH = 300


@dataclass(frozen=True)
class ContentInsights:
    summary: str
    keywords: tuple[str, ...]
    relevance_score: int
    content_type: str
    word_count: int
    readability_score: int

    def as_record(self) -> dict[str, Any]:
        """Wire representation, as embedded in scraped records."""
        return {
            "summary": self.summary,
            "keywords": list(self.keywords),
            "relevanceScore": self.relevance_score,
            "contentType": self.content_type,
            "wordCount": self.word_count,
            "readabilityScore": self.readability_score,
        }


def classify_content(content: str, url: str) -> str:
    """First matching rule wins; the order is part of the contract."""
    if "api" in url or content.startswith('{"'):
        return "API/JSON Data"
    if "company" in content or "startup" in content:
        return "Business/Company"
    if "product" in content or "buy" in content:
        return "E-commerce/Product"
    if "blog" in content or "article" in content:
        return "Blog/Article"
    return "General Content"


def generate_content_insights(content: str, url: str) -> ContentInsights:
    """Keyword, summary and scoring heuristics over de-tagged page text."""
    words = tokenize(content)
    # an empty page still counts as one empty word
    word_count = len(words) or 1

    keywords = rank_keywords(words, STOP_WORDS)[:MAX_KEYWORDS]

    sentences = [s for s in split_sentences(content) if len(s.strip()) > 30]
    summary = ". ".join(sentences[:2]) + "."

    relevance = min(
        round_half_up(word_count / 100 + len(keywords) * 2 + len(sentences) * 0.5),
        100,
    )
    readability = min(round_half_up(len(sentences) / word_count * 1000), 100)

    return ContentInsights(
        summary=summary[:MAX_SUMMARY_LENGTH],
        keywords=tuple(keywords),
        relevance_score=relevance,
        content_type=classify_content(content, url),
        word_count=word_count,
        readability_score=readability,
    )
