"""Heuristic analysis of arbitrary page content for the analyze endpoint.

This is a separate heuristic from :mod:`termfolio.analysis.insights`: it has
its own stop-word list, entity matching, sentence scoring, relevance formula
and content-type labels.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from urllib.parse import urlparse

from .text import EXTENDED_STOP_WORDS, rank_keywords, round_half_up, split_sentences, tokenize

MAX_ENTITIES = 10
MAX_INSIGHTS = 5
MAX_KEYWORDS = 15
MAX_SUMMARY_SENTENCES = 3

TECH_PATTERNS = (
    re.compile(
        r"\b(Python|JavaScript|React|Node\.js|MongoDB|SQL|PostgreSQL|MySQL|Docker|AWS|Azure|GCP|Kubernetes)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(AI|ML|Machine Learning|Data Science|Analytics|API|REST|GraphQL|JSON|XML)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(GitHub|GitLab|Slack|Teams|Zoom|Figma|VS Code|IntelliJ)\b", re.IGNORECASE),
)
COMPANY_PATTERNS = (
    re.compile(r"\b([A-Z][a-z]+ (?:Inc|LLC|Corp|Corporation|Ltd|Limited|Co|Company))\b"),
    re.compile(
        r"\b(Google|Apple|Microsoft|Amazon|Meta|Tesla|Netflix|Spotify|Uber|Airbnb)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(Y Combinator|YC|Techstars|500 Startups)\b", re.IGNORECASE),
)
LOCATION_PATTERNS = (
    re.compile(
        r"\b(San Francisco|New York|London|Tokyo|Berlin|Sydney|Toronto|Mumbai|Bangalore)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(Silicon Valley|Bay Area|NYC|LA|Seattle)\b", re.IGNORECASE),
)

INFORMATIVE_WORDS = ("provides", "offers", "specializes", "focuses", "develops", "creates", "builds")

_TECH_ENTITY_RE = re.compile(r"\b(Python|JavaScript|React|AI|ML|API|Data|Analytics)\b", re.IGNORECASE)
_BUSINESS_RE = re.compile(r"\b(startup|company|business|revenue|funding|growth|scale)\b", re.IGNORECASE)
_EDUCATIONAL_RE = re.compile(r"\b(learn|tutorial|guide|how to|example|documentation)\b", re.IGNORECASE)


@dataclass
class ContentAnalysis:
    summary: str
    entities: list[str] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    relevance_score: int = 0
    content_type: str = "General Web Content"


def extract_entities(content: str) -> list[str]:
    """Technology, company and location mentions, de-duplicated ignoring case."""
    seen: set[str] = set()
    entities: list[str] = []
    for pattern in (*TECH_PATTERNS, *COMPANY_PATTERNS, *LOCATION_PATTERNS):
        for match in pattern.finditer(content):
            entity = match.group(0).strip()
            key = entity.lower()
            if key not in seen:
                seen.add(key)
                entities.append(entity)
    return entities


def generate_insights(content: str, url: str, entities: list[str]) -> list[str]:
    insights: list[str] = []

    if len(content) > 5000:
        insights.append("Rich, comprehensive content with detailed information")
    elif len(content) > 1000:
        insights.append("Moderate content depth with good coverage")
    else:
        insights.append("Concise content, may need additional detail")

    tech_entities = [e for e in entities if _TECH_ENTITY_RE.search(e)]
    if len(tech_entities) > 3:
        insights.append("Strong technology focus with multiple tech stack mentions")

    if len(_BUSINESS_RE.findall(content)) > 5:
        insights.append("Business-oriented content with commercial focus")

    if len(_EDUCATIONAL_RE.findall(content)) > 3:
        insights.append("Educational or instructional content detected")

    if "github.com" in url:
        insights.append("Code repository or developer-focused content")
    elif "linkedin.com" in url:
        insights.append("Professional networking or career-related content")
    elif "ycombinator.com" in url:
        insights.append("Startup ecosystem and entrepreneurship content")

    return insights


def _sentence_score(sentence: str, entities: list[str]) -> int:
    lowered = sentence.lower()
    score = sum(2 for entity in entities if entity.lower() in lowered)
    if 50 < len(sentence) < 200:
        score += 1
    score += sum(1 for word in INFORMATIVE_WORDS if word in lowered)
    return score


def generate_summary(sentences: list[str], entities: list[str], url: str) -> str:
    """Join the three most informative sentences, or describe the source host."""
    scored = [(s.strip(), _sentence_score(s, entities)) for s in sentences]
    scored.sort(key=lambda item: item[1], reverse=True)
    top = [s for s, _ in scored[:MAX_SUMMARY_SENTENCES] if s]

    if not top:
        hostname = urlparse(url).hostname or url
        return f"Content analysis from {hostname} - processed and summarized."
    return " ".join(top)


def calculate_relevance_score(content: str, entities: list[str], keywords: list[str]) -> int:
    score = min(len(content) / 1000, 10)
    score += len(entities) * 2
    score += min(len(keywords) / 2, 15)
    if "<" in content or "{" in content:
        score += 5
    return min(round_half_up(score), 100)


def determine_content_type(content: str, url: str) -> str:
    if "/api/" in url or content.startswith("{") or content.startswith("["):
        return "API Response"
    if "ycombinator.com" in url or "startup" in content or "company" in content:
        return "Company Directory"
    if "documentation" in content or "docs" in content or "/docs/" in url:
        return "Documentation"
    if "published" in content or "author" in content or "/blog/" in url:
        return "Article/Blog"
    if "product" in content or "features" in content or "pricing" in content:
        return "Product Page"
    return "General Web Content"


def analyze_content(content: str, url: str) -> ContentAnalysis:
    words = tokenize(content)
    sentences = [s for s in split_sentences(content) if len(s.strip()) > 10]

    entities = extract_entities(content)
    keywords = rank_keywords(words, EXTENDED_STOP_WORDS)

    return ContentAnalysis(
        summary=generate_summary(sentences, entities, url),
        entities=entities[:MAX_ENTITIES],
        insights=generate_insights(content, url, entities)[:MAX_INSIGHTS],
        keywords=keywords[:MAX_KEYWORDS],
        relevance_score=calculate_relevance_score(content, entities, keywords),
        content_type=determine_content_type(content, url),
    )
