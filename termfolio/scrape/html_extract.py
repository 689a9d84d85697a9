"""HTML scrape path: regex extraction over raw markup.

No DOM parser is involved: every field is pulled out with a regular expression
so that the caps, truncation lengths and class-name vocabularies below stay the
exact extraction contract, including how they behave on minified or malformed
markup.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .models import CardData, ExtractedCard

logger = logging.getLogger(__name__)

T = TypeVar("T")

TITLE_FALLBACK = "No title found"
DESCRIPTION_FALLBACK = "No description found"

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")

_TITLE_RE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)
_DESCRIPTION_RE = re.compile(
    r'<meta[^>]*name="description"[^>]*content="([^"]*)"[^>]*>', re.IGNORECASE
)
_HEADING_RES = tuple(
    re.compile(rf"<{tag}[^>]*>([^<]+)</{tag}>", re.IGNORECASE) for tag in ("h1", "h2", "h3")
)
_PARAGRAPH_RE = re.compile(r"<p[^>]*>[\s\S]*?</p>", re.IGNORECASE)
_ARTICLE_RE = re.compile(r"<article[^>]*>[\s\S]*?</article>", re.IGNORECASE)
_LIST_ITEM_RE = re.compile(r"<li[^>]*>[\s\S]*?</li>", re.IGNORECASE)
_LINK_RE = re.compile(r'<a[^>]*href="([^"]*)"[^>]*>([^<]+)</a>', re.IGNORECASE)
_HREF_RE = re.compile(r'href="([^"]*)"')
_LINK_TEXT_RE = re.compile(r">([^<]+)<")
_IMAGE_RE = re.compile(r'<img[^>]*src="([^"]*)"[^>]*>', re.IGNORECASE)
_SRC_RE = re.compile(r'src="([^"]*)"')
_ALT_RE = re.compile(r'alt="([^"]*)"')
_MAIN_CONTENT_RE = re.compile(
    r"<(main|section|article)[^>]*>[\s\S]*?</(main|section|article)>", re.IGNORECASE
)
_JSON_LD_RE = re.compile(
    r"""<script[^>]*type=["']application/ld\+json["'][^>]*>([\s\S]*?)</script>""",
    re.IGNORECASE,
)

# Order matters: &amp; is decoded after &nbsp; and before the rest.
_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
)

MEANINGFUL_CLASSES = ("content", "article", "post", "description", "summary", "text", "body")

# Repeated content units, paired with the label recorded as extractionMethod.
CARD_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (
        re.compile(r"<div[^>]*class[^>]*(?:company|startup|card|item)[^>]*>[\s\S]*?</div>", re.IGNORECASE),
        "Company/Startup Directory",
    ),
    (
        re.compile(r"<div[^>]*class[^>]*(?:product|listing|tile)[^>]*>[\s\S]*?</div>", re.IGNORECASE),
        "E-commerce Product",
    ),
    (
        re.compile(r"<article[^>]*>[\s\S]*?</article>", re.IGNORECASE),
        "Article/Blog Post",
    ),
    (
        re.compile(r"<div[^>]*class[^>]*(?:news|post|story)[^>]*>[\s\S]*?</div>", re.IGNORECASE),
        "News Item",
    ),
    (
        re.compile(r"<div[^>]*class[^>]*(?:profile|person|member|user)[^>]*>[\s\S]*?</div>", re.IGNORECASE),
        "Profile/Person",
    ),
    (
        re.compile(r"<div[^>]*class[^>]*(?:card|panel|box|container)[^>]*>[\s\S]*?</div>", re.IGNORECASE),
        "General Content Card",
    ),
)

_CARD_TITLE_RES = (
    re.compile(r"<h[1-6][^>]*>([^<]+)</h[1-6]>", re.IGNORECASE),
    re.compile(r"<div[^>]*class[^>]*(?:title|name|heading)[^>]*>([^<]+)</div>", re.IGNORECASE),
    re.compile(r"<span[^>]*class[^>]*(?:title|name|heading)[^>]*>([^<]+)</span>", re.IGNORECASE),
    re.compile(r"<a[^>]*class[^>]*(?:title|name|link)[^>]*>([^<]+)</a>", re.IGNORECASE),
)
_CARD_DESCRIPTION_RES = (
    re.compile(r"<p[^>]*>([^<]+)</p>", re.IGNORECASE),
    re.compile(r"<div[^>]*class[^>]*(?:description|summary|excerpt)[^>]*>([^<]+)</div>", re.IGNORECASE),
    re.compile(r"<span[^>]*class[^>]*(?:description|summary)[^>]*>([^<]+)</span>", re.IGNORECASE),
)
_CARD_TAG_RES = (
    re.compile(r"class[^>]*(?:tag|category|label|badge)[^>]*>([^<]+)<", re.IGNORECASE),
    re.compile(r"<span[^>]*class[^>]*(?:tag|category)[^>]*>([^<]+)</span>", re.IGNORECASE),
)
_CARD_PRICE_RES = (
    re.compile(r"\$[\d,]+\.?\d*"),
    re.compile(r"[\d,]+\.?\d*\s*(?:USD|EUR|GBP|₹|¥)"),
    re.compile(r"class[^>]*price[^>]*>([^<]*[\d]+[^<]*)</[^>]*>", re.IGNORECASE),
)
_CARD_LOCATION_RES = (
    re.compile(r"class[^>]*(?:location|address|city)[^>]*>([^<]+)<", re.IGNORECASE),
    re.compile(
        r"\b(?:San Francisco|New York|London|Tokyo|Berlin|Sydney|Toronto|Mumbai|Bangalore)\b",
        re.IGNORECASE,
    ),
)
_CARD_URL_RE = re.compile(r'href="([^"]+)"', re.IGNORECASE)
_CARD_IMAGE_RE = re.compile(r'src="([^"]+)"', re.IGNORECASE)

MAX_CARDS_PER_PATTERN = 8
MAX_TAG_LENGTH = 50


def strip_tags(markup: str) -> str:
    return _TAG_RE.sub("", markup)


def decode_entities(text: str) -> str:
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def truncate(text: str, limit: int) -> str:
    """Cut *text* to *limit* characters, marking the cut with ``...``."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def page_text(html: str) -> str:
    """De-tag the whole page into one whitespace-normalised string."""
    return _WHITESPACE_RE.sub(" ", _TAG_RE.sub(" ", html)).strip()


def _first_group(match: re.Match[str]) -> str:
    """Captured text when the pattern has a group, otherwise the whole match."""
    if match.re.groups and match.group(1) is not None:
        return match.group(1).strip()
    return match.group(0).strip()


def extract_title(html: str) -> str:
    match = _TITLE_RE.search(html)
    return match.group(1).strip() if match else TITLE_FALLBACK


def extract_description(html: str) -> str:
    match = _DESCRIPTION_RE.search(html)
    return match.group(1).strip() if match else DESCRIPTION_FALLBACK


def extract_headings(html: str) -> list[str]:
    """All h1 texts, then all h2 texts, then all h3 texts."""
    headings: list[str] = []
    for pattern in _HEADING_RES:
        headings.extend(strip_tags(m.group(0)).strip() for m in pattern.finditer(html))
    return headings


def extract_paragraphs(html: str, limit: int = 15) -> list[str]:
    paragraphs: list[str] = []
    for match in _PARAGRAPH_RE.finditer(html):
        text = decode_entities(strip_tags(match.group(0)).strip())
        if len(text) > 20 and "Click here" not in text and "Read more" not in text:
            paragraphs.append(text)
            if len(paragraphs) == limit:
                break
    return paragraphs


def extract_articles(html: str, limit: int = 5) -> list[str]:
    articles: list[str] = []
    for match in _ARTICLE_RE.findall(html)[:limit]:
        text = strip_tags(match).strip()
        if len(text) > 50:
            articles.append(truncate(text, 500))
    return articles


def extract_list_items(html: str, limit: int = 20) -> list[str]:
    items: list[str] = []
    for match in _LIST_ITEM_RE.finditer(html):
        text = strip_tags(match.group(0)).strip()
        if 10 < len(text) < 200:
            items.append(text)
            if len(items) == limit:
                break
    return items


def extract_content_divs(html: str, per_class: int = 3) -> list[str]:
    """Text of divs whose class mentions one of the meaningful class names."""
    divs: list[str] = []
    for class_name in MEANINGFUL_CLASSES:
        pattern = re.compile(
            rf"""<div[^>]*class=["'][^"']*{class_name}[^"']*["'][^>]*>([\s\S]*?)</div>""",
            re.IGNORECASE,
        )
        for match in list(pattern.finditer(html))[:per_class]:
            text = strip_tags(match.group(0)).strip()
            if len(text) > 50:
                divs.append(truncate(text, 300))
    return divs


def extract_links(html: str, limit: int = 20) -> list[dict[str, str]]:
    links: list[dict[str, str]] = []
    for match in list(_LINK_RE.finditer(html))[:limit]:
        anchor = match.group(0)
        href = _HREF_RE.search(anchor)
        text = _LINK_TEXT_RE.search(anchor)
        if href and text:
            links.append({"url": href.group(1), "text": text.group(1).strip()})
    return links


def extract_images(html: str, limit: int = 10) -> list[dict[str, str]]:
    images: list[dict[str, str]] = []
    for match in list(_IMAGE_RE.finditer(html))[:limit]:
        tag = match.group(0)
        src = _SRC_RE.search(tag)
        alt = _ALT_RE.search(tag)
        if src:
            images.append({"src": src.group(1), "alt": alt.group(1) if alt else "No alt text"})
    return images


def extract_main_content(html: str, limit: int = 3) -> list[str]:
    blocks: list[str] = []
    for match in list(_MAIN_CONTENT_RE.finditer(html))[:limit]:
        text = strip_tags(match.group(0)).strip()
        if len(text) > 100:
            blocks.append(truncate(text, 500))
    return blocks


def extract_structured_data(html: str, limit: int = 3) -> list[dict[str, Any]]:
    """JSON-LD blocks that name or describe something."""
    items: list[dict[str, Any]] = []
    for match in list(_JSON_LD_RE.finditer(html))[:limit]:
        raw = strip_tags(match.group(0)).strip()
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.debug("skipping invalid JSON-LD block", extra={"length": len(raw)})
            continue
        if not isinstance(parsed, dict):
            continue
        if parsed.get("name") or parsed.get("headline") or parsed.get("description"):
            items.append({
                "type": parsed.get("@type") or "Unknown",
                "name": parsed.get("name") or parsed.get("headline"),
                "description": parsed.get("description"),
            })
    return items


def extract_card_data(fragment: str) -> CardData:
    """Parse one matched card fragment into its title, tags, price, etc."""
    card = CardData()

    for pattern in _CARD_TITLE_RES:
        match = pattern.search(fragment)
        if match:
            card.title = match.group(1).strip()
            break

    for pattern in _CARD_DESCRIPTION_RES:
        match = pattern.search(fragment)
        if match:
            card.description = match.group(1).strip()
            break

    # Whole matches, de-tagged: the class-attribute pattern keeps its `class="..">` prefix
    # and both patterns can report the same tag.
    for pattern in _CARD_TAG_RES:
        for match in pattern.finditer(fragment):
            tag = strip_tags(match.group(0)).strip()
            if tag and len(tag) < MAX_TAG_LENGTH:
                card.tags.append(tag)

    for pattern in _CARD_PRICE_RES:
        match = pattern.search(fragment)
        if match:
            card.price = match.group(0).strip()
            break

    for pattern in _CARD_LOCATION_RES:
        match = pattern.search(fragment)
        if match:
            card.location = _first_group(match)
            break

    url = _CARD_URL_RE.search(fragment)
    if url:
        card.url = url.group(1)

    image = _CARD_IMAGE_RE.search(fragment)
    if image:
        card.image = image.group(1)

    return card


def extract_cards(html: str) -> list[ExtractedCard]:
    """Run every card pattern, keeping cards that have a title or description."""
    cards: list[ExtractedCard] = []
    for pattern, method in CARD_PATTERNS:
        for match in list(pattern.finditer(html))[:MAX_CARDS_PER_PATTERN]:
            card = extract_card_data(match.group(0))
            if card.title or card.description:
                cards.append(ExtractedCard(card=card, extraction_method=method))
    return cards


@dataclass
class PageContent:
    """Everything the HTML path pulls out of one page."""

    title: str = TITLE_FALLBACK
    description: str = DESCRIPTION_FALLBACK
    headings: list[str] = field(default_factory=list)
    paragraphs: list[str] = field(default_factory=list)
    cards: list[ExtractedCard] = field(default_factory=list)
    articles: list[str] = field(default_factory=list)
    list_items: list[str] = field(default_factory=list)
    content_divs: list[str] = field(default_factory=list)
    links: list[dict[str, str]] = field(default_factory=list)
    images: list[dict[str, str]] = field(default_factory=list)
    main_content: list[str] = field(default_factory=list)
    structured_data: list[dict[str, Any]] = field(default_factory=list)
    text: str = ""


def _run_step(name: str, step: Callable[[str], T], html: str, default: T) -> T:
    """Run one extraction step; a failing step yields *default*, not an error."""
    try:
        return step(html)
    except Exception:
        logger.warning("html extraction step failed", extra={"step": name}, exc_info=True)
        return default


def extract_page(html: str) -> PageContent:
    return PageContent(
        title=_run_step("title", extract_title, html, TITLE_FALLBACK),
        description=_run_step("description", extract_description, html, DESCRIPTION_FALLBACK),
        headings=_run_step("headings", extract_headings, html, []),
        paragraphs=_run_step("paragraphs", extract_paragraphs, html, []),
        cards=_run_step("cards", extract_cards, html, []),
        articles=_run_step("articles", extract_articles, html, []),
        list_items=_run_step("list_items", extract_list_items, html, []),
        content_divs=_run_step("content_divs", extract_content_divs, html, []),
        links=_run_step("links", extract_links, html, []),
        images=_run_step("images", extract_images, html, []),
        main_content=_run_step("main_content", extract_main_content, html, []),
        structured_data=_run_step("structured_data", extract_structured_data, html, []),
        text=_run_step("text", page_text, html, ""),
    )
