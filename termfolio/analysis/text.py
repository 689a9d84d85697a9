"""Tokenising and counting helpers shared by both content heuristics."""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Iterable

# Base list used by the scrape insights.
STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
})

# The analyze endpoint also drops auxiliary verbs and demonstratives.
EXTENDED_STOP_WORDS = STOP_WORDS | frozenset({
    "is", "are", "was", "were", "be", "been", "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "may", "might", "can", "this", "that", "these", "those",
})

_NON_WORD_RE = re.compile(r"[^\w]", re.ASCII)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (``round`` would use banker's rounding)."""
    return int(math.floor(value + 0.5))


def tokenize(content: str) -> list[str]:
    """Lower-case whitespace tokens."""
    return content.lower().split()


def split_sentences(content: str) -> list[str]:
    return _SENTENCE_SPLIT_RE.split(content)


def rank_keywords(words: Iterable[str], stop_words: frozenset[str]) -> list[str]:
    """Tokens longer than two characters, most frequent first.

    Punctuation and other non-ASCII-word characters are removed from each token
    before counting.  Ties keep first-seen order.
    """
    counts: Counter[str] = Counter()
    for word in words:
        clean = _NON_WORD_RE.sub("", word).lower()
        if len(clean) > 2 and clean not in stop_words:
            counts[clean] += 1
    # Counter preserves insertion order and sorted() is stable, so equal counts
    # stay in first-seen order.
    return [word for word, _ in sorted(counts.items(), key=lambda item: item[1], reverse=True)]
