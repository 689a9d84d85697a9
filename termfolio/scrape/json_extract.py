"""JSON/API scrape path: pick the interesting array out of a JSON document."""

from __future__ import annotations

from typing import Any

from .models import ScrapedRecord

MAX_JSON_ITEMS = 100


def wants_json(url: str, data_type: str) -> bool:
    """Return True when a scrape should take the JSON path instead of HTML."""
    return data_type in ("api", "json") or "api" in url or ".json" in url


def select_items(data: Any) -> list[Any]:
    """Apply the first-array-wins rule to a decoded JSON document.

    - root array: its first 100 elements
    - root object: the first 100 elements of the first own key (insertion
      order) whose value is an array
    - object without array-valued keys: the object itself, as a single item
    - anything else (null, scalars): no items
    """
    if isinstance(data, list):
        return data[:MAX_JSON_ITEMS]
    if isinstance(data, dict):
        for value in data.values():
            if isinstance(value, list):
                return value[:MAX_JSON_ITEMS]
        return [data]
    return []


def to_records(items: list[Any]) -> list[ScrapedRecord]:
    """Turn selected items into records, wrapping non-objects as ``{"value": x}``."""
    return [item if isinstance(item, dict) else {"value": item} for item in items]
