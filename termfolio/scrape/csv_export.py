"""CSV serialisation of scraped records."""

from __future__ import annotations

import json
import math
from typing import Any, Iterable

from .models import ScrapedRecord

MAX_CELL_LENGTH = 500
LIST_SEPARATOR = " | "
LABEL_KEYS = ("name", "text", "title", "type")
QUALITY_FIELDS = ("hasStructuredData", "hasMainContent", "hasArticles", "contentRichness")


def _to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def cell_text(value: Any) -> str:
    """String form of a scalar cell value: lower-case booleans, blank for missing."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return _to_json(value)
    return str(value)


def _label(element: Any) -> str:
    if isinstance(element, dict):
        for key in LABEL_KEYS:
            if element.get(key):
                return cell_text(element[key])
    return _to_json(element)


def flatten_record(record: ScrapedRecord) -> dict[str, Any]:
    """Flatten one record into scalar columns."""
    flat: dict[str, Any] = {}
    for key, value in record.items():
        if isinstance(value, list):
            if not value:
                flat[key] = ""
            elif isinstance(value[0], (dict, list)) or value[0] is None:
                flat[key] = LIST_SEPARATOR.join(_label(element) for element in value)
            else:
                flat[key] = LIST_SEPARATOR.join(cell_text(element) for element in value)
        elif isinstance(value, dict):
            if "hasStructuredData" in value:
                for quality_field in QUALITY_FIELDS:
                    flat[f"{key}_{quality_field}"] = value.get(quality_field)
            else:
                flat[key] = _to_json(value)
        else:
            flat[key] = value
    return flat


def collect_columns(rows: Iterable[dict[str, Any]]) -> list[str]:
    """Union of keys across *rows*, in first-seen order."""
    columns: dict[str, None] = {}
    for row in rows:
        for key in row:
            columns.setdefault(key, None)
    return list(columns)


def quote_cell(value: Any) -> str:
    text = cell_text(value)
    if len(text) > MAX_CELL_LENGTH:
        text = text[:MAX_CELL_LENGTH] + "..."
    return '"' + text.replace('"', '""') + '"'


def records_to_csv(records: list[ScrapedRecord]) -> str:
    """Render *records* as CSV: quoted header row plus one row per record."""
    if not records:
        return ""

    rows = [flatten_record(record) for record in records]
    columns = collect_columns(rows)

    lines = [",".join(quote_cell(column) for column in columns)]
    for row in rows:
        lines.append(",".join(quote_cell(row.get(column)) for column in columns))
    return "\n".join(lines)
