"""Request/response Pydantic models."""

import re
from typing import Annotated, Any, Literal
from urllib.parse import urlsplit

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*$")


def _absolute_url(value: str) -> str:
    value = value.strip()
    parts = urlsplit(value)
    if not parts.scheme or not _SCHEME_RE.match(parts.scheme) or not (parts.netloc or parts.path):
        raise ValueError("must be an absolute URL")
    return value


AbsoluteUrl = Annotated[str, AfterValidator(_absolute_url)]


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=1000)
    context: str | None = None


class ChatResponse(BaseModel):
    response: str | None = None
    error: str | None = None


class ScrapeRequest(_WireModel):
    url: AbsoluteUrl
    data_type: Literal["html", "api", "json"] = Field(default="html", alias="dataType")


class ScrapeResponse(_WireModel):
    success: bool
    data: list[dict[str, Any]] | None = None
    csv_content: str | None = Field(default=None, alias="csvContent")
    total_items: int | None = Field(default=None, alias="totalItems")
    error: str | None = None


class AnalyzeRequest(_WireModel):
    content: str = Field(min_length=1)
    url: AbsoluteUrl
    analysis_type: Literal["summary", "entities", "insights", "keywords"] = Field(
        default="summary", alias="analysisType"
    )


class Analysis(_WireModel):
    summary: str
    entities: list[str]
    insights: list[str]
    keywords: list[str]
    relevance_score: int = Field(alias="relevanceScore")
    content_type: str = Field(alias="contentType")


class AnalyzeResponse(_WireModel):
    success: bool
    analysis: Analysis | None = None
    error: str | None = None


class CommandRequest(BaseModel):
    input: str = Field(max_length=2000)


class CommandResponse(BaseModel):
    output: str
    action: str | None = None
    argument: str | None = None
