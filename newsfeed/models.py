from __future__ import annotations

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from .rules import PLACEHOLDER_URL


class ReportItem(BaseModel):
    row: Optional[int] = None
    column: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class DecodeResult(BaseModel):
    columns: List[str] = Field(default_factory=list)
    records: List[Dict[str, str]] = Field(default_factory=list)
    skipped: List[ReportItem] = Field(default_factory=list)


class ReportSummary(BaseModel):
    rows: int = 0
    columns: int = 0
    skipped: int = 0


class DecodeResponse(BaseModel):
    summary: ReportSummary
    columns: List[str] = Field(default_factory=list)
    records: List[Dict[str, str]] = Field(default_factory=list)
    skipped: List[ReportItem] = Field(default_factory=list)


class ArticleView(BaseModel):
    headline: str
    summary: str = ""
    url: str = PLACEHOLDER_URL
    published_time: str = ""
    dateline: str
    tickers: Optional[str] = None
    image_url: Optional[str] = None
    breaking: bool = False


class ArticlesResponse(BaseModel):
    articles: List[ArticleView] = Field(default_factory=list)
    skipped: int = 0
    last_refreshed_at: Optional[str] = Field(default=None, examples=["2024-03-01T14:30:00+00:00"])
    last_error: Optional[str] = None


class DatelineResponse(BaseModel):
    value: Optional[str] = None
    dateline: str


class HealthResponse(BaseModel):
    ok: bool = True


def summarize(result: DecodeResult) -> ReportSummary:
    return ReportSummary(
        rows=len(result.records),
        columns=len(result.columns),
        skipped=len(result.skipped),
    )
