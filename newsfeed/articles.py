"""
Presentation view model for decoded articles.

Filters out records without a headline, orders the rest newest first and
shapes each one for display. Values are returned unescaped; the consumer
escapes before embedding them in markup.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from typing import Dict, Iterable, List, Optional

from pydantic import HttpUrl, TypeAdapter, ValidationError

from .models import ArticleView
from .rules import (
    DEFAULT_SCHEME,
    HEADLINE,
    IMAGE_URL,
    NOT_AVAILABLE,
    PLACEHOLDER_URL,
    PUBLISHED_TIME,
    SUMMARY,
    SUMMARY_MAX_CHARS,
    TICKERS,
    URL,
)
from .timestamps import normalize_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

_http_url = TypeAdapter(HttpUrl)


def has_headline(record: Dict[str, str]) -> bool:
    headline = record.get(HEADLINE)
    return isinstance(headline, str) and headline.strip() != ""


def _sort_key_time(record: Dict[str, str], tz: tzinfo) -> Optional[datetime]:
    dt = parse_timestamp(record.get(PUBLISHED_TIME))
    if dt is None:
        return None
    # Naive and aware values must compare; naive ones are read in ``tz``.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return dt


def sort_by_recency(records: Iterable[Dict[str, str]], tz: tzinfo = timezone.utc) -> List[Dict[str, str]]:
    """Newest first; records with an unparseable time go last, in input order."""
    dated = []
    undated = []
    for record in records:
        dt = _sort_key_time(record, tz)
        if dt is None:
            undated.append(record)
        else:
            dated.append((dt, record))

    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [record for _, record in dated] + undated


def sanitize_url(raw: Optional[str]) -> str:
    """
    Make a feed URL safe to link to.

    Strips one layer of wrapping quotes, defaults the scheme to https and
    falls back to "#" when the result is not an absolute http(s) URL.
    """
    if not raw:
        return PLACEHOLDER_URL

    url = raw
    if url.startswith('"'):
        url = url[1:]
    if url.endswith('"'):
        url = url[:-1]
    url = url.strip()

    if not url:
        return PLACEHOLDER_URL

    if not url.startswith(("http://", "https://")):
        url = DEFAULT_SCHEME + url

    try:
        _http_url.validate_python(url)
    except ValidationError:
        return PLACEHOLDER_URL

    return url


def excerpt(summary: str, limit: int = SUMMARY_MAX_CHARS) -> str:
    if len(summary) > limit:
        return summary[:limit] + "..."
    return summary


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value or value == NOT_AVAILABLE:
        return None
    return value


def to_view(
    record: Dict[str, str],
    breaking: bool = False,
    tz: Optional[tzinfo] = None,
    summary_limit: int = SUMMARY_MAX_CHARS,
) -> ArticleView:
    headline = record.get(HEADLINE) or ""
    summary = record.get(SUMMARY) or ""
    published = record.get(PUBLISHED_TIME) or ""

    if not summary.strip():
        logger.warning(f"Summary missing for article: {headline!r}")

    return ArticleView(
        headline=headline,
        summary=excerpt(summary, summary_limit),
        url=sanitize_url(record.get(URL)),
        published_time=published,
        dateline=normalize_timestamp(published, tz=tz),
        tickers=_optional(record.get(TICKERS)),
        image_url=_optional(record.get(IMAGE_URL)),
        breaking=breaking,
    )


def build_views(
    records: Iterable[Dict[str, str]],
    tz: tzinfo = timezone.utc,
    summary_limit: int = SUMMARY_MAX_CHARS,
) -> List[ArticleView]:
    """Headline filter, recency sort, then one view per record; the newest is flagged breaking."""
    kept = [record for record in records if has_headline(record)]
    ordered = sort_by_recency(kept, tz=tz)
    return [
        to_view(record, breaking=(i == 0), tz=tz, summary_limit=summary_limit)
        for i, record in enumerate(ordered)
    ]
