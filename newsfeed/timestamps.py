"""
Timestamp normalization for article datelines.

Feed timestamps arrive in many shapes (ISO with or without fractional
seconds and a Z suffix, quoted cells, spreadsheet-style "3/1/2024 14:30").
Each is cleaned up, parsed with dateutil and rendered with one fixed en-US
template. Failures resolve to sentinels, never exceptions.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any, Optional

from dateutil import parser as date_parser

from .rules import INVALID_TIMESTAMP, MISSING_TIMESTAMP, MONTH_NAMES


def clean_timestamp(raw: str) -> str:
    value = raw.strip()

    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]

    if value.endswith("Z"):
        value = value[:-1]

    # Drops fractional seconds (and anything after them)
    if "." in value:
        value = value[:value.index(".")]

    return value


def _parse(value: str) -> Optional[datetime]:
    try:
        parsed = date_parser.parse(value)
        # dateutil accepts offsets such as +25:00 that datetime later rejects
        parsed.utcoffset()
    except (ValueError, OverflowError, TypeError):
        return None
    return parsed


def parse_timestamp(raw: Any) -> Optional[datetime]:
    """
    Parse a feed timestamp, or return None.

    Tries the cleaned value first, then again with the ISO "T" separator
    replaced by a space.
    """
    if not isinstance(raw, str) or not raw.strip():
        return None

    value = clean_timestamp(raw)
    if not value:
        return None

    parsed = _parse(value)
    if parsed is None and "T" in value:
        parsed = _parse(value.replace("T", " "))
    return parsed


def format_dateline(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{MONTH_NAMES[dt.month - 1]} {dt.day}, {dt.year:04d} at {hour:02d}:{dt.minute:02d} {meridiem}"


def normalize_timestamp(raw: Any, tz: Optional[tzinfo] = None) -> str:
    """
    Render a feed timestamp as a dateline, e.g. "March 1, 2024 at 02:30 PM".

    Returns "N/A" for a missing, blank or non-string value and "Invalid Date"
    when no parse attempt succeeds. Offset-aware values are shifted into
    ``tz`` when given; naive values keep their wall-clock time.

    The output is not guaranteed to parse back.
    """
    if not isinstance(raw, str) or not raw.strip():
        return MISSING_TIMESTAMP

    dt = parse_timestamp(raw)
    if dt is None:
        return INVALID_TIMESTAMP

    if tz is not None and dt.tzinfo is not None:
        try:
            dt = dt.astimezone(tz)
        except (OverflowError, ValueError):
            return INVALID_TIMESTAMP

    return format_dateline(dt)
