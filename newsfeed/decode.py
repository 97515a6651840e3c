"""
Tabular decoding of the published feed.

Responsibilities:
- split raw text into logical rows (quoted fields may span lines)
- tokenize each row into fields (RFC4180-like quoting)
- bind the header row and map data rows onto it
- report rows that were dropped instead of raising

The JSON form of the feed is accepted too and lands in the same record shape.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from .models import DecodeResult, ReportItem
from .rules import BYTE_ORDER_MARK, DEFAULT_DELIMITER, DEFAULT_QUOTECHAR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dialect:
    delimiter: str = DEFAULT_DELIMITER
    quotechar: str = DEFAULT_QUOTECHAR
    skip_blank_rows: bool = True


DEFAULT_DIALECT = Dialect()


def split_rows(text: str, dialect: Dialect = DEFAULT_DIALECT) -> List[str]:
    """
    Split text into logical rows.

    A line break (LF, CRLF or a lone CR) ends a row only outside quotes, so a
    quoted field keeps its embedded line breaks. Every quote character toggles
    the quoted state; an escaped quote ("") toggles twice and nets out.
    """
    rows: List[str] = []
    buf: List[str] = []
    in_quotes = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if ch == dialect.quotechar:
            in_quotes = not in_quotes
            buf.append(ch)
        elif ch in "\r\n" and not in_quotes:
            rows.append("".join(buf))
            buf = []
            if ch == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
        else:
            buf.append(ch)
        i += 1

    if buf:
        rows.append("".join(buf))

    return rows


def split_fields(row: str, dialect: Dialect = DEFAULT_DIALECT) -> List[str]:
    """
    Tokenize one logical row into trimmed fields.

    A blank row yields no fields at all rather than a single empty one.
    """
    if dialect.skip_blank_rows and not row.strip():
        return []

    fields: List[str] = []
    buf: List[str] = []
    in_quotes = False
    quote = dialect.quotechar
    i = 0
    n = len(row)

    while i < n:
        ch = row[i]
        if in_quotes:
            if ch == quote:
                if i + 1 < n and row[i + 1] == quote:
                    buf.append(quote)
                    i += 1
                else:
                    in_quotes = False
            else:
                buf.append(ch)
        elif ch == quote:
            in_quotes = True
        elif ch == dialect.delimiter:
            fields.append("".join(buf).strip())
            buf = []
        else:
            buf.append(ch)
        i += 1

    fields.append("".join(buf).strip())
    return fields


def decode_csv(text: str, dialect: Dialect = DEFAULT_DIALECT) -> DecodeResult:
    """
    Decode delimited text into records keyed by the header row.

    Rows whose field count differs from the header are dropped and listed in
    ``skipped``. Duplicate header names: the later column wins.
    """
    if text.startswith(BYTE_ORDER_MARK):
        text = text[len(BYTE_ORDER_MARK):]

    rows = split_rows(text, dialect)
    if not rows:
        return DecodeResult()

    header = split_fields(rows[0], dialect)
    if not header:
        logger.debug("Header row is blank; nothing to decode")
        return DecodeResult(skipped=[
            ReportItem(row=1, issue="missing_header", value=None, action="input_ignored"),
        ])

    records: List[Dict[str, str]] = []
    skipped: List[ReportItem] = []

    for i, row in enumerate(rows[1:], start=2):
        fields = split_fields(row, dialect)
        if not fields:
            continue

        if len(fields) != len(header):
            logger.debug(
                f"Dropping row {i}: {len(fields)} fields, expected {len(header)}"
            )
            skipped.append(ReportItem(
                row=i,
                issue="row_length_mismatch",
                value=str(len(fields)),
                action=f"dropped_expected_{len(header)}",
            ))
            continue

        records.append(dict(zip(header, fields)))

    return DecodeResult(columns=header, records=records, skipped=skipped)


def _json_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return json.dumps(value, ensure_ascii=False)


def decode_json(text: str) -> DecodeResult:
    """Decode the structured-list form of the feed (a JSON array of objects)."""
    try:
        data = json.loads(text.lstrip(BYTE_ORDER_MARK))
    except json.JSONDecodeError as e:
        logger.debug(f"Feed body is not valid JSON: {e}")
        return DecodeResult(skipped=[
            ReportItem(issue="invalid_json", value=str(e), action="input_ignored"),
        ])

    if not isinstance(data, list):
        return DecodeResult(skipped=[
            ReportItem(issue="not_a_list", value=type(data).__name__, action="input_ignored"),
        ])

    columns: List[str] = []
    records: List[Dict[str, str]] = []
    skipped: List[ReportItem] = []

    for i, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            skipped.append(ReportItem(
                row=i,
                issue="not_an_object",
                value=type(item).__name__,
                action="dropped",
            ))
            continue

        record = {str(k).strip(): _json_value(v) for k, v in item.items()}
        for key in record:
            if key not in columns:
                columns.append(key)
        records.append(record)

    return DecodeResult(columns=columns, records=records, skipped=skipped)


def decode(text: str, fmt: str = "auto", dialect: Dialect = DEFAULT_DIALECT) -> DecodeResult:
    if fmt == "json":
        return decode_json(text)
    if fmt == "csv":
        return decode_csv(text, dialect)
    if fmt != "auto":
        raise ValueError(f"Unknown feed format: {fmt!r}")

    head = text.lstrip(BYTE_ORDER_MARK).lstrip()
    if head.startswith(("[", "{")):
        return decode_json(text)
    return decode_csv(text, dialect)
