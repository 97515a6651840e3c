"""
Feed retrieval.

Fetches the published spreadsheet over HTTP, turns the body into text and
hands it to the decoder. HTTP failures propagate; the poller decides what
to do with them.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from charset_normalizer import from_bytes

from .decode import decode
from .models import DecodeResult
from .rules import DEFAULT_REQUEST_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


def decode_payload(raw: bytes) -> str:
    """
    Decode a response or upload body to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - UTF-8 input with a BOM is decoded with utf-8-sig so the BOM is dropped.
    - If decode fails, fall back to UTF-8 with replacement characters.
    """
    if not raw:
        return ""

    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    if raw.startswith(b"\xef\xbb\xbf") and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    try:
        return raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        logger.warning(f"Could not decode body as {decode_used}, falling back to utf-8")
        return raw.decode("utf-8", errors="replace")


def _format_from_content_type(content_type: str) -> str:
    content_type = content_type.lower()
    if "json" in content_type:
        return "json"
    if "csv" in content_type:
        return "csv"
    return "auto"


def fetch_feed(
    url: str,
    fmt: str = "auto",
    timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    client: Optional[httpx.Client] = None,
) -> DecodeResult:
    """Fetch ``url`` and decode it as CSV or JSON."""
    if client is None:
        with httpx.Client(timeout=timeout, follow_redirects=True) as own_client:
            return fetch_feed(url, fmt=fmt, timeout=timeout, client=own_client)

    logger.info(f"Fetching feed: {url}")
    response = client.get(url)
    response.raise_for_status()

    if fmt == "auto":
        fmt = _format_from_content_type(response.headers.get("content-type", ""))

    result = decode(decode_payload(response.content), fmt=fmt)
    logger.info(
        f"Decoded {len(result.records)} records from {url} ({len(result.skipped)} skipped)"
    )
    return result
