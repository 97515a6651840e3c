import logging
from contextlib import asynccontextmanager
from functools import partial
from typing import Optional

from dateutil import tz
from fastapi import FastAPI, File, HTTPException, Request, UploadFile

from .articles import build_views
from .config import settings
from .decode import decode
from .feed import decode_payload, fetch_feed
from .models import (
    ArticlesResponse,
    DatelineResponse,
    DecodeResponse,
    HealthResponse,
    ReportSummary,
    summarize,
)
from .poller import FeedPoller
from .timestamps import normalize_timestamp

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

UPLOAD_FORMATS = {".csv": "csv", ".json": "json"}


def display_tz():
    return tz.gettz(settings.display_timezone) or tz.UTC


def build_poller() -> Optional[FeedPoller]:
    if not settings.feed_url:
        return None
    load = partial(
        fetch_feed,
        settings.feed_url,
        fmt=settings.feed_format,
        timeout=settings.request_timeout_seconds,
    )
    return FeedPoller(load, interval=settings.refresh_interval_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    poller = build_poller()
    app.state.poller = poller
    if poller is None:
        logger.warning("NEWSFEED_FEED_URL not set; /articles is disabled")
    elif settings.auto_refresh:
        poller.start()
    try:
        yield
    finally:
        if poller is not None:
            poller.stop(timeout=5)


app = FastAPI(
    title="newsfeed",
    description="Published-sheet news feed decoding and datelines",
    version="0.1.0",
    lifespan=lifespan,
)


def _poller(request: Request) -> FeedPoller:
    poller = getattr(request.app.state, "poller", None)
    if poller is None:
        raise HTTPException(status_code=503, detail="No feed configured")
    return poller


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/decode", response_model=DecodeResponse)
async def decode_upload(file: UploadFile = File(...)):
    name = (file.filename or "").lower()
    fmt = next((f for ext, f in UPLOAD_FORMATS.items() if name.endswith(ext)), None)
    if fmt is None:
        raise HTTPException(status_code=422, detail="Only CSV or JSON files are supported")

    raw = await file.read()
    result = decode(decode_payload(raw), fmt=fmt)
    return DecodeResponse(
        summary=summarize(result),
        columns=result.columns,
        records=result.records,
        skipped=result.skipped,
    )


@app.get("/dateline", response_model=DatelineResponse)
def dateline(value: Optional[str] = None):
    return DatelineResponse(value=value, dateline=normalize_timestamp(value, tz=display_tz()))


@app.get("/articles", response_model=ArticlesResponse)
def articles(request: Request):
    poller = _poller(request)
    result = poller.latest
    if result is None:
        detail = "Feed not loaded yet"
        if poller.last_error:
            detail = f"Failed to retrieve news: {poller.last_error}"
        raise HTTPException(status_code=503, detail=detail)

    refreshed = poller.last_refreshed_at
    return ArticlesResponse(
        articles=build_views(result.records, tz=display_tz(), summary_limit=settings.summary_max_chars),
        skipped=len(result.skipped),
        last_refreshed_at=refreshed.isoformat() if refreshed else None,
        last_error=poller.last_error,
    )


@app.post("/refresh", response_model=ReportSummary)
def refresh(request: Request):
    poller = _poller(request)
    result = poller.refresh()
    if result is None:
        raise HTTPException(status_code=502, detail=f"Failed to retrieve news: {poller.last_error}")
    return summarize(result)
