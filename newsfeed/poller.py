"""
Periodic feed refresh.

One FeedPoller owns its thread, its cancellation event and the last dataset
it loaded. A failed refresh keeps the previous dataset.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from .models import DecodeResult
from .rules import DEFAULT_REFRESH_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class FeedPoller:
    def __init__(
        self,
        load: Callable[[], DecodeResult],
        interval: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")

        self.interval = interval
        self._load = load
        self._lock = threading.Lock()
        # guards the thread/event swap in start() and stop()
        self._control = threading.RLock()
        self._stop: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

        self._latest: Optional[DecodeResult] = None
        self._last_error: Optional[str] = None
        self._last_refreshed_at: Optional[datetime] = None

    @property
    def latest(self) -> Optional[DecodeResult]:
        with self._lock:
            return self._latest

    @property
    def last_error(self) -> Optional[str]:
        with self._lock:
            return self._last_error

    @property
    def last_refreshed_at(self) -> Optional[datetime]:
        with self._lock:
            return self._last_refreshed_at

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def refresh(self) -> Optional[DecodeResult]:
        """Run one load. Returns the new dataset, or None if the load failed."""
        try:
            result = self._load()
        except Exception as e:
            logger.error(f"Feed refresh failed: {e}")
            with self._lock:
                self._last_error = str(e)
            return None

        with self._lock:
            self._latest = result
            self._last_error = None
            self._last_refreshed_at = datetime.now(timezone.utc)

        logger.info(f"Feed refreshed: {len(result.records)} records ({len(result.skipped)} skipped)")
        return result

    def _run(self, stop: threading.Event) -> None:
        self.refresh()
        while not stop.wait(self.interval):
            self.refresh()

    def start(self) -> None:
        """Refresh now, then every ``interval`` seconds. Restarts if already running."""
        with self._control:
            if self._stop is not None:
                self.stop()

            stop = threading.Event()
            self._stop = stop
            self._thread = threading.Thread(
                target=self._run, args=(stop,), name="feed-poller", daemon=True
            )
            self._thread.start()
        logger.info(f"Auto-refresh started (every {self.interval / 60:g} minutes).")

    def stop(self, timeout: Optional[float] = None) -> None:
        with self._control:
            if self._stop is None:
                return

            self._stop.set()
            if self._thread is not None and self._thread is not threading.current_thread():
                self._thread.join(timeout)

            self._stop = None
            self._thread = None
        logger.info("Auto-refresh stopped.")
