"""Server-side log feed refreshed periodically by a background scheduler."""

import logging
import threading
from datetime import datetime, timezone

from apscheduler.schedulers.background import BackgroundScheduler

from bucket_console.envelope import utc_now_iso
from bucket_console.errors import PollInProgressError, QueueError
from bucket_console.filters import filter_entries

logger = logging.getLogger(__name__)


class LogFeed:
    """Holds the latest display list. Each successful poll replaces it wholesale."""

    def __init__(self, poller):
        self._poller = poller
        self._lock = threading.Lock()
        self._entries: tuple = ()
        self._last_polled_at: str | None = None
        self._last_error: str | None = None

    def refresh(self) -> bool:
        """Run one poll cycle. Returns True if the display list was replaced.

        Failures are recorded on the feed and never raised, so the scheduler
        keeps running.
        """
        try:
            entries = tuple(self._poller.poll())
        except PollInProgressError:
            logger.debug("Skipping feed refresh, a poll is already running")
            return False
        except QueueError as exc:
            logger.error("Feed refresh failed: %s", exc)
            with self._lock:
                self._last_error = f"Failed to fetch logs: {exc}"
                self._last_polled_at = utc_now_iso()
            return False

        with self._lock:
            self._entries = entries
            self._last_error = None
            self._last_polled_at = utc_now_iso()
        return True

    @property
    def entries(self) -> tuple:
        with self._lock:
            return self._entries

    def snapshot(self, level: str | None = None, search: str | None = None) -> dict:
        with self._lock:
            entries = self._entries
            last_polled_at = self._last_polled_at
            last_error = self._last_error
        return {
            "success": last_error is None,
            "logs": [e.to_dict() for e in filter_entries(entries, level, search)],
            "lastPolledAt": last_polled_at,
            "lastError": last_error,
        }


def start_feed_scheduler(feed: LogFeed, interval_seconds: int = 30) -> BackgroundScheduler:
    """Refresh ``feed`` now and then every ``interval_seconds`` on a background thread."""
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        feed.refresh,
        "interval",
        seconds=interval_seconds,
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now(timezone.utc),
    )
    scheduler.start()
    logger.info("Log feed scheduler started (every %ds)", interval_seconds)
    return scheduler
