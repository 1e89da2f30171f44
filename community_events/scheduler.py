"""Background cleanup of completed events.

Runs once when started, then daily at a fixed local hour. Each run purges
events whose end time is before ``now - retention`` in its own session. A
failing run is logged and the loop carries on with the next one.
"""
import logging
import threading
from datetime import datetime, time, timedelta, timezone
from typing import Any, Callable, Optional

import pytz
from sqlalchemy.orm import Session

from community_events.services import event_service

logger = logging.getLogger(__name__)


class CleanupScheduler:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        run_at_hour: int = 3,
        tz_name: str = "UTC",
        retention: timedelta = timedelta(0),
        clock: Callable[[], datetime] = event_service.utcnow,
    ):
        if not 0 <= run_at_hour <= 23:
            raise ValueError(f"run_at_hour must be within 0-23, got {run_at_hour}")
        self.session_factory = session_factory
        self.run_at_hour = run_at_hour
        self.tz = pytz.timezone(tz_name)
        self.retention = retention
        self.clock = clock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def seconds_until_next_run(self, now: Optional[datetime] = None) -> float:
        """Seconds from ``now`` to the next ``run_at_hour`` in the scheduler's zone."""
        now = event_service.as_utc(now) or self.clock()
        local_now = now.astimezone(self.tz)
        day = local_now.date()
        target = self.tz.localize(datetime.combine(day, time(self.run_at_hour)))
        if target <= local_now:
            target = self.tz.localize(datetime.combine(day + timedelta(days=1), time(self.run_at_hour)))
        return (target.astimezone(timezone.utc) - now).total_seconds()

    def run_once(self) -> list[dict[str, Any]]:
        """One purge pass. Never raises; returns what was deleted ([] on failure)."""
        now = self.clock()
        cutoff = now - self.retention
        try:
            db = self.session_factory()
            try:
                deleted = event_service.purge_completed_before(db, cutoff)
            finally:
                db.close()
        except Exception:
            logger.exception("Event cleanup run failed (cutoff %s)", cutoff.isoformat())
            return []

        if not deleted:
            logger.debug("No completed events found before %s for deletion", cutoff.isoformat())
            return deleted
        logger.info("Deleted %d events completed before %s", len(deleted), cutoff.isoformat())
        for snapshot in deleted:
            logger.debug("Deleted event with id %s titled '%s'", snapshot["event_id"], snapshot["title"])
        return deleted

    def _loop(self) -> None:
        logger.info("Running initial event cleanup on startup")
        self.run_once()
        while not self._stop.is_set():
            delay = self.seconds_until_next_run()
            logger.debug("Next event cleanup in %.0f seconds", delay)
            if self._stop.wait(delay):
                break
            self.run_once()
        logger.info("Event cleanup scheduler stopped")

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="event-cleanup", daemon=True)
        self._thread.start()
        logger.info(
            "Event cleanup scheduler started (daily at %02d:00 %s, retention %s)",
            self.run_at_hour, self.tz.zone, self.retention,
        )

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
