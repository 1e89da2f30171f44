"""Tests for the background cleanup scheduler."""
import logging
import threading
from datetime import datetime, timezone, timedelta

import pytest

from community_events.models.event import Event
from community_events.models.user import UserRole
from community_events.scheduler import CleanupScheduler
from tests.conftest import make_event, make_user


def _count_events(session_factory):
    session = session_factory()
    try:
        return session.query(Event).count()
    finally:
        session.close()


class TestRunOnce:

    def test_purges_yesterdays_event(self, db, session_factory):
        organizer = make_user(db, "Org", UserRole.organizer)
        past_id = make_event(db, organizer, title="Yesterday", start_offset_hours=-28, duration_hours=4).event_id
        make_event(db, organizer, title="Tomorrow")
        db.close()

        scheduler = CleanupScheduler(session_factory)
        deleted = scheduler.run_once()
        assert [s["event_id"] for s in deleted] == [past_id]
        assert _count_events(session_factory) == 1

        assert scheduler.run_once() == []

    def test_retention_keeps_recent_events(self, db, session_factory):
        organizer = make_user(db, "Org", UserRole.organizer)
        make_event(db, organizer, title="Recent", start_offset_hours=-32, duration_hours=2)
        old_id = make_event(db, organizer, title="Old", start_offset_hours=-80, duration_hours=2).event_id
        db.close()

        scheduler = CleanupScheduler(session_factory, retention=timedelta(hours=48))
        assert [s["event_id"] for s in scheduler.run_once()] == [old_id]
        assert _count_events(session_factory) == 1

    def test_uses_injected_clock(self, db, session_factory):
        organizer = make_user(db, "Org", UserRole.organizer)
        make_event(db, organizer, start_offset_hours=2, duration_hours=1)
        db.close()

        future = datetime.now(timezone.utc) + timedelta(days=1)
        scheduler = CleanupScheduler(session_factory, clock=lambda: future)
        assert len(scheduler.run_once()) == 1

    def test_failure_is_logged_not_raised(self, caplog):
        def broken_factory():
            raise RuntimeError("database unreachable")

        scheduler = CleanupScheduler(broken_factory)
        with caplog.at_level(logging.ERROR, logger="community_events.scheduler"):
            assert scheduler.run_once() == []
        assert "Event cleanup run failed" in caplog.text


class TestNextRun:

    def test_later_today(self):
        scheduler = CleanupScheduler(lambda: None, run_at_hour=3)
        now = datetime(2024, 6, 1, 2, 0, tzinfo=timezone.utc)
        assert scheduler.seconds_until_next_run(now) == 3600

    def test_exactly_at_hour_waits_a_day(self):
        scheduler = CleanupScheduler(lambda: None, run_at_hour=3)
        now = datetime(2024, 6, 1, 3, 0, tzinfo=timezone.utc)
        assert scheduler.seconds_until_next_run(now) == 24 * 3600

    def test_local_zone_across_dst(self):
        """New York springs forward on 2024-03-10; 03:00 EDT is 07:00 UTC."""
        scheduler = CleanupScheduler(lambda: None, run_at_hour=3, tz_name="America/New_York")
        now = datetime(2024, 3, 9, 12, 0, tzinfo=timezone.utc)
        assert scheduler.seconds_until_next_run(now) == 19 * 3600

    def test_invalid_hour(self):
        with pytest.raises(ValueError):
            CleanupScheduler(lambda: None, run_at_hour=24)


class TestLoop:

    def test_start_runs_immediately_and_repeats(self, monkeypatch):
        scheduler = CleanupScheduler(lambda: None)
        runs = []
        repeated = threading.Event()

        def fake_run_once():
            runs.append(1)
            if len(runs) >= 2:
                repeated.set()
            return []

        monkeypatch.setattr(scheduler, "run_once", fake_run_once)
        monkeypatch.setattr(scheduler, "seconds_until_next_run", lambda now=None: 0.01)

        scheduler.start()
        try:
            assert scheduler.running
            assert repeated.wait(5)
        finally:
            scheduler.stop()
        assert not scheduler.running

    def test_stop_interrupts_wait(self, monkeypatch):
        scheduler = CleanupScheduler(lambda: None)
        monkeypatch.setattr(scheduler, "run_once", lambda: [])
        monkeypatch.setattr(scheduler, "seconds_until_next_run", lambda now=None: 3600)

        scheduler.start()
        thread = scheduler._thread
        scheduler.stop(timeout=5)
        assert not thread.is_alive()
