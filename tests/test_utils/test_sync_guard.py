# tests/test_utils/test_sync_guard.py
import threading
from datetime import date, datetime
from reader_sync.config import Settings
from reader_sync.utils.dates import format_day, parse_day, start_of_day
from reader_sync.utils.sync_guard import CATALOG_SYNC, DAILY_SYNC, SyncGuard

def test_second_holder_is_turned_away():
    guard = SyncGuard()
    with guard.hold(CATALOG_SYNC) as first:
        with guard.hold(CATALOG_SYNC) as second:
            assert first is True
            assert second is False
        # The refused caller does not release the owner's slot
        assert guard.is_running(CATALOG_SYNC)
    assert not guard.is_running(CATALOG_SYNC)

def test_kinds_are_independent():
    guard = SyncGuard()
    with guard.hold(CATALOG_SYNC) as catalog_acquired:
        with guard.hold(DAILY_SYNC) as daily_acquired:
            assert catalog_acquired and daily_acquired

def test_slot_released_on_exception():
    guard = SyncGuard()
    try:
        with guard.hold(DAILY_SYNC):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert not guard.is_running(DAILY_SYNC)

def test_guard_across_threads():
    guard = SyncGuard()
    started = threading.Event()
    release = threading.Event()
    outcomes = []

    def long_sync():
        with guard.hold(CATALOG_SYNC) as acquired:
            outcomes.append(acquired)
            started.set()
            release.wait(timeout=5)

    worker = threading.Thread(target=long_sync)
    worker.start()
    started.wait(timeout=5)

    with guard.hold(CATALOG_SYNC) as acquired:
        outcomes.append(acquired)

    release.set()
    worker.join(timeout=5)
    assert outcomes == [True, False]

def test_dates():
    assert start_of_day(datetime(2026, 2, 6, 23, 59)) == date(2026, 2, 6)
    assert start_of_day(date(2026, 2, 6)) == date(2026, 2, 6)
    assert format_day(date(2026, 2, 6)) == "2026-02-06"
    assert parse_day("2026-02-06") == date(2026, 2, 6)

def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///other.db")
    monkeypatch.setenv("READER_SYNC_HTTP_TIMEOUT", "30")
    monkeypatch.setenv("READER_SYNC_BATCH_SIZE", "50")
    monkeypatch.setenv("READER_SYNC_LOG_LEVEL", "debug")
    monkeypatch.delenv("READER_SYNC_FEED_URL", raising=False)

    settings = Settings.from_env()

    assert settings.database_url == "sqlite:///other.db"
    assert settings.http_timeout == 30.0
    assert settings.batch_size == 50
    assert settings.log_level == "DEBUG"
    assert settings.feed_url.endswith("today.rss")

def test_settings_override_ignores_none():
    settings = Settings().override(database_url=None, batch_size=10)
    assert settings.database_url == Settings().database_url
    assert settings.batch_size == 10
