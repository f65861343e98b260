# tests/test_services/test_services.py
import pytest
from datetime import date
from unittest.mock import MagicMock
from reader_sync.config import Settings
from reader_sync.errors import MalformedBatch, SourceUnavailable, SyncCancelled
from reader_sync.sa.models import Book, DailyCollection
from reader_sync.sa.repositories import BookRepository
from reader_sync.services.catalog_service import CatalogService, decode_catalog
from reader_sync.services.feed_service import FeedService
from reader_sync.sync.engine import SyncStatus
from reader_sync.utils.sync_guard import CATALOG_SYNC, DAILY_SYNC, SyncGuard

FEED_DAY = date(2026, 2, 6)

@pytest.fixture
def settings(test_db_path):
    return Settings(database_url=f"sqlite:///{test_db_path}")

@pytest.fixture
def guard():
    return SyncGuard()

def fetcher_returning(data):
    fetcher = MagicMock()
    fetcher.fetch.return_value = data
    return fetcher

def test_seed_import(db_session, settings, guard, fresh_session):
    """Test the bundled seed catalog imports its English Text rows"""
    service = CatalogService(db_session, settings=settings, guard=guard)
    result = service.import_catalog()

    assert result.status == SyncStatus.COMPLETED
    assert result.processed == 10
    assert result.inserted == 7
    assert result.skipped == 3
    ids = BookRepository(fresh_session).get_all_ids()
    assert ids == {"1", "11", "84", "1342", "2701", "74", "30000"}
    assert fresh_session.get(Book, "84").title == (
        "Frankenstein; Or, The Modern Prometheus by Shelley, Mary Wollstonecraft, 1797-1851"
    )

def test_import_from_url_uses_fetcher(db_session, settings, guard, catalog_text):
    fetcher = fetcher_returning(catalog_text.encode("utf-8"))
    service = CatalogService(db_session, settings=settings, fetcher=fetcher, guard=guard)

    result = service.import_catalog(url="https://example.org/pg_catalog.csv", link_to=FEED_DAY)

    fetcher.fetch.assert_called_once_with("https://example.org/pg_catalog.csv")
    assert result.inserted == 3
    assert result.linked == 3

def test_import_skipped_while_another_catalog_sync_runs(db_session, settings, guard, fresh_session):
    service = CatalogService(db_session, settings=settings, guard=guard)

    with guard.hold(CATALOG_SYNC) as acquired:
        assert acquired
        result = service.import_catalog()

    assert result.status == SyncStatus.ALREADY_RUNNING
    assert not result.completed
    assert BookRepository(fresh_session).count() == 0

def test_catalog_and_daily_syncs_do_not_block_each_other(db_session, settings, guard, sample_feed):
    feed_service = FeedService(db_session, settings=settings, fetcher=fetcher_returning(sample_feed), guard=guard)

    with guard.hold(CATALOG_SYNC):
        result = feed_service.refresh_daily_feed(day=FEED_DAY)

    assert result.completed
    assert not guard.is_running(DAILY_SYNC)

def test_guard_is_released_after_failure(db_session, settings, guard):
    fetcher = MagicMock()
    fetcher.fetch.side_effect = SourceUnavailable("https://example.org/pg_catalog.csv", "HTTP 503")
    service = CatalogService(db_session, settings=settings, fetcher=fetcher, guard=guard)

    with pytest.raises(SourceUnavailable):
        service.import_catalog(url="https://example.org/pg_catalog.csv")

    assert not guard.is_running(CATALOG_SYNC)

def test_missing_seed_file(db_session, settings, guard, tmp_path):
    service = CatalogService(
        db_session,
        settings=settings.override(seed_path=str(tmp_path / "missing.csv")),
        guard=guard
    )

    with pytest.raises(SourceUnavailable) as exc_info:
        service.import_catalog()
    assert exc_info.value.reason == "file not found"

def test_undecodable_catalog(db_session, settings, guard, fresh_session):
    service = CatalogService(db_session, settings=settings, fetcher=fetcher_returning(b"\xff\xfe\x00bad"), guard=guard)

    with pytest.raises(MalformedBatch):
        service.import_catalog(url="https://example.org/pg_catalog.csv")
    assert BookRepository(fresh_session).count() == 0

def test_decode_catalog():
    assert decode_catalog("Text#\n84,Text".encode("utf-8")) == "Text#\n84,Text"

def test_import_can_be_cancelled(db_session, settings, guard, fresh_session):
    service = CatalogService(db_session, settings=settings, guard=guard, should_cancel=lambda: True)

    with pytest.raises(SyncCancelled):
        service.import_catalog()
    assert BookRepository(fresh_session).count() == 0
    assert not guard.is_running(CATALOG_SYNC)

def test_needs_initial_import(db_session, settings, guard, monkeypatch):
    service = CatalogService(db_session, settings=settings, guard=guard)
    assert service.needs_initial_import()

    monkeypatch.setattr("reader_sync.services.catalog_service.INITIAL_IMPORT_THRESHOLD", 5)
    service.import_catalog()
    assert not service.needs_initial_import()

def test_refresh_daily_feed(db_session, settings, guard, sample_feed, fresh_session):
    fetcher = fetcher_returning(sample_feed)
    service = FeedService(db_session, settings=settings, fetcher=fetcher, guard=guard)

    result = service.refresh_daily_feed(day=FEED_DAY)

    fetcher.fetch.assert_called_once_with(settings.feed_url)
    assert result.inserted == 2
    assert result.linked == 2
    assert result.collection_date == FEED_DAY
    assert fresh_session.get(DailyCollection, FEED_DAY).book_ids == {"77001", "77002"}

def test_refresh_daily_feed_defaults_to_today(db_session, settings, guard, sample_feed, monkeypatch):
    monkeypatch.setattr("reader_sync.services.feed_service.today", lambda: FEED_DAY)
    service = FeedService(db_session, settings=settings, fetcher=fetcher_returning(sample_feed), guard=guard)

    result = service.refresh_daily_feed()

    assert result.collection_date == FEED_DAY
    assert service.get_collection().book_ids == {"77001", "77002"}

def test_refresh_daily_feed_skipped_while_running(db_session, settings, guard, sample_feed):
    fetcher = fetcher_returning(sample_feed)
    service = FeedService(db_session, settings=settings, fetcher=fetcher, guard=guard)

    with guard.hold(DAILY_SYNC):
        result = service.refresh_daily_feed(day=FEED_DAY)

    assert result.status == SyncStatus.ALREADY_RUNNING
    fetcher.fetch.assert_not_called()

def test_malformed_feed_leaves_store_untouched(db_session, settings, guard, fresh_session):
    broken = b"<rss><channel><item><title>Half an item</title></channel>"
    service = FeedService(db_session, settings=settings, fetcher=fetcher_returning(broken), guard=guard)

    with pytest.raises(MalformedBatch):
        service.refresh_daily_feed(day=FEED_DAY)

    assert BookRepository(fresh_session).count() == 0
    assert fresh_session.get(DailyCollection, FEED_DAY) is None

def test_feed_from_local_file(db_session, settings, guard, sample_feed, tmp_path):
    feed_file = tmp_path / "today.rss"
    feed_file.write_bytes(sample_feed)
    service = FeedService(db_session, settings=settings, guard=guard)

    result = service.refresh_daily_feed(url=str(feed_file), day=FEED_DAY)

    assert result.inserted == 2

def test_get_latest_collection(db_session, settings, guard, build_feed):
    service = FeedService(db_session, settings=settings, guard=guard)
    assert service.get_latest_collection() is None

    for day, book_id in ((date(2026, 2, 5), "1"), (FEED_DAY, "2")):
        service.fetcher = fetcher_returning(
            build_feed((f"Book {book_id}", f"https://www.gutenberg.org/ebooks/{book_id}", "Language: English"))
        )
        service.refresh_daily_feed(day=day)

    latest = service.get_latest_collection()
    assert latest.date == FEED_DAY
    assert latest.book_ids == {"2"}
