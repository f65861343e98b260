# reader_sync/services/feed_service.py
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from reader_sync.config import Settings
from reader_sync.parsers.feed_tokenizer import tokenize_feed
from reader_sync.sa.models import DailyCollection
from reader_sync.sa.repositories import CollectionRepository
from reader_sync.sync.engine import SyncEngine, SyncResult
from reader_sync.sync.store import SqlAlchemyBookStore
from reader_sync.utils.dates import format_day, today
from reader_sync.utils.http import SourceFetcher, fetcher_for
from reader_sync.utils.logging import get_logger
from reader_sync.utils.sync_guard import DAILY_SYNC, SyncGuard, default_guard

logger = get_logger(__name__)

class FeedService:
    """Pulls the "new today" RSS feed and files its books under today's collection."""

    def __init__(
        self,
        session: Session,
        settings: Optional[Settings] = None,
        fetcher: Optional[SourceFetcher] = None,
        guard: SyncGuard = default_guard
    ):
        self.session = session
        self.settings = settings or Settings.from_env()
        self.fetcher = fetcher
        self.guard = guard
        self.store = SqlAlchemyBookStore(session)

    def refresh_daily_feed(self, url: Optional[str] = None, day: Optional[date] = None) -> SyncResult:
        """
        Fetch the daily feed and link its books to the collection for day.

        Args:
            url: Feed URL; defaults to the configured feed
            day: Collection date; defaults to today

        Returns:
            SyncResult; status is ALREADY_RUNNING if a daily sync holds the guard

        Raises:
            SourceUnavailable: If the feed could not be fetched
            MalformedBatch: If the feed is not well-formed XML
            CommitFailed: If saving the batch failed
        """
        with self.guard.hold(DAILY_SYNC) as acquired:
            if not acquired:
                logger.info("Fetch already in progress. Skipping.")
                return SyncResult.already_running()

            source = url or self.settings.feed_url
            day = day or today()

            fetcher = self.fetcher or fetcher_for(source, timeout=self.settings.http_timeout)
            items = tokenize_feed(fetcher.fetch(source))
            logger.info(f"Parsed {len(items)} feed items for {format_day(day)}")

            engine = SyncEngine(self.store, batch_size=self.settings.batch_size)
            return engine.sync_feed_items(items, day)

    def get_collection(self, day: Optional[date] = None) -> Optional[DailyCollection]:
        """Collection for day (today by default), or None if nothing was synced that day"""
        return CollectionRepository(self.session).get_by_date(day or today())

    def get_latest_collection(self) -> Optional[DailyCollection]:
        return CollectionRepository(self.session).get_latest()
