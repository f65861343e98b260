# reader_sync/services/catalog_service.py
from datetime import date
from typing import Callable, Optional

from sqlalchemy.orm import Session

from reader_sync.config import Settings
from reader_sync.errors import MalformedBatch
from reader_sync.parsers.csv_tokenizer import tokenize_csv
from reader_sync.sa.repositories import BookRepository
from reader_sync.sync.engine import SyncEngine, SyncResult
from reader_sync.sync.store import SqlAlchemyBookStore
from reader_sync.utils.http import SourceFetcher, fetcher_for
from reader_sync.utils.logging import get_logger
from reader_sync.utils.sync_guard import CATALOG_SYNC, SyncGuard, default_guard

logger = get_logger(__name__)

# The daily feed alone never gets a store anywhere near this size
INITIAL_IMPORT_THRESHOLD = 1000


def decode_catalog(data: bytes) -> str:
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise MalformedBatch(f"catalog is not valid UTF-8: {e}") from e


class CatalogService:
    """Imports the Gutenberg CSV catalog into the store."""

    def __init__(
        self,
        session: Session,
        settings: Optional[Settings] = None,
        fetcher: Optional[SourceFetcher] = None,
        guard: SyncGuard = default_guard,
        should_cancel: Optional[Callable[[], bool]] = None
    ):
        """
        Initialize the catalog service.

        Args:
            session: SQLAlchemy session the import is committed through
            settings: Configuration; read from the environment when omitted
            fetcher: Source fetcher; picked from the source scheme when omitted
            guard: Single-flight guard shared with other services
            should_cancel: Cooperative cancellation hook passed to the engine
        """
        self.session = session
        self.settings = settings or Settings.from_env()
        self.fetcher = fetcher
        self.guard = guard
        self.should_cancel = should_cancel
        self.store = SqlAlchemyBookStore(session)

    def needs_initial_import(self) -> bool:
        """True when the store holds too few books to have seen a full catalog import"""
        return BookRepository(self.session).count() < INITIAL_IMPORT_THRESHOLD

    def import_catalog(self, url: Optional[str] = None, link_to: Optional[date] = None) -> SyncResult:
        """
        Import the catalog, optionally linking every imported book to a collection.

        Args:
            url: Catalog URL or path. If None, uses the bundled seed catalog.
            link_to: Date of a collection to link processed books to. Existing
                books are then linked as they are instead of being updated.

        Returns:
            SyncResult; status is ALREADY_RUNNING if another catalog sync holds the guard

        Raises:
            SourceUnavailable: If the catalog could not be loaded
            MalformedBatch: If the catalog is not UTF-8 text
            CommitFailed: If saving the batch failed
        """
        with self.guard.hold(CATALOG_SYNC) as acquired:
            if not acquired:
                logger.info("Catalog sync already in progress. Skipping.")
                return SyncResult.already_running()

            if url:
                logger.info("Downloading catalog from web...")
                source = url
            else:
                logger.info("Loading catalog from bundled seed file...")
                source = self.settings.seed_path

            fetcher = self.fetcher or fetcher_for(source, timeout=self.settings.http_timeout)
            data = fetcher.fetch(source)

            logger.info("Parsing CSV...")
            rows = tokenize_csv(decode_catalog(data))

            engine = SyncEngine(
                self.store,
                batch_size=self.settings.batch_size,
                should_cancel=self.should_cancel
            )
            return engine.sync_catalog_rows(rows, link_to=link_to)
