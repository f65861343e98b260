# reader_sync/sync/engine.py
"""Upsert engine shared by the catalog import and the daily feed.

One call loads the set of stored book ids once, walks the records in order,
decides per record whether to skip it, insert a new book or update/link an
existing one, and commits once at the end. The id set is never re-read while
the batch runs, so callers must not run two catalog syncs against the same
store at the same time (see SyncGuard).
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Set, Union

from reader_sync.config import DEFAULT_BATCH_SIZE
from reader_sync.errors import EligibilityLost, RowRejected, SyncCancelled
from reader_sync.parsers.feed_tokenizer import FeedItem
from reader_sync.resolvers.book_normalizer import (
    BookCandidate,
    apply_catalog_row,
    catalog_row_id,
    normalize_catalog_row,
    normalize_feed_item,
)
from reader_sync.sa.models import Book, DailyCollection
from reader_sync.sync.store import BookStore
from reader_sync.utils.dates import format_day, start_of_day
from reader_sync.utils.logging import get_logger

logger = get_logger(__name__)


class SyncStatus(str, Enum):
    COMPLETED = "completed"
    ALREADY_RUNNING = "already_running"


@dataclass
class SyncResult:
    """Counters for one sync call"""
    status: SyncStatus = SyncStatus.COMPLETED
    processed: int = 0
    inserted: int = 0
    updated: int = 0
    linked: int = 0
    skipped: int = 0
    ineligible: int = 0
    collection_date: Optional[date] = None

    @classmethod
    def already_running(cls) -> "SyncResult":
        return cls(status=SyncStatus.ALREADY_RUNNING)

    @property
    def completed(self) -> bool:
        return self.status == SyncStatus.COMPLETED

    def summary(self) -> str:
        message = (
            f"Added {self.inserted} new books, updated {self.updated} existing books, "
            f"skipped {self.skipped} rows, {self.ineligible} no longer eligible."
        )
        if self.collection_date is not None:
            message += f" Linked {self.linked} books to the collection for {format_day(self.collection_date)}."
        return message


@dataclass
class _BatchState:
    known_ids: Set[str]
    result: SyncResult
    collection: Optional[DailyCollection] = None
    member_ids: Set[str] = field(default_factory=set)
    # Books inserted earlier in this batch, by id
    pending: Dict[str, Book] = field(default_factory=dict)

    def is_known(self, book_id: str) -> bool:
        return book_id in self.known_ids or book_id in self.pending


class SyncEngine:
    """Computes insert/update/link decisions for a batch and commits them once."""

    def __init__(
        self,
        store: BookStore,
        batch_size: int = DEFAULT_BATCH_SIZE,
        should_cancel: Optional[Callable[[], bool]] = None
    ):
        """
        Initialize the engine.

        Args:
            store: Persistence boundary the batch is read from and committed to
            batch_size: Number of records between cancellation checks
            should_cancel: Optional callable; when it returns True at a batch
                boundary the sync is rolled back and SyncCancelled is raised
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.store = store
        self.batch_size = batch_size
        self.should_cancel = should_cancel

    def sync_catalog_rows(
        self,
        rows: Sequence[List[str]],
        link_to: Optional[Union[date, datetime]] = None
    ) -> SyncResult:
        """
        Upsert tokenized catalog rows.

        Without link_to this is a full catalog sync: existing books get their
        catalog fields refreshed. With link_to, existing books are only linked
        into the collection for that date, never updated.

        Args:
            rows: Tokenized CSV rows, header already removed
            link_to: Optional date of the collection to link every surviving book to

        Returns:
            SyncResult with the per-row counters

        Raises:
            CommitFailed: If the final commit fails; nothing is persisted
            SyncCancelled: If should_cancel fired; nothing is persisted
        """
        day = start_of_day(link_to) if link_to is not None else None
        return self._run(rows, day, self._catalog_step)

    def sync_feed_items(self, items: Sequence[FeedItem], day: Union[date, datetime]) -> SyncResult:
        """
        Upsert daily feed items and link all of them into the collection for day.

        Raises:
            CommitFailed: If the final commit fails; nothing is persisted
            SyncCancelled: If should_cancel fired; nothing is persisted
        """
        return self._run(items, start_of_day(day), self._feed_step)

    def _run(self, records: Sequence, day: Optional[date], step: Callable) -> SyncResult:
        state = _BatchState(
            known_ids=self.store.get_all_book_ids(),
            result=SyncResult(collection_date=day),
        )
        logger.info(f"Filtering {len(records)} records against {len(state.known_ids)} existing books")

        try:
            if day is not None:
                state.collection = self._find_or_create_collection(day)
                state.member_ids = state.collection.book_ids

            for index, record in enumerate(records):
                if index % self.batch_size == 0:
                    self._check_cancelled(index)

                state.result.processed += 1
                book = step(record, state)
                if book is not None and state.collection is not None:
                    self._link(book, state)
        except Exception:
            # Nothing staged by a failed batch may reach the next commit
            self.store.rollback()
            raise

        self.store.commit()
        logger.info(f"Import success: {state.result.summary()}")
        return state.result

    def _catalog_step(self, row: List[str], state: _BatchState) -> Optional[Book]:
        try:
            book_id = catalog_row_id(row)
        except RowRejected as e:
            logger.debug(f"Rejecting row {row!r}: {e.reason}")
            state.result.skipped += 1
            return None

        if state.is_known(book_id):
            book = self._existing_book(book_id, state)
            if book is None:
                return None
            if state.collection is None:
                try:
                    apply_catalog_row(book, row)
                except EligibilityLost as e:
                    logger.info(f"Skipping update for book ID {book_id}: {e.reason}")
                    state.result.ineligible += 1
                    return None
                state.result.updated += 1
            return book

        try:
            candidate = normalize_catalog_row(row)
        except RowRejected as e:
            logger.debug(f"Skipping row for book ID {book_id}: {e.reason}")
            state.result.skipped += 1
            return None
        return self._insert(candidate, state)

    def _feed_step(self, item: FeedItem, state: _BatchState) -> Optional[Book]:
        candidate = normalize_feed_item(item)
        if state.is_known(candidate.id):
            return self._existing_book(candidate.id, state)
        return self._insert(candidate, state)

    def _existing_book(self, book_id: str, state: _BatchState) -> Optional[Book]:
        if book_id in state.pending:
            return state.pending[book_id]
        book = self.store.get_book(book_id)
        if book is None:
            logger.warning(f"Book ID {book_id} found in existing IDs but failed to fetch. Skipping.")
            state.result.skipped += 1
        return book

    def _insert(self, candidate: BookCandidate, state: _BatchState) -> Book:
        book = candidate.to_book()
        self.store.add_book(book)
        state.pending[book.id] = book
        state.result.inserted += 1
        return book

    def _link(self, book: Book, state: _BatchState) -> None:
        # Membership is by id so a re-fetched instance of a linked book is not added twice
        if book.id in state.member_ids:
            return
        state.collection.books.append(book)
        state.member_ids.add(book.id)
        state.result.linked += 1

    def _find_or_create_collection(self, day: date) -> DailyCollection:
        collection = self.store.get_collection(day)
        if collection is None:
            collection = DailyCollection(date=day)
            self.store.add_collection(collection)
            logger.info(f"Created collection for {format_day(day)}")
        return collection

    def _check_cancelled(self, index: int) -> None:
        if self.should_cancel is not None and self.should_cancel():
            logger.warning(f"Sync cancelled after {index} records; nothing was saved")
            raise SyncCancelled(f"Sync cancelled after {index} records")
