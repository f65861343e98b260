# reader_sync/sync/store.py
from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from reader_sync.errors import CommitFailed
from reader_sync.sa.models import Book, DailyCollection
from reader_sync.sa.repositories import BookRepository, CollectionRepository


class BookStore(ABC):
    """Persistence boundary used by the sync engine.

    Nothing staged through add_book/add_collection, and no membership change
    on a fetched collection, is durable until commit() succeeds. commit() is
    all or nothing.
    """

    @abstractmethod
    def get_all_book_ids(self) -> Set[str]:
        """Ids of every stored book, without loading the books"""

    @abstractmethod
    def get_book(self, book_id: str) -> Optional[Book]:
        pass

    @abstractmethod
    def get_collection(self, day: date) -> Optional[DailyCollection]:
        pass

    @abstractmethod
    def add_book(self, book: Book) -> None:
        pass

    @abstractmethod
    def add_collection(self, collection: DailyCollection) -> None:
        pass

    @abstractmethod
    def commit(self) -> None:
        """Persist everything staged since the last commit.

        Raises:
            CommitFailed: If the store rejected the changes. Nothing is persisted.
        """

    @abstractmethod
    def rollback(self) -> None:
        pass


class SqlAlchemyBookStore(BookStore):
    """BookStore backed by one SQLAlchemy session"""

    def __init__(self, session: Session):
        self.session = session
        self.books = BookRepository(session)
        self.collections = CollectionRepository(session)

    def get_all_book_ids(self) -> Set[str]:
        return self.books.get_all_ids()

    def get_book(self, book_id: str) -> Optional[Book]:
        return self.books.get_by_id(book_id)

    def get_collection(self, day: date) -> Optional[DailyCollection]:
        return self.collections.get_by_date(day)

    def add_book(self, book: Book) -> None:
        self.books.add(book)

    def add_collection(self, collection: DailyCollection) -> None:
        self.collections.add(collection)

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise CommitFailed(f"Save failed: {e}") from e

    def rollback(self) -> None:
        self.session.rollback()
