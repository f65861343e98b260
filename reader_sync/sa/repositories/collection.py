# reader_sync/sa/repositories/collection.py
from datetime import date
from typing import Optional
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload
from reader_sync.sa.models import DailyCollection

class CollectionRepository:
    """Repository for DailyCollection entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_date(self, day: date) -> Optional[DailyCollection]:
        """Get the collection for a calendar date with its books loaded.

        Args:
            day: The collection date

        Returns:
            The DailyCollection if found, None otherwise
        """
        return self.session.scalar(
            select(DailyCollection)
            .options(selectinload(DailyCollection.books))
            .filter(DailyCollection.date == day)
        )

    def get_latest(self) -> Optional[DailyCollection]:
        """Get the most recent collection, if any"""
        return self.session.scalar(
            select(DailyCollection)
            .options(selectinload(DailyCollection.books))
            .order_by(DailyCollection.date.desc())
            .limit(1)
        )

    def add(self, collection: DailyCollection) -> DailyCollection:
        self.session.add(collection)
        return collection
