# reader_sync/sa/models/collection.py
import datetime
from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Table
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base

daily_collection_book = Table(
    'daily_collection_book',
    Base.metadata,
    Column('collection_date', Date, ForeignKey('daily_collection.date'), primary_key=True),
    Column('book_id', String(64), ForeignKey('book.id'), primary_key=True),
)

class DailyCollection(Base):
    """Books announced by the daily feed on a given calendar date"""
    __tablename__ = 'daily_collection'

    date: Mapped[datetime.date] = mapped_column(Date, primary_key=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.datetime.now(datetime.UTC)
    )

    # Relationships
    books = relationship('Book', secondary=daily_collection_book, back_populates='collections')

    @property
    def book_ids(self) -> set[str]:
        return {book.id for book in self.books}

    def __repr__(self) -> str:
        return f"<DailyCollection date={self.date.isoformat()} books={len(self.books)}>"
