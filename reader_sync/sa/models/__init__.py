from .base import Base, TimestampMixin
from .book import Book
from .collection import DailyCollection, daily_collection_book

__all__ = [
    'Base',
    'TimestampMixin',
    'Book',
    'DailyCollection',
    'daily_collection_book'
]
