from .database import Database
from .models import Base, Book, DailyCollection, daily_collection_book

__all__ = [
    'Database',
    'Base',
    'Book',
    'DailyCollection',
    'daily_collection_book'
]
