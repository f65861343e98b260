from .book import BookRepository
from .collection import CollectionRepository

__all__ = ['BookRepository', 'CollectionRepository']
