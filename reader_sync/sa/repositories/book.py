# reader_sync/sa/repositories/book.py
from typing import Optional, List, Set
from sqlalchemy import select, func
from sqlalchemy.orm import Session
from ..models import Book

class BookRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, book_id: str) -> Optional[Book]:
        """Get a book by its catalog ID"""
        return self.session.get(Book, book_id)

    def get_all_ids(self) -> Set[str]:
        """Get the IDs of every stored book.

        Only the id column is selected so that loading a 70k row catalog
        does not hydrate full Book objects.

        Returns:
            Set of book IDs
        """
        return set(self.session.scalars(select(Book.id)))

    def count(self) -> int:
        """Count stored books"""
        return self.session.scalar(select(func.count()).select_from(Book)) or 0

    def search_by_title(self, query: str, limit: int = 20) -> List[Book]:
        """Search books by title.

        Args:
            query: Search query string
            limit: Maximum number of results to return

        Returns:
            List of matching Book objects ordered by title
        """
        return list(
            self.session.scalars(
                select(Book)
                .filter(Book.title.ilike(f"%{query}%"))
                .order_by(Book.title)
                .limit(limit)
            )
        )

    def add(self, book: Book) -> Book:
        """Stage a new book for insertion. Nothing is committed here."""
        self.session.add(book)
        return book
