# reader_sync/sa/models/book.py
from sqlalchemy import String, Float, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin

GUTENBERG_BASE_URL = "https://www.gutenberg.org"

LANGUAGE_TAGS = {
    "english": "🇺🇸 EN",
    "spanish": "🇪🇸 ES",
    "german": "🇩🇪 DE",
    "french": "🇫🇷 FR",
    "hungarian": "🇭🇺 HU",
    "finnish": "🇫🇮 FI",
    "italian": "🇮🇹 IT",
    "portuguese": "🇵🇹 PT",
    "dutch": "🇳🇱 NL",
    "catalan": "🇦🇩 CA",
}

class Book(Base, TimestampMixin):
    __tablename__ = 'book'

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    explicit_author: Mapped[str | None] = mapped_column(String, nullable=True)
    description_language: Mapped[str | None] = mapped_column(String, nullable=True)
    link: Mapped[str] = mapped_column(String, nullable=False)

    # Owned by the reader, never written by a sync
    last_read_location: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    local_file_name: Mapped[str | None] = mapped_column(String, nullable=True)
    local_cover_file_name: Mapped[str | None] = mapped_column(String, nullable=True)

    # Relationships
    collections = relationship('DailyCollection', secondary='daily_collection_book', back_populates='books')

    __table_args__ = (
        Index('idx_book_title', 'title'),
    )

    @property
    def display_title(self) -> str:
        """Title without the trailing "by Author" part"""
        cleaned = self.title.replace(":", "")
        return cleaned.split(" by ")[0]

    @property
    def author(self) -> str:
        if self.explicit_author:
            return self.explicit_author
        # Records from the daily feed only carry "Title by Author"
        parts = self.title.split(" : by ")
        if len(parts) > 1:
            return parts[-1]
        parts = self.title.split(" by ")
        return parts[-1] if len(parts) > 1 else "Unknown Author"

    @property
    def language(self) -> str:
        """Language name parsed out of "Language: English" style descriptions"""
        if self.description_language is None:
            return "Unknown"
        parts = self.description_language.split(": ")
        return parts[1].strip() if len(parts) > 1 else "Unknown"

    @property
    def language_tag(self) -> str:
        return LANGUAGE_TAGS.get(self.language.lower(), f"🌐 {self.language}")

    @property
    def cover_url(self) -> str:
        return f"{GUTENBERG_BASE_URL}/cache/epub/{self.id}/pg{self.id}.cover.medium.jpg"

    @property
    def remote_html_url(self) -> str:
        return f"{GUTENBERG_BASE_URL}/ebooks/{self.id}.html.images"

    @property
    def remote_epub_url(self) -> str:
        return f"{GUTENBERG_BASE_URL}/ebooks/{self.id}.epub3.images"

    def __repr__(self) -> str:
        return f"<Book id={self.id!r} title={self.title!r}>"
