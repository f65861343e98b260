# reader_sync/resolvers/book_normalizer.py
"""Turns raw catalog rows and feed items into book candidates.

Every function here is pure: no store access and no network. Catalog rows
are filtered to English "Text" entries; feed items are accepted as they are.
"""
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import List, NamedTuple, Optional
from urllib.parse import urlparse

from reader_sync.errors import EligibilityLost, RowRejected
from reader_sync.parsers.feed_tokenizer import FeedItem
from reader_sync.resolvers.languages import language_description
from reader_sync.sa.models import Book
from reader_sync.sa.models.book import GUTENBERG_BASE_URL

CATALOG_MIN_COLUMNS = 6
ELIGIBLE_TYPE = "Text"
ELIGIBLE_LANGUAGE = "en"
UNKNOWN_AUTHOR = "unknown"
MALFORMED_ROW = "malformed row"

_NUMERIC_ID = re.compile(r'[0-9]+')


class CatalogFields(NamedTuple):
    book_id: str
    type: str
    title: str
    language: str
    authors: str


@dataclass(frozen=True)
class BookCandidate:
    """Catalog-origin fields for a book, before it touches the store"""
    id: str
    title: str
    link: str
    explicit_author: Optional[str] = None
    description_language: Optional[str] = None

    def to_book(self) -> Book:
        return Book(
            id=self.id,
            title=self.title,
            link=self.link,
            explicit_author=self.explicit_author,
            description_language=self.description_language,
            last_read_location=0.0,
            last_synced_at=datetime.now(UTC),
        )


def _strip_quotes(value: str) -> str:
    return value.replace('"', '')


def book_link(book_id: str) -> str:
    return f"{GUTENBERG_BASE_URL}/ebooks/{book_id}"


def combined_title(title: str, authors: str) -> str:
    """Legacy "Title by Author" string used by the display helpers on Book"""
    if not authors or authors.lower() == UNKNOWN_AUTHOR:
        return title
    return f"{title} by {authors}"


def parse_catalog_fields(row: List[str]) -> CatalogFields:
    """Pick the used columns out of a catalog row and strip their quotes.

    Raises:
        RowRejected: If the row has fewer than six columns or no id
    """
    if len(row) < CATALOG_MIN_COLUMNS:
        raise RowRejected(MALFORMED_ROW)
    book_id = _strip_quotes(row[0]).strip()
    if not book_id:
        raise RowRejected(MALFORMED_ROW)
    return CatalogFields(
        book_id=book_id,
        type=_strip_quotes(row[1]),
        title=_strip_quotes(row[3]),
        language=_strip_quotes(row[4]),
        authors=_strip_quotes(row[5]),
    )


def eligibility_failure(fields: CatalogFields) -> Optional[str]:
    """Reason a row fails the Text/English filter, or None when it passes"""
    if fields.type != ELIGIBLE_TYPE:
        return f"type is {fields.type!r}, not {ELIGIBLE_TYPE!r}"
    if fields.language.lower() != ELIGIBLE_LANGUAGE:
        return f"language is {fields.language!r}, not {ELIGIBLE_LANGUAGE!r}"
    return None


def catalog_row_id(row: List[str]) -> str:
    """Book id of a catalog row without running the eligibility filter."""
    return parse_catalog_fields(row).book_id


def normalize_catalog_row(row: List[str]) -> BookCandidate:
    """
    Build a candidate from one catalog row.

    Args:
        row: Tokenized CSV row (id, type, unused, title, language, authors)

    Returns:
        BookCandidate for an English "Text" entry

    Raises:
        RowRejected: If the row is too short or fails the Text/English filter
    """
    fields = parse_catalog_fields(row)
    failure = eligibility_failure(fields)
    if failure:
        raise RowRejected(failure)

    return BookCandidate(
        id=fields.book_id,
        title=combined_title(fields.title, fields.authors),
        link=book_link(fields.book_id),
        explicit_author=fields.authors or None,
        description_language=language_description(fields.language),
    )


def apply_catalog_row(book: Book, row: List[str]) -> Book:
    """
    Refresh the catalog-origin fields of an existing book from a catalog row.

    Only title, link, language description and explicit author change. Reading
    position and local file names belong to the reader and are left alone.

    Args:
        book: Book already in the store
        row: Tokenized CSV row for the same id

    Returns:
        The same Book instance, updated in place

    Raises:
        RowRejected: If the row is too short
        EligibilityLost: If the row no longer passes the Text/English filter
    """
    fields = parse_catalog_fields(row)
    failure = eligibility_failure(fields)
    if failure:
        raise EligibilityLost(book.id, failure)

    book.title = combined_title(fields.title, fields.authors)
    book.link = book_link(book.id)
    book.description_language = language_description(fields.language)
    book.explicit_author = fields.authors or None
    book.last_synced_at = datetime.now(UTC)
    return book


def derive_book_id(link: str) -> str:
    """Catalog id from the last path segment of a book link.

    "https://www.gutenberg.org/ebooks/12345" gives "12345". Anything that is
    not a non-negative integer gives a freshly generated identifier.
    """
    path = urlparse(link).path.rstrip('/')
    segment = path.rsplit('/', 1)[-1]
    if _NUMERIC_ID.fullmatch(segment):
        return str(int(segment))
    return str(uuid.uuid4())


def normalize_feed_item(item: FeedItem) -> BookCandidate:
    """Build a candidate from a daily feed item. Feed items are never filtered."""
    return BookCandidate(
        id=derive_book_id(item.link),
        title=item.title,
        link=item.link,
        description_language=item.description,
    )
