# tests/conftest.py
import os
import sys
import pytest
from pathlib import Path
from sqlalchemy.sql import text

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from sqlalchemy.orm import Session
from reader_sync.sa.database import Database
from reader_sync.sa.models import Book
from reader_sync.sync.store import SqlAlchemyBookStore

CATALOG_HEADER = "Text#,Type,Issued,Title,Language,Authors,Subjects,LoCC,Bookshelves"

@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory):
    """Create a temporary directory for the test database."""
    test_dir = tmp_path_factory.mktemp("test_db")
    return str(test_dir / "test_books.db")

@pytest.fixture(scope="session")
def database(test_db_path):
    """Create a test database instance"""
    db = Database(f"sqlite:///{test_db_path}")

    # Drop all tables and recreate schema
    db.drop_db()
    db.init_db()

    yield db

    db.engine.dispose()
    try:
        os.remove(test_db_path)
    except OSError:
        pass

@pytest.fixture(scope="function")
def db_session(database):
    """Create a new database session for a test"""
    session: Session = database.get_session()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture(autouse=True)
def cleanup_db(database):
    """Clean up database tables before each test"""
    with database.get_db() as session:
        session.execute(text("DELETE FROM daily_collection_book"))
        session.execute(text("DELETE FROM daily_collection"))
        session.execute(text("DELETE FROM book"))
    yield

@pytest.fixture
def fresh_session(database):
    """A second session, for reading back what a sync committed"""
    session: Session = database.get_session()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def store(db_session):
    return SqlAlchemyBookStore(db_session)

@pytest.fixture
def sample_book(db_session):
    """A stored book that a reader has already opened and downloaded."""
    book = Book(
        id="84",
        title="Frankenstein by Mary Shelley",
        explicit_author="Mary Shelley",
        description_language="Language: English",
        link="https://www.gutenberg.org/ebooks/84",
        last_read_location=0.42,
        local_file_name="84.html",
        local_cover_file_name="cover_84.jpg"
    )
    db_session.add(book)
    db_session.commit()
    return book

def make_catalog(*lines: str) -> str:
    """Catalog text with the standard header"""
    return "\n".join((CATALOG_HEADER,) + lines) + "\n"

@pytest.fixture
def catalog_text():
    return make_catalog(
        '84,Text,1993-10-01,Frankenstein,en,Mary Wollstonecraft Shelley,,,',
        '1342,Text,1998-06-01,Pride and Prejudice,en,"Austen, Jane, 1775-1817",,,',
        '2000,Text,1999-12-01,Don Quijote,es,"Cervantes Saavedra, Miguel de",,,',
        '10802,Sound,2004-01-01,Pride and Prejudice (audio),en,"Austen, Jane",,,',
        '30000,Text,2009-09-18,Anonymous Pamphlet,en,Unknown,,,',
    )

def make_feed(*items) -> bytes:
    """RSS 2.0 document with one <item> per (title, link, description) tuple"""
    body = "".join(
        f"""
    <item>
      <title>{title}</title>
      <link>{link}</link>
      <description>{description}</description>
    </item>"""
        for title, link, description in items
    )
    return f"""<?xml version="1.0" encoding="utf-8"?>
<rss version="2.0">
  <channel>
    <title>Project Gutenberg Recently Posted or Updated EBooks</title>
    <link>https://www.gutenberg.org</link>
    <description>Latest additions</description>{body}
  </channel>
</rss>
""".encode("utf-8")

@pytest.fixture
def sample_feed():
    return make_feed(
        ("The Lost Colony by Jane Doe", "https://www.gutenberg.org/ebooks/77001", "Language: English"),
        ("Poèmes choisis by Jean Martin", "https://www.gutenberg.org/ebooks/77002", "Language: French"),
    )

@pytest.fixture
def build_catalog():
    return make_catalog

@pytest.fixture
def build_feed():
    return make_feed
