# reader_sync/config.py
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

DEFAULT_DATABASE_URL = "sqlite:///books.db"
DEFAULT_CATALOG_URL = "https://www.gutenberg.org/cache/epub/feeds/pg_catalog.csv"
DEFAULT_FEED_URL = "https://www.gutenberg.org/cache/epub/feeds/today.rss"
DEFAULT_SEED_PATH = str(Path(__file__).parent / "data" / "seed_catalog.csv")
DEFAULT_BATCH_SIZE = 500


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value)


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, resolved from the environment"""
    database_url: str = DEFAULT_DATABASE_URL
    catalog_url: str = DEFAULT_CATALOG_URL
    feed_url: str = DEFAULT_FEED_URL
    seed_path: str = DEFAULT_SEED_PATH
    http_timeout: Optional[float] = None
    batch_size: int = DEFAULT_BATCH_SIZE
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults.

        Recognised variables:
            DATABASE_URL: SQLAlchemy connection string
            READER_SYNC_CATALOG_URL: Remote CSV catalog
            READER_SYNC_FEED_URL: Daily RSS feed
            READER_SYNC_SEED_PATH: Bundled catalog used when no URL is given
            READER_SYNC_HTTP_TIMEOUT: Seconds; unset means no timeout
            READER_SYNC_BATCH_SIZE: Rows between cancellation checks
            READER_SYNC_LOG_LEVEL: Logging level name
        """
        return cls(
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            catalog_url=os.getenv("READER_SYNC_CATALOG_URL", DEFAULT_CATALOG_URL),
            feed_url=os.getenv("READER_SYNC_FEED_URL", DEFAULT_FEED_URL),
            seed_path=os.getenv("READER_SYNC_SEED_PATH", DEFAULT_SEED_PATH),
            http_timeout=_optional_float(os.getenv("READER_SYNC_HTTP_TIMEOUT")),
            batch_size=int(os.getenv("READER_SYNC_BATCH_SIZE", str(DEFAULT_BATCH_SIZE))),
            log_level=os.getenv("READER_SYNC_LOG_LEVEL", "INFO").upper(),
        )

    def override(self, **changes) -> "Settings":
        """Return a copy with the non-None values in changes applied"""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
