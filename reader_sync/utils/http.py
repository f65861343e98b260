# reader_sync/utils/http.py
import requests
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse, unquote

from reader_sync.errors import SourceUnavailable
from reader_sync.utils.logging import get_logger

logger = get_logger(__name__)

class SourceFetcher(ABC):
    """Given a URL or path, returns the raw bytes behind it. One attempt, no retries."""

    @abstractmethod
    def fetch(self, source: str) -> bytes:
        pass

class HttpFetcher(SourceFetcher):
    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: Seconds passed to requests; None waits indefinitely
        """
        self.timeout = timeout

    def fetch(self, source: str) -> bytes:
        """
        Download a URL.

        Args:
            source: The URL to download

        Returns:
            The response body

        Raises:
            SourceUnavailable: On a transport error or a non-200 response
        """
        logger.info(f"Starting network fetch for {source}")
        try:
            response = requests.get(source, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Fetch failed for {source}: {e}")
            raise SourceUnavailable(source, str(e)) from e

        if response.status_code != 200:
            logger.error(f"Fetch failed for {source}: HTTP {response.status_code}")
            raise SourceUnavailable(source, f"HTTP {response.status_code}")

        logger.info(f"Network response successful, {len(response.content)} bytes")
        return response.content

class FileFetcher(SourceFetcher):
    def fetch(self, source: str) -> bytes:
        """Read a local file, given as a path or a file:// URL"""
        parsed = urlparse(source)
        path = Path(unquote(parsed.path)) if parsed.scheme == 'file' else Path(source)
        logger.info(f"Loading {path}")
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise SourceUnavailable(str(path), "file not found") from e
        except OSError as e:
            raise SourceUnavailable(str(path), str(e)) from e

def fetcher_for(source: str, timeout: Optional[float] = None) -> SourceFetcher:
    """Pick the fetcher matching the scheme of source"""
    if urlparse(source).scheme.lower() in ('http', 'https'):
        return HttpFetcher(timeout=timeout)
    return FileFetcher()
