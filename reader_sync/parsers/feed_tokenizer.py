# reader_sync/parsers/feed_tokenizer.py
"""Event-driven tokenizer for the daily RSS 2.0 feed.

Parsing runs through an lxml parser target: ``start``/``data``/``end``
callbacks accumulate the title, link and description of the current
``<item>``, and every finished item becomes a :class:`FeedItem`.

The outcome of one parse is a one-shot future. It is resolved exactly once,
with the item list when the document ends or with :class:`MalformedBatch`
when lxml reports a structural error. Items collected before an error are
discarded. Resolving the future a second time raises ``InvalidStateError``.
"""
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Dict, List, Optional
from urllib.parse import urlparse

from lxml import etree

from reader_sync.errors import MalformedBatch
from reader_sync.utils.logging import get_logger

logger = get_logger(__name__)

ITEM_TAG = 'item'
FIELD_TAGS = ('title', 'link', 'description')


@dataclass(frozen=True)
class FeedItem:
    title: str
    link: str
    description: str


def is_valid_url(value: str) -> bool:
    """True for absolute URLs with a scheme and a host"""
    if not value or any(char.isspace() for char in value):
        return False
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc)


class FeedItemTarget:
    """lxml parser target that collects RSS items."""

    def __init__(self):
        self.items: List[FeedItem] = []
        self._in_item = False
        self._field: Optional[str] = None
        self._buffers: Dict[str, List[str]] = {}

    def start(self, tag, attrib):
        if tag == ITEM_TAG:
            self._in_item = True
            self._field = None
            self._buffers = {name: [] for name in FIELD_TAGS}
        elif self._in_item and tag in FIELD_TAGS:
            self._field = tag

    def data(self, data):
        # Character data can arrive in several chunks for one element
        if self._in_item and self._field is not None:
            self._buffers[self._field].append(data)

    def end(self, tag):
        if not self._in_item:
            return
        if tag == ITEM_TAG:
            self._in_item = False
            self._field = None
            self._finish_item()
        elif tag == self._field:
            self._field = None

    def close(self):
        return self.items

    def _finish_item(self) -> None:
        title, link, description = (
            ''.join(self._buffers[name]).strip() for name in FIELD_TAGS
        )
        if not is_valid_url(link):
            logger.warning(f"Dropping feed item with invalid link {link!r}: {title}")
            return
        self.items.append(FeedItem(title=title, link=link, description=description))


def tokenize_feed(data: bytes) -> List[FeedItem]:
    """
    Split an RSS document into feed items.

    Args:
        data: Raw XML bytes as downloaded

    Returns:
        Items in document order, minus those with an invalid link

    Raises:
        MalformedBatch: If the document is not well-formed XML
    """
    outcome: Future = Future()
    target = FeedItemTarget()
    parser = etree.XMLParser(target=target, resolve_entities=False, no_network=True)

    if not data or not data.strip():
        outcome.set_exception(MalformedBatch("document is empty"))
        return outcome.result()

    try:
        etree.fromstring(data, parser)
    except etree.XMLSyntaxError as exc:
        logger.error(f"Fatal XML parse error: {exc}")
        outcome.set_exception(MalformedBatch(str(exc)))
    else:
        logger.debug(f"XML parse finished with {len(target.items)} items")
        outcome.set_result(list(target.items))

    return outcome.result()
