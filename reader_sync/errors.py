# reader_sync/errors.py


class SyncError(Exception):
    """Base class for everything the sync pipeline raises"""


class SourceUnavailable(SyncError):
    """The bundled seed file is missing or the remote fetch failed"""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Source unavailable: {source} ({reason})")


class MalformedBatch(SyncError):
    """The payload could not be tokenized at all"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to parse the feed: {reason}")


class RowRejected(SyncError):
    """A single row was filtered out or is too short to use"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class EligibilityLost(SyncError):
    """A previously imported row no longer passes the catalog filter"""

    def __init__(self, book_id: str, reason: str):
        self.book_id = book_id
        self.reason = reason
        super().__init__(f"Book {book_id} is no longer eligible: {reason}")


class CommitFailed(SyncError):
    """The store refused to persist the batch"""


class SyncCancelled(SyncError):
    """The caller asked the sync to stop"""
