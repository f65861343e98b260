# reader_sync/utils/sync_guard.py
import threading
from contextlib import contextmanager
from typing import Dict, Iterator

CATALOG_SYNC = "catalog"
DAILY_SYNC = "daily"


class SyncGuard:
    """Single-flight lock per sync kind.

    Different kinds may run at the same time. A second caller for a kind that
    is already running is told so immediately instead of waiting.
    """

    def __init__(self):
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, kind: str) -> threading.Lock:
        with self._registry_lock:
            if kind not in self._locks:
                self._locks[kind] = threading.Lock()
            return self._locks[kind]

    def is_running(self, kind: str) -> bool:
        return self._lock_for(kind).locked()

    @contextmanager
    def hold(self, kind: str) -> Iterator[bool]:
        """Try to take the slot for kind.

        Yields:
            True if this caller owns the slot, False if a sync of this kind is
            already in progress
        """
        lock = self._lock_for(kind)
        acquired = lock.acquire(blocking=False)
        try:
            yield acquired
        finally:
            if acquired:
                lock.release()


# Shared by every service in the process
default_guard = SyncGuard()
