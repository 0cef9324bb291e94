import logging
import threading
from contextlib import contextmanager
from typing import Dict, Optional
from uuid import UUID

from shared.core.config import settings
from shared.core.exceptions import ConflictError

logger = logging.getLogger(__name__)


class _ItemLock:
    __slots__ = ("lock", "holders")

    def __init__(self):
        self.lock = threading.Lock()
        self.holders = 0


class ItemLockRegistry:
    """Per-item mutual exclusion for ledger writes inside one process.

    Writes to different items never wait on each other. Entries are
    reference counted and dropped once no thread is using or waiting on
    them, so the registry does not grow with the number of items.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[UUID, _ItemLock] = {}

    def _checkout(self, item_id: UUID) -> _ItemLock:
        with self._guard:
            entry = self._locks.get(item_id)
            if entry is None:
                entry = self._locks[item_id] = _ItemLock()
            entry.holders += 1
            return entry

    def _checkin(self, item_id: UUID, entry: _ItemLock):
        with self._guard:
            entry.holders -= 1
            if entry.holders == 0:
                self._locks.pop(item_id, None)

    @contextmanager
    def hold(self, item_id: UUID, timeout: Optional[float] = None, blocking: bool = True):
        """Hold the item's lock for the duration of the block.

        Raises ConflictError when the lock is not obtained within
        ``timeout`` seconds, or immediately when ``blocking`` is False and
        another write is in flight.
        """
        if timeout is None:
            timeout = settings.LOCK_TIMEOUT_SECONDS
        entry = self._checkout(item_id)
        try:
            if blocking:
                acquired = entry.lock.acquire(timeout=timeout)
            else:
                acquired = entry.lock.acquire(blocking=False)
            if not acquired:
                logger.warning("Could not lock inventory item %s (blocking=%s, timeout=%ss)",
                               item_id, blocking, timeout)
                raise ConflictError(item_id)
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            self._checkin(item_id, entry)

    def is_held(self, item_id: UUID) -> bool:
        with self._guard:
            entry = self._locks.get(item_id)
            return entry is not None and entry.lock.locked()


item_locks = ItemLockRegistry()
