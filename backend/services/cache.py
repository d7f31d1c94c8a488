"""Per-user in-memory TTL cache for transaction lists.

Expiry is evaluated lazily on read: a stale entry stays in the store until
it is overwritten by ``set`` or removed by ``invalidate``. There is no
locking; every method runs to completion on the event loop thread, so two
overlapping loads for the same user simply resolve last-write-wins.

Note: Each uvicorn worker has its own cache instance. With --workers 2,
the same user may be fetched once per worker.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30.0


@dataclass
class CacheEntry:
    data: list[dict[str, Any]]
    timestamp: float


class TransactionCache:
    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self.last_fetch: float | None = None
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._store)

    def set(self, user_id: str, transactions: list[dict[str, Any]]) -> None:
        now = self._clock()
        self._store[user_id] = CacheEntry(data=transactions, timestamp=now)
        self.last_fetch = now
        logger.debug("Cached %d transactions for %s", len(transactions), user_id)

    def get(self, user_id: str) -> list[dict[str, Any]] | None:
        entry = self._store.get(user_id)
        if entry is None:
            return None
        if self._clock() - entry.timestamp < self.ttl_seconds:
            return entry.data
        logger.debug("Cache entry for %s is stale", user_id)
        return None

    def invalidate(self, user_id: str | None = None) -> None:
        """Drop one user's entry, or every entry when called without a user."""
        if user_id is None:
            self._store.clear()
        else:
            self._store.pop(user_id, None)
        self.last_fetch = None
        logger.debug("Invalidated cache for %s", user_id or "all users")

    def clear_all(self) -> None:
        self.invalidate()

    def needs_refresh(self, user_id: str) -> bool:
        return self.get(user_id) is None
