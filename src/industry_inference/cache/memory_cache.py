"""In-process TTL cache with LRU eviction."""

import time
from collections import OrderedDict
from typing import Callable, Optional

from industry_inference.cache.base import DEFAULT_TTL_SECONDS, ClassificationCache
from industry_inference.models.industry_models import CachedClassification


class InMemoryClassificationCache(ClassificationCache):
    """
    Bounded dict cache local to one process.

    Expiry uses a monotonic clock so wall-clock jumps never resurrect or
    drop entries. Concurrent writers race on the same key; the last write
    wins, which is fine because classification is idempotent.
    """

    backend_name = "memory"

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_entries: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(ttl_seconds=ttl_seconds)
        self.max_entries = max_entries
        self._clock = clock
        self._store: OrderedDict[str, tuple[CachedClassification, float]] = OrderedDict()

    async def _get(self, key: str) -> Optional[CachedClassification]:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            self._store.pop(key, None)
            return None
        self._store.move_to_end(key)
        return value

    async def _set(self, key: str, value: CachedClassification) -> None:
        self._store[key] = (value, self._clock() + self.ttl_seconds)
        self._store.move_to_end(key)
        while len(self._store) > self.max_entries:
            self._store.popitem(last=False)

    async def _clear(self) -> int:
        removed = len(self._store)
        self._store.clear()
        return removed

    async def _size(self) -> int:
        now = self._clock()
        expired = [k for k, (_, expires_at) in self._store.items() if now >= expires_at]
        for key in expired:
            del self._store[key]
        return len(self._store)
