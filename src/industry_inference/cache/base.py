"""
Abstract classification cache.

The cache is an optimization only. Public methods never raise: backend
failures are logged, counted, and reported as a miss (``get``) or a no-op
(``set``/``clear``). Backends implement the underscored hooks and may raise
freely.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Optional

import structlog

from industry_inference.models.industry_models import CachedClassification
from industry_inference.monitoring.metrics import cache_operations_total

logger = structlog.get_logger(__name__)

DEFAULT_TTL_SECONDS = 3600


class CacheUnavailable(Exception):
    """Raised by backends when the underlying store cannot be reached."""


@dataclass
class CacheStats:
    backend: str
    size: Optional[int]
    ttl_seconds: int
    hits: int
    misses: int
    sets: int
    errors: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class ClassificationCache(ABC):
    """
    Template for classification cache backends.

    Counters (hits, misses, sets, errors) are per instance and only used
    for observability.
    """

    backend_name = "base"

    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self.ttl_seconds = ttl_seconds
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._errors = 0

    async def get(self, key: str) -> Optional[CachedClassification]:
        """Cached value for ``key``; None on miss, expiry or any failure."""
        try:
            value = await self._get(key)
        except Exception as e:
            self._record_error("get", e)
            return None

        if value is None:
            self._misses += 1
            cache_operations_total.labels(operation="get", result="miss").inc()
            return None

        self._hits += 1
        cache_operations_total.labels(operation="get", result="hit").inc()
        return value

    async def set(self, key: str, value: CachedClassification) -> None:
        """Store ``value`` with the configured TTL, replacing any previous entry."""
        try:
            await self._set(key, value)
        except Exception as e:
            self._record_error("set", e)
            return
        self._sets += 1
        cache_operations_total.labels(operation="set", result="ok").inc()

    async def clear(self) -> int:
        """Drop every entry; returns how many were removed (0 on failure)."""
        try:
            removed = await self._clear()
        except Exception as e:
            self._record_error("clear", e)
            return 0
        cache_operations_total.labels(operation="clear", result="ok").inc()
        logger.info("Cache cleared", backend=self.backend_name, removed=removed)
        return removed

    async def stats(self) -> CacheStats:
        try:
            size: Optional[int] = await self._size()
        except Exception as e:
            self._record_error("stats", e)
            size = None
        return CacheStats(
            backend=self.backend_name,
            size=size,
            ttl_seconds=self.ttl_seconds,
            hits=self._hits,
            misses=self._misses,
            sets=self._sets,
            errors=self._errors,
        )

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        logger.debug("Closing cache", backend=self.backend_name)

    def _record_error(self, operation: str, error: Exception) -> None:
        self._errors += 1
        cache_operations_total.labels(operation=operation, result="error").inc()
        logger.warning(
            "Cache operation failed, continuing without cache",
            backend=self.backend_name,
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
        )

    @abstractmethod
    async def _get(self, key: str) -> Optional[CachedClassification]:
        pass

    @abstractmethod
    async def _set(self, key: str, value: CachedClassification) -> None:
        pass

    @abstractmethod
    async def _clear(self) -> int:
        pass

    @abstractmethod
    async def _size(self) -> int:
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(ttl={self.ttl_seconds}s)"
