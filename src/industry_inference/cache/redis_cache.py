"""Redis-backed classification cache shared across worker processes."""

from typing import Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from industry_inference.cache.base import DEFAULT_TTL_SECONDS, CacheUnavailable, ClassificationCache
from industry_inference.models.industry_models import CachedClassification

logger = structlog.get_logger(__name__)

SCAN_BATCH_SIZE = 500


class RedisClassificationCache(ClassificationCache):
    """
    Stores entries as JSON strings under ``key_prefix + key`` with SETEX.

    Expiry is delegated to Redis. ``clear`` and the size in ``stats`` walk
    the prefix with SCAN, so they are O(n) and meant for ops use only.
    """

    backend_name = "redis"

    def __init__(
        self,
        client: AsyncRedis,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        key_prefix: str = "industry:classification:",
    ):
        super().__init__(ttl_seconds=ttl_seconds)
        self._client = client
        self.key_prefix = key_prefix

    def _full_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def _get(self, key: str) -> Optional[CachedClassification]:
        try:
            raw = await self._client.get(self._full_key(key))
        except RedisError as e:
            raise CacheUnavailable(f"Redis GET failed: {e}") from e
        if raw is None:
            return None
        try:
            return CachedClassification.model_validate_json(raw)
        except PydanticValidationError:
            # Stale schema or corrupted entry: drop it and treat as a miss
            logger.warning("Discarding undecodable cache entry", key=key)
            await self._client.delete(self._full_key(key))
            return None

    async def _set(self, key: str, value: CachedClassification) -> None:
        try:
            await self._client.setex(self._full_key(key), self.ttl_seconds, value.model_dump_json())
        except RedisError as e:
            raise CacheUnavailable(f"Redis SETEX failed: {e}") from e

    async def _clear(self) -> int:
        removed = 0
        batch: list[str] = []
        try:
            async for name in self._client.scan_iter(match=f"{self.key_prefix}*", count=SCAN_BATCH_SIZE):
                batch.append(name)
                if len(batch) >= SCAN_BATCH_SIZE:
                    removed += await self._client.delete(*batch)
                    batch.clear()
            if batch:
                removed += await self._client.delete(*batch)
        except RedisError as e:
            raise CacheUnavailable(f"Redis clear failed: {e}") from e
        return removed

    async def _size(self) -> int:
        count = 0
        try:
            async for _ in self._client.scan_iter(match=f"{self.key_prefix}*", count=SCAN_BATCH_SIZE):
                count += 1
        except RedisError as e:
            raise CacheUnavailable(f"Redis SCAN failed: {e}") from e
        return count

    async def health_check(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.warning("Redis health check failed", error=str(e))
            return False

    async def close(self) -> None:
        await self._client.aclose()
        logger.debug("Redis cache client closed")
