"""Unit tests for the Redis cache backend (mocked client)."""

from unittest.mock import AsyncMock, MagicMock, Mock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from industry_inference.cache.redis_cache import RedisClassificationCache
from industry_inference.cache.redis_client import RedisClient
from industry_inference.config import Settings
from industry_inference.models.enums import ClassificationSource
from industry_inference.models.industry_models import CachedClassification, IndustryLevel


def cached() -> CachedClassification:
    return CachedClassification(
        category=IndustryLevel(id="finance", label="金融"),
        segment=IndustryLevel(id="pe_vc", label="PE/VC"),
        confidence=0.9,
        reasoning="匹配职业关键词「投资」",
        source=ClassificationSource.SEED,
        raw_input="投资",
        normalized_input="投资",
    )


def scan_results(*names):
    async def _scan(*args, **kwargs):
        for name in names:
            yield name

    return Mock(side_effect=_scan)


@pytest.mark.asyncio
async def test_set_uses_setex_with_prefix_and_ttl(mock_async_redis):
    cache = RedisClassificationCache(mock_async_redis, ttl_seconds=3600, key_prefix="p:")

    await cache.set("key", cached())

    name, ttl, payload = mock_async_redis.setex.call_args.args
    assert name == "p:key"
    assert ttl == 3600
    assert CachedClassification.model_validate_json(payload) == cached()


@pytest.mark.asyncio
async def test_get_decodes_entry(mock_async_redis):
    mock_async_redis.get.return_value = cached().model_dump_json()
    cache = RedisClassificationCache(mock_async_redis, key_prefix="p:")

    value = await cache.get("key")

    mock_async_redis.get.assert_awaited_once_with("p:key")
    assert value == cached()


@pytest.mark.asyncio
async def test_undecodable_entry_is_deleted_and_missed(mock_async_redis):
    mock_async_redis.get.return_value = '{"category": "broken"}'
    cache = RedisClassificationCache(mock_async_redis, key_prefix="p:")

    assert await cache.get("key") is None
    mock_async_redis.delete.assert_awaited_once_with("p:key")


@pytest.mark.asyncio
async def test_connection_errors_degrade_to_miss(mock_async_redis):
    mock_async_redis.get.side_effect = RedisConnectionError("down")
    mock_async_redis.setex.side_effect = RedisConnectionError("down")
    cache = RedisClassificationCache(mock_async_redis)

    assert await cache.get("key") is None
    await cache.set("key", cached())  # must not raise

    assert cache._errors == 2
    assert cache._sets == 0


@pytest.mark.asyncio
async def test_clear_deletes_prefixed_keys(mock_async_redis):
    mock_async_redis.scan_iter = scan_results("p:a", "p:b", "p:c")
    mock_async_redis.delete.return_value = 3
    cache = RedisClassificationCache(mock_async_redis, key_prefix="p:")

    removed = await cache.clear()

    assert removed == 3
    mock_async_redis.delete.assert_awaited_once_with("p:a", "p:b", "p:c")
    assert mock_async_redis.scan_iter.call_args.kwargs["match"] == "p:*"


@pytest.mark.asyncio
async def test_stats_counts_keys(mock_async_redis):
    mock_async_redis.scan_iter = scan_results("p:a", "p:b")
    cache = RedisClassificationCache(mock_async_redis, ttl_seconds=600, key_prefix="p:")

    stats = await cache.stats()

    assert stats.backend == "redis"
    assert stats.size == 2
    assert stats.ttl_seconds == 600


@pytest.mark.asyncio
async def test_health_check(mock_async_redis):
    cache = RedisClassificationCache(mock_async_redis)
    assert await cache.health_check() is True

    mock_async_redis.ping.side_effect = RedisConnectionError("down")
    assert await cache.health_check() is False


@pytest.fixture
def redis_settings():
    settings = MagicMock(spec=Settings)
    settings.REDIS_URL = "redis://localhost:6379/0"
    settings.REDIS_MAX_CONNECTIONS = 50
    return settings


@pytest.fixture(autouse=True)
def reset_pool():
    RedisClient._async_pool = None
    yield
    RedisClient._async_pool = None


def test_async_pool_created_once(redis_settings):
    with patch("industry_inference.cache.redis_client.AsyncConnectionPool") as mock_pool:
        mock_pool.from_url.return_value = MagicMock()

        RedisClient.get_async_client(redis_settings)
        RedisClient.get_async_client(redis_settings)

        mock_pool.from_url.assert_called_once()
        assert mock_pool.from_url.call_args.args == (redis_settings.REDIS_URL,)
        assert mock_pool.from_url.call_args.kwargs["decode_responses"] is True


@pytest.mark.asyncio
async def test_close_async_pool_disconnects(redis_settings):
    pool = MagicMock()
    pool.disconnect = AsyncMock()
    RedisClient._async_pool = pool

    await RedisClient.close_async_pool()

    pool.disconnect.assert_awaited_once()
    assert RedisClient._async_pool is None
