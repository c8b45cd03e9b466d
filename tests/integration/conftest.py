"""Integration test fixtures (service checks and prerequisites).

Provides fixtures for checking if external services are available.
Integration tests are skipped if required services are not running.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from redis import Redis
from redis.asyncio import Redis as AsyncRedis

from industry_inference.api.dependencies import get_industry_classifier, get_settings
from industry_inference.cache.memory_cache import InMemoryClassificationCache
from industry_inference.classifier.factory import build_industry_classifier

REDIS_TEST_URL = "redis://localhost:6379/15"  # Test database


@pytest.fixture(scope="session")
def check_redis():
    """Check if Redis is available at localhost:6379.

    Skips tests if Redis is not reachable.
    """
    try:
        client = Redis.from_url(REDIS_TEST_URL, socket_connect_timeout=1)
        client.ping()
        client.close()
    except Exception as e:
        pytest.skip(f"Redis not available: {e}")


@pytest_asyncio.fixture
async def real_async_redis_client(check_redis):
    """Real AsyncRedis client instance for integration tests (async).

    Uses database 15 (test database), flushed before and after each test.
    """
    client = AsyncRedis.from_url(REDIS_TEST_URL, decode_responses=True)
    await client.flushdb()

    yield client

    await client.flushdb()
    await client.aclose()


@pytest.fixture
def integration_settings(test_settings):
    """Settings for integration tests with real services."""
    test_settings.REDIS_URL = REDIS_TEST_URL
    test_settings.PROMETHEUS_ENABLED = False
    return test_settings


@pytest.fixture
def api_classifier(integration_settings):
    """Classifier over the shipped tables, AI disabled, fresh in-memory cache."""
    return build_industry_classifier(
        integration_settings, cache=InMemoryClassificationCache(ttl_seconds=3600)
    )


@pytest.fixture
def client(api_classifier, integration_settings):
    """TestClient with the classifier and settings swapped via dependency_overrides.

    Startup events are not run (no context manager), so the real singleton
    is never built.
    """
    from industry_inference.main import app

    app.dependency_overrides[get_industry_classifier] = lambda: api_classifier
    app.dependency_overrides[get_settings] = lambda: integration_settings
    yield TestClient(app)
    app.dependency_overrides.clear()
