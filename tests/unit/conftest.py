"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without external dependencies.
"""

import json
from typing import Any, Optional
from unittest.mock import AsyncMock, Mock

import pytest

from industry_inference.cache.memory_cache import InMemoryClassificationCache
from industry_inference.classifier.factory import build_industry_classifier
from industry_inference.llm.base_client import BaseLLMClient
from industry_inference.models.llm_models import LLMGenerationResponse


def make_llm_response(content: Any, model: str = "deepseek-chat") -> LLMGenerationResponse:
    """LLMGenerationResponse wrapping ``content`` (dicts are JSON-encoded)."""
    if not isinstance(content, str):
        content = json.dumps(content, ensure_ascii=False)
    return LLMGenerationResponse(
        content=content,
        model_version=model,
        finish_reason="stop",
        prompt_tokens=300,
        completion_tokens=40,
        usage_tokens=340,
        latency_ms=120,
    )


@pytest.fixture
def llm_response():
    """Factory fixture for LLMGenerationResponse (see make_llm_response)."""
    return make_llm_response


@pytest.fixture
def mock_llm_client():
    """Mock BaseLLMClient; set ``generate.return_value`` or ``side_effect`` per test."""
    client = Mock(spec=BaseLLMClient)
    client.generate = AsyncMock(
        return_value=make_llm_response(
            {
                "category": "tech",
                "segment": "software_dev",
                "niche": "backend",
                "confidence": 0.9,
                "reasoning": "描述指向后端开发",
            }
        )
    )
    client.health_check = AsyncMock(return_value=True)
    client.close = AsyncMock()
    return client


@pytest.fixture
def mock_async_redis():
    """Mock AsyncRedis client for unit tests (async)."""
    mock = AsyncMock()
    mock.get = AsyncMock(return_value=None)
    mock.setex = AsyncMock(return_value=True)
    mock.delete = AsyncMock(return_value=1)
    mock.ping = AsyncMock(return_value=True)
    mock.aclose = AsyncMock()
    return mock


@pytest.fixture
def memory_cache() -> InMemoryClassificationCache:
    return InMemoryClassificationCache(ttl_seconds=3600)


@pytest.fixture
def build_classifier(test_settings, memory_cache):
    """Factory fixture building a classifier over the shipped tables.

    Usage:
        def test_something(build_classifier, mock_llm_client):
            classifier = build_classifier(llm_client=mock_llm_client)
    """

    def _build(llm_client: Optional[BaseLLMClient] = None, **overrides):
        settings = test_settings.model_copy(update=overrides) if overrides else test_settings
        return build_industry_classifier(settings, cache=memory_cache, llm_client=llm_client)

    return _build
