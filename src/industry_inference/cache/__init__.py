"""
Classification cache layer.

- keys.py: generate_cache_key fingerprint
- base.py: ClassificationCache template (never raises), CacheStats
- memory_cache.py: in-process TTL/LRU backend
- redis_cache.py: Redis SETEX backend
- redis_client.py: shared async connection pool
"""

from industry_inference.cache.base import CacheStats, CacheUnavailable, ClassificationCache
from industry_inference.cache.keys import generate_cache_key
from industry_inference.cache.memory_cache import InMemoryClassificationCache
from industry_inference.cache.redis_cache import RedisClassificationCache

__all__ = [
    "CacheStats",
    "CacheUnavailable",
    "ClassificationCache",
    "InMemoryClassificationCache",
    "RedisClassificationCache",
    "generate_cache_key",
]
