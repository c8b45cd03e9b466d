"""
Enumerations for industry classification data models.

All enums are closed sets - no values outside these sets are permitted.
"""

from enum import Enum


class ClassificationSource(str, Enum):
    """
    Tier that produced a classification.

    Ordered from most to least trusted: deterministic seed rules, ontology
    keyword matching, LLM inference, and the generic fallback.
    """

    SEED = "seed"
    ONTOLOGY = "ontology"
    AI = "ai"
    FALLBACK = "fallback"


class SeedMatchType(str, Enum):
    """How a seed rule pattern is compared against normalized input."""

    EXACT = "exact"
    CONTAINS = "contains"


class CacheBackend(str, Enum):
    """Supported classification cache backends."""

    MEMORY = "memory"
    REDIS = "redis"
