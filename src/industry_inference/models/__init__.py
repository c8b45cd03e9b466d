"""
Pydantic data models for the Industry Inference Service.

Includes:
- Enums (ClassificationSource, SeedMatchType, CacheBackend)
- Industry models (IndustryLevel, ClassificationContext, ClassificationCandidate,
  IndustryClassificationResponse, CachedClassification, UserIndustryData)
- LLM models (LLMGenerationRequest, LLMGenerationResponse)
"""

from industry_inference.models.enums import CacheBackend, ClassificationSource, SeedMatchType
from industry_inference.models.industry_models import (
    CachedClassification,
    ClassificationCandidate,
    ClassificationContext,
    IndustryClassificationResponse,
    IndustryLevel,
    UserIndustryData,
)
from industry_inference.models.llm_models import LLMGenerationRequest, LLMGenerationResponse

__all__ = [
    # Enums
    "CacheBackend",
    "ClassificationSource",
    "SeedMatchType",
    # Industry models
    "CachedClassification",
    "ClassificationCandidate",
    "ClassificationContext",
    "IndustryClassificationResponse",
    "IndustryLevel",
    "UserIndustryData",
    # LLM models
    "LLMGenerationRequest",
    "LLMGenerationResponse",
]
