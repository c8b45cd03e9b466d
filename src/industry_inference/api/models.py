"""
API-specific request and response models for FastAPI endpoints.

These wrap the core classification models with the shapes the web
client expects (parse-industry options, classification plus persisted
user record, cache statistics).
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from industry_inference.models.industry_models import (
    ClassificationContext,
    IndustryClassificationResponse,
    UserIndustryData,
)


class ParseIndustryRequest(BaseModel):
    """Request for the lightweight parse-industry endpoint."""

    text: str = Field(
        default="",
        max_length=500,
        description="Free-text occupation description",
        examples=["做投资的"],
    )


class IndustryOption(BaseModel):
    value: str = Field(description="Category id", examples=["finance"])
    label: str = Field(description="Category display label", examples=["金融"])
    confidence: float = Field(ge=0.0, le=1.0)


class ParseIndustryResponse(BaseModel):
    """
    Category-level suggestion for a select widget.

    Both fields are omitted for blank input.
    """

    primary: Optional[IndustryOption] = None
    alternatives: Optional[list[IndustryOption]] = None


class ClassifyIndustryRequest(BaseModel):
    description: str = Field(
        default="",
        max_length=500,
        description="Free-text occupation description",
        examples=["AI工程师"],
    )
    context: Optional[ClassificationContext] = None


class ClassifyIndustryResponse(BaseModel):
    """Full classification plus the record to persist on the user."""

    classification: IndustryClassificationResponse
    user_industry: UserIndustryData


class ValidateIndustryResponse(BaseModel):
    valid: bool = True
    user_industry: UserIndustryData


class CacheStatsResponse(BaseModel):
    backend: str
    size: Optional[int] = Field(description="Entries currently stored (null if unavailable)")
    ttl_seconds: int
    hits: int
    misses: int
    sets: int
    errors: int


class CacheClearResponse(BaseModel):
    removed: int = Field(ge=0)


class TaxonomyResponse(BaseModel):
    categories: list[dict[str, Any]]
    fallback: dict[str, str]


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(
        description="Overall health status",
        examples=["healthy", "degraded", "unhealthy"],
    )
    version: str = Field(description="Service version")
    services: dict[str, str] = Field(
        description="Status of individual services",
        examples=[{"llm": "ok", "cache": "ok"}],
    )
    timestamp: datetime = Field(description="Health check timestamp (UTC)")
