"""
Industry classification data models.

Taxonomy nodes, classification context, candidates, the classification
response returned to callers, the cached form of a response, and the
user-facing persisted shape (UserIndustryData).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from industry_inference.models.enums import ClassificationSource


class IndustryLevel(BaseModel):
    """
    One taxonomy node (category, segment, or niche).

    Immutable reference data: nodes come from static tables and are never
    mutated at runtime.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Stable node identifier (e.g. 'pe_vc')")
    label: str = Field(..., min_length=1, description="Chinese display label")


class ClassificationContext(BaseModel):
    """
    Optional context narrowing a classification request.

    Accepts both snake_case and the camelCase keys sent by web clients.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    occupation_id: Optional[str] = Field(
        default=None,
        alias="occupationId",
        description="Preset occupation chosen by the user, if any",
    )
    locked_category_id: Optional[str] = Field(
        default=None,
        alias="lockedCategoryId",
        description="Category the result must stay within",
    )
    source: Optional[str] = Field(
        default=None, description="Calling surface (e.g. 'onboarding', 'edit_profile')"
    )


class ClassificationCandidate(BaseModel):
    """
    One plausible classification offered for an ambiguous input.

    Presentation only: candidates are never cached or persisted.
    """

    category: IndustryLevel
    segment: IndustryLevel
    niche: Optional[IndustryLevel] = None
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str = Field(..., min_length=1)
    occupation_name: Optional[str] = None


class IndustryClassificationResponse(BaseModel):
    """
    Result of ``classify_industry``.

    category and segment are always populated, including for fallback
    results. candidates is present only for ambiguous inputs.
    """

    category: IndustryLevel
    segment: IndustryLevel
    niche: Optional[IndustryLevel] = None
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str = ""
    source: ClassificationSource
    processing_time_ms: float = Field(default=0.0, ge=0.0)
    raw_input: str = ""
    normalized_input: str = ""
    candidates: Optional[list[ClassificationCandidate]] = None
    from_cache: bool = False

    @property
    def is_ambiguous(self) -> bool:
        return bool(self.candidates)


class CachedClassification(BaseModel):
    """Cached form of a decisive classification, keyed by cache fingerprint."""

    category: IndustryLevel
    segment: IndustryLevel
    niche: Optional[IndustryLevel] = None
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str = ""
    source: ClassificationSource
    raw_input: str
    normalized_input: str

    @classmethod
    def from_response(cls, response: IndustryClassificationResponse) -> "CachedClassification":
        return cls(
            category=response.category,
            segment=response.segment,
            niche=response.niche,
            confidence=response.confidence,
            reasoning=response.reasoning,
            source=response.source,
            raw_input=response.raw_input,
            normalized_input=response.normalized_input,
        )

    def to_response(self, processing_time_ms: float = 0.0) -> IndustryClassificationResponse:
        return IndustryClassificationResponse(
            category=self.category,
            segment=self.segment,
            niche=self.niche,
            confidence=self.confidence,
            reasoning=self.reasoning,
            source=self.source,
            processing_time_ms=processing_time_ms,
            raw_input=self.raw_input,
            normalized_input=self.normalized_input,
            from_cache=True,
        )


class UserIndustryData(BaseModel):
    """
    Classification result as persisted on the user record.

    Confidence is an integer percentage (0-100), unlike the [0, 1] scale used
    inside the pipeline.
    """

    raw: str = Field(..., description="Verbatim user input")
    normalized: str = Field(..., description="Cleaned input")
    category: IndustryLevel
    segment: IndustryLevel
    niche: Optional[IndustryLevel] = None
    confidence: int = Field(..., ge=0, le=100)
    source: ClassificationSource
    updated_at: Optional[datetime] = None

    @classmethod
    def from_classification(
        cls,
        response: IndustryClassificationResponse,
        updated_at: Optional[datetime] = None,
    ) -> "UserIndustryData":
        return cls(
            raw=response.raw_input,
            normalized=response.normalized_input or response.raw_input,
            category=response.category,
            segment=response.segment,
            niche=response.niche,
            confidence=round(response.confidence * 100),
            source=response.source,
            updated_at=updated_at,
        )
