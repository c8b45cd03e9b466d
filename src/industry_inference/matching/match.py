"""Result types produced by the local matching tiers."""

from dataclasses import dataclass
from typing import Optional

from industry_inference.models.enums import ClassificationSource
from industry_inference.models.industry_models import ClassificationCandidate
from industry_inference.taxonomy.taxonomy import TaxonomyPath


@dataclass(frozen=True)
class LocalMatch:
    """A taxonomy path proposed by a deterministic tier."""

    path: TaxonomyPath
    confidence: float
    source: ClassificationSource
    reasoning: str
    occupation_name: Optional[str] = None

    def to_candidate(self) -> ClassificationCandidate:
        return ClassificationCandidate(
            category=self.path.category,
            segment=self.path.segment,
            niche=self.path.niche,
            confidence=self.confidence,
            reasoning=self.reasoning,
            occupation_name=self.occupation_name,
        )


@dataclass(frozen=True)
class SeedMatch(LocalMatch):
    pattern: str = ""
    fuzzy_distance: int = 0

    @property
    def is_fuzzy(self) -> bool:
        return self.fuzzy_distance > 0


@dataclass(frozen=True)
class OntologyMatch(LocalMatch):
    hits: int = 0
    position_hit: bool = False
    matched_terms: tuple[str, ...] = ()
