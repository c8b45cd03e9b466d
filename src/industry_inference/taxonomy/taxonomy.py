"""
Three-level industry taxonomy (category -> segment -> niche).

Loaded once from ``industry_taxonomy.json`` and treated as immutable
reference data. Every other table (seed rules, ontology, ambiguity lexicon)
and every AI answer is resolved against this taxonomy.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import structlog

from industry_inference.models.industry_models import IndustryLevel

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TaxonomyPath:
    """A resolved (category, segment, optional niche) triple."""

    category: IndustryLevel
    segment: IndustryLevel
    niche: Optional[IndustryLevel] = None

    @property
    def key(self) -> tuple[str, str, Optional[str]]:
        return (self.category.id, self.segment.id, self.niche.id if self.niche else None)

    @property
    def label(self) -> str:
        parts = [self.category.label, self.segment.label]
        if self.niche:
            parts.append(self.niche.label)
        return " / ".join(parts)

    def without_niche(self) -> "TaxonomyPath":
        return TaxonomyPath(category=self.category, segment=self.segment)


class IndustryTaxonomy:
    """
    Lookup structure over the taxonomy tree.

    Categories and segments keep their file order, which is also the order
    exposed to prompts and the ``/taxonomy`` endpoint.
    """

    def __init__(self, data: dict[str, Any]):
        self._categories: dict[str, IndustryLevel] = {}
        self._segments: dict[str, dict[str, IndustryLevel]] = {}
        self._niches: dict[tuple[str, str], dict[str, IndustryLevel]] = {}

        for category in data.get("categories", []):
            category_id = category["id"]
            self._categories[category_id] = IndustryLevel(id=category_id, label=category["label"])
            self._segments[category_id] = {}
            for segment in category.get("segments", []):
                segment_id = segment["id"]
                self._segments[category_id][segment_id] = IndustryLevel(
                    id=segment_id, label=segment["label"]
                )
                self._niches[(category_id, segment_id)] = {
                    niche["id"]: IndustryLevel(id=niche["id"], label=niche["label"])
                    for niche in segment.get("niches", [])
                }

        fallback = data.get("fallback", {})
        resolved = self.resolve_path(fallback.get("category", ""), fallback.get("segment", ""))
        if resolved is None:
            raise ValueError(f"Taxonomy fallback node does not resolve: {fallback!r}")
        self._fallback = resolved

        logger.info(
            "Taxonomy loaded",
            categories=len(self._categories),
            segments=sum(len(s) for s in self._segments.values()),
            niches=sum(len(n) for n in self._niches.values()),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "IndustryTaxonomy":
        with open(path, "r", encoding="utf-8") as f:
            return cls(json.load(f))

    @property
    def fallback_path(self) -> TaxonomyPath:
        """Generic node used when nothing else resolves."""
        return self._fallback

    @property
    def category_ids(self) -> list[str]:
        return list(self._categories)

    def find_category(self, category_id: Optional[str]) -> Optional[IndustryLevel]:
        if not category_id:
            return None
        return self._categories.get(category_id)

    def find_segment(self, category_id: Optional[str], segment_id: Optional[str]) -> Optional[IndustryLevel]:
        if not category_id or not segment_id:
            return None
        return self._segments.get(category_id, {}).get(segment_id)

    def find_niche(
        self,
        category_id: Optional[str],
        segment_id: Optional[str],
        niche_id: Optional[str],
    ) -> Optional[IndustryLevel]:
        if not category_id or not segment_id or not niche_id:
            return None
        return self._niches.get((category_id, segment_id), {}).get(niche_id)

    def resolve_path(
        self,
        category_id: Optional[str],
        segment_id: Optional[str],
        niche_id: Optional[str] = None,
    ) -> Optional[TaxonomyPath]:
        """
        Resolve ids into a TaxonomyPath.

        Returns None when the category or segment is unknown, or when a niche
        id is given but does not exist under that segment.
        """
        category = self.find_category(category_id)
        segment = self.find_segment(category_id, segment_id)
        if category is None or segment is None:
            return None

        niche = None
        if niche_id:
            niche = self.find_niche(category_id, segment_id, niche_id)
            if niche is None:
                return None

        return TaxonomyPath(category=category, segment=segment, niche=niche)

    def first_segment_path(self, category_id: str) -> Optional[TaxonomyPath]:
        """Path to the first segment of a category, used for locked-category fallbacks."""
        category = self.find_category(category_id)
        segments = self._segments.get(category_id)
        if category is None or not segments:
            return None
        return TaxonomyPath(category=category, segment=next(iter(segments.values())))

    def segment_ids(self, category_id: str) -> list[str]:
        return list(self._segments.get(category_id, {}))

    def niche_ids(self, category_id: str, segment_id: str) -> list[str]:
        return list(self._niches.get((category_id, segment_id), {}))

    def tree(self, include_niches: bool = True) -> list[dict[str, Any]]:
        """Nested dict view for API responses and prompt rendering."""
        result = []
        for category_id, category in self._categories.items():
            segments = []
            for segment_id, segment in self._segments[category_id].items():
                node: dict[str, Any] = {"id": segment.id, "label": segment.label}
                if include_niches:
                    node["niches"] = [
                        {"id": niche.id, "label": niche.label}
                        for niche in self._niches[(category_id, segment_id)].values()
                    ]
                segments.append(node)
            result.append({"id": category.id, "label": category.label, "segments": segments})
        return result
