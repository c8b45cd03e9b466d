"""
Ambiguity layer.

Decides whether local evidence is strong enough to commit to a single
answer, or whether the caller should be offered ranked candidates. Inputs
listed in the ambiguity lexicon (``AI``, ``工程师``, ``做投资的`` ...) are
never committed to, whatever the other tiers say.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

import structlog

from industry_inference.matching.match import LocalMatch
from industry_inference.matching.text_utils import normalize_text
from industry_inference.models.industry_models import ClassificationCandidate
from industry_inference.taxonomy.rules import AmbiguousTerm

logger = structlog.get_logger(__name__)


@dataclass
class AmbiguityAssessment:
    """Outcome of the ambiguity layer for one input."""

    decisive: Optional[LocalMatch] = None
    candidates: list[ClassificationCandidate] = field(default_factory=list)
    known_ambiguous: bool = False

    @property
    def is_ambiguous(self) -> bool:
        return self.decisive is None and bool(self.candidates)


def _candidate_key(candidate: ClassificationCandidate) -> tuple:
    return (
        candidate.category.id,
        candidate.segment.id,
        candidate.niche.id if candidate.niche else None,
    )


class AmbiguityResolver:
    def __init__(
        self,
        lexicon: Sequence[AmbiguousTerm],
        decisive_threshold: float = 0.8,
        ambiguity_margin: float = 0.1,
        max_candidates: int = 5,
    ):
        self.decisive_threshold = decisive_threshold
        self.ambiguity_margin = ambiguity_margin
        self.max_candidates = max_candidates

        self._lexicon: dict[str, AmbiguousTerm] = {}
        for entry in lexicon:
            for term in entry.terms:
                self._lexicon.setdefault(term, entry)

    def is_known_ambiguous(self, text: str) -> bool:
        return normalize_text(text) in self._lexicon

    def lexicon_candidates(
        self, text: str, locked_category_id: Optional[str] = None
    ) -> list[ClassificationCandidate]:
        entry = self._lexicon.get(normalize_text(text))
        if entry is None:
            return []
        return self.rank_candidates(entry.candidates, locked_category_id)

    def rank_candidates(
        self,
        candidates: Iterable[ClassificationCandidate],
        locked_category_id: Optional[str] = None,
    ) -> list[ClassificationCandidate]:
        """Filter to the locked category, dedupe by path, sort desc, cap."""
        best: dict[tuple, ClassificationCandidate] = {}
        for candidate in candidates:
            if locked_category_id and candidate.category.id != locked_category_id:
                continue
            key = _candidate_key(candidate)
            current = best.get(key)
            if current is None or candidate.confidence > current.confidence:
                best[key] = candidate

        ranked = sorted(best.values(), key=lambda c: c.confidence, reverse=True)
        return ranked[: self.max_candidates]

    def assess(
        self,
        text: str,
        matches: Sequence[LocalMatch],
        locked_category_id: Optional[str] = None,
    ) -> AmbiguityAssessment:
        """
        Combine lexicon knowledge with the local matches for ``text``.

        Args:
            text: Raw or normalized user input
            matches: Seed and ontology matches gathered so far (any order)
            locked_category_id: When set, anything outside it is discarded

        Returns:
            AmbiguityAssessment with either a decisive match, ranked
            candidates, or neither
        """
        if self.is_known_ambiguous(text):
            candidates = self.lexicon_candidates(text, locked_category_id)
            logger.info(
                "Input is known ambiguous",
                input=normalize_text(text),
                candidates=len(candidates),
            )
            return AmbiguityAssessment(candidates=candidates, known_ambiguous=True)

        in_scope = [
            m for m in matches
            if not locked_category_id or m.path.category.id == locked_category_id
        ]
        ranked = sorted(in_scope, key=lambda m: m.confidence, reverse=True)

        decisive = self._pick_decisive(ranked)
        if decisive is not None:
            return AmbiguityAssessment(decisive=decisive)

        return AmbiguityAssessment(
            candidates=self.rank_candidates((m.to_candidate() for m in ranked), locked_category_id)
        )

    def _pick_decisive(self, ranked: Sequence[LocalMatch]) -> Optional[LocalMatch]:
        if not ranked or ranked[0].confidence < self.decisive_threshold:
            return None
        top = ranked[0]
        top_segment = top.path.key[:2]
        for other in ranked[1:]:
            if other.path.key[:2] != top_segment and top.confidence - other.confidence < self.ambiguity_margin:
                return None
        return top
