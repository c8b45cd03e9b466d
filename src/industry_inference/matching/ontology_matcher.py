"""
Ontology matcher: substring scoring of positions and keywords per path.

A position (job title) hit is stronger evidence than a keyword hit:

    position hits: 0.80 + 0.04 * (hits - 1)
    keyword only:  0.70 + 0.05 * (hits - 1)

Both are capped at 0.95 so an ontology match never outranks an exact seed.
"""

from typing import Optional, Sequence

import structlog

from industry_inference.matching.match import OntologyMatch
from industry_inference.matching.reasoning import ontology_reasoning
from industry_inference.matching.text_utils import normalize_text
from industry_inference.models.enums import ClassificationSource
from industry_inference.taxonomy.rules import OntologyEntry

logger = structlog.get_logger(__name__)

POSITION_BASE = 0.80
POSITION_STEP = 0.04
KEYWORD_BASE = 0.70
KEYWORD_STEP = 0.05
MAX_ONTOLOGY_CONFIDENCE = 0.95


def score_hits(position_hits: int, keyword_hits: int) -> float:
    if position_hits:
        score = POSITION_BASE + POSITION_STEP * (position_hits + keyword_hits - 1)
    elif keyword_hits:
        score = KEYWORD_BASE + KEYWORD_STEP * (keyword_hits - 1)
    else:
        return 0.0
    return round(min(score, MAX_ONTOLOGY_CONFIDENCE), 4)


class OntologyMatcher:
    """Ranks every ontology entry that shares vocabulary with the input."""

    def __init__(
        self,
        entries: Sequence[OntologyEntry],
        decisive_threshold: float = 0.8,
        ambiguity_margin: float = 0.1,
    ):
        self.entries = list(entries)
        self.decisive_threshold = decisive_threshold
        self.ambiguity_margin = ambiguity_margin

    def match(self, text: str) -> list[OntologyMatch]:
        """All hits, highest confidence first (ties: more hits, then data order)."""
        normalized = normalize_text(text)
        if not normalized:
            return []

        scored: list[tuple[OntologyMatch, int]] = []
        for order, entry in enumerate(self.entries):
            positions = [p for p in entry.positions if p in normalized]
            keywords = [k for k in entry.keywords if k in normalized]
            if not positions and not keywords:
                continue
            terms = tuple(positions + keywords)
            scored.append(
                (
                    OntologyMatch(
                        path=entry.path,
                        confidence=score_hits(len(positions), len(keywords)),
                        source=ClassificationSource.ONTOLOGY,
                        reasoning=ontology_reasoning(terms, entry.path),
                        hits=len(terms),
                        position_hit=bool(positions),
                        matched_terms=terms,
                    ),
                    order,
                )
            )

        scored.sort(key=lambda item: (-item[0].confidence, -item[0].hits, item[1]))
        return [match for match, _ in scored]

    def decisive(self, matches: Sequence[OntologyMatch]) -> Optional[OntologyMatch]:
        """
        The top match when it clears the threshold with no close rival.

        A rival is a hit in a different segment within ``ambiguity_margin``
        of the top confidence. Hits in the same segment (e.g. a niche and its
        parent) reinforce rather than compete.
        """
        if not matches:
            return None
        top = matches[0]
        if top.confidence < self.decisive_threshold:
            return None

        top_segment = top.path.key[:2]
        for other in matches[1:]:
            if other.path.key[:2] == top_segment:
                continue
            if top.confidence - other.confidence < self.ambiguity_margin:
                logger.debug(
                    "Ontology match not decisive",
                    top=top.path.key,
                    rival=other.path.key,
                    top_confidence=top.confidence,
                    rival_confidence=other.confidence,
                )
                return None
        return top
