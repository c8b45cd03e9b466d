"""
Seed matcher: ordered ``pattern -> taxonomy path`` rules.

Rules are evaluated top to bottom and the first hit wins. When no rule
hits, a fuzzy pass tolerates small typos against ``exact`` patterns.
"""

from typing import Optional, Sequence

import structlog

from industry_inference.matching.match import SeedMatch
from industry_inference.matching.reasoning import fuzzy_seed_reasoning, seed_reasoning
from industry_inference.matching.text_utils import levenshtein_distance, normalize_text
from industry_inference.models.enums import ClassificationSource, SeedMatchType
from industry_inference.taxonomy.rules import SeedRule

logger = structlog.get_logger(__name__)

FUZZY_MIN_INPUT_LENGTH = 2
FUZZY_PENALTY_PER_EDIT = 0.1
# Latin abbreviations (pe, vc, hr, ipo) change meaning with one letter
FUZZY_MIN_LATIN_PATTERN_LENGTH = 4


def max_fuzzy_distance(pattern: str) -> int:
    """Allowed edits for a pattern: ``len // 4`` clamped to [1, 2]."""
    return max(1, min(2, len(pattern) // 4))


class SeedMatcher:
    """Deterministic first tier of the classification pipeline."""

    def __init__(self, rules: Sequence[SeedRule], enable_fuzzy: bool = True):
        self.rules = list(rules)
        self.enable_fuzzy = enable_fuzzy

        self._by_occupation: dict[str, SeedRule] = {}
        for rule in self.rules:
            if rule.occupation_id:
                self._by_occupation.setdefault(rule.occupation_id, rule)

    def match_occupation(self, occupation_id: Optional[str]) -> Optional[SeedMatch]:
        """Resolve a preset occupation id to the rule that carries it."""
        if not occupation_id:
            return None
        rule = self._by_occupation.get(occupation_id)
        if rule is None:
            logger.debug("Unknown occupation id", occupation_id=occupation_id)
            return None
        return self._build(rule, distance=0)

    def match(self, text: str) -> Optional[SeedMatch]:
        normalized = normalize_text(text)
        if not normalized:
            return None

        for rule in self.rules:
            if rule.matches(normalized):
                return self._build(rule, distance=0)

        if self.enable_fuzzy:
            return self._match_fuzzy(normalized)
        return None

    def _match_fuzzy(self, normalized: str) -> Optional[SeedMatch]:
        if len(normalized) < FUZZY_MIN_INPUT_LENGTH:
            return None

        best: Optional[SeedMatch] = None
        for rule in self.rules:
            if rule.match_type is not SeedMatchType.EXACT:
                continue
            if rule.pattern.isascii() and len(rule.pattern) < FUZZY_MIN_LATIN_PATTERN_LENGTH:
                continue
            allowed = max_fuzzy_distance(rule.pattern)
            if abs(len(rule.pattern) - len(normalized)) > allowed:
                continue
            distance = levenshtein_distance(normalized, rule.pattern)
            if distance == 0 or distance > allowed:
                continue
            candidate = self._build(rule, distance=distance)
            if best is None or candidate.confidence > best.confidence:
                best = candidate

        if best is not None:
            logger.debug(
                "Fuzzy seed match",
                input=normalized,
                pattern=best.pattern,
                distance=best.fuzzy_distance,
                confidence=best.confidence,
            )
        return best

    @staticmethod
    def _build(rule: SeedRule, distance: int) -> SeedMatch:
        confidence = round(max(0.0, rule.confidence - FUZZY_PENALTY_PER_EDIT * distance), 4)
        reasoning = (
            fuzzy_seed_reasoning(rule.pattern, distance, rule.path)
            if distance
            else seed_reasoning(rule.pattern, rule.path)
        )
        return SeedMatch(
            path=rule.path,
            confidence=confidence,
            source=ClassificationSource.SEED,
            reasoning=reasoning,
            occupation_name=rule.occupation_name,
            pattern=rule.pattern,
            fuzzy_distance=distance,
        )
