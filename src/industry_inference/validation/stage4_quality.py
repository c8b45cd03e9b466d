"""
Stage 4: Quality Checks.

Non-blocking checks that produce warnings:
- Low confidence
- Missing reasoning
- Segment has niches but none was chosen
- Unexpected extra fields

Unlike Stages 1-3, these do NOT raise exceptions.
"""

import structlog

from industry_inference.taxonomy.taxonomy import IndustryTaxonomy, TaxonomyPath

logger = structlog.get_logger(__name__)

EXPECTED_FIELDS = {"category", "segment", "niche", "confidence", "reasoning"}


class Stage4QualityChecks:
    """
    Stage 4 validator: Quality checks (non-blocking warnings).

    Returns list of warning strings instead of raising exceptions.
    """

    def __init__(self, taxonomy: IndustryTaxonomy, min_confidence_threshold: float = 0.5):
        """
        Args:
            taxonomy: Used to tell whether a niche could have been chosen
            min_confidence_threshold: Warn if confidence is below this
        """
        self.taxonomy = taxonomy
        self.min_confidence_threshold = min_confidence_threshold

    def validate(self, data: dict, path: TaxonomyPath) -> list[str]:
        warnings: list[str] = []

        confidence = float(data.get("confidence", 0.0))
        if confidence < self.min_confidence_threshold:
            warnings.append(
                f"Low confidence: {confidence:.3f} (threshold: {self.min_confidence_threshold})"
            )

        reasoning = data.get("reasoning")
        if not isinstance(reasoning, str) or not reasoning.strip():
            warnings.append("Reasoning is missing or empty")

        if path.niche is None and self.taxonomy.niche_ids(path.category.id, path.segment.id):
            warnings.append(f"No niche chosen for {path.category.id}/{path.segment.id}")

        extra = sorted(set(data) - EXPECTED_FIELDS)
        if extra:
            warnings.append(f"Unexpected fields in reply: {', '.join(extra)}")

        if warnings:
            logger.info("Stage 4: quality warnings", count=len(warnings))
        return warnings
