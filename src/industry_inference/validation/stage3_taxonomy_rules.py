"""
Stage 3: Taxonomy Rules Validation.

Resolve the ids in the LLM reply against the taxonomy:
- category and segment must exist (no invented ids)
- category must equal the locked category when one is set
- an unknown niche is dropped with a warning rather than failing

This is a hard-fail stage for the first two rules.
"""

from typing import Any, Optional

import structlog

from industry_inference.monitoring.metrics import validation_failures_total
from industry_inference.taxonomy.taxonomy import IndustryTaxonomy, TaxonomyPath
from industry_inference.validation.exceptions import TaxonomyRuleViolation

logger = structlog.get_logger(__name__)


def _clean_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    cleaned = str(value).strip().lower()
    if cleaned in ("", "null", "none"):
        return None
    return cleaned


class Stage3TaxonomyRules:
    """
    Stage 3 validator: taxonomy enforcement.

    Returns the resolved path and any warnings; raises TaxonomyRuleViolation
    on hard failures.
    """

    def __init__(self, taxonomy: IndustryTaxonomy):
        self.taxonomy = taxonomy

    def validate(
        self, data: dict, locked_category_id: Optional[str] = None
    ) -> tuple[TaxonomyPath, list[str]]:
        """
        Args:
            data: Schema-validated reply dict
            locked_category_id: Category the answer must stay within

        Returns:
            Tuple of (resolved TaxonomyPath, warnings)

        Raises:
            TaxonomyRuleViolation: Unknown category/segment or locked category left
        """
        warnings: list[str] = []
        category_id = _clean_id(data.get("category"))
        segment_id = _clean_id(data.get("segment"))
        niche_id = _clean_id(data.get("niche"))

        if self.taxonomy.find_category(category_id) is None:
            validation_failures_total.labels(stage="stage3", error_type="unknown_category").inc()
            raise TaxonomyRuleViolation(
                f"Category '{category_id}' is not in the taxonomy",
                rule_name="category_exists",
                invalid_value=category_id,
                expected_values=self.taxonomy.category_ids,
                field_path="category",
            )

        if locked_category_id and category_id != locked_category_id:
            validation_failures_total.labels(stage="stage3", error_type="locked_category_violation").inc()
            raise TaxonomyRuleViolation(
                f"Category '{category_id}' violates locked category '{locked_category_id}'",
                rule_name="locked_category",
                invalid_value=category_id,
                expected_values=[locked_category_id],
                field_path="category",
            )

        if self.taxonomy.find_segment(category_id, segment_id) is None:
            validation_failures_total.labels(stage="stage3", error_type="unknown_segment").inc()
            raise TaxonomyRuleViolation(
                f"Segment '{segment_id}' is not under category '{category_id}'",
                rule_name="segment_exists",
                invalid_value=segment_id,
                expected_values=self.taxonomy.segment_ids(category_id),
                field_path="segment",
            )

        if niche_id and self.taxonomy.find_niche(category_id, segment_id, niche_id) is None:
            warnings.append(
                f"Niche '{niche_id}' is not under {category_id}/{segment_id}; dropped"
            )
            niche_id = None

        path = self.taxonomy.resolve_path(category_id, segment_id, niche_id)
        if path is None:
            raise TaxonomyRuleViolation(
                f"Path {category_id}/{segment_id} does not resolve", rule_name="path_resolves"
            )
        logger.debug("Stage 3: taxonomy rules validated", path=path.key)
        return path, warnings
