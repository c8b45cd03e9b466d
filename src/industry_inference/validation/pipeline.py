"""
Validation Pipeline: Multi-stage validation orchestrator.

Coordinates the 4 validation stages for an LLM classification reply:
- Stage 1: JSON Parse (hard fail)
- Stage 2: JSON Schema (hard fail)
- Stage 3: Taxonomy Rules (hard fail)
- Stage 4: Quality Checks (warnings)

Unlike the stages, the pipeline itself never raises: it returns a tagged
result, ``Valid(classification, warnings)`` or ``Invalid(stage, reason,
details)``.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from industry_inference.monitoring.metrics import validation_failures_total
from industry_inference.taxonomy.taxonomy import IndustryTaxonomy, TaxonomyPath
from industry_inference.validation.exceptions import ValidationError
from industry_inference.validation.stage1_json_parse import Stage1JSONParse
from industry_inference.validation.stage2_schema import Stage2SchemaValidation
from industry_inference.validation.stage3_taxonomy_rules import Stage3TaxonomyRules
from industry_inference.validation.stage4_quality import Stage4QualityChecks

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AIClassification:
    """An LLM answer that passed stages 1-3."""

    path: TaxonomyPath
    confidence: float
    reasoning: str = ""


@dataclass(frozen=True)
class Valid:
    classification: AIClassification
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    """
    Rejected (or missing) AI answer.

    ``stage`` is a validation stage (stage1-3) or, when produced by the AI
    adapter, the failure point (disabled, timeout, llm, confidence, unexpected).
    """

    stage: str
    reason: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return False


ValidationResult = Union[Valid, Invalid]


class ValidationPipeline:
    """
    Multi-stage validation pipeline orchestrator.

    Validates LLM replies through 4 stages, enforcing hard constraints
    and accumulating quality warnings.
    """

    def __init__(
        self,
        taxonomy: IndustryTaxonomy,
        schema_path: str | Path,
        min_confidence_warning_threshold: float = 0.5,
    ):
        self.taxonomy = taxonomy
        self.stage1 = Stage1JSONParse()
        self.stage2 = Stage2SchemaValidation(schema_path)
        self.stage3 = Stage3TaxonomyRules(taxonomy)
        self.stage4 = Stage4QualityChecks(
            taxonomy, min_confidence_threshold=min_confidence_warning_threshold
        )

    def validate(self, content: str, locked_category_id: Optional[str] = None) -> ValidationResult:
        """
        Run the full pipeline on a raw LLM reply.

        Args:
            content: Raw reply text
            locked_category_id: Category the answer must stay within

        Returns:
            Valid with the resolved classification, or Invalid naming the
            stage that rejected it
        """
        try:
            data = self.stage1.validate(content)
            self.stage2.validate(data)
            path, warnings = self.stage3.validate(data, locked_category_id)
            warnings.extend(self.stage4.validate(data, path))
        except ValidationError as e:
            logger.warning(
                "LLM reply rejected",
                stage=e.stage,
                reason=e.message,
                details=e.details,
            )
            return Invalid(stage=e.stage, reason=e.message, details=e.details)
        except Exception as e:
            validation_failures_total.labels(stage="unexpected", error_type=type(e).__name__).inc()
            logger.exception("Unexpected error during validation", error=str(e))
            return Invalid(
                stage="unexpected",
                reason=f"Unexpected validation error: {e}",
                details={"error_type": type(e).__name__},
            )

        reasoning = data.get("reasoning")
        classification = AIClassification(
            path=path,
            confidence=float(data["confidence"]),
            reasoning=reasoning.strip() if isinstance(reasoning, str) else "",
        )

        if warnings:
            logger.info(
                "Validation completed with warnings",
                count=len(warnings),
                warnings=warnings[:3],
            )
        return Valid(classification=classification, warnings=warnings)
