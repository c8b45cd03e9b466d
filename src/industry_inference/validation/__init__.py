"""
Multi-stage validation of LLM replies, plus user payload validation.

- pipeline.py: orchestrator returning Valid | Invalid
- stage1_json_parse.py: JSON parsing, code fences stripped (hard fail)
- stage2_schema.py: JSON Schema validation (hard fail)
- stage3_taxonomy_rules.py: ids exist in taxonomy, locked category respected (hard fail)
- stage4_quality.py: quality checks (warnings only)
- industry_validation.py: guards and validators for UserIndustryData payloads
"""

from industry_inference.validation.exceptions import (
    IndustryValidationError,
    JSONParseError,
    SchemaValidationError,
    TaxonomyRuleViolation,
    ValidationError,
)
from industry_inference.validation.industry_validation import (
    is_valid_industry_level,
    is_valid_user_industry_data,
    validate_industry_level,
    validate_user_industry_data,
)
from industry_inference.validation.pipeline import (
    AIClassification,
    Invalid,
    Valid,
    ValidationPipeline,
    ValidationResult,
)

__all__ = [
    # Pipeline
    "ValidationPipeline",
    "ValidationResult",
    "Valid",
    "Invalid",
    "AIClassification",
    # Exceptions
    "ValidationError",
    "JSONParseError",
    "SchemaValidationError",
    "TaxonomyRuleViolation",
    "IndustryValidationError",
    # User payload validation
    "validate_industry_level",
    "validate_user_industry_data",
    "is_valid_industry_level",
    "is_valid_user_industry_data",
]
