"""
Validation-specific exceptions for the multi-stage validation pipeline.

Stages raise these; ValidationPipeline converts them into an ``Invalid``
result, so they never escape the pipeline.
"""

from typing import Any


class ValidationError(Exception):
    """
    Base exception for all validation errors.

    Raised during Stages 1-3 (hard failures).
    """

    stage = "unknown"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize validation error.

        Args:
            message: Human-readable error description
            details: Structured error data for logging/metrics
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class JSONParseError(ValidationError):
    """
    Stage 1: JSON parsing failed.

    Raised when the LLM reply is not a JSON object.
    """

    stage = "stage1"

    def __init__(self, message: str, raw_content: str | None = None, parse_error: str | None = None):
        details = {}
        if raw_content:
            # First 500 chars are enough to debug, avoid excessive logging
            details["content_snippet"] = raw_content[:500]
        if parse_error:
            details["parse_error"] = parse_error
        super().__init__(message, details)


class SchemaValidationError(ValidationError):
    """
    Stage 2: JSON Schema validation failed.

    Raised when the parsed object doesn't conform to industry_classification_v1.json.
    """

    stage = "stage2"

    def __init__(
        self,
        message: str,
        validation_errors: list[str] | None = None,
        schema_path: str | None = None,
    ):
        details = {}
        if validation_errors:
            details["validation_errors"] = validation_errors
        if schema_path:
            details["schema_path"] = schema_path
        super().__init__(message, details)


class TaxonomyRuleViolation(ValidationError):
    """
    Stage 3: taxonomy rules validation failed.

    Raised when the LLM output:
    - names a category or segment that is not in the taxonomy (invented id)
    - leaves the category the request was locked to
    """

    stage = "stage3"

    def __init__(
        self,
        message: str,
        rule_name: str | None = None,
        invalid_value: Any | None = None,
        expected_values: list[str] | None = None,
        field_path: str | None = None,
    ):
        details = {}
        if rule_name:
            details["rule_name"] = rule_name
        if invalid_value is not None:
            details["invalid_value"] = str(invalid_value)
        if expected_values:
            details["expected_values"] = expected_values[:20]  # Limit to first 20
        if field_path:
            details["field_path"] = field_path
        super().__init__(message, details)


class IndustryValidationError(ValueError):
    """
    A user industry payload failed validation.

    ``field`` names the offending attribute so the API can point at it.
    """

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
