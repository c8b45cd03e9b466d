"""
Stage 2: JSON Schema Validation.

Validate the parsed dict against industry_classification_v1.json.
This is a hard-fail stage.
"""

import json
from pathlib import Path

import structlog
from jsonschema import Draft7Validator

from industry_inference.monitoring.metrics import validation_failures_total
from industry_inference.validation.exceptions import SchemaValidationError

logger = structlog.get_logger(__name__)


class Stage2SchemaValidation:
    """
    Stage 2 validator: Validate against JSON Schema.

    Raises SchemaValidationError on schema violations (hard fail).
    """

    def __init__(self, schema_path: str | Path):
        """
        Initialize schema validator.

        Args:
            schema_path: Path to industry_classification_v1.json
        """
        self.schema_path = str(schema_path)
        self._validator: Draft7Validator | None = None

    def _get_validator(self) -> Draft7Validator:
        """Load the schema once and cache the validator."""
        if self._validator is not None:
            return self._validator

        schema_file = Path(self.schema_path)
        if not schema_file.exists():
            raise SchemaValidationError(
                f"JSON Schema file not found: {self.schema_path}",
                schema_path=self.schema_path,
            )

        with open(schema_file, "r", encoding="utf-8") as f:
            schema = json.load(f)
        Draft7Validator.check_schema(schema)
        self._validator = Draft7Validator(schema)
        logger.info("Loaded JSON Schema", schema_path=self.schema_path)
        return self._validator

    def validate(self, data: dict) -> None:
        """
        Validate data against JSON Schema.

        Raises:
            SchemaValidationError: If data doesn't conform to schema
        """
        validator = self._get_validator()
        errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])

        if errors:
            validation_failures_total.labels(stage="stage2", error_type="schema_violation").inc()
            error_messages = []
            for error in errors[:10]:  # Limit to first 10 errors
                path = ".".join(str(p) for p in error.path) if error.path else "root"
                error_messages.append(f"{path}: {error.message}")

            raise SchemaValidationError(
                f"JSON Schema validation failed with {len(errors)} error(s)",
                validation_errors=error_messages,
                schema_path=self.schema_path,
            )

        logger.debug("Stage 2: validated against JSON Schema")
