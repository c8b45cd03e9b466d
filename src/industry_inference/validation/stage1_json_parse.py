"""
Stage 1: JSON Parse Validation.

Parse the raw LLM reply into a dict. Markdown code fences are stripped
first. This is a hard-fail stage.
"""

import json

import structlog

from industry_inference.llm.text_utils import strip_code_fences
from industry_inference.monitoring.metrics import validation_failures_total
from industry_inference.validation.exceptions import JSONParseError

logger = structlog.get_logger(__name__)


class Stage1JSONParse:
    """
    Stage 1 validator: Parse JSON string to dict.

    Raises JSONParseError on malformed JSON (hard fail).
    """

    def validate(self, content: str) -> dict:
        """
        Parse JSON content from the LLM reply.

        Args:
            content: Raw reply text, optionally wrapped in a code fence

        Returns:
            Parsed dict representation

        Raises:
            JSONParseError: If content is not a JSON object
        """
        if not content or not content.strip():
            validation_failures_total.labels(stage="stage1", error_type="empty_content").inc()
            raise JSONParseError(
                "LLM response content is empty or whitespace-only",
                raw_content=content,
                parse_error="Empty content",
            )

        cleaned = strip_code_fences(content)
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as e:
            validation_failures_total.labels(stage="stage1", error_type="json_decode_error").inc()
            raise JSONParseError(
                f"Failed to parse LLM response as JSON: {e.msg}",
                raw_content=content,
                parse_error=f"{e.msg} at line {e.lineno} col {e.colno}",
            ) from e

        if not isinstance(parsed, dict):
            validation_failures_total.labels(stage="stage1", error_type="not_json_object").inc()
            raise JSONParseError(
                f"LLM response is not a JSON object (got {type(parsed).__name__})",
                raw_content=content,
                parse_error=f"Expected dict, got {type(parsed).__name__}",
            )

        logger.debug("Stage 1: parsed JSON", keys=len(parsed))
        return parsed
