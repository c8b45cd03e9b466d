"""
AI classifier adapter: the LLM tier of the pipeline.

Wraps prompt building, the provider call and reply validation behind a
single ``classify`` call that never raises. Every failure mode (disabled,
timeout, provider error, rejected reply, low confidence) comes back as an
``Invalid`` result so the orchestrator can fall back.
"""

import asyncio
import json
from typing import Optional, Sequence

import structlog

from industry_inference.llm.base_client import BaseLLMClient
from industry_inference.llm.exceptions import LLMClientError
from industry_inference.llm.prompt_builder import PromptBuilder
from industry_inference.llm.text_utils import strip_code_fences
from industry_inference.matching.text_utils import normalize_text
from industry_inference.models.industry_models import ClassificationCandidate, ClassificationContext
from industry_inference.monitoring.metrics import ai_fallbacks_total
from industry_inference.validation.pipeline import Invalid, ValidationPipeline, ValidationResult

logger = structlog.get_logger(__name__)


class AIClassifierAdapter:
    def __init__(
        self,
        client: Optional[BaseLLMClient],
        prompt_builder: PromptBuilder,
        pipeline: ValidationPipeline,
        timeout: float = 5.0,
        min_confidence: float = 0.3,
        enable_normalization: bool = False,
        normalization_timeout: float = 3.0,
    ):
        """
        Args:
            client: LLM client, or None to disable the AI tier
            prompt_builder: Renders classification/normalization prompts
            pipeline: Validates replies
            timeout: Budget for one classification, provider retries included
            min_confidence: Valid answers below this are rejected
            enable_normalization: Whether ``normalize`` calls the LLM
            normalization_timeout: Budget for one normalization call
        """
        self.client = client
        self.prompt_builder = prompt_builder
        self.pipeline = pipeline
        self.timeout = timeout
        self.min_confidence = min_confidence
        self.enable_normalization = enable_normalization
        self.normalization_timeout = normalization_timeout

        if client is None:
            logger.warning("AI classifier disabled (no LLM client configured)")

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def classify(
        self,
        text: str,
        context: Optional[ClassificationContext] = None,
        hints: Sequence[ClassificationCandidate] = (),
    ) -> ValidationResult:
        """
        Ask the LLM to classify ``text``.

        Args:
            text: Normalized description
            context: Locked category, if any, constrains the answer
            hints: Local candidates passed to the model as suggestions

        Returns:
            Valid with the resolved classification, or Invalid with the reason
        """
        if self.client is None:
            return self._invalid("disabled", "AI classifier is not configured")

        locked_category_id = context.locked_category_id if context else None
        try:
            result = await asyncio.wait_for(
                self._classify(text, locked_category_id, hints), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            return self._invalid("timeout", f"AI classification exceeded {self.timeout}s")
        except LLMClientError as e:
            return self._invalid(
                "llm", e.message, {"error_type": type(e).__name__, **e.details}
            )
        except Exception as e:
            logger.exception("Unexpected error in AI classifier", error=str(e))
            return self._invalid("unexpected", str(e), {"error_type": type(e).__name__})

        if isinstance(result, Invalid):
            ai_fallbacks_total.labels(reason="invalid_output").inc()
            return result

        confidence = result.classification.confidence
        if confidence < self.min_confidence:
            return self._invalid(
                "confidence",
                f"AI confidence {confidence:.2f} below minimum {self.min_confidence}",
                {"path": list(result.classification.path.key)},
            )

        logger.info(
            "AI classification accepted",
            path=result.classification.path.key,
            confidence=confidence,
            warnings=len(result.warnings),
        )
        return result

    async def _classify(
        self,
        text: str,
        locked_category_id: Optional[str],
        hints: Sequence[ClassificationCandidate],
    ) -> ValidationResult:
        request, metadata = self.prompt_builder.build_classification_request(
            text, locked_category_id=locked_category_id, hints=hints
        )
        logger.debug("Calling LLM for classification", **metadata)
        response = await self.client.generate(request)
        return self.pipeline.validate(response.content, locked_category_id)

    async def normalize(self, text: str) -> str:
        """
        Clean up a raw description with the LLM when enabled.

        Always returns usable text: any failure (or a disabled feature)
        yields the locally normalized input.
        """
        local = normalize_text(text)
        if not local or self.client is None or not self.enable_normalization:
            return local

        try:
            request = self.prompt_builder.build_normalization_request(text)
            response = await asyncio.wait_for(
                self.client.generate(request), timeout=self.normalization_timeout
            )
            data = json.loads(strip_code_fences(response.content))
        except asyncio.TimeoutError:
            logger.warning("AI normalization timed out", timeout=self.normalization_timeout)
            return local
        except (LLMClientError, json.JSONDecodeError) as e:
            logger.warning("AI normalization failed", error=str(e), error_type=type(e).__name__)
            return local
        except Exception as e:
            logger.exception("Unexpected error during AI normalization", error=str(e))
            return local

        value = data.get("normalized") if isinstance(data, dict) else None
        normalized = normalize_text(value) if isinstance(value, str) else ""
        if not normalized:
            return local
        logger.debug("AI normalization applied", original=local, normalized=normalized)
        return normalized

    @staticmethod
    def _invalid(stage: str, reason: str, details: Optional[dict] = None) -> Invalid:
        reason_label = {
            "disabled": "disabled",
            "timeout": "timeout",
            "llm": "llm_error",
            "confidence": "low_confidence",
        }.get(stage, "unexpected_error")
        ai_fallbacks_total.labels(reason=reason_label).inc()
        if stage == "disabled":
            logger.debug("AI tier skipped", reason=reason)
        else:
            logger.warning("AI tier failed, falling back", stage=stage, reason=reason)
        return Invalid(stage=stage, reason=reason, details=details or {})
