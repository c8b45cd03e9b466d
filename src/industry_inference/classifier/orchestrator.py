"""
Classification orchestrator.

Runs a free-text occupation description through the tiers in order:

    cache -> seed rules -> ontology -> ambiguity layer -> AI -> fallback

and returns the first decisive answer. ``classify_industry`` never raises:
each tier boundary degrades to the next tier, and the last resort is a
fallback classification.
"""

import time
from typing import Any, Mapping, Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from industry_inference.cache.base import ClassificationCache
from industry_inference.cache.keys import generate_cache_key
from industry_inference.classifier.ai_adapter import AIClassifierAdapter
from industry_inference.matching.ambiguity import AmbiguityResolver
from industry_inference.matching.match import LocalMatch
from industry_inference.matching.ontology_matcher import OntologyMatcher
from industry_inference.matching.reasoning import ai_reasoning, ensure_reasoning, fallback_reasoning
from industry_inference.matching.seed_matcher import SeedMatcher
from industry_inference.matching.text_utils import normalize_text
from industry_inference.models.enums import ClassificationSource
from industry_inference.models.industry_models import (
    CachedClassification,
    ClassificationCandidate,
    ClassificationContext,
    IndustryClassificationResponse,
)
from industry_inference.monitoring.metrics import (
    classification_candidates_total,
    classification_duration_seconds,
    classification_requests_total,
)
from industry_inference.taxonomy.taxonomy import IndustryTaxonomy, TaxonomyPath
from industry_inference.validation.pipeline import Valid

logger = structlog.get_logger(__name__)

ContextInput = Union[ClassificationContext, Mapping[str, Any], None]

BLANK_INPUT_REASONING = "未填写职业描述，暂归入{label}，建议手动选择"


class IndustryClassifier:
    """
    Tiered industry classifier.

    All collaborators are injected, including the cache, so tests and
    worker processes can each own their instance.
    """

    def __init__(
        self,
        taxonomy: IndustryTaxonomy,
        seed_matcher: SeedMatcher,
        ontology_matcher: OntologyMatcher,
        ambiguity_resolver: AmbiguityResolver,
        ai_adapter: AIClassifierAdapter,
        cache: ClassificationCache,
        decisive_threshold: float = 0.8,
        fallback_confidence: float = 0.3,
    ):
        self.taxonomy = taxonomy
        self.seed_matcher = seed_matcher
        self.ontology_matcher = ontology_matcher
        self.ambiguity_resolver = ambiguity_resolver
        self.ai_adapter = ai_adapter
        self.cache = cache
        self.decisive_threshold = decisive_threshold
        self.fallback_confidence = fallback_confidence

    async def classify_industry(
        self,
        description: Optional[str],
        context: ContextInput = None,
    ) -> IndustryClassificationResponse:
        """
        Classify a free-text occupation description.

        Args:
            description: Raw user input, e.g. "做投资的" or "AI工程师"
            context: Optional ClassificationContext (or a dict with
                occupationId / lockedCategoryId / source)

        Returns:
            IndustryClassificationResponse. ``candidates`` is set only for
            ambiguous inputs; ``from_cache`` marks cache hits.
        """
        start_time = time.perf_counter()
        raw = description or ""
        ctx = self._coerce_context(context)
        locked = ctx.locked_category_id if ctx else None
        normalized = normalize_text(raw)

        if not normalized:
            response = self._blank_response(raw, locked)
            return self._finish(response, start_time)

        key = generate_cache_key(raw, ctx)
        cached = await self.cache.get(key)
        if cached is not None:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.debug("Classification cache hit", input=normalized, source=cached.source.value)
            response = cached.to_response(processing_time_ms=elapsed_ms)
            classification_requests_total.labels(source=response.source.value).inc()
            return response

        try:
            response = await self._classify_uncached(raw, normalized, ctx)
        except Exception as e:
            logger.exception(
                "Classification failed, using fallback", input=normalized, error=str(e)
            )
            response = self._fallback_response(raw, normalized, locked, candidates=[], weak=None)

        response = self._finish(response, start_time)

        if response.source is not ClassificationSource.FALLBACK and not response.candidates:
            await self.cache.set(key, CachedClassification.from_response(response))

        return response

    async def _classify_uncached(
        self,
        raw: str,
        normalized: str,
        ctx: Optional[ClassificationContext],
    ) -> IndustryClassificationResponse:
        locked = ctx.locked_category_id if ctx else None
        matching_text = await self.ai_adapter.normalize(raw)
        known_ambiguous = self.ambiguity_resolver.is_known_ambiguous(
            normalized
        ) or self.ambiguity_resolver.is_known_ambiguous(matching_text)

        # Preset occupations are explicit user choices
        occupation = self.seed_matcher.match_occupation(ctx.occupation_id if ctx else None)
        if occupation is not None and self._in_scope(occupation.path, locked):
            return self._decisive_response(raw, normalized, occupation)

        matches: list[LocalMatch] = []

        seed = self.seed_matcher.match(matching_text)
        if seed is not None and self._in_scope(seed.path, locked):
            if seed.confidence >= self.decisive_threshold and not known_ambiguous:
                return self._decisive_response(raw, normalized, seed)
            matches.append(seed)

        ontology = [
            m for m in self.ontology_matcher.match(matching_text) if self._in_scope(m.path, locked)
        ]
        if seed is None and not known_ambiguous:
            decisive = self.ontology_matcher.decisive(ontology)
            if decisive is not None:
                return self._decisive_response(raw, normalized, decisive)
        matches.extend(ontology)

        assessment = self.ambiguity_resolver.assess(
            matching_text if not known_ambiguous else normalized, matches, locked
        )
        if assessment.decisive is not None:
            return self._decisive_response(raw, normalized, assessment.decisive)
        candidates = assessment.candidates

        result = await self.ai_adapter.classify(matching_text, ctx, hints=candidates)
        if isinstance(result, Valid):
            return self._ai_response(raw, normalized, result, candidates, known_ambiguous, locked)

        weak = max(matches, key=lambda m: m.confidence) if matches else None
        return self._fallback_response(raw, normalized, locked, candidates=candidates, weak=weak)

    def _decisive_response(
        self, raw: str, normalized: str, match: LocalMatch
    ) -> IndustryClassificationResponse:
        return IndustryClassificationResponse(
            category=match.path.category,
            segment=match.path.segment,
            niche=match.path.niche,
            confidence=match.confidence,
            reasoning=ensure_reasoning(match.reasoning, match.source, match.path),
            source=match.source,
            raw_input=raw,
            normalized_input=normalized,
        )

    def _ai_response(
        self,
        raw: str,
        normalized: str,
        result: Valid,
        candidates: list[ClassificationCandidate],
        known_ambiguous: bool,
        locked: Optional[str],
    ) -> IndustryClassificationResponse:
        answer = result.classification
        path = answer.path
        reasoning = answer.reasoning or ai_reasoning(path)

        keep_candidates: list[ClassificationCandidate] = []
        if known_ambiguous or answer.confidence < self.decisive_threshold:
            ai_candidate = ClassificationCandidate(
                category=path.category,
                segment=path.segment,
                niche=path.niche,
                confidence=answer.confidence,
                reasoning=reasoning,
            )
            keep_candidates = self.ambiguity_resolver.rank_candidates(
                [ai_candidate, *candidates], locked
            )

        return IndustryClassificationResponse(
            category=path.category,
            segment=path.segment,
            niche=path.niche,
            confidence=answer.confidence,
            reasoning=reasoning,
            source=ClassificationSource.AI,
            raw_input=raw,
            normalized_input=normalized,
            candidates=keep_candidates or None,
        )

    def _fallback_response(
        self,
        raw: str,
        normalized: str,
        locked: Optional[str],
        candidates: list[ClassificationCandidate],
        weak: Optional[LocalMatch],
    ) -> IndustryClassificationResponse:
        hint: Optional[str] = None
        if candidates:
            top = candidates[0]
            path = TaxonomyPath(category=top.category, segment=top.segment, niche=top.niche)
            hint = top.occupation_name
        elif weak is not None:
            path = weak.path
            hint = weak.occupation_name
        else:
            path = self._default_path(locked)

        return IndustryClassificationResponse(
            category=path.category,
            segment=path.segment,
            niche=path.niche,
            confidence=self.fallback_confidence,
            reasoning=fallback_reasoning(path, hint),
            source=ClassificationSource.FALLBACK,
            raw_input=raw,
            normalized_input=normalized,
            candidates=candidates or None,
        )

    def _blank_response(self, raw: str, locked: Optional[str]) -> IndustryClassificationResponse:
        path = self._default_path(locked)
        return IndustryClassificationResponse(
            category=path.category,
            segment=path.segment,
            confidence=0.0,
            reasoning=BLANK_INPUT_REASONING.format(label=path.label),
            source=ClassificationSource.FALLBACK,
            raw_input=raw,
            normalized_input="",
        )

    def _default_path(self, locked: Optional[str]) -> TaxonomyPath:
        if locked:
            path = self.taxonomy.first_segment_path(locked)
            if path is not None:
                return path
        return self.taxonomy.fallback_path

    @staticmethod
    def _in_scope(path: TaxonomyPath, locked: Optional[str]) -> bool:
        return not locked or path.category.id == locked

    @staticmethod
    def _coerce_context(context: ContextInput) -> Optional[ClassificationContext]:
        if context is None or isinstance(context, ClassificationContext):
            return context
        try:
            return ClassificationContext.model_validate(dict(context))
        except (PydanticValidationError, TypeError, ValueError) as e:
            logger.warning("Ignoring malformed classification context", error=str(e))
            return None

    def _finish(
        self, response: IndustryClassificationResponse, start_time: float
    ) -> IndustryClassificationResponse:
        elapsed = time.perf_counter() - start_time
        response.processing_time_ms = elapsed * 1000

        source = response.source.value
        classification_requests_total.labels(source=source).inc()
        classification_duration_seconds.labels(source=source).observe(elapsed)
        if response.candidates:
            classification_candidates_total.inc()

        logger.info(
            "Industry classified",
            input=response.normalized_input,
            source=source,
            path=[response.category.id, response.segment.id, response.niche.id if response.niche else None],
            confidence=round(response.confidence, 3),
            candidates=len(response.candidates or []),
            processing_time_ms=round(response.processing_time_ms, 2),
        )
        return response

    async def close(self) -> None:
        await self.cache.close()
        if self.ai_adapter.client is not None:
            await self.ai_adapter.client.close()


async def classify_industry(
    description: Optional[str],
    context: ContextInput = None,
    *,
    classifier: IndustryClassifier,
) -> IndustryClassificationResponse:
    """Convenience wrapper delegating to an injected ``IndustryClassifier``."""
    return await classifier.classify_industry(description, context)
