"""
Wiring for IndustryClassifier.

Loads the reference tables once and assembles the tiers from Settings.
"""

from typing import Optional

import structlog

from industry_inference.cache.base import ClassificationCache
from industry_inference.cache.memory_cache import InMemoryClassificationCache
from industry_inference.cache.redis_cache import RedisClassificationCache
from industry_inference.cache.redis_client import RedisClient
from industry_inference.classifier.ai_adapter import AIClassifierAdapter
from industry_inference.classifier.orchestrator import IndustryClassifier
from industry_inference.config import Settings
from industry_inference.llm.base_client import BaseLLMClient
from industry_inference.llm.chat_client import ChatCompletionClient
from industry_inference.llm.prompt_builder import PromptBuilder
from industry_inference.matching.ambiguity import AmbiguityResolver
from industry_inference.matching.ontology_matcher import OntologyMatcher
from industry_inference.matching.seed_matcher import SeedMatcher
from industry_inference.models.enums import CacheBackend
from industry_inference.taxonomy.rules import load_ambiguous_terms, load_ontology, load_seed_rules
from industry_inference.taxonomy.taxonomy import IndustryTaxonomy
from industry_inference.validation.pipeline import ValidationPipeline

logger = structlog.get_logger(__name__)


def create_classification_cache(settings: Settings) -> ClassificationCache:
    backend = CacheBackend(settings.CACHE_BACKEND.lower())
    if backend is CacheBackend.REDIS:
        return RedisClassificationCache(
            RedisClient.get_async_client(settings),
            ttl_seconds=settings.CACHE_TTL_SECONDS,
            key_prefix=settings.CACHE_KEY_PREFIX,
        )
    return InMemoryClassificationCache(
        ttl_seconds=settings.CACHE_TTL_SECONDS,
        max_entries=settings.CACHE_MAX_ENTRIES,
    )


def create_llm_client(settings: Settings) -> Optional[BaseLLMClient]:
    """Chat completions client, or None when no API key is configured."""
    if not settings.LLM_API_KEY:
        return None
    return ChatCompletionClient(
        base_url=settings.LLM_BASE_URL,
        api_key=settings.LLM_API_KEY,
        timeout=settings.LLM_REQUEST_TIMEOUT,
        max_retries=settings.LLM_MAX_RETRIES,
        retry_backoff=settings.LLM_RETRY_BACKOFF,
    )


def build_industry_classifier(
    settings: Settings,
    cache: Optional[ClassificationCache] = None,
    llm_client: Optional[BaseLLMClient] = None,
) -> IndustryClassifier:
    """
    Assemble a classifier from settings.

    Args:
        settings: Application settings
        cache: Cache to use instead of the configured backend
        llm_client: LLM client to use instead of one built from settings

    Returns:
        Ready-to-use IndustryClassifier
    """
    taxonomy = IndustryTaxonomy.from_file(settings.TAXONOMY_PATH)
    threshold = settings.DECISIVE_CONFIDENCE_THRESHOLD

    seed_matcher = SeedMatcher(load_seed_rules(settings.SEED_RULES_PATH, taxonomy))
    ontology_matcher = OntologyMatcher(
        load_ontology(settings.ONTOLOGY_PATH, taxonomy),
        decisive_threshold=threshold,
        ambiguity_margin=settings.AMBIGUITY_MARGIN,
    )
    ambiguity_resolver = AmbiguityResolver(
        load_ambiguous_terms(settings.AMBIGUOUS_TERMS_PATH, taxonomy),
        decisive_threshold=threshold,
        ambiguity_margin=settings.AMBIGUITY_MARGIN,
        max_candidates=settings.MAX_CANDIDATES,
    )

    prompt_builder = PromptBuilder(
        templates_dir=settings.PROMPT_TEMPLATES_DIR,
        taxonomy=taxonomy,
        max_description_length=settings.MAX_DESCRIPTION_LENGTH,
        default_model=settings.LLM_MODEL,
        default_temperature=settings.LLM_TEMPERATURE,
        default_max_tokens=settings.LLM_MAX_TOKENS,
        normalization_max_tokens=settings.NORMALIZATION_MAX_TOKENS,
    )
    pipeline = ValidationPipeline(
        taxonomy,
        schema_path=settings.JSON_SCHEMA_PATH,
        min_confidence_warning_threshold=settings.MIN_CONFIDENCE_WARNING_THRESHOLD,
    )
    ai_adapter = AIClassifierAdapter(
        client=llm_client if llm_client is not None else create_llm_client(settings),
        prompt_builder=prompt_builder,
        pipeline=pipeline,
        timeout=settings.LLM_TIMEOUT,
        min_confidence=settings.AI_MIN_CONFIDENCE,
        enable_normalization=settings.ENABLE_AI_NORMALIZATION,
        normalization_timeout=settings.NORMALIZATION_TIMEOUT,
    )

    classifier = IndustryClassifier(
        taxonomy=taxonomy,
        seed_matcher=seed_matcher,
        ontology_matcher=ontology_matcher,
        ambiguity_resolver=ambiguity_resolver,
        ai_adapter=ai_adapter,
        cache=cache if cache is not None else create_classification_cache(settings),
        decisive_threshold=threshold,
        fallback_confidence=settings.FALLBACK_CONFIDENCE,
    )
    logger.info(
        "Industry classifier ready",
        cache_backend=classifier.cache.backend_name,
        ai_enabled=ai_adapter.enabled,
        decisive_threshold=threshold,
    )
    return classifier
