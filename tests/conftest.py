"""Shared test fixtures and configuration for all tests.

This conftest.py provides the real reference tables (taxonomy, seed rules,
ontology, ambiguity lexicon) and the components built from them, so unit
and integration tests exercise the shipped data.
"""

import pytest

from industry_inference.config import Settings
from industry_inference.llm.prompt_builder import PromptBuilder
from industry_inference.matching.ambiguity import AmbiguityResolver
from industry_inference.matching.ontology_matcher import OntologyMatcher
from industry_inference.matching.seed_matcher import SeedMatcher
from industry_inference.taxonomy.rules import (
    load_ambiguous_terms,
    load_ontology,
    load_seed_rules,
)
from industry_inference.taxonomy.taxonomy import IndustryTaxonomy
from industry_inference.validation.pipeline import ValidationPipeline


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    The AI tier is disabled (no API key) and the cache is in-process.
    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.DECISIVE_CONFIDENCE_THRESHOLD = 0.9
    """
    return Settings(
        APP_NAME="Industry Inference Service (Test)",
        APP_VERSION="0.1.0",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        LLM_API_KEY=None,
        LLM_MODEL="deepseek-chat",
        LLM_TIMEOUT=1.0,
        LLM_MAX_RETRIES=1,
        ENABLE_AI_NORMALIZATION=False,
        CACHE_BACKEND="memory",
        CACHE_TTL_SECONDS=3600,
        REDIS_URL="redis://localhost:6379/15",
        PROMETHEUS_ENABLED=False,
    )


@pytest.fixture
def taxonomy(test_settings: Settings) -> IndustryTaxonomy:
    return IndustryTaxonomy.from_file(test_settings.TAXONOMY_PATH)


@pytest.fixture
def seed_matcher(test_settings: Settings, taxonomy: IndustryTaxonomy) -> SeedMatcher:
    return SeedMatcher(load_seed_rules(test_settings.SEED_RULES_PATH, taxonomy))


@pytest.fixture
def ontology_matcher(test_settings: Settings, taxonomy: IndustryTaxonomy) -> OntologyMatcher:
    return OntologyMatcher(load_ontology(test_settings.ONTOLOGY_PATH, taxonomy))


@pytest.fixture
def ambiguity_resolver(test_settings: Settings, taxonomy: IndustryTaxonomy) -> AmbiguityResolver:
    return AmbiguityResolver(load_ambiguous_terms(test_settings.AMBIGUOUS_TERMS_PATH, taxonomy))


@pytest.fixture
def prompt_builder(test_settings: Settings, taxonomy: IndustryTaxonomy) -> PromptBuilder:
    return PromptBuilder(
        templates_dir=test_settings.PROMPT_TEMPLATES_DIR,
        taxonomy=taxonomy,
        max_description_length=test_settings.MAX_DESCRIPTION_LENGTH,
    )


@pytest.fixture
def validation_pipeline(test_settings: Settings, taxonomy: IndustryTaxonomy) -> ValidationPipeline:
    return ValidationPipeline(taxonomy, schema_path=test_settings.JSON_SCHEMA_PATH)
