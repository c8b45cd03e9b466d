"""
FastAPI dependency injection for the industry inference service.

Provides singleton instances of expensive resources (the classifier with
its loaded tables, cache and LLM client). Tests swap them through
``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from industry_inference.classifier.factory import build_industry_classifier
from industry_inference.classifier.orchestrator import IndustryClassifier
from industry_inference.config import Settings, settings
from industry_inference.taxonomy.taxonomy import IndustryTaxonomy


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return settings


@lru_cache()
def get_industry_classifier() -> IndustryClassifier:
    """
    Get singleton classifier.

    Taxonomy and matching tables are loaded once; the cache and the LLM
    client's connection pool are shared across requests.

    Returns:
        IndustryClassifier instance
    """
    return build_industry_classifier(get_settings())


def get_taxonomy(
    classifier: IndustryClassifier = Depends(get_industry_classifier),
) -> IndustryTaxonomy:
    return classifier.taxonomy
