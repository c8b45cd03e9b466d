"""
Classification pipeline.

- orchestrator.py: IndustryClassifier and classify_industry
- ai_adapter.py: LLM tier returning Valid/Invalid results
- factory.py: builds a classifier from Settings
"""

from industry_inference.classifier.ai_adapter import AIClassifierAdapter
from industry_inference.classifier.factory import (
    build_industry_classifier,
    create_classification_cache,
    create_llm_client,
)
from industry_inference.classifier.orchestrator import IndustryClassifier, classify_industry

__all__ = [
    "AIClassifierAdapter",
    "IndustryClassifier",
    "build_industry_classifier",
    "classify_industry",
    "create_classification_cache",
    "create_llm_client",
]
