"""Monitoring and metrics instrumentation for the Industry Inference Service.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from industry_inference.monitoring.metrics import (
    ai_fallbacks_total,
    cache_operations_total,
    classification_candidates_total,
    classification_duration_seconds,
    classification_requests_total,
    llm_latency_seconds,
    llm_tokens_total,
    validation_failures_total,
)

__all__ = [
    "classification_requests_total",
    "classification_candidates_total",
    "classification_duration_seconds",
    "cache_operations_total",
    "llm_latency_seconds",
    "llm_tokens_total",
    "validation_failures_total",
    "ai_fallbacks_total",
]
