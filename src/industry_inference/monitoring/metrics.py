"""Custom Prometheus metrics for the Industry Inference Service.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- ai_fallbacks_total (AI tier failing or disabled)
- validation_failures_total (LLM replies rejected by the validation pipeline)
- cache_operations_total with result="error" (cache backend unavailable)
"""

from prometheus_client import Counter, Histogram

# === Classification Metrics ===

classification_requests_total = Counter(
    "classification_requests_total",
    "Total classifications by the tier that produced the answer",
    ["source"],
)
"""
Classification counter by source.

Labels:
- source: seed, ontology, ai, fallback

A rising fallback share means the seed tables or the AI tier need attention.
"""

classification_candidates_total = Counter(
    "classification_candidates_total",
    "Total classifications returned with candidates (ambiguous inputs)",
)

classification_duration_seconds = Histogram(
    "classification_duration_seconds",
    "End-to-end classification latency in seconds",
    ["source"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)
"""
Classification latency histogram.

Buckets span sub-millisecond seed hits to multi-second AI calls.
"""

# === Cache Metrics ===

cache_operations_total = Counter(
    "cache_operations_total",
    "Cache operations by operation and result",
    ["operation", "result"],
)
"""
Cache operations counter.

Labels:
- operation: get, set, clear
- result: hit, miss, ok, error

Alert thresholds:
- WARN: any sustained result="error" (backend down, classification still works)
"""

# === LLM Performance Metrics ===

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "LLM generation latency in seconds",
    ["model", "success"],
    buckets=[0.25, 0.5, 1.0, 2.0, 3.0, 5.0, 10.0],
)
"""
LLM generation latency histogram.

Labels:
- model: Model name (e.g., deepseek-chat)
- success: true (generation succeeded), false (generation failed)

Alert thresholds:
- WARN: p95 > 3s (normalization budget)
- CRITICAL: p95 > 5s (AI tier budget, answers start falling back)
"""

llm_tokens_total = Counter(
    "llm_tokens_total",
    "Total tokens consumed by model and type",
    ["model", "token_type"],
)
"""
Token consumption counter.

Labels:
- model: Model name
- token_type: prompt (input tokens), completion (output tokens)

Used for cost estimation.
"""

# === Validation Metrics ===

validation_failures_total = Counter(
    "validation_failures_total",
    "Total validation failures by stage and error type",
    ["stage", "error_type"],
)
"""
Validation failures counter by stage and error type.

Labels:
- stage: stage1 (JSON parse), stage2 (schema), stage3 (taxonomy rules)
- error_type: json_decode_error, schema_violation, unknown_category, etc.
"""

ai_fallbacks_total = Counter(
    "ai_fallbacks_total",
    "AI tier outcomes that degraded to a fallback classification",
    ["reason"],
)
"""
AI fallback counter.

Labels:
- reason: disabled, timeout, llm_error, invalid_output, low_confidence, unexpected_error
"""
