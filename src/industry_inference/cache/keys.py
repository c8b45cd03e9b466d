"""Cache key fingerprint for classification requests."""

import json
from typing import Any, Mapping, Optional, Union

from industry_inference.models.industry_models import ClassificationContext

ContextLike = Union[ClassificationContext, Mapping[str, Any], None]

# Serialized field order is part of the key format
_CONTEXT_FIELDS = (
    ("occupationId", "occupation_id"),
    ("lockedCategoryId", "locked_category_id"),
    ("source", "source"),
)


def _context_value(context: ContextLike, camel: str, snake: str) -> Optional[str]:
    if context is None:
        return None
    if isinstance(context, ClassificationContext):
        value = getattr(context, snake)
    else:
        value = context.get(snake, context.get(camel))
    return value or None


def generate_cache_key(description: Optional[str], context: ContextLike = None) -> str:
    """
    Deterministic key for ``(description, context)``.

    The description is trimmed and lowercased; context fields are written
    in a fixed order with ``null`` for anything missing, so how the caller
    built the context object never changes the key.

    Examples:
        >>> generate_cache_key("  Investment ", {})
        '{"description":"investment","occupationId":null,"lockedCategoryId":null,"source":null}'
    """
    payload: dict[str, Optional[str]] = {"description": (description or "").strip().lower()}
    for camel, snake in _CONTEXT_FIELDS:
        payload[camel] = _context_value(context, camel, snake)
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
