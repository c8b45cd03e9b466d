"""
Text processing utilities for the LLM layer.

Cleans model replies before JSON parsing and trims user descriptions
before they are embedded in a prompt.
"""

import re

_CODE_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?```$", re.DOTALL)
_SENTENCE_END_RE = re.compile(r"[。！？；.!?;](?:\s|$)?")


def strip_code_fences(content: str) -> str:
    """
    Remove a Markdown code fence wrapped around the whole reply.

    Chat models often answer ```json {...} ``` even in JSON mode.

    Examples:
        >>> strip_code_fences('```json\\n{"a": 1}\\n```')
        '{"a": 1}'
        >>> strip_code_fences('{"a": 1}')
        '{"a": 1}'
    """
    stripped = content.strip()
    match = _CODE_FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def truncate_at_sentence_boundary(text: str, max_chars: int) -> str:
    """
    Truncate text at the last sentence boundary before max_chars.

    Understands both Chinese (。！？；) and ASCII punctuation. Falls back
    to a hard cut when no boundary exists in the allowed window.

    Examples:
        >>> truncate_at_sentence_boundary("我是医生。在三甲医院工作。", 6)
        '我是医生。'
        >>> truncate_at_sentence_boundary("产品经理", 10)
        '产品经理'
    """
    if len(text) <= max_chars:
        return text

    window = text[:max_chars]
    matches = list(_SENTENCE_END_RE.finditer(window))
    if matches:
        cutoff = matches[-1].end()
        return text[:cutoff].rstrip()

    return window


def count_tokens_approximate(text: str) -> int:
    """
    Rough token estimate for pre-flight checks.

    CJK characters are close to one token each; other text averages about
    four characters per token.
    """
    cjk = sum(1 for ch in text if "一" <= ch <= "鿿")
    other = len(text) - cjk
    return max(1, cjk + other // 4)
