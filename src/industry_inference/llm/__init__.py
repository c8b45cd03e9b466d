"""
LLM client abstraction and implementations.

Components:
- BaseLLMClient: Abstract base class for LLM clients
- ChatCompletionClient: OpenAI-compatible /chat/completions client (DeepSeek by default)
- PromptBuilder: Renders classification and normalization prompts
- text_utils: Text processing utilities (code fences, truncation)
- exceptions: LLM-specific exceptions
"""

from industry_inference.llm.base_client import BaseLLMClient
from industry_inference.llm.chat_client import ChatCompletionClient
from industry_inference.llm.exceptions import (
    LLMAuthenticationError,
    LLMClientError,
    LLMConnectionError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from industry_inference.llm.prompt_builder import PromptBuilder

__all__ = [
    "BaseLLMClient",
    "ChatCompletionClient",
    "PromptBuilder",
    "LLMAuthenticationError",
    "LLMClientError",
    "LLMConnectionError",
    "LLMGenerationError",
    "LLMModelNotAvailableError",
    "LLMRateLimitError",
    "LLMTimeoutError",
]
