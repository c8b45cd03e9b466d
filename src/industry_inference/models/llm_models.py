"""
LLM-specific data models for the request/response cycle.

These models are internal to the LLM layer and handle the raw communication
with the completion provider. They are kept separate from the classification
models so the underlying client implementation can change freely.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class LLMGenerationRequest(BaseModel):
    """
    Provider-agnostic generation request.

    Sent to any BaseLLMClient implementation as system + user messages.
    """

    model_config = ConfigDict(frozen=True)

    system_prompt: Optional[str] = Field(default=None, description="System message, if any")
    prompt: str = Field(..., description="User message")
    model: str = Field(..., description="Model name (e.g. 'deepseek-chat')")
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_tokens: int = Field(default=500, ge=1, le=8192)
    json_mode: bool = Field(default=True, description="Ask the provider for a JSON object reply")


class LLMGenerationResponse(BaseModel):
    """
    Raw generation result plus metadata for logging and metrics.

    Content is validated later by the validation pipeline.
    """

    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Generated text")
    model_version: str = Field(..., description="Model reported by the provider")
    finish_reason: str = Field(..., description="Why generation stopped ('stop', 'length', ...)")
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    usage_tokens: Optional[int] = None
    latency_ms: int = Field(..., ge=0)
    raw_metadata: Dict[str, Any] = Field(default_factory=dict)
