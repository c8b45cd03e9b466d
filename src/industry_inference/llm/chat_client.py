"""
OpenAI-compatible chat completions client (DeepSeek by default).

Communicates with ``POST /chat/completions`` using httpx AsyncClient:
- JSON mode via ``response_format``
- Connection pooling through a persistent AsyncClient
- Connection-level retries with exponential backoff
- Token and latency metrics per call
"""

import asyncio
import json
import time
from typing import Any, Optional

import httpx
import structlog

from industry_inference.llm.base_client import BaseLLMClient
from industry_inference.llm.exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from industry_inference.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from industry_inference.monitoring.metrics import llm_latency_seconds, llm_tokens_total

logger = structlog.get_logger(__name__)


class ChatCompletionClient(BaseLLMClient):
    """
    LLM client for any provider speaking the OpenAI chat completions API.

    API Endpoints:
    - POST /chat/completions: generate a reply for system + user messages
    - GET /models: health check
    """

    def __init__(
        self,
        base_url: str = "https://api.deepseek.com",
        api_key: Optional[str] = None,
        timeout: float = 5.0,
        max_retries: int = 2,
        retry_backoff: float = 0.25,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs,
    ):
        """
        Initialize chat completions client.

        Args:
            base_url: Provider URL
            api_key: Bearer token; requests are sent without auth when None
            timeout: Per-request timeout in seconds
            max_retries: Connection-level attempts for network errors
            retry_backoff: First backoff in seconds, doubled per attempt
            connection_limits: httpx connection pool limits
            transport: Custom httpx transport (tests use httpx.MockTransport)
            **kwargs: Additional config
        """
        super().__init__(base_url, timeout, max_retries, **kwargs)
        self.api_key = api_key
        self.retry_backoff = retry_backoff

        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=10,
                max_connections=20,
                keepalive_expiry=30.0,
            )
        self._connection_limits = connection_limits
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                headers=self._headers(),
                transport=self._transport,
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client

    @staticmethod
    def build_payload(request: LLMGenerationRequest) -> dict[str, Any]:
        messages = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.append({"role": "user", "content": request.prompt})

        payload: dict[str, Any] = {
            "model": request.model,
            "messages": messages,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "stream": False,
        }
        if request.json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate a completion via ``POST /chat/completions``.

        Response shape:
        {
            "model": "deepseek-chat",
            "choices": [{"message": {"content": "..."}, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 120, "completion_tokens": 40, "total_tokens": 160}
        }
        """
        start_time = time.monotonic()
        payload = self.build_payload(request)

        logger.info(
            "Sending chat completion request",
            model=request.model,
            prompt_length=len(request.prompt),
            temperature=request.temperature,
            max_tokens=request.max_tokens,
            json_mode=request.json_mode,
        )

        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_retries + 1):
            try:
                client = await self._get_client()
                response = await client.post("/chat/completions", json=payload)
                response.raise_for_status()
                return self._parse_response(response, request, start_time, attempt)

            except httpx.TimeoutException as e:
                logger.warning(
                    "Chat completion timeout",
                    attempt=attempt,
                    max_retries=self.max_retries,
                    timeout=self.timeout,
                    error=str(e),
                )
                last_error = LLMTimeoutError(
                    f"Request timeout after {self.timeout}s",
                    details={"attempt": attempt, "timeout": self.timeout},
                )

            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                logger.error(
                    "Chat completion HTTP error",
                    status_code=status_code,
                    error_text=e.response.text[:500],
                    attempt=attempt,
                )
                self._observe_failure(request, start_time)
                if status_code == 429:
                    raise LLMRateLimitError(
                        "Rate limited by provider", details={"status": status_code}
                    ) from e
                if status_code in (401, 403):
                    raise LLMAuthenticationError(
                        "Provider rejected credentials", details={"status": status_code}
                    ) from e
                if status_code == 404:
                    raise LLMModelNotAvailableError(
                        f"Model not found: {request.model}",
                        details={"model": request.model, "status": status_code},
                    ) from e
                if status_code < 500:
                    raise LLMGenerationError(
                        f"Provider client error: {status_code}",
                        details={"status": status_code, "error": e.response.text[:500]},
                    ) from e
                last_error = LLMGenerationError(
                    f"Provider server error: {status_code}",
                    details={"status": status_code},
                )

            except httpx.TransportError as e:
                logger.warning(
                    "Chat completion network error",
                    attempt=attempt,
                    max_retries=self.max_retries,
                    error=str(e),
                )
                last_error = LLMConnectionError(
                    f"Network error: {str(e)}",
                    details={"attempt": attempt, "error_type": type(e).__name__},
                )

            if attempt < self.max_retries:
                backoff = self.retry_backoff * (2 ** (attempt - 1))
                logger.info("Retrying chat completion", backoff_seconds=backoff, attempt=attempt)
                await asyncio.sleep(backoff)

        self._observe_failure(request, start_time)
        raise last_error or LLMConnectionError("No attempt was made")

    def _parse_response(
        self,
        response: httpx.Response,
        request: LLMGenerationRequest,
        start_time: float,
        attempt: int,
    ) -> LLMGenerationResponse:
        try:
            data = response.json()
        except json.JSONDecodeError as e:
            self._observe_failure(request, start_time)
            raise LLMGenerationError(
                "Invalid JSON response from provider",
                details={"parse_error": str(e)},
            ) from e

        choices = data.get("choices") or []
        if not choices:
            self._observe_failure(request, start_time)
            raise LLMGenerationError("Provider returned no choices", details={"response": data})

        choice = choices[0]
        content = (choice.get("message") or {}).get("content") or ""
        if not content.strip():
            self._observe_failure(request, start_time)
            raise LLMGenerationError("Empty completion content", details={"response": data})

        latency_ms = int((time.monotonic() - start_time) * 1000)
        model_version = data.get("model") or request.model
        usage = data.get("usage") or {}
        prompt_tokens = usage.get("prompt_tokens")
        completion_tokens = usage.get("completion_tokens")

        logger.info(
            "Chat completion successful",
            model=model_version,
            latency_ms=latency_ms,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            finish_reason=choice.get("finish_reason"),
            attempt=attempt,
        )

        llm_latency_seconds.labels(model=model_version, success="true").observe(latency_ms / 1000.0)
        if prompt_tokens:
            llm_tokens_total.labels(model=model_version, token_type="prompt").inc(prompt_tokens)
        if completion_tokens:
            llm_tokens_total.labels(model=model_version, token_type="completion").inc(completion_tokens)

        return LLMGenerationResponse(
            content=content,
            model_version=model_version,
            finish_reason=choice.get("finish_reason") or "unknown",
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            usage_tokens=usage.get("total_tokens"),
            latency_ms=latency_ms,
            raw_metadata={"id": data.get("id"), "created": data.get("created")},
        )

    @staticmethod
    def _observe_failure(request: LLMGenerationRequest, start_time: float) -> None:
        llm_latency_seconds.labels(model=request.model, success="false").observe(
            time.monotonic() - start_time
        )

    async def health_check(self) -> bool:
        try:
            client = await self._get_client()
            response = await client.get("/models", timeout=2.0)
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning("LLM health check failed", error=str(e))
            return False

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            logger.info("Chat completion client closed")
        self._client = None
