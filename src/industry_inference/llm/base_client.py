"""
Abstract base client for LLM completion providers.

The rest of the service sees the provider as ``generate(request) ->
response``. Provider identity, auth and rate limits stay behind this
interface.
"""

from abc import ABC, abstractmethod

import structlog

from industry_inference.models.llm_models import LLMGenerationRequest, LLMGenerationResponse

logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for LLM clients.

    Responsibilities:
    - Send generation requests to the provider
    - Parse responses into LLMGenerationResponse
    - Map transport failures onto LLMClientError subclasses

    Does NOT handle:
    - Prompt construction (that's PromptBuilder's job)
    - Response validation (that's ValidationPipeline's job)
    - The overall time budget (that's AIClassifierAdapter's job)
    """

    def __init__(self, base_url: str, timeout: float = 5.0, max_retries: int = 2, **kwargs):
        """
        Initialize base client.

        Args:
            base_url: Provider base URL (e.g., https://api.deepseek.com)
            timeout: Per-request timeout in seconds
            max_retries: Connection-level attempts for network errors
            **kwargs: Additional provider-specific config
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.extra_config = kwargs

        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            base_url=self.base_url,
            timeout=timeout,
            max_retries=self.max_retries,
        )

    @abstractmethod
    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate a completion.

        Raises:
            LLMConnectionError: Network errors after retries
            LLMTimeoutError: Request exceeded timeout after retries
            LLMRateLimitError: Provider throttled the request
            LLMGenerationError: Provider-side or response-shape errors
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Lightweight reachability check.

        Must NOT raise - return False on error.
        """

    async def close(self) -> None:
        """Release pooled connections. Called on app shutdown."""
        logger.debug("Closing LLM client", client_class=self.__class__.__name__)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_url={self.base_url}, timeout={self.timeout}s)"
