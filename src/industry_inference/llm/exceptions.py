"""
Custom exceptions for the LLM client layer.

The AI classifier adapter catches every LLMClientError and turns it into a
fallback outcome, so these never reach an HTTP caller. The subclasses exist
so logs and metrics can tell the failure modes apart.
"""


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.

    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LLMConnectionError(LLMClientError):
    """
    Raised when unable to connect to the completion provider.

    Network failures and DNS errors. Retried with backoff inside the client.
    """


class LLMTimeoutError(LLMConnectionError):
    """Raised when a single HTTP request exceeds the client timeout."""


class LLMGenerationError(LLMClientError):
    """
    Raised when the provider answers but the answer is unusable.

    Examples:
    - 4xx/5xx status
    - Body is not JSON or has no choices
    - Empty message content
    """


class LLMRateLimitError(LLMClientError):
    """Raised on HTTP 429. Not retried: the AI tier budget is only a few seconds."""


class LLMModelNotAvailableError(LLMGenerationError):
    """Raised when the configured model does not exist on the provider."""


class LLMAuthenticationError(LLMGenerationError):
    """Raised on HTTP 401/403 (missing or revoked API key)."""
