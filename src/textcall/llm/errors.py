"""LLM-specific error hierarchy.

All LLM errors inherit from TextcallError for consistent exception handling.
"""

from __future__ import annotations

from textcall.exceptions import TextcallError


class LLMClientError(TextcallError):
    """Base for all LLM client errors."""


class LLMConfigError(LLMClientError):
    """Missing or invalid LLM configuration (e.g., no API key)."""


class LLMTransportError(LLMClientError):
    """The request never produced an HTTP response (network failure)."""


class LLMStatusError(LLMClientError):
    """The endpoint answered with a non-success status.

    Attributes:
        status_code: HTTP status returned by the endpoint.
    """

    def __init__(self, message: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(message)


class LLMRateLimitError(LLMStatusError):
    """Rate limited by the API (429).

    Attributes:
        retry_after: Seconds to wait before retrying (from Retry-After header),
            or None if not provided.
    """

    def __init__(self, message: str = "Rate limited", retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        if retry_after is not None:
            message = f"{message} (retry after {retry_after}s)"
        super().__init__(message, status_code=429)


class LLMAuthError(LLMStatusError):
    """Authentication failed (401/403)."""


class LLMResponseError(LLMClientError):
    """Unexpected response format from LLM API."""
