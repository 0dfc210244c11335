"""Built-in OpenAI-compatible httpx client for the Groq endpoint.

Provides a sync HTTP client for chat completion APIs. One client (and its
connection pool) is shared across all turns of a session.
"""

from __future__ import annotations

import logging
import os

import httpx
import tenacity
from pydantic import ValidationError

from textcall.llm.errors import (
    LLMAuthError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
    LLMStatusError,
    LLMTransportError,
)
from textcall.models.messages import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "llama-3.3-70b-versatile"
API_KEY_ENV = "GROQ_API_KEY"

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
_AUTH_ERROR_STATUS_CODES = {401, 403}


def _is_retryable(exc: BaseException) -> bool:
    """Check if an exception is retryable.

    Retryable: 429, 500, 502, 503, 504, connection errors.
    Not retryable: 401, 403, 400, other client errors.
    """
    if isinstance(exc, LLMAuthError):
        return False
    if isinstance(exc, LLMStatusError):
        return exc.status_code in _RETRYABLE_STATUS_CODES
    return isinstance(exc, LLMTransportError)


class GroqClient:
    """Sync httpx client for OpenAI-compatible chat completions.

    Implements the LLMClient protocol. Every failure is raised as an
    LLMClientError subclass. By default each request is attempted once;
    pass ``max_retries`` > 1 to retry transient errors (429, 5xx,
    connection failures) with exponential backoff.

    Usage::

        with GroqClient(api_key="gsk-...") as client:
            response = client.chat(request)
            for choice in response.choices:
                print(choice.content())
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        max_retries: int = 1,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: API key. Falls back to the GROQ_API_KEY env var.
            base_url: API base URL. Defaults to the Groq OpenAI-compatible API.
            timeout: Request timeout in seconds.
            max_retries: Total attempts per request (1 disables retry).
            transport: Optional httpx transport, e.g. a MockTransport in tests.

        Raises:
            LLMConfigError: If no API key is provided or found in environment.
        """
        self._api_key = api_key or os.environ.get(API_KEY_ENV, "")
        if not self._api_key:
            raise LLMConfigError(
                f"No API key provided. Pass api_key= or set the {API_KEY_ENV} "
                "environment variable."
            )
        if max_retries < 1:
            raise LLMConfigError("max_retries must be at least 1")
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._max_retries = max_retries
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._api_key}",
            },
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def chat(self, request: ChatRequest) -> ChatResponse:
        """Send a chat completion request.

        Uses tenacity.Retrying programmatically (not as decorator) so that
        max_retries is configurable per-instance.

        Raises:
            LLMAuthError: On 401/403 (never retried).
            LLMRateLimitError: On 429.
            LLMStatusError: On any other non-success status.
            LLMTransportError: On network failures.
            LLMResponseError: On a body that is not a chat completion.
        """
        retryer = tenacity.Retrying(
            retry=tenacity.retry_if_exception(_is_retryable),
            wait=(
                tenacity.wait_exponential(multiplier=1, min=1, max=30)
                + tenacity.wait_random(0, 2)
            ),
            stop=tenacity.stop_after_attempt(self._max_retries),
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return retryer(self._do_chat, request)

    def _do_chat(self, request: ChatRequest) -> ChatResponse:
        """Execute a single chat completion request (no retry)."""
        payload = request.to_payload()
        logger.debug(
            "POST %s/chat/completions (%d messages, %d tools)",
            self._base_url,
            len(request.messages),
            len(request.tools),
        )
        try:
            response = self._client.post(
                f"{self._base_url}/chat/completions",
                json=payload,
            )
        except httpx.HTTPError as exc:
            raise LLMTransportError(f"Request failed: {exc}") from exc

        if response.status_code in _AUTH_ERROR_STATUS_CODES:
            raise LLMAuthError(
                f"Authentication failed: HTTP {response.status_code} - "
                f"{response.text}",
                status_code=response.status_code,
            )

        if response.status_code == 429:
            retry_after_raw = response.headers.get("Retry-After")
            retry_after: float | None = None
            if retry_after_raw is not None:
                try:
                    retry_after = float(retry_after_raw)
                except (ValueError, TypeError):
                    pass
            raise LLMRateLimitError(
                f"Rate limited: HTTP 429 - {response.text}",
                retry_after=retry_after,
            )

        if not response.is_success:
            raise LLMStatusError(
                f"HTTP {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise LLMResponseError(
                f"Response body is not JSON: {response.text[:200]}"
            ) from exc
        if not isinstance(data, dict) or "choices" not in data:
            raise LLMResponseError(
                f"Unexpected response format: missing 'choices' key. "
                f"Response: {data}"
            )
        try:
            return ChatResponse.from_payload(data)
        except ValidationError as exc:
            raise LLMResponseError(f"Malformed choices in response: {exc}") from exc

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> GroqClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
