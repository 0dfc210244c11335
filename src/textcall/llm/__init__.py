"""LLM client infrastructure for Textcall.

Provides the Groq (OpenAI-compatible) HTTP client, the pluggable client
protocol, and the LLM error hierarchy.
"""

from textcall.llm.client import DEFAULT_BASE_URL, DEFAULT_MODEL, GroqClient
from textcall.llm.errors import (
    LLMAuthError,
    LLMClientError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
    LLMStatusError,
    LLMTransportError,
)
from textcall.llm.protocols import LLMClient

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_MODEL",
    "GroqClient",
    "LLMClient",
    "LLMClientError",
    "LLMConfigError",
    "LLMRateLimitError",
    "LLMAuthError",
    "LLMResponseError",
    "LLMStatusError",
    "LLMTransportError",
]
