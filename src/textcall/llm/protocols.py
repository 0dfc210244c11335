"""LLM client protocol.

Any object with chat() and close() methods matching this signature can
drive a conversation. The built-in GroqClient implements it; tests use
stubs that return canned responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from textcall.models.messages import ChatRequest, ChatResponse


@runtime_checkable
class LLMClient(Protocol):
    """Protocol for pluggable chat completion transports."""

    def chat(self, request: ChatRequest) -> ChatResponse:
        """Send one request and return the decoded response."""
        ...

    def close(self) -> None:
        """Release underlying resources."""
        ...
