"""Test helpers: a recording stub client and response builders."""

from __future__ import annotations

import json

from textcall.models.messages import ChatRequest, ChatResponse


def message_response(*contents: str | None) -> ChatResponse:
    """Build a chat completion response with one message choice per content."""
    return ChatResponse.from_payload({
        "id": "chatcmpl-test123",
        "object": "chat.completion",
        "choices": [
            {
                "index": i,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
            for i, content in enumerate(contents)
        ],
    })


def marker(name: str, params: dict) -> str:
    """Render a function call marker as a model would write it."""
    return f"<function={name}{json.dumps(params)}>"


class StubClient:
    """A fake LLM client that records requests and returns responses in order."""

    def __init__(self, *responses: ChatResponse) -> None:
        self.requests: list[ChatRequest] = []
        self._responses = list(responses)
        self.closed = False

    def queue(self, *responses: ChatResponse) -> None:
        self._responses.extend(responses)

    def chat(self, request: ChatRequest) -> ChatResponse:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError("StubClient received an unexpected request")
        return self._responses.pop(0)

    def close(self) -> None:
        self.closed = True
