"""Wire models for OpenAI-compatible chat completions.

Pydantic models for the request and response bodies exchanged with the
completion endpoint. Requests are built fresh per outbound call; responses
are validated from the decoded JSON body.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Role(str, enum.Enum):
    """Message roles understood by the endpoint."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class Message(BaseModel):
    """A single chat message.

    ``role`` is always set. ``content`` may be empty; a null content on the
    wire is read as an empty string. ``tool_calls`` is only populated when
    the endpoint returns native structured tool calls.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    role: Role | str
    content: str = ""
    tool_calls: list[dict[str, Any]] | None = None

    @field_validator("content", mode="before")
    @classmethod
    def _null_content(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the ``{role, content}`` request shape."""
        return {"role": self.role, "content": self.content}


class ToolParameters(BaseModel):
    """JSON schema describing a tool's named parameters."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str = "object"
    properties: dict[str, Any] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class ToolDeclaration(BaseModel):
    """Advisory tool metadata sent to the endpoint with each request."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: ToolParameters = Field(default_factory=ToolParameters)

    def to_openai(self) -> dict[str, Any]:
        """Convert to OpenAI function-calling format.

        Returns:
            Dict with "type": "function" and nested "function" object.
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters.model_dump(),
            },
        }


class ChatRequest(BaseModel):
    """One outbound chat completion request.

    Message order is conversation order.
    """

    model_config = ConfigDict(frozen=True)

    model: str
    messages: list[Message]
    tools: list[ToolDeclaration] = Field(default_factory=list)
    tool_choice: str = "auto"

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON body for the endpoint.

        ``tools`` and ``tool_choice`` are omitted when no tools are declared,
        since OpenAI-compatible endpoints reject a tool choice without tools.
        """
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_wire() for m in self.messages],
        }
        if self.tools:
            payload["tools"] = [t.to_openai() for t in self.tools]
            payload["tool_choice"] = self.tool_choice
        return payload


class Choice(BaseModel):
    """One candidate response.

    Chat completions fill ``message``; legacy text completions fill ``text``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    message: Message | None = None
    text: str | None = None

    def content(self) -> str | None:
        """Return the choice text, preferring the message over raw text.

        Returns None when the choice carries neither.
        """
        if self.message is not None:
            return self.message.content
        return self.text


class ChatResponse(BaseModel):
    """Decoded response body: an ordered list of choices."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    choices: list[Choice]

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> ChatResponse:
        """Validate a decoded JSON body."""
        return cls.model_validate(data)
