"""Data models for chat completion requests and responses."""

from textcall.models.messages import (
    ChatRequest,
    ChatResponse,
    Choice,
    Message,
    Role,
    ToolDeclaration,
    ToolParameters,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "Choice",
    "Message",
    "Role",
    "ToolDeclaration",
    "ToolParameters",
]
