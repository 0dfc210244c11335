"""Textcall exception hierarchy.

All Textcall-specific exceptions inherit from TextcallError.
"""


class TextcallError(Exception):
    """Base exception for all Textcall errors."""


class ConfigError(TextcallError):
    """Raised when a configuration value is missing or invalid."""


class DuplicateToolError(TextcallError):
    """Raised when two tools with the same name are given to a registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool already registered: {name}")


class ConversationError(TextcallError):
    """Raised when a conversation turn cannot be started."""
