"""Textcall: local function calling for chat completion endpoints.

The model asks for a local function by writing a ``<function=NAME{...}>``
marker in its reply. Textcall detects the marker, runs the registered
handler, and feeds the result back until the model answers in plain text.
"""

from textcall._version import __version__

# Core entry point
from textcall.conversation import Conversation
from textcall.config import AgentConfig

# Wire models
from textcall.models import (
    ChatRequest,
    ChatResponse,
    Choice,
    Message,
    Role,
    ToolDeclaration,
    ToolParameters,
)

# Tools and registry
from textcall.toolkit import (
    CALCULATOR_TOOL,
    FunctionCallIntent,
    FunctionRegistry,
    ToolDefinition,
    calculate,
    check_parameters,
    default_registry,
)

# Intent extraction
from textcall.parsing import (
    Extraction,
    ExtractionKind,
    FirstMatchExtractor,
    IntentExtractor,
    MarkerExtractor,
    NativeToolCallExtractor,
    make_extractor,
)

# Dispatch
from textcall.dispatch import (
    ChoiceOutcome,
    DispatchConfig,
    DispatchLoop,
    FollowUpContext,
    StepResult,
    TurnResult,
)

# LLM client
from textcall.llm import GroqClient, LLMClient

# Exceptions
from textcall.exceptions import (
    ConfigError,
    ConversationError,
    DuplicateToolError,
    TextcallError,
)

__all__ = [
    "__version__",
    "Conversation",
    "AgentConfig",
    "ChatRequest",
    "ChatResponse",
    "Choice",
    "Message",
    "Role",
    "ToolDeclaration",
    "ToolParameters",
    "CALCULATOR_TOOL",
    "FunctionCallIntent",
    "FunctionRegistry",
    "ToolDefinition",
    "calculate",
    "check_parameters",
    "default_registry",
    "Extraction",
    "ExtractionKind",
    "FirstMatchExtractor",
    "IntentExtractor",
    "MarkerExtractor",
    "NativeToolCallExtractor",
    "make_extractor",
    "ChoiceOutcome",
    "DispatchConfig",
    "DispatchLoop",
    "FollowUpContext",
    "StepResult",
    "TurnResult",
    "GroqClient",
    "LLMClient",
    "ConfigError",
    "ConversationError",
    "DuplicateToolError",
    "TextcallError",
]
