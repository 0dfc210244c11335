"""Local function toolkit.

Provides tool definitions, the immutable function registry, and the
built-in calculator tool.
"""

from textcall.toolkit.calculator import CALCULATOR_TOOL, calculate, default_registry
from textcall.toolkit.models import (
    ERROR_PREFIX,
    FunctionCallIntent,
    ToolDefinition,
    check_parameters,
)
from textcall.toolkit.registry import FunctionRegistry

__all__ = [
    "CALCULATOR_TOOL",
    "ERROR_PREFIX",
    "FunctionCallIntent",
    "FunctionRegistry",
    "ToolDefinition",
    "calculate",
    "check_parameters",
    "default_registry",
]
