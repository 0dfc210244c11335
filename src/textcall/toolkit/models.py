"""Toolkit data models for locally registered functions.

Frozen dataclasses for tool definitions and parsed call intents, plus the
shared parameter shape check handlers use before doing any work.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from textcall.models.messages import ToolDeclaration, ToolParameters

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

#: Prefix every handler uses for error text returned into the conversation.
ERROR_PREFIX = "Error:"

_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "number": (int, float),
    "integer": (int,),
    "boolean": (bool,),
    "object": (dict,),
    "array": (list,),
}


@dataclass(frozen=True)
class ToolDefinition:
    """A locally executable function and its advertised schema.

    Attributes:
        name: Function name the model uses in a marker (e.g. "calculate").
        description: Human-readable description of what the tool does.
        parameters: JSON Schema dict describing the tool parameters.
        handler: Callable taking the decoded parameter object and
            returning result text. Must not raise on bad input.
        prompt_hint: Optional sentence added to the system prompt telling
            the model how to invoke this tool.
    """

    name: str
    description: str
    parameters: dict
    handler: Callable[[Any], str]
    prompt_hint: str | None = None

    def declaration(self) -> ToolDeclaration:
        """Return the advisory declaration sent to the endpoint."""
        return ToolDeclaration(
            name=self.name,
            description=self.description,
            parameters=ToolParameters.model_validate(self.parameters),
        )

    def to_openai(self) -> dict:
        """Convert to OpenAI function-calling format."""
        return self.declaration().to_openai()


@dataclass(frozen=True)
class FunctionCallIntent:
    """A function call requested by the model.

    Exists only within one dispatch step.

    Attributes:
        function_name: Name extracted from the model output.
        raw_parameters: Parameter text exactly as it appeared.
        parameters: Decoded parameter object.
    """

    function_name: str
    raw_parameters: str
    parameters: dict = field(default_factory=dict)


def _matches_type(value: Any, json_type: str) -> bool:
    expected = _JSON_TYPES.get(json_type)
    if expected is None:
        return True
    # bool is an int subclass but never a JSON number
    if isinstance(value, bool) and json_type in ("number", "integer"):
        return False
    return isinstance(value, expected)


def check_parameters(params: Any, schema: dict) -> str | None:
    """Check a decoded parameter value against a tool schema.

    Only presence of required fields and JSON types of declared fields are
    checked. Enum membership and value ranges are left to the handler.

    Args:
        params: The decoded parameter value.
        schema: JSON Schema dict with ``properties`` and ``required``.

    Returns:
        A description of the first problem found, or None if the shape
        is acceptable.
    """
    if not isinstance(params, dict):
        return f"expected an object, got {type(params).__name__}"

    properties = schema.get("properties", {})
    for name in schema.get("required", []):
        if name not in params:
            return f"missing required parameter '{name}'"

    for name, value in params.items():
        declared = properties.get(name)
        if declared is None:
            continue
        json_type = declared.get("type")
        if json_type and not _matches_type(value, json_type):
            return f"parameter '{name}' must be of type {json_type}"
    return None
