"""System prompt for marker-based function calling.

The prompt teaches the model the marker grammar and lists the registered
functions. Tools may contribute a usage hint; tools without one get a
generic line built from their declaration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from textcall.toolkit.registry import FunctionRegistry

SYSTEM_PROMPT_INTRO = "You are a helpful assistant with access to local functions."

SYSTEM_PROMPT_GRAMMAR = (
    "To call a function, respond with exactly one marker of the form "
    '<function=NAME{"param": value}> where the braces hold a JSON object '
    "of the parameters. After receiving results, provide a friendly response."
)


def build_system_prompt(registry: FunctionRegistry) -> str:
    """Render the system prompt for the tools in ``registry``."""
    lines = [SYSTEM_PROMPT_INTRO]
    for tool in registry.tools():
        if tool.prompt_hint:
            lines.append(tool.prompt_hint)
            continue
        params = ", ".join(tool.parameters.get("properties", {}))
        lines.append(f"- {tool.name}({params}): {tool.description}")
    lines.append(SYSTEM_PROMPT_GRAMMAR)
    return "\n".join(lines)
