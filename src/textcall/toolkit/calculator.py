"""Calculator: the built-in demonstration tool.

Performs one arithmetic operation on two numbers. All failures come back
as text starting with ``Error:`` so they flow into the conversation.
"""

from __future__ import annotations

import logging
from typing import Any

from textcall.toolkit.models import ERROR_PREFIX, ToolDefinition, check_parameters
from textcall.toolkit.registry import FunctionRegistry

logger = logging.getLogger(__name__)

CALCULATOR_PARAMETERS: dict = {
    "type": "object",
    "properties": {
        "a": {
            "type": "number",
            "description": "First number",
        },
        "b": {
            "type": "number",
            "description": "Second number",
        },
        "operation": {
            "type": "string",
            "description": "Operation to perform (+, -, *, /)",
            "enum": ["+", "-", "*", "/"],
        },
    },
    "required": ["a", "b", "operation"],
}


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def calculate(params: Any) -> str:
    """Apply ``operation`` to ``a`` and ``b``.

    Args:
        params: Decoded parameter object with keys a, b and operation.

    Returns:
        Sentence describing the result, or error text.
    """
    logger.info("calculate called")

    problem = check_parameters(params, CALCULATOR_PARAMETERS)
    if problem is not None:
        logger.warning("calculate rejected parameters: %s", problem)
        return f"{ERROR_PREFIX} Invalid parameters for calculation: {problem}"

    a, b, op = params["a"], params["b"], params["operation"]
    try:
        if op == "+":
            result = a + b
        elif op == "-":
            result = a - b
        elif op == "*":
            result = a * b
        elif op == "/":
            if b == 0:
                return f"{ERROR_PREFIX} Division by zero"
            result = a / b
        else:
            return f"{ERROR_PREFIX} Unknown operation '{op}'"

        output = (
            f"The result of {_format_number(a)} {op} {_format_number(b)} "
            f"is {_format_number(result)}"
        )
    except (OverflowError, ValueError) as exc:
        # Huge ints overflow float division or exceed the int-to-str digit limit.
        logger.warning("calculate failed: %s", exc)
        return f"{ERROR_PREFIX} Result out of range: {exc}"
    logger.info("calculate output: %s", output)
    return output


CALCULATOR_TOOL = ToolDefinition(
    name="calculate",
    description="Calculator tool that performs basic arithmetic operations",
    parameters=CALCULATOR_PARAMETERS,
    handler=calculate,
    prompt_hint=(
        "When users want to perform arithmetic operations, use the calculate "
        "function by responding with: "
        '<function=calculate{"a": number1, "b": number2, "operation": "op"}> '
        "where op can be +, -, *, or /."
    ),
)


def default_registry() -> FunctionRegistry:
    """Build the registry shipped with the CLI."""
    return FunctionRegistry([CALCULATOR_TOOL])
