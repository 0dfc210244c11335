"""Tests for the local function toolkit.

Tests cover the FunctionRegistry, tool declarations, parameter shape
checking, and the built-in calculator handler.
"""

from __future__ import annotations

import sys

import pytest

from textcall.exceptions import DuplicateToolError
from textcall.toolkit import (
    CALCULATOR_TOOL,
    ERROR_PREFIX,
    FunctionRegistry,
    ToolDefinition,
    calculate,
    check_parameters,
    default_registry,
)


def _echo_tool(name: str = "echo") -> ToolDefinition:
    return ToolDefinition(
        name=name,
        description="Echo the text parameter back",
        parameters={
            "type": "object",
            "properties": {"text": {"type": "string", "description": "Text"}},
            "required": ["text"],
        },
        handler=lambda params: params["text"],
    )


# ===========================================================================
# FunctionRegistry
# ===========================================================================


class TestFunctionRegistry:

    def test_lookup_returns_handler(self, registry):
        assert registry.lookup("calculate") is calculate

    def test_lookup_unknown_returns_none(self, registry):
        assert registry.lookup("missing") is None
        assert registry.get("missing") is None

    def test_names_keep_registration_order(self):
        registry = FunctionRegistry([_echo_tool("b"), _echo_tool("a")])
        assert registry.names() == ["b", "a"]
        assert list(registry) == ["b", "a"]
        assert len(registry) == 2

    def test_duplicate_name_rejected(self):
        with pytest.raises(DuplicateToolError, match="echo"):
            FunctionRegistry([_echo_tool(), _echo_tool()])

    def test_contains(self, registry):
        assert "calculate" in registry
        assert "echo" not in registry

    def test_table_is_read_only(self, registry):
        with pytest.raises(TypeError):
            registry._tools["echo"] = _echo_tool()

    def test_empty_registry(self):
        registry = FunctionRegistry()
        assert len(registry) == 0
        assert registry.declarations() == []

    def test_default_registry_has_calculator(self):
        assert default_registry().names() == ["calculate"]

    def test_separate_registries_are_independent(self):
        custom = FunctionRegistry([_echo_tool()])
        assert "echo" in custom
        assert "echo" not in default_registry()


class TestDeclarations:

    def test_calculator_declaration_wire_shape(self):
        oai = CALCULATOR_TOOL.to_openai()
        assert oai["type"] == "function"
        func = oai["function"]
        assert func["name"] == "calculate"
        assert func["description"] == CALCULATOR_TOOL.description
        assert func["parameters"]["type"] == "object"
        assert set(func["parameters"]["properties"]) == {"a", "b", "operation"}
        assert func["parameters"]["required"] == ["a", "b", "operation"]
        assert func["parameters"]["properties"]["operation"]["enum"] == ["+", "-", "*", "/"]

    def test_registry_declarations_match_tools(self, registry):
        decls = registry.declarations()
        assert [d.name for d in decls] == ["calculate"]
        assert decls[0].to_openai() == CALCULATOR_TOOL.to_openai()


# ===========================================================================
# check_parameters
# ===========================================================================


class TestCheckParameters:
    schema = {
        "type": "object",
        "properties": {
            "n": {"type": "number"},
            "i": {"type": "integer"},
            "s": {"type": "string"},
            "flag": {"type": "boolean"},
        },
        "required": ["n"],
    }

    def test_valid(self):
        assert check_parameters({"n": 1.5, "i": 2, "s": "x", "flag": True}, self.schema) is None

    def test_int_is_a_number(self):
        assert check_parameters({"n": 3}, self.schema) is None

    def test_missing_required(self):
        assert check_parameters({}, self.schema) == "missing required parameter 'n'"

    def test_wrong_type(self):
        assert "must be of type string" in check_parameters({"n": 1, "s": 5}, self.schema)

    def test_bool_is_not_a_number(self):
        assert "must be of type number" in check_parameters({"n": True}, self.schema)

    def test_float_is_not_an_integer(self):
        assert "must be of type integer" in check_parameters({"n": 1, "i": 1.5}, self.schema)

    def test_not_an_object(self):
        assert check_parameters([1, 2], self.schema) == "expected an object, got list"

    def test_undeclared_parameters_are_allowed(self):
        assert check_parameters({"n": 1, "extra": object()}, self.schema) is None


# ===========================================================================
# Calculator
# ===========================================================================


class TestCalculator:

    def test_addition(self):
        result = calculate({"a": 6, "b": 3, "operation": "+"})
        assert "9" in result
        assert result == "The result of 6 + 3 is 9"

    @pytest.mark.parametrize(
        "a, b, op, expected",
        [
            (10, 4, "-", "The result of 10 - 4 is 6"),
            (2.5, 4, "*", "The result of 2.5 * 4 is 10"),
            (7, 2, "/", "The result of 7 / 2 is 3.5"),
            (6.0, 3.0, "/", "The result of 6 / 3 is 2"),
        ],
    )
    def test_operations(self, a, b, op, expected):
        assert calculate({"a": a, "b": b, "operation": op}) == expected

    def test_division_by_zero(self):
        result = calculate({"a": 5, "b": 0, "operation": "/"})
        assert result.startswith(ERROR_PREFIX)
        assert "Division by zero" in result

    def test_unknown_operation(self):
        result = calculate({"a": 1, "b": 1, "operation": "%"})
        assert result == "Error: Unknown operation '%'"

    def test_missing_parameter(self):
        result = calculate({"a": 1, "operation": "+"})
        assert result.startswith(ERROR_PREFIX)
        assert "missing required parameter 'b'" in result

    def test_string_number_rejected(self):
        result = calculate({"a": "1", "b": 2, "operation": "+"})
        assert result.startswith(ERROR_PREFIX)
        assert "'a'" in result

    def test_non_object_parameters(self):
        result = calculate([1, 2, "+"])
        assert result.startswith(ERROR_PREFIX)

    def test_float_overflow_is_error_text(self):
        result = calculate({"a": 10**400, "b": 1, "operation": "/"})
        assert result.startswith(ERROR_PREFIX)
        assert "out of range" in result

    @pytest.mark.skipif(
        not hasattr(sys, "get_int_max_str_digits"),
        reason="interpreter has no int string conversion limit",
    )
    def test_result_too_long_to_print_is_error_text(self):
        result = calculate({"a": 10**2200, "b": 10**2200, "operation": "*"})
        assert result.startswith(ERROR_PREFIX)
        assert "out of range" in result

    def test_float_infinity_is_a_result(self):
        assert calculate({"a": 1e308, "b": 10, "operation": "*"}) == (
            "The result of 1e+308 * 10 is inf"
        )

    def test_never_raises_on_garbage(self):
        for params in (None, 42, "text", {}, {"a": None, "b": None, "operation": None}):
            assert calculate(params).startswith(ERROR_PREFIX)
