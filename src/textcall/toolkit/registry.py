"""FunctionRegistry: immutable name -> tool lookup table.

Built once from a sequence of ToolDefinitions and never changed afterwards,
so a single registry can be shared by any number of conversations.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from textcall.exceptions import DuplicateToolError

if TYPE_CHECKING:
    from collections.abc import Callable

    from textcall.models.messages import ToolDeclaration
    from textcall.toolkit.models import ToolDefinition

logger = logging.getLogger(__name__)


class FunctionRegistry:
    """Read-only mapping from function name to tool definition.

    There is no registration API after construction; adding a capability
    means passing another ToolDefinition when the registry is built.

    Usage::

        registry = FunctionRegistry([CALCULATOR_TOOL])
        handler = registry.lookup("calculate")
        if handler is not None:
            text = handler({"a": 1, "b": 2, "operation": "+"})
    """

    def __init__(self, tools: Iterable[ToolDefinition] = ()) -> None:
        table: dict[str, ToolDefinition] = {}
        for tool in tools:
            if tool.name in table:
                raise DuplicateToolError(tool.name)
            table[tool.name] = tool
        self._tools = MappingProxyType(table)
        logger.debug("Registry built with tools: %s", ", ".join(table) or "(none)")

    def lookup(self, name: str) -> Callable[[Any], str] | None:
        """Return the handler registered under ``name``, or None."""
        tool = self._tools.get(name)
        return tool.handler if tool is not None else None

    def get(self, name: str) -> ToolDefinition | None:
        """Return the full tool definition registered under ``name``, or None."""
        return self._tools.get(name)

    def names(self) -> list[str]:
        """Return registered names in registration order."""
        return list(self._tools)

    def tools(self) -> list[ToolDefinition]:
        """Return registered tool definitions in registration order."""
        return list(self._tools.values())

    def declarations(self) -> list[ToolDeclaration]:
        """Return the endpoint-facing declaration of every registered tool."""
        return [tool.declaration() for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)
