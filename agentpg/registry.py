"""A thread-safe registry of tools."""

from __future__ import annotations

import threading
from typing import Any, Iterable, Iterator, Optional

from agentpg.tool import Tool


class ToolRegistryError(Exception):
    """Raised when a tool cannot be registered or run."""


class ToolNotFoundError(ToolRegistryError, LookupError):
    """Raised when no tool has the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"tool not found: {name}")
        self.name = name


class ToolRegistry:
    """Holds tools by name and describes them in the API's tool format."""

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}
        self._lock = threading.RLock()

    def register(self, tool: Optional[Tool]) -> None:
        """Add a tool; its name must be new and its schema of type object."""
        if tool is None:
            raise ToolRegistryError("tool cannot be None")
        name = tool.name
        if not name:
            raise ToolRegistryError("tool name cannot be empty")
        schema = tool.input_schema()
        if schema.type != "object":
            raise ToolRegistryError(
                f"tool {name}: schema type must be 'object', got {schema.type}"
            )
        with self._lock:
            if name in self._tools:
                raise ToolRegistryError(f"tool {name} already registered")
            self._tools[name] = tool

    def register_all(self, tools: Iterable[Tool]) -> None:
        """Add tools in order, stopping at the first failure."""
        for tool in tools:
            self.register(tool)

    def get(self, name: str) -> Optional[Tool]:
        """Return the tool with this name, or None."""
        with self._lock:
            return self._tools.get(name)

    def has(self, name: str) -> bool:
        """Whether a tool with this name is registered."""
        with self._lock:
            return name in self._tools

    def names(self) -> list[str]:
        """Names of all registered tools."""
        with self._lock:
            return list(self._tools)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tools)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        with self._lock:
            return iter(list(self._tools.values()))

    def to_api_tools(self) -> list[dict[str, Any]]:
        """Describe every tool as an API tool definition."""
        with self._lock:
            tools = list(self._tools.values())
        return [self._to_api_tool(tool) for tool in tools]

    @staticmethod
    def _to_api_tool(tool: Tool) -> dict[str, Any]:
        schema = tool.input_schema()
        input_schema: dict[str, Any] = {
            "type": "object",
            "properties": {name: prop.to_dict() for name, prop in schema.properties.items()},
        }
        if schema.required:
            input_schema["required"] = list(schema.required)
        return {
            "name": tool.name,
            "description": tool.description,
            "input_schema": input_schema,
        }

    def execute(self, tool_name: str, tool_input: str) -> str:
        """Run the named tool on JSON-encoded input."""
        tool = self.get(tool_name)
        if tool is None:
            raise ToolNotFoundError(tool_name)
        return tool.execute(tool_input)