"""The tool interface and the JSON Schema used to describe tool input."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol, runtime_checkable


@dataclass
class PropertyDef:
    """One property of a tool's input schema."""

    type: str
    description: str = ""
    enum: list[str] = field(default_factory=list)
    items: Optional[PropertyDef] = None
    properties: dict[str, PropertyDef] = field(default_factory=dict)
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON Schema form, leaving out unset fields."""
        out: dict[str, Any] = {"type": self.type}
        if self.description:
            out["description"] = self.description
        if self.enum:
            out["enum"] = list(self.enum)
        if self.items is not None:
            out["items"] = self.items.to_dict()
        if self.properties:
            out["properties"] = {name: prop.to_dict() for name, prop in self.properties.items()}
        if self.minimum is not None:
            out["minimum"] = self.minimum
        if self.maximum is not None:
            out["maximum"] = self.maximum
        if self.min_length is not None:
            out["minLength"] = self.min_length
        if self.max_length is not None:
            out["maxLength"] = self.max_length
        return out


@dataclass
class ToolSchema:
    """The JSON Schema of a tool's input; its type must be "object"."""

    type: str = "object"
    properties: dict[str, PropertyDef] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON Schema form."""
        out: dict[str, Any] = {
            "type": self.type,
            "properties": {name: prop.to_dict() for name, prop in self.properties.items()},
        }
        if self.required:
            out["required"] = list(self.required)
        return out


@runtime_checkable
class Tool(Protocol):
    """What every tool provides: a name, a description, a schema and an execute call."""

    name: str
    description: str

    def input_schema(self) -> ToolSchema:
        """Return the JSON Schema of the tool's input."""

    def execute(self, tool_input: str) -> str:
        """Run the tool on JSON-encoded input and return its output."""


@dataclass
class FuncTool:
    """A tool backed by a plain function taking the JSON-encoded input."""

    name: str
    description: str
    schema: ToolSchema
    fn: Callable[[str], str]

    def input_schema(self) -> ToolSchema:
        """Return the schema given at construction."""
        return self.schema

    def execute(self, tool_input: str) -> str:
        """Call the wrapped function."""
        return self.fn(tool_input)


def new_func_tool(
    name: str, description: str, schema: ToolSchema, fn: Callable[[str], str]
) -> FuncTool:
    """Create a tool from a function."""
    return FuncTool(name=name, description=description, schema=schema, fn=fn)