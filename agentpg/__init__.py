"""Building blocks for tool-using language-model agents: types, tools, streaming and logging hooks."""

__version__ = "0.1.0"

__all__ = [
    "types",
    "storage",
    "convert",
    "events",
    "accumulator",
    "tool",
    "validator",
    "registry",
    "executor",
    "converter",
    "agent_tool",
    "logging_hooks",
]