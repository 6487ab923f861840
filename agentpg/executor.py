"""Running tool calls with timeouts, one after another or in parallel."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from agentpg.registry import ToolNotFoundError, ToolRegistry
from agentpg.validator import Validator

DEFAULT_TIMEOUT = 30.0


class ToolTimeoutError(TimeoutError):
    """Raised in a result when a tool does not finish within its timeout."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"tool execution timeout after {timeout}s")
        self.timeout = timeout


@dataclass
class ExecuteResult:
    """The outcome of one tool call; duration is in seconds."""

    tool_name: str
    tool_input: str
    output: str = ""
    error: Optional[BaseException] = None
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        """Whether the call finished without error."""
        return self.error is None


@dataclass(frozen=True)
class ToolCallRequest:
    """A request to run a tool."""

    id: str
    tool_name: str
    tool_input: str = "{}"


class Executor:
    """Runs tools from a registry, turning failures into results."""

    def __init__(self, registry: ToolRegistry, default_timeout: float = DEFAULT_TIMEOUT) -> None:
        self.registry = registry
        self.validator = Validator()
        self.default_timeout = default_timeout

    def execute(self, tool_name: str, tool_input: str) -> ExecuteResult:
        """Run one tool call; errors and timeouts are reported in the result."""
        start = time.monotonic()
        outcome: dict[str, Any] = {}
        done = threading.Event()

        def run() -> None:
            try:
                outcome["output"] = self.registry.execute(tool_name, tool_input)
            except Exception as exc:  # the tool's failure becomes the result's error
                outcome["error"] = exc
            finally:
                done.set()

        threading.Thread(target=run, name=f"tool-{tool_name}", daemon=True).start()
        finished = done.wait(self.default_timeout)
        duration = time.monotonic() - start

        if not finished:
            return ExecuteResult(
                tool_name=tool_name,
                tool_input=tool_input,
                error=ToolTimeoutError(self.default_timeout),
                duration=duration,
            )
        return ExecuteResult(
            tool_name=tool_name,
            tool_input=tool_input,
            output=outcome.get("output", ""),
            error=outcome.get("error"),
            duration=duration,
        )

    def execute_multiple(self, calls: Sequence[ToolCallRequest]) -> list[ExecuteResult]:
        """Run calls one after another, in order."""
        return [self.execute(call.tool_name, call.tool_input) for call in calls]

    def execute_parallel(self, calls: Sequence[ToolCallRequest]) -> list[ExecuteResult]:
        """Run calls concurrently; results keep the order of the calls."""
        if not calls:
            return []
        with ThreadPoolExecutor(max_workers=len(calls)) as pool:
            return list(pool.map(lambda call: self.execute(call.tool_name, call.tool_input), calls))

    def execute_batch(self, calls: Sequence[ToolCallRequest], parallel: bool) -> list[ExecuteResult]:
        """Run calls in parallel or in sequence."""
        if parallel:
            return self.execute_parallel(calls)
        return self.execute_multiple(calls)

    def validate_input(self, tool_name: str, tool_input: str) -> dict[str, Any]:
        """Check input against the named tool's schema and return the decoded input."""
        tool = self.registry.get(tool_name)
        if tool is None:
            raise ToolNotFoundError(tool_name)
        return self.validator.validate_input(tool.input_schema(), tool_input)