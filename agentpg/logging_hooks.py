"""Ready-made hooks for logging and metrics."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping, Optional, Sequence

from agentpg.types import Message, Response

_PREVIEW_LIMIT = 100


def _plain(value: Any) -> Any:
    return getattr(value, "value", value)


def _reduction(result: Any) -> Optional[float]:
    if result.original_tokens > 0:
        return (result.original_tokens - result.compacted_tokens) / result.original_tokens * 100
    return None


class LoggingHooks:
    """Logs one line per agent event."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger if logger is not None else logging.getLogger("agentpg")

    def before_message(self, messages: Sequence[Message]) -> None:
        """Log how many messages are about to be sent."""
        self.logger.info("[AgentPG] Sending %d messages to Anthropic API", len(messages or ()))

    def after_message(self, response: Response) -> None:
        """Log the stop reason of a response."""
        self.logger.info(
            "[AgentPG] Received response from Anthropic API: stop_reason=%s", response.stop_reason
        )

    def tool_call(
        self, tool_name: str, tool_input: Optional[str], output: str, error: Optional[BaseException]
    ) -> None:
        """Log a tool's failure, or a preview of its output."""
        if error is not None:
            self.logger.info("[AgentPG] Tool '%s' failed: %s", tool_name, error)
            return
        preview = output
        if len(preview) > _PREVIEW_LIMIT:
            preview = preview[:_PREVIEW_LIMIT] + "..."
        self.logger.info("[AgentPG] Tool '%s' succeeded: %s", tool_name, preview)

    def before_compaction(self, session_id: str) -> None:
        """Log the start of a compaction."""
        self.logger.info("[AgentPG] Starting context compaction for session %s", session_id)

    def after_compaction(self, result: Any) -> None:
        """Log the outcome of a compaction."""
        reduction = _reduction(result) or 0.0
        self.logger.info(
            "[AgentPG] Compaction complete: %d → %d tokens "
            "(%.1f%% reduction, %d messages removed, strategy: %s)",
            result.original_tokens,
            result.compacted_tokens,
            reduction,
            result.messages_removed,
            _plain(result.strategy),
        )


def default_logging_hooks() -> LoggingHooks:
    """Logging hooks writing to the package logger."""
    return LoggingHooks(logging.getLogger("agentpg"))


class VerboseLoggingHooks:
    """Logs agent events in detail, for debugging."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger if logger is not None else logging.getLogger("agentpg")

    def before_message(self, messages: Sequence[Message]) -> None:
        """Log each message's role."""
        messages = messages or ()
        self.logger.info("[AgentPG][VERBOSE] === Sending %d messages ===", len(messages))
        for position, msg in enumerate(messages):
            self.logger.info("[AgentPG][VERBOSE] Message %d: role=%s", position, _plain(msg.role))

    def after_message(self, response: Response) -> None:
        """Log the stop reason and token usage."""
        self.logger.info("[AgentPG][VERBOSE] Response: stop_reason=%s", response.stop_reason)
        usage = response.usage
        if usage is not None:
            self.logger.info(
                "[AgentPG][VERBOSE] Usage: %d input + %d output = %d total tokens",
                usage.input_tokens,
                usage.output_tokens,
                usage.input_tokens + usage.output_tokens,
            )

    def tool_call(
        self, tool_name: str, tool_input: Optional[str], output: str, error: Optional[BaseException]
    ) -> None:
        """Log a tool's input and its full output or error."""
        start = time.monotonic()
        self.logger.info("[AgentPG][VERBOSE] === Tool Call: %s ===", tool_name)
        self.logger.info("[AgentPG][VERBOSE] Input: %s", tool_input or "")
        if error is not None:
            self.logger.info("[AgentPG][VERBOSE] Error: %s", error)
        else:
            self.logger.info("[AgentPG][VERBOSE] Output: %s", output)
        self.logger.info("[AgentPG][VERBOSE] Duration: %.6fs", time.monotonic() - start)

    def before_compaction(self, session_id: str) -> None:
        """Log the start of a compaction."""
        self.logger.info("[AgentPG][VERBOSE] === Starting Compaction ===")
        self.logger.info("[AgentPG][VERBOSE] Session: %s", session_id)

    def after_compaction(self, result: Any) -> None:
        """Log every figure of a compaction."""
        self.logger.info("[AgentPG][VERBOSE] === Compaction Complete ===")
        self.logger.info("[AgentPG][VERBOSE] Strategy: %s", _plain(result.strategy))
        self.logger.info("[AgentPG][VERBOSE] Original tokens: %d", result.original_tokens)
        self.logger.info("[AgentPG][VERBOSE] Compacted tokens: %d", result.compacted_tokens)
        self.logger.info("[AgentPG][VERBOSE] Messages removed: %d", result.messages_removed)
        reduction = _reduction(result)
        if reduction is not None:
            self.logger.info("[AgentPG][VERBOSE] Reduction: %.1f%%", reduction)


MetricCallback = Callable[[str, float, Optional[Mapping[str, str]]], None]


class MetricsHooks:
    """Reports agent events as named metric values."""

    def __init__(self, on_metric: MetricCallback) -> None:
        self.on_metric = on_metric

    def after_message(self, response: Response) -> None:
        """Report input, output and total tokens."""
        usage = response.usage
        if usage is None:
            return
        self.on_metric("agent.tokens.input", float(usage.input_tokens), None)
        self.on_metric("agent.tokens.output", float(usage.output_tokens), None)
        self.on_metric(
            "agent.tokens.total", float(usage.input_tokens + usage.output_tokens), None
        )

    def tool_call(
        self, tool_name: str, tool_input: Optional[str], output: str, error: Optional[BaseException]
    ) -> None:
        """Count a tool success or error, tagged with the tool name."""
        tags = {"tool": tool_name}
        name = "agent.tool.error" if error is not None else "agent.tool.success"
        self.on_metric(name, 1.0, tags)

    def after_compaction(self, result: Any) -> None:
        """Report token counts before and after compaction, and the reduction."""
        tags = {"strategy": _plain(result.strategy)}
        self.on_metric("agent.compaction.original_tokens", float(result.original_tokens), tags)
        self.on_metric("agent.compaction.compacted_tokens", float(result.compacted_tokens), tags)
        reduction = _reduction(result)
        if reduction is not None:
            self.on_metric("agent.compaction.reduction_pct", reduction, tags)