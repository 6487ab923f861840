"""Using one agent as a tool of another."""

from __future__ import annotations

import json
from typing import Any, Optional, Protocol, runtime_checkable

from agentpg.tool import PropertyDef, ToolSchema


@runtime_checkable
class DelegateAgent(Protocol):
    """What an agent must offer to be wrapped as a tool."""

    system_prompt: str

    def new_session_with_parent(
        self,
        tenant_id: str,
        identifier: str,
        parent_session_id: Optional[str],
        metadata: Optional[dict[str, Any]],
    ) -> str:
        """Create a session linked to a parent session and return its id."""

    def load_session(self, session_id: str) -> None:
        """Make the given session the current one."""

    def run(self, prompt: str) -> str:
        """Run the agent on a prompt and return the text of its answer."""


class AgentTool:
    """Wraps an agent as a tool; the agent gets its own session under the parent's."""

    def __init__(
        self,
        agent: Optional[DelegateAgent],
        name: str,
        description: str,
        parent_tenant_id: str,
        parent_session_id: Optional[str] = None,
    ) -> None:
        if agent is None:
            raise ValueError("agent cannot be None")
        if not name:
            raise ValueError("name cannot be empty")
        if not parent_tenant_id:
            raise ValueError("parent_tenant_id cannot be empty")
        if not description:
            description = f"Delegate task to {name} agent"

        try:
            session_id = agent.new_session_with_parent(parent_tenant_id, name, parent_session_id, None)
        except Exception as exc:
            raise RuntimeError(f"failed to create nested session: {exc}") from exc

        self._agent = agent
        self._name = name
        self._description = description
        self._parent_tenant_id = parent_tenant_id
        self._parent_session_id = parent_session_id
        self._session_id = session_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def session_id(self) -> str:
        """The dedicated session of the wrapped agent."""
        return self._session_id

    @property
    def parent_session_id(self) -> Optional[str]:
        return self._parent_session_id

    @property
    def parent_tenant_id(self) -> str:
        return self._parent_tenant_id

    def input_schema(self) -> ToolSchema:
        """A task to delegate and optional context for it."""
        return ToolSchema(
            type="object",
            properties={
                "task": PropertyDef(
                    type="string", description="The task or question to delegate to this agent"
                ),
                "context": PropertyDef(
                    type="string", description="Additional context for the task (optional)"
                ),
            },
            required=["task"],
        )

    def execute(self, tool_input: str) -> str:
        """Run the wrapped agent on the task in its own session and return its answer."""
        try:
            params = json.loads(tool_input)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"invalid input: {exc}") from exc
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise ValueError("invalid input: expected a JSON object")
        task = params.get("task") or ""
        context = params.get("context") or ""
        if not isinstance(task, str) or not isinstance(context, str):
            raise ValueError("invalid input: task and context must be strings")
        if not task:
            raise ValueError("task is required")

        try:
            self._agent.load_session(self._session_id)
        except Exception as exc:
            raise RuntimeError(f"failed to load session: {exc}") from exc

        prompt = f"Context: {context}\n\nTask: {task}" if context else task

        try:
            return self._agent.run(prompt)
        except Exception as exc:
            raise RuntimeError(f"nested agent failed: {exc}") from exc