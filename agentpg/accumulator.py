"""Assembling a complete message from streaming API events."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional


@dataclass
class AccumulatingBlock:
    """A content block still being streamed."""

    type: str = ""
    index: int = 0
    text: str = ""
    tool_id: str = ""
    tool_name: str = ""
    tool_input: str = ""


@dataclass
class StreamUsage:
    """Token usage gathered from a stream."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0


@dataclass
class MessageContentBlock:
    """A finished content block of a streamed message."""

    type: str
    text: str = ""
    tool_use_id: str = ""
    tool_name: str = ""
    tool_input: Optional[dict[str, Any]] = None
    tool_input_raw: str = ""


@dataclass
class StreamMessage:
    """A message assembled from streaming events."""

    id: str = ""
    model: str = ""
    role: str = ""
    content: list[MessageContentBlock] = field(default_factory=list)
    stop_reason: str = ""
    stop_sequence: str = ""
    usage: StreamUsage = field(default_factory=StreamUsage)
    created_at: Optional[datetime] = None

    def to_record(self, session_id: str) -> dict[str, Any]:
        """Return the message as a plain record bound to a session."""
        return {
            "id": self.id,
            "session_id": session_id,
            "role": self.role,
            "content": self.content,
            "stop_reason": self.stop_reason,
            "stop_sequence": self.stop_sequence,
            "usage": self.usage,
            "created_at": datetime.now(timezone.utc),
        }


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _int(value: Any) -> int:
    return int(value) if value is not None else 0


class Accumulator:
    """Builds a message from streaming events in the API's wire format.

    Events are mappings such as ``{"type": "content_block_delta", "index": 0,
    "delta": {"type": "text_delta", "text": "..."}}``; unknown events are ignored.
    """

    def __init__(self) -> None:
        self._message_id = ""
        self._model = ""
        self._role = ""
        self._content: list[AccumulatingBlock] = []
        self._stop_reason = ""
        self._stop_sequence = ""
        self._usage = StreamUsage()
        self._current: dict[int, AccumulatingBlock] = {}

    def process_event(self, event: Mapping[str, Any]) -> None:
        """Fold one streaming event into the message."""
        kind = event.get("type")
        if kind == "message_start":
            message = event.get("message") or {}
            self._message_id = _text(message.get("id"))
            self._model = _text(message.get("model"))
            self._role = _text(message.get("role"))
            self._usage.input_tokens = _int((message.get("usage") or {}).get("input_tokens"))
        elif kind == "content_block_start":
            index = _int(event.get("index"))
            content = event.get("content_block") or {}
            block = AccumulatingBlock(index=index)
            content_type = content.get("type")
            if content_type == "text":
                block.type = "text"
                block.text = _text(content.get("text"))
            elif content_type == "tool_use":
                block.type = "tool_use"
                block.tool_id = _text(content.get("id"))
                block.tool_name = _text(content.get("name"))
            self._current[index] = block
        elif kind == "content_block_delta":
            block = self._current.get(_int(event.get("index")))
            if block is None:
                return
            delta = event.get("delta") or {}
            delta_type = delta.get("type")
            if delta_type == "text_delta":
                block.text += _text(delta.get("text"))
            elif delta_type == "input_json_delta":
                block.tool_input += _text(delta.get("partial_json"))
        elif kind == "content_block_stop":
            block = self._current.pop(_int(event.get("index")), None)
            if block is not None:
                self._content.append(block)
        elif kind == "message_delta":
            delta = event.get("delta") or {}
            self._stop_reason = _text(delta.get("stop_reason"))
            self._stop_sequence = _text(delta.get("stop_sequence"))
            self._usage.output_tokens = _int((event.get("usage") or {}).get("output_tokens"))

    def add_block(self, block: AccumulatingBlock) -> None:
        """Append a finished block to the message content."""
        self._content.append(block)

    def message(self) -> StreamMessage:
        """Return the message as accumulated so far."""
        return StreamMessage(
            id=self._message_id,
            model=self._model,
            role=self._role,
            content=[self._finish(block) for block in self._content],
            stop_reason=self._stop_reason,
            stop_sequence=self._stop_sequence,
            usage=dataclasses.replace(self._usage),
        )

    @staticmethod
    def _finish(block: AccumulatingBlock) -> MessageContentBlock:
        result = MessageContentBlock(type=block.type)
        if block.type == "text":
            result.text = block.text
        elif block.type == "tool_use":
            result.tool_use_id = block.tool_id
            result.tool_name = block.tool_name
            raw = block.tool_input or "{}"
            result.tool_input_raw = raw
            try:
                parsed = json.loads(raw)
            except ValueError:
                parsed = None
            if isinstance(parsed, dict):
                result.tool_input = parsed
        return result