"""Streaming event kinds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class EventType(str, Enum):
    """The kind of a streaming event."""

    MESSAGE_START = "message_start"
    CONTENT_BLOCK_START = "content_block_start"
    CONTENT_BLOCK_DELTA = "content_block_delta"
    CONTENT_BLOCK_STOP = "content_block_stop"
    MESSAGE_DELTA = "message_delta"
    MESSAGE_STOP = "message_stop"


@dataclass(frozen=True)
class MessageStartEvent:
    """A message has started."""

    type: ClassVar[EventType] = EventType.MESSAGE_START
    message_id: str = ""
    model: str = ""


@dataclass(frozen=True)
class ContentBlockStartEvent:
    """A content block has started."""

    type: ClassVar[EventType] = EventType.CONTENT_BLOCK_START
    index: int = 0
    block_type: str = ""


@dataclass(frozen=True)
class TextDeltaEvent:
    """Text has arrived for a block."""

    type: ClassVar[EventType] = EventType.CONTENT_BLOCK_DELTA
    index: int = 0
    delta: str = ""


@dataclass(frozen=True)
class ToolUseStartEvent:
    """A tool use block has started."""

    type: ClassVar[EventType] = EventType.CONTENT_BLOCK_START
    index: int = 0
    tool_id: str = ""
    tool_name: str = ""


@dataclass(frozen=True)
class ToolInputDeltaEvent:
    """Partial tool input JSON has arrived."""

    type: ClassVar[EventType] = EventType.CONTENT_BLOCK_DELTA
    index: int = 0
    delta: str = ""


@dataclass(frozen=True)
class ContentBlockStopEvent:
    """A content block has ended."""

    type: ClassVar[EventType] = EventType.CONTENT_BLOCK_STOP
    index: int = 0


@dataclass(frozen=True)
class MessageDeltaEvent:
    """Message metadata has changed."""

    type: ClassVar[EventType] = EventType.MESSAGE_DELTA
    stop_reason: str = ""
    stop_sequence: str = ""


@dataclass(frozen=True)
class MessageStopEvent:
    """The message has ended."""

    type: ClassVar[EventType] = EventType.MESSAGE_STOP