"""Conversion between conversation messages and the model API's wire format."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from agentpg.accumulator import StreamMessage, StreamUsage
from agentpg.types import ContentBlock, ContentType, Message, Role, Usage

EXTENDED_CONTEXT_BETA = "context-1m-2025-08-07"


class APIError(Exception):
    """An error answered by the model API, carrying its HTTP status code."""

    def __init__(self, status_code: int, message: str = "") -> None:
        super().__init__(f"{status_code}: {message}" if message else str(status_code))
        self.status_code = status_code
        self.message = message


@dataclass(frozen=True)
class ToolCall:
    """A tool call requested by the assistant; the input is JSON-encoded."""

    id: str
    name: str
    tool_input: str = ""


def _plain(value: Any) -> Any:
    return getattr(value, "value", value)


def convert_content_block(block: ContentBlock) -> dict[str, Any]:
    """Convert one content block to an API content block; unknown kinds become empty text."""
    if block.type == ContentType.TEXT:
        return {"type": "text", "text": block.text}

    if block.type == ContentType.TOOL_USE:
        tool_input: Any = None
        if block.tool_input_raw:
            try:
                tool_input = json.loads(block.tool_input_raw)
            except ValueError:
                tool_input = None
        elif block.tool_input is not None:
            tool_input = block.tool_input
        # The API requires an object here, never null.
        if tool_input is None:
            tool_input = {}
        return {
            "type": "tool_use",
            "id": block.tool_use_id,
            "name": block.tool_name,
            "input": tool_input,
        }

    if block.type == ContentType.TOOL_RESULT:
        return {
            "type": "tool_result",
            "tool_use_id": block.tool_result_id,
            "content": [{"type": "text", "text": block.tool_content}],
            "is_error": block.is_error,
        }

    if block.type == ContentType.IMAGE and block.image_source is not None:
        source = block.image_source
        if source.type == "base64":
            return {
                "type": "image",
                "source": {"type": "base64", "media_type": source.media_type, "data": source.data},
            }
        if source.type == "url":
            return {"type": "image", "source": {"type": "url", "url": source.url}}

    if block.type == ContentType.DOCUMENT and block.document_source is not None:
        return {
            "type": "document",
            "source": {
                "type": "base64",
                "media_type": "application/pdf",
                "data": block.document_source.data,
            },
        }

    return {"type": "text", "text": ""}


def to_api_messages(messages: Sequence[Message]) -> list[dict[str, Any]]:
    """Convert messages to API message parameters, leaving out system messages."""
    return [
        {"role": _plain(msg.role), "content": [convert_content_block(b) for b in msg.content]}
        for msg in messages
        if msg.role != Role.SYSTEM
    ]


def convert_streaming_message(stream_message: StreamMessage, session_id: str) -> Message:
    """Turn a streamed message into a conversation message with a fresh id."""
    content = [
        ContentBlock(
            type=block.type,
            text=block.text,
            tool_use_id=block.tool_use_id,
            tool_name=block.tool_name,
            tool_input=block.tool_input,
            tool_input_raw=block.tool_input_raw,
        )
        for block in stream_message.content
    ]
    times: dict[str, Any] = {}
    if stream_message.created_at is not None:
        times = {"created_at": stream_message.created_at, "updated_at": stream_message.created_at}
    return Message(
        id=str(uuid.uuid4()),
        session_id=session_id,
        role=stream_message.role,
        content=content,
        metadata={"anthropic_message_id": stream_message.id},
        **times,
    )


def convert_usage(stream_usage: StreamUsage) -> Usage:
    """Convert streamed usage to message usage."""
    return Usage(
        input_tokens=stream_usage.input_tokens,
        output_tokens=stream_usage.output_tokens,
        cache_creation_tokens=stream_usage.cache_creation_tokens,
        cache_read_tokens=stream_usage.cache_read_tokens,
    )


def extract_tool_calls(content: Sequence[ContentBlock]) -> list[ToolCall]:
    """Return the tool calls among the content blocks, in order."""
    return [
        ToolCall(id=block.tool_use_id, name=block.tool_name, tool_input=block.tool_input_raw)
        for block in content
        if block.type == ContentType.TOOL_USE
    ]


def has_tool_calls(msg: Message) -> bool:
    """Whether the message holds at least one tool call."""
    return any(block.type == ContentType.TOOL_USE for block in msg.content)


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def count_tokens(content: Sequence[ContentBlock]) -> int:
    """Roughly estimate the tokens of content blocks, at about four bytes a token."""
    total = 0
    for block in content:
        if block.type == ContentType.TEXT:
            total += _byte_len(block.text) // 4
        elif block.type == ContentType.TOOL_USE:
            total += 50 + _byte_len(block.tool_name) + _byte_len(block.tool_input_raw) // 4
        elif block.type == ContentType.TOOL_RESULT:
            total += 20 + _byte_len(block.tool_content) // 4
    return total


def build_system_prompt(system_prompt: str) -> list[dict[str, Any]]:
    """Return the system prompt as a list of API text blocks."""
    return [{"type": "text", "text": system_prompt}]


def _find_api_error(err: Optional[BaseException]) -> Optional[APIError]:
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, APIError):
            return err
        seen.add(id(err))
        err = err.__cause__ or err.__context__
    return None


def is_max_tokens_error(err: Optional[BaseException]) -> bool:
    """Whether the error is an API error about the token limit."""
    api_error = _find_api_error(err)
    if api_error is None:
        return False
    text = str(api_error)
    return any(marker in text for marker in ("max_tokens", "context_length", "token limit"))


def is_retryable_error(err: Optional[BaseException]) -> bool:
    """Whether the error is an API rate limit or server error."""
    api_error = _find_api_error(err)
    if api_error is None:
        return False
    return api_error.status_code == 429 or api_error.status_code >= 500


def build_extended_context_headers() -> dict[str, str]:
    """Headers that turn on the extended context window."""
    return {"anthropic-beta": EXTENDED_CONTEXT_BETA}


def extract_text_content(content: Sequence[ContentBlock]) -> str:
    """Join the text of all text blocks."""
    return "".join(block.text for block in content if block.type == ContentType.TEXT)


def create_tool_result_blocks(
    tool_calls: Sequence[ToolCall],
    results: Sequence[str],
    errors: Sequence[Optional[BaseException]],
) -> list[ContentBlock]:
    """Build one tool result block per call; an error at a position wins over its result."""
    blocks = []
    for position, call in enumerate(tool_calls):
        is_error = False
        content = ""
        error = errors[position] if position < len(errors) else None
        if error is not None:
            is_error = True
            content = f"Error executing tool: {error}"
        elif position < len(results):
            content = results[position]
        blocks.append(
            ContentBlock(
                type=ContentType.TOOL_RESULT,
                tool_result_id=call.id,
                tool_content=content,
                is_error=is_error,
            )
        )
    return blocks