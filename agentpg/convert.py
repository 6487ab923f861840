"""Conversion between conversation messages and stored messages."""

from __future__ import annotations

import json
import logging
from typing import Any

from agentpg.storage import MessageUsage, StoredMessage
from agentpg.types import ContentBlock, Message, Usage, content_block_from_dict

logger = logging.getLogger(__name__)


def to_storage_message(msg: Message) -> StoredMessage:
    """Convert a conversation message to its stored form."""
    usage = None
    if msg.usage is not None:
        usage = MessageUsage(
            input_tokens=msg.usage.input_tokens,
            output_tokens=msg.usage.output_tokens,
            cache_creation_tokens=msg.usage.cache_creation_tokens,
            cache_read_tokens=msg.usage.cache_read_tokens,
        )
    role = msg.role.value if hasattr(msg.role, "value") else msg.role
    return StoredMessage(
        id=msg.id,
        session_id=msg.session_id,
        role=role,
        content=msg.content,
        usage=usage,
        metadata=msg.metadata,
        is_preserved=msg.is_preserved,
        is_summary=msg.is_summary,
        created_at=msg.created_at,
        updated_at=msg.updated_at,
    )


def _map_to_content_block(data: dict[str, Any]) -> ContentBlock:
    block = ContentBlock(type="")
    if isinstance(data.get("type"), str):
        block = ContentBlock(type=data["type"])
    if isinstance(data.get("text"), str):
        block.text = data["text"]
    if isinstance(data.get("id"), str):
        block.tool_use_id = data["id"]
    if isinstance(data.get("name"), str):
        block.tool_name = data["name"]
    tool_input = data.get("input")
    if isinstance(tool_input, dict):
        block.tool_input = tool_input
        try:
            block.tool_input_raw = json.dumps(tool_input, sort_keys=True, separators=(",", ":"))
        except (TypeError, ValueError):
            pass
    if isinstance(data.get("tool_use_id"), str):
        block.tool_result_id = data["tool_use_id"]
    if isinstance(data.get("content"), str):
        block.tool_content = data["content"]
    if isinstance(data.get("is_error"), bool):
        block.is_error = data["is_error"]
    return block


def _decode_json_content(raw: bytes, message_id: str) -> list[ContentBlock]:
    try:
        decoded = json.loads(raw)
        if decoded is None:
            return []
        if not isinstance(decoded, list) or not all(isinstance(item, dict) for item in decoded):
            raise ValueError("content is not a list of objects")
        return [content_block_from_dict(item) for item in decoded]
    except ValueError as exc:
        logger.warning("failed to unmarshal content blocks for message %s: %s", message_id, exc)
        return []


def _decode_list_content(items: list[Any], message_id: str) -> list[ContentBlock]:
    blocks = []
    for item in items:
        if isinstance(item, ContentBlock):
            blocks.append(item)
        elif isinstance(item, dict):
            blocks.append(_map_to_content_block(item))
        else:
            logger.warning(
                "unexpected content block type in message %s: %s", message_id, type(item).__name__
            )
    return blocks


def from_storage_message(stored: StoredMessage) -> Message:
    """Convert a stored message back to a conversation message."""
    usage = None
    if stored.usage is not None:
        usage = Usage(
            input_tokens=stored.usage.input_tokens,
            output_tokens=stored.usage.output_tokens,
            cache_creation_tokens=stored.usage.cache_creation_tokens,
            cache_read_tokens=stored.usage.cache_read_tokens,
        )

    content = stored.content
    if isinstance(content, (bytes, bytearray)):
        blocks = _decode_json_content(bytes(content), stored.id)
    elif isinstance(content, list):
        blocks = _decode_list_content(content, stored.id)
    else:
        if content is not None:
            logger.warning(
                "unexpected content type in message %s: %s", stored.id, type(content).__name__
            )
        blocks = []

    extra = {}
    if stored.created_at is not None:
        extra["created_at"] = stored.created_at
    if stored.updated_at is not None:
        extra["updated_at"] = stored.updated_at
    return Message(
        id=stored.id,
        session_id=stored.session_id,
        role=stored.role,
        content=blocks,
        usage=usage,
        metadata=stored.metadata,
        is_preserved=stored.is_preserved,
        is_summary=stored.is_summary,
        **extra,
    )


def from_storage_messages(stored_messages: list[StoredMessage]) -> list[Message]:
    """Convert stored messages, keeping their order."""
    return [from_storage_message(stored) for stored in stored_messages]


def to_storage_messages(messages: list[Message]) -> list[StoredMessage]:
    """Convert conversation messages, keeping their order."""
    return [to_storage_message(msg) for msg in messages]