"""Conversation message types and constructors."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union


class Role(str, Enum):
    """The author of a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ContentType(str, Enum):
    """The kind of a content block."""

    TEXT = "text"
    TOOL_USE = "tool_use"
    TOOL_RESULT = "tool_result"
    IMAGE = "image"
    DOCUMENT = "document"


def _coerce(enum_cls: type[Enum], value: Any) -> Any:
    """Turn a plain string into an enum member when it names one."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ImageSource:
    """Where an image comes from: inline base64 data or a URL."""

    type: str
    media_type: str
    data: str = ""
    url: str = ""


@dataclass
class DocumentSource:
    """An inline base64 document, such as a PDF."""

    type: str
    media_type: str
    data: str


def _image_source_to_dict(source: ImageSource) -> dict[str, Any]:
    out: dict[str, Any] = {"type": source.type, "media_type": source.media_type}
    if source.data:
        out["data"] = source.data
    if source.url:
        out["url"] = source.url
    return out


def _document_source_to_dict(source: DocumentSource) -> dict[str, Any]:
    return {"type": source.type, "media_type": source.media_type, "data": source.data}


@dataclass
class ContentBlock:
    """One piece of a message: text, a tool call, a tool result, an image or a document."""

    type: Union[ContentType, str]
    text: str = ""
    tool_use_id: str = ""
    tool_name: str = ""
    tool_input: Optional[dict[str, Any]] = None
    tool_input_raw: str = ""
    tool_result_id: str = ""
    tool_content: str = ""
    is_error: bool = False
    image_source: Optional[ImageSource] = None
    document_source: Optional[DocumentSource] = None

    def __post_init__(self) -> None:
        self.type = _coerce(ContentType, self.type)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the block, leaving out empty fields."""
        out: dict[str, Any] = {"type": _plain(self.type)}
        if self.text:
            out["text"] = self.text
        if self.tool_use_id:
            out["id"] = self.tool_use_id
        if self.tool_name:
            out["name"] = self.tool_name
        if self.tool_input:
            out["input"] = dict(self.tool_input)
        if self.tool_input_raw:
            out["input_raw"] = json.loads(self.tool_input_raw)
        if self.tool_result_id:
            out["tool_use_id"] = self.tool_result_id
        if self.tool_content:
            out["content"] = self.tool_content
        if self.is_error:
            out["is_error"] = True
        if self.image_source is not None:
            out["source"] = _image_source_to_dict(self.image_source)
        if self.document_source is not None:
            out["document"] = _document_source_to_dict(self.document_source)
        return out


def content_block_from_dict(data: dict[str, Any]) -> ContentBlock:
    """Build a content block from its JSON form."""
    raw = data.get("input_raw")
    tool_input_raw = "" if raw is None else json.dumps(raw, separators=(",", ":"))

    image = data.get("source")
    image_source = None
    if isinstance(image, dict):
        image_source = ImageSource(
            type=image.get("type", ""),
            media_type=image.get("media_type", ""),
            data=image.get("data", ""),
            url=image.get("url", ""),
        )

    document = data.get("document")
    document_source = None
    if isinstance(document, dict):
        document_source = DocumentSource(
            type=document.get("type", ""),
            media_type=document.get("media_type", ""),
            data=document.get("data", ""),
        )

    tool_input = data.get("input")
    return ContentBlock(
        type=data.get("type", ""),
        text=data.get("text", ""),
        tool_use_id=data.get("id", ""),
        tool_name=data.get("name", ""),
        tool_input=dict(tool_input) if isinstance(tool_input, dict) else None,
        tool_input_raw=tool_input_raw,
        tool_result_id=data.get("tool_use_id", ""),
        tool_content=data.get("content", ""),
        is_error=bool(data.get("is_error", False)),
        image_source=image_source,
        document_source=document_source,
    )


@dataclass
class Usage:
    """Token usage reported for a response."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0


@dataclass
class Message:
    """A conversation message with its metadata."""

    id: str
    session_id: str
    role: Union[Role, str]
    content: list[ContentBlock] = field(default_factory=list)
    usage: Optional[Usage] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    is_preserved: bool = False
    is_summary: bool = False

    def __post_init__(self) -> None:
        self.role = _coerce(Role, self.role)

    def token_count(self) -> int:
        """Total of input and output tokens, or 0 without usage."""
        if self.usage is None:
            return 0
        return self.usage.input_tokens + self.usage.output_tokens


@dataclass
class Response:
    """What an agent run returns."""

    message: Optional[Message] = None
    stop_reason: str = ""
    usage: Optional[Usage] = None


def new_message(session_id: str, role: Union[Role, str], content: list[ContentBlock]) -> Message:
    """Create a message with a fresh id and timestamps."""
    now = _now()
    return Message(
        id=str(uuid.uuid4()),
        session_id=session_id,
        role=role,
        content=content,
        metadata={},
        created_at=now,
        updated_at=now,
    )


def new_user_message(session_id: str, text: str) -> Message:
    """Create a user message holding one text block."""
    return new_message(session_id, Role.USER, [new_text_block(text)])


def new_assistant_message(session_id: str, content: list[ContentBlock]) -> Message:
    """Create an assistant message."""
    return new_message(session_id, Role.ASSISTANT, content)


def new_text_block(text: str) -> ContentBlock:
    """Create a text content block."""
    return ContentBlock(type=ContentType.TEXT, text=text)


def new_tool_use_block(tool_use_id: str, name: str, tool_input: Optional[dict[str, Any]]) -> ContentBlock:
    """Create a tool use block, keeping both the parsed and the JSON-encoded input."""
    try:
        raw = json.dumps(tool_input, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError):
        raw = ""
    return ContentBlock(
        type=ContentType.TOOL_USE,
        tool_use_id=tool_use_id,
        tool_name=name,
        tool_input=tool_input,
        tool_input_raw=raw,
    )


def new_tool_result_block(tool_use_id: str, content: str, is_error: bool) -> ContentBlock:
    """Create a tool result block answering the given tool use."""
    return ContentBlock(
        type=ContentType.TOOL_RESULT,
        tool_result_id=tool_use_id,
        tool_content=content,
        is_error=is_error,
    )