from datetime import datetime, timezone

import pytest

from agentpg.accumulator import MessageContentBlock, StreamMessage, StreamUsage
from agentpg.converter import (
    APIError,
    ToolCall,
    build_extended_context_headers,
    build_system_prompt,
    convert_content_block,
    convert_streaming_message,
    convert_usage,
    count_tokens,
    create_tool_result_blocks,
    extract_text_content,
    extract_tool_calls,
    has_tool_calls,
    is_max_tokens_error,
    is_retryable_error,
    to_api_messages,
)
from agentpg.types import (
    ContentBlock,
    ContentType,
    DocumentSource,
    ImageSource,
    Message,
    Role,
    new_text_block,
    new_tool_result_block,
    new_tool_use_block,
)


@pytest.mark.parametrize(
    "block, expected_input",
    [
        (ContentBlock(type=ContentType.TOOL_USE, tool_use_id="test-id", tool_name="test_tool"), {}),
        (
            ContentBlock(
                type=ContentType.TOOL_USE,
                tool_use_id="test-id",
                tool_name="test_tool",
                tool_input_raw="",
            ),
            {},
        ),
        (
            ContentBlock(
                type=ContentType.TOOL_USE,
                tool_use_id="test-id",
                tool_name="test_tool",
                tool_input_raw='{"key":"value"}',
            ),
            {"key": "value"},
        ),
        (
            ContentBlock(
                type=ContentType.TOOL_USE,
                tool_use_id="test-id",
                tool_name="test_tool",
                tool_input={"foo": "bar"},
            ),
            {"foo": "bar"},
        ),
    ],
)
def test_convert_content_block_tool_use_input(block, expected_input):
    result = convert_content_block(block)
    assert result["type"] == "tool_use"
    assert result["id"] == "test-id"
    assert result["name"] == "test_tool"
    assert result["input"] == expected_input


def test_tool_use_null_raw_input_becomes_object():
    block = ContentBlock(type=ContentType.TOOL_USE, tool_use_id="x", tool_name="t", tool_input_raw="null")
    assert convert_content_block(block)["input"] == {}


def test_convert_to_api_messages_with_tool_use():
    messages = [
        Message(
            id="m1",
            session_id="s",
            role=Role.ASSISTANT,
            content=[ContentBlock(type=ContentType.TOOL_USE, tool_use_id="tool-123", tool_name="list_tasks")],
        )
    ]
    result = to_api_messages(messages)
    assert len(result) == 1
    assert len(result[0]["content"]) == 1
    assert result[0]["role"] == "assistant"
    assert result[0]["content"][0]["input"] == {}


def test_system_messages_are_skipped():
    messages = [
        Message(id="a", session_id="s", role=Role.SYSTEM, content=[new_text_block("sys")]),
        Message(id="b", session_id="s", role=Role.USER, content=[new_text_block("hi")]),
    ]
    result = to_api_messages(messages)
    assert result == [{"role": "user", "content": [{"type": "text", "text": "hi"}]}]


def test_tool_result_block():
    result = convert_content_block(new_tool_result_block("tool-1", "output", True))
    assert result["tool_use_id"] == "tool-1"
    assert result["content"] == [{"type": "text", "text": "output"}]
    assert result["is_error"] is True


def test_image_blocks():
    b64 = ContentBlock(type=ContentType.IMAGE, image_source=ImageSource("base64", "image/png", data="AAAA"))
    assert convert_content_block(b64)["source"] == {"type": "base64", "media_type": "image/png", "data": "AAAA"}
    url = ContentBlock(
        type=ContentType.IMAGE,
        image_source=ImageSource("url", "image/png", url="https://example.com/a.png"),
    )
    assert convert_content_block(url)["source"] == {"type": "url", "url": "https://example.com/a.png"}


def test_document_block():
    doc = ContentBlock(type=ContentType.DOCUMENT, document_source=DocumentSource("base64", "application/pdf", "PDF"))
    result = convert_content_block(doc)
    assert result["type"] == "document"
    assert result["source"]["media_type"] == "application/pdf"
    assert result["source"]["data"] == "PDF"


def test_image_without_source_falls_back_to_empty_text():
    assert convert_content_block(ContentBlock(type=ContentType.IMAGE)) == {"type": "text", "text": ""}


def test_convert_streaming_message():
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    stream = StreamMessage(
        id="msg_1",
        role="assistant",
        content=[
            MessageContentBlock(type="text", text="hello"),
            MessageContentBlock(
                type="tool_use", tool_use_id="t1", tool_name="calc", tool_input={"a": 1}, tool_input_raw='{"a":1}'
            ),
        ],
        created_at=created,
    )
    msg = convert_streaming_message(stream, "session-9")
    assert msg.session_id == "session-9"
    assert msg.role == Role.ASSISTANT
    assert msg.metadata == {"anthropic_message_id": "msg_1"}
    assert msg.created_at == created
    assert msg.content[0].text == "hello"
    assert msg.content[1].tool_input == {"a": 1}
    assert msg.content[1].tool_input_raw == '{"a":1}'
    assert msg.id != convert_streaming_message(stream, "session-9").id


def test_convert_usage():
    usage = convert_usage(StreamUsage(input_tokens=10, output_tokens=20, cache_creation_tokens=3, cache_read_tokens=4))
    assert (usage.input_tokens, usage.output_tokens, usage.cache_creation_tokens, usage.cache_read_tokens) == (
        10,
        20,
        3,
        4,
    )


def test_extract_tool_calls_and_has_tool_calls():
    content = [new_text_block("hi"), new_tool_use_block("t1", "calc", {"a": 1})]
    calls = extract_tool_calls(content)
    assert calls == [ToolCall(id="t1", name="calc", tool_input='{"a":1}')]
    assert has_tool_calls(Message(id="m", session_id="s", role=Role.ASSISTANT, content=content))
    assert not has_tool_calls(Message(id="m", session_id="s", role=Role.ASSISTANT, content=[new_text_block("x")]))


def test_count_tokens():
    assert count_tokens([new_text_block("abcdefgh")]) == 2
    tool_use = ContentBlock(type=ContentType.TOOL_USE, tool_name="calc", tool_input_raw="{}")
    assert count_tokens([tool_use]) == 54
    assert count_tokens([new_tool_result_block("t", "abcd", False)]) == 21
    assert count_tokens([]) == 0


def test_build_system_prompt():
    assert build_system_prompt("be brief") == [{"type": "text", "text": "be brief"}]


@pytest.mark.parametrize(
    "message, expected",
    [
        ("prompt is too long: max_tokens exceeded", True),
        ("context_length exceeded", True),
        ("over the token limit", True),
        ("invalid request", False),
    ],
)
def test_is_max_tokens_error(message, expected):
    assert is_max_tokens_error(APIError(400, message)) is expected


def test_is_max_tokens_error_needs_api_error():
    assert is_max_tokens_error(ValueError("max_tokens")) is False
    assert is_max_tokens_error(None) is False


@pytest.mark.parametrize("status, expected", [(429, True), (500, True), (503, True), (400, False), (404, False)])
def test_is_retryable_error(status, expected):
    assert is_retryable_error(APIError(status, "x")) is expected


def test_is_retryable_error_finds_wrapped_api_error():
    try:
        try:
            raise APIError(529, "overloaded")
        except APIError as inner:
            raise RuntimeError("call failed") from inner
    except RuntimeError as outer:
        assert is_retryable_error(outer) is True
    assert is_retryable_error(RuntimeError("plain")) is False


def test_build_extended_context_headers():
    assert build_extended_context_headers() == {"anthropic-beta": "context-1m-2025-08-07"}


def test_extract_text_content():
    content = [new_text_block("a"), new_tool_use_block("t", "n", {}), new_text_block("b")]
    assert extract_text_content(content) == "ab"


def test_create_tool_result_blocks():
    calls = [ToolCall("c1", "t"), ToolCall("c2", "t"), ToolCall("c3", "t")]
    blocks = create_tool_result_blocks(calls, ["ok", "ignored"], [None, ValueError("boom")])
    assert [b.tool_result_id for b in blocks] == ["c1", "c2", "c3"]
    assert blocks[0].tool_content == "ok" and not blocks[0].is_error
    assert blocks[1].tool_content == "Error executing tool: boom" and blocks[1].is_error
    assert blocks[2].tool_content == "" and not blocks[2].is_error
    assert all(b.type == ContentType.TOOL_RESULT for b in blocks)