# agentpg

The building blocks of an agent that holds conversations and calls tools. The package uses only the standard library.

## What is in it

- **Conversation types** (`agentpg.types`). This module defines `Role`, `ContentType`, `ContentBlock`, `ImageSource`, `DocumentSource`, `Usage`, `Message` and `Response`.
  - Blocks convert to their JSON form with `ContentBlock.to_dict()` and back again with `content_block_from_dict()`.
  - The helpers `new_message`, `new_user_message`, `new_assistant_message`, `new_text_block`, `new_tool_use_block` and `new_tool_result_block` build these types. `Message.token_count()` adds up input and output tokens.
- **Storage records** (`agentpg.storage`). This module holds the abstract `Store` interface and the records it deals in: `Session`, `StoredMessage`, `MessageUsage` and `CompactionEvent`.
  - `agentpg.convert` converts between stored and conversation messages with `to_storage_message`, `from_storage_message`, `to_storage_messages` and `from_storage_messages`.
  - Stored content can be JSON bytes, a list of `ContentBlock`, or a list of dicts.
- **Streaming** (`agentpg.events`, `agentpg.accumulator`).
  - `agentpg.events` defines the `EventType` enum and frozen event dataclasses.
  - `Accumulator.process_event()` takes streaming events in the API's wire format, as plain mappings such as `{"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "Hi"}}`. It ignores events it does not recognise. `Accumulator.message()` returns the `StreamMessage` assembled so far.
  - When a tool call arrives with no input, its input is `"{}"`.
- **Tools**:
  - `agentpg.tool` provides the `Tool` protocol, `ToolSchema`, `PropertyDef`, `FuncTool` and `new_func_tool`. A tool's `execute` takes JSON-encoded input and returns a string.
  - `agentpg.validator` provides `Validator.validate_input()`. It checks JSON input against a schema and returns the decoded object. The checks cover required fields, types, enums, numeric ranges, string lengths, array items and nested objects. A mismatch raises `ValidationError`, which is a `ValueError`.
  - `agentpg.registry` provides `ToolRegistry`, a thread-safe store of tools by name. `register` raises `ToolRegistryError` for a duplicate name, an empty name or a schema that is not of type object. `execute` raises `ToolNotFoundError` for an unknown name. `to_api_tools()` describes every tool in the API's tool format.
  - `agentpg.executor` provides `Executor`, which runs tool calls with a timeout of 30 seconds by default. It runs them singly, in sequence (`execute_multiple`), in parallel (`execute_parallel`) or either way (`execute_batch`). It reports failures and timeouts (`ToolTimeoutError`) in each `ExecuteResult` rather than raising them.
  - `agentpg.agent_tool` provides `AgentTool`. It wraps any object that meets the `DelegateAgent` protocol as a tool. The wrapped agent works in its own session, linked to a parent session.
- **API conversion** (`agentpg.converter`).
  - `to_api_messages` turns messages into request payloads and leaves out system messages.
  - `extract_tool_calls`, `has_tool_calls` and `create_tool_result_blocks` handle tool calls and their results.
  - `count_tokens` gives a rough estimate at about four bytes per token.
  - `is_max_tokens_error` and `is_retryable_error` classify an `APIError`. `build_extended_context_headers` returns the beta header that turns on the extended context window.
- **Logging and metrics hooks** (`agentpg.logging_hooks`).
  - `LoggingHooks` and `VerboseLoggingHooks` write events to a `logging.Logger`, which is the `agentpg` logger by default.
  - `MetricsHooks` reports token counts, tool outcomes and compaction figures to a callback.
  - `default_logging_hooks()` returns `LoggingHooks` bound to the package logger.

## Installation

```
pip install .
```

## Example

```python
import json

from agentpg.tool import ToolSchema, PropertyDef, new_func_tool
from agentpg.registry import ToolRegistry
from agentpg.executor import Executor, ToolCallRequest

def add(tool_input):
    args = json.loads(tool_input)
    return str(args["a"] + args["b"])

schema = ToolSchema(
    type="object",
    properties={"a": PropertyDef(type="number"), "b": PropertyDef(type="number")},
    required=["a", "b"],
)

registry = ToolRegistry()
registry.register(new_func_tool("add", "Adds two numbers", schema, add))

executor = Executor(registry)
executor.validate_input("add", '{"a": 1, "b": 2}')
result = executor.execute("add", '{"a": 1, "b": 2}')
print(result.output)  # 3

results = executor.execute_batch(
    [ToolCallRequest(id="1", tool_name="add", tool_input='{"a": 2, "b": 3}')],
    parallel=True,
)
print(results[0].output)  # 5
```

## Logging and metrics

The hook classes are plain objects. Call their methods wherever the events happen:

```python
from agentpg.logging_hooks import MetricsHooks, default_logging_hooks

logging_hooks = default_logging_hooks()
logging_hooks.tool_call("add", "{}", "3", None)

metrics = MetricsHooks(lambda name, value, tags: print(name, value, tags))
metrics.tool_call("add", "{}", "3", None)  # agent.tool.success 1.0 {'tool': 'add'}
```

## What the package does not do

- It has no agent run loop and no client that talks to a model API. `agentpg.converter` builds and reads the payloads, but the package sends nothing itself.
- It has no registry for hooks. The hook classes do not register themselves, and nothing calls them for you.
- `Store` is an interface only. The package ships no database or other storage backend.
- It has no command-line program.

## Running the tests

```
pip install .[test]
pytest
```