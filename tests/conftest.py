"""
Pytest configuration and fixtures for toolchat tests.
"""

import copy
import json

import pytest

from toolchat.tools.registry import ToolRegistry


class ScriptedLLMClient:
    """Stand-in for LLMClient that replays canned completion envelopes."""

    model = "stub-model"

    def __init__(self, responses: list[dict]):
        self._responses = [copy.deepcopy(r) for r in responses]
        self.calls: list[dict] = []
        self.closed = False

    def create_completion(self, messages, tools=None, tool_choice="auto", max_tokens=None):
        self.calls.append(
            {"messages": messages, "tools": tools, "tool_choice": tool_choice}
        )
        if not self._responses:
            raise AssertionError("model called more times than scripted")
        return self._responses.pop(0)

    def close(self):
        self.closed = True


def _completion(content=None, tool_calls=None) -> dict:
    message = {"role": "assistant", "content": content}
    if tool_calls:
        message["tool_calls"] = tool_calls
    return {
        "id": "gen-test",
        "object": "chat.completion",
        "model": "stub-model",
        "choices": [
            {
                "index": 0,
                "message": message,
                "finish_reason": "tool_calls" if tool_calls else "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


def _tool_call(call_id: str, name: str, arguments) -> dict:
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)
    return {
        "id": call_id,
        "type": "function",
        "function": {"name": name, "arguments": arguments},
    }


@pytest.fixture
def make_completion():
    """Factory for provider completion envelopes."""
    return _completion


@pytest.fixture
def make_tool_call():
    """Factory for provider tool-call entries."""
    return _tool_call


@pytest.fixture
def scripted_llm():
    """Factory for a ScriptedLLMClient replaying the given responses."""
    return ScriptedLLMClient


@pytest.fixture
def registry_snapshot():
    """Restore the tool registry after a test that registers or clears tools."""
    saved = ToolRegistry.all_tools()
    yield ToolRegistry
    ToolRegistry._tools.clear()
    ToolRegistry._tools.update(saved)
