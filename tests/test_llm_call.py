"""Tests for the chat-completions client wrapper."""

from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from toolchat.llm_call import LLMClient, ProviderError

REQUEST = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")


def _status_error(status_code: int, body) -> openai.APIStatusError:
    response = httpx.Response(status_code, request=REQUEST)
    return openai.APIStatusError("provider error", response=response, body=body)


@pytest.fixture
def mock_openai():
    with patch("toolchat.llm_call.OpenAI") as mock_cls:
        yield mock_cls


class TestLLMClientSetup:
    """Tests for client construction."""

    def test_provider_headers_and_no_retries(self, mock_openai):
        LLMClient(base_url="https://example.test/v1", api_key="sk-test", timeout=5)

        kwargs = mock_openai.call_args.kwargs
        assert kwargs["base_url"] == "https://example.test/v1"
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["timeout"] == 5
        assert kwargs["max_retries"] == 0
        assert "HTTP-Referer" in kwargs["default_headers"]
        assert "X-Title" in kwargs["default_headers"]

    def test_model_override(self, mock_openai):
        assert LLMClient(model="openai/gpt-4o-mini").model == "openai/gpt-4o-mini"


class TestCreateCompletion:
    """Tests for create_completion."""

    def test_request_shape(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.return_value.model_dump.return_value = {"choices": []}
        client = LLMClient(model="m")
        tools = [{"type": "function", "function": {"name": "t"}}]

        result = client.create_completion(
            [{"role": "user", "content": "hi"}], tools=tools, max_tokens=64
        )

        assert result == {"choices": []}
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "m"
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert kwargs["tools"] == tools
        assert kwargs["tool_choice"] == "auto"
        assert kwargs["max_tokens"] == 64
        assert kwargs["stream"] is False
        create.return_value.model_dump.assert_called_once_with(exclude_none=True)

    def test_no_tools_no_tool_choice(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.return_value.model_dump.return_value = {}
        LLMClient().create_completion([{"role": "user", "content": "hi"}])

        kwargs = create.call_args.kwargs
        assert "tools" not in kwargs
        assert "tool_choice" not in kwargs

    def test_status_error_keeps_provider_error(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.side_effect = _status_error(
            401, {"error": {"message": "No auth credentials found", "code": 401}}
        )

        with pytest.raises(ProviderError) as exc_info:
            LLMClient().create_completion([{"role": "user", "content": "hi"}])

        assert exc_info.value.status_code == 401
        assert exc_info.value.error == {"message": "No auth credentials found", "code": 401}

    def test_status_error_without_body(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.side_effect = _status_error(503, None)

        with pytest.raises(ProviderError) as exc_info:
            LLMClient().create_completion([{"role": "user", "content": "hi"}])

        assert exc_info.value.status_code == 503
        assert exc_info.value.error == "API request failed"

    def test_timeout(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.side_effect = openai.APITimeoutError(request=REQUEST)

        with pytest.raises(ProviderError) as exc_info:
            LLMClient().create_completion([{"role": "user", "content": "hi"}])

        assert exc_info.value.status_code == 504

    def test_connection_error(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.side_effect = openai.APIConnectionError(request=REQUEST)

        with pytest.raises(ProviderError) as exc_info:
            LLMClient().create_completion([{"role": "user", "content": "hi"}])

        assert exc_info.value.status_code == 502

    def test_close(self, mock_openai):
        client = LLMClient()
        client.close()
        mock_openai.return_value.close.assert_called_once()

    def test_close_swallows_errors(self):
        with patch("toolchat.llm_call.OpenAI") as mock_cls:
            mock_cls.return_value = MagicMock()
            mock_cls.return_value.close.side_effect = RuntimeError("already closed")
            LLMClient().close()
