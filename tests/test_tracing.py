"""
Tests for Langfuse tracing integration with SDK v3.

Tests cover:
- Client disabled states (credentials, auth check, init failure)
- Context manager no-ops when disabled
- Trace lifecycle with a mocked Langfuse client
"""

import pytest
from unittest.mock import MagicMock, patch

from toolchat.tracing import client as client_module
from toolchat.tracing.client import (
    TracingClient,
    get_tracing_client,
    init_tracing_client,
    shutdown_tracing,
)
from toolchat.tracing.context import GenerationContext, TracingContext


@pytest.fixture(autouse=True)
def reset_tracing_singleton():
    """Never leak a tracing client into other tests."""
    yield
    client_module._tracing_client = None


@pytest.fixture
def mock_langfuse():
    with patch("toolchat.tracing.client.Langfuse") as mock_cls:
        mock_cls.return_value.auth_check.return_value = True
        yield mock_cls


class TestTracingClient:
    """Tests for TracingClient."""

    def test_client_disabled_without_credentials(self):
        client = TracingClient(public_key="", secret_key="")
        assert client.enabled is False
        assert "credentials not configured" in client.error.lower()
        assert client.client is None

    def test_client_disabled_with_partial_credentials(self):
        client = TracingClient(public_key="pk-test", secret_key="")
        assert client.enabled is False

    def test_flush_and_shutdown_no_op_when_disabled(self):
        client = TracingClient()
        client.flush()
        client.shutdown()

    def test_client_enabled(self, mock_langfuse):
        client = TracingClient(
            public_key="pk-test", secret_key="sk-test", host="http://langfuse:3000"
        )

        assert client.enabled is True
        assert client.error is None
        assert mock_langfuse.call_args.kwargs["host"] == "http://langfuse:3000"

    def test_auth_check_failure_disables(self, mock_langfuse):
        mock_langfuse.return_value.auth_check.return_value = False

        client = TracingClient(public_key="pk-test", secret_key="sk-test")

        assert client.enabled is False
        assert client.client is None
        assert "auth_check" in client.error

    def test_auth_check_exception_disables(self, mock_langfuse):
        mock_langfuse.return_value.auth_check.side_effect = ConnectionError("refused")

        client = TracingClient(public_key="pk-test", secret_key="sk-test")

        assert client.enabled is False
        assert "refused" in client.error

    def test_init_failure_disables(self, mock_langfuse):
        mock_langfuse.side_effect = ValueError("bad config")

        client = TracingClient(public_key="pk-test", secret_key="sk-test")

        assert client.enabled is False
        assert "bad config" in client.error

    def test_rejected_client_never_flushed(self, mock_langfuse):
        mock_langfuse.return_value.auth_check.return_value = False

        client = TracingClient(public_key="pk-test", secret_key="sk-test")
        client.flush()
        client.shutdown()

        mock_langfuse.return_value.flush.assert_not_called()
        mock_langfuse.return_value.shutdown.assert_not_called()

    def test_flush_errors_are_logged(self, mock_langfuse):
        mock_langfuse.return_value.flush.side_effect = RuntimeError("down")

        client = TracingClient(public_key="pk-test", secret_key="sk-test")
        client.flush()

        assert client.enabled is True

    def test_flush_delegates(self, mock_langfuse):
        client = TracingClient(public_key="pk-test", secret_key="sk-test")
        client.flush()
        mock_langfuse.return_value.flush.assert_called_once()


class TestSingleton:
    """Tests for the module-level client singleton."""

    def test_init_get_shutdown(self, mock_langfuse):
        created = init_tracing_client(public_key="pk-test", secret_key="sk-test")

        assert get_tracing_client() is created

        shutdown_tracing()

        assert get_tracing_client() is None
        mock_langfuse.return_value.shutdown.assert_called_once()


class TestTracingContextDisabled:
    """Context managers are no-ops without a tracing client."""

    def test_disabled_without_client(self):
        ctx = TracingContext(execution_id="exec-1")
        assert ctx.enabled is False

        ctx.start_trace(name="chat", input=[{"role": "user", "content": "hi"}])
        with ctx.span("tool:count_words", input={"text": "a"}) as span:
            span.set_output(1)
        with ctx.generation("model_step_1", model="m") as gen:
            gen.set_output({"content": "hi"})
        ctx.end_trace(output="done")

        assert ctx.get_trace_context() is None


class TestTracingContextEnabled:
    """Trace lifecycle with a mocked Langfuse client."""

    def test_root_span_and_children(self, mock_langfuse):
        init_tracing_client(public_key="pk-test", secret_key="sk-test")
        langfuse = mock_langfuse.return_value
        root = MagicMock(trace_id="trace-1", id="span-root")
        langfuse.start_as_current_observation.return_value.__enter__.return_value = root

        ctx = TracingContext(execution_id="exec-1")
        ctx.start_trace(name="chat", input=[])
        assert ctx.get_trace_context() == {
            "trace_id": "trace-1",
            "parent_span_id": "span-root",
        }

        with ctx.generation("model_step_1", model="m") as gen:
            gen.set_output({"content": "hi"})
        ctx.end_trace(output="hi")

        calls = langfuse.start_as_current_observation.call_args_list
        assert calls[0].kwargs["as_type"] == "span"
        assert calls[1].kwargs["as_type"] == "generation"
        assert calls[1].kwargs["trace_context"]["parent_span_id"] == "span-root"
        root.update.assert_called()


class TestGenerationUsage:
    """Tests for GenerationContext.set_usage."""

    def test_usage_keys(self):
        gen = GenerationContext(name="g", model="m")
        gen.set_usage({"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5})
        assert gen._usage == {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5}

    def test_missing_usage_ignored(self):
        gen = GenerationContext(name="g", model="m")
        gen.set_usage(None)
        assert gen._usage is None
