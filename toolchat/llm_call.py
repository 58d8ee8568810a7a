"""
LLM Call Interface for toolchat

Wraps the OpenAI SDK pointed at an OpenAI-compatible chat-completions
provider (OpenRouter by default) and turns provider failures into
``ProviderError`` so the API layer can report the upstream status.
"""

import logging
from typing import Optional

import openai
from openai import OpenAI

from .config import config

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """A chat-completions request failed upstream."""

    def __init__(self, status_code: int, error):
        self.status_code = status_code
        self.error = error
        super().__init__(f"Provider request failed ({status_code}): {error}")


def _error_from_body(body) -> object:
    """Pick the provider's ``error`` object out of a response body."""
    if isinstance(body, dict) and body.get("error"):
        return body["error"]
    return "API request failed"


class LLMClient:
    """Chat-completions client for the model provider."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url or config.provider.base_url
        self.model = model or config.provider.model
        self.client = OpenAI(
            base_url=self.base_url,
            api_key=api_key or config.provider.api_key or "missing-api-key",
            timeout=timeout or config.provider.timeout,
            max_retries=0,
            default_headers={
                "HTTP-Referer": config.provider.site_url,
                "X-Title": config.provider.app_title,
            },
        )

    def create_completion(
        self,
        messages: list[dict],
        tools: Optional[list[dict]] = None,
        tool_choice: str = "auto",
        max_tokens: Optional[int] = None,
    ) -> dict:
        """Send one chat-completions request.

        Args:
            messages: Conversation history in provider format
            tools: Function-calling tool declarations
            tool_choice: "auto" to let the model pick, "none" to forbid tools
            max_tokens: Maximum tokens to generate

        Returns:
            The provider's completion envelope as a plain dict.

        Raises:
            ProviderError: On a non-2xx status, a timeout or a connection failure.
        """
        create_kwargs: dict = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens if max_tokens is not None else config.provider.max_tokens,
            "stream": False,
        }
        if tools:
            create_kwargs["tools"] = tools
            create_kwargs["tool_choice"] = tool_choice

        try:
            response = self.client.chat.completions.create(**create_kwargs)
        except openai.APIStatusError as e:
            logger.error(f"Provider API error {e.status_code}: {e.body}")
            raise ProviderError(e.status_code, _error_from_body(e.body)) from e
        except openai.APITimeoutError as e:
            logger.error(f"Provider request timed out: {e}")
            raise ProviderError(504, "Model request timed out") from e
        except openai.APIConnectionError as e:
            logger.error(f"Provider connection failed: {e}")
            raise ProviderError(502, "Could not reach model provider") from e

        return response.model_dump(exclude_none=True)

    def close(self) -> None:
        """Close the underlying OpenAI client."""
        try:
            self.client.close()
        except Exception as e:
            logger.debug(f"Error closing OpenAI client: {e}")
