"""
Pydantic schemas for the chat API.

Inbound messages follow the OpenAI chat format so that a conversation
containing earlier tool round-trips can be sent back unchanged.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, model_validator


class FunctionCall(BaseModel):
    """Name and JSON-encoded arguments of a requested function."""

    name: str
    arguments: str = "{}"


class ToolCall(BaseModel):
    """A tool invocation requested by the model."""

    id: str
    type: Literal["function"] = "function"
    function: FunctionCall


class ChatMessage(BaseModel):
    """A single message in a chat conversation."""

    role: Literal["system", "user", "assistant", "tool"] = Field(
        ..., description="The role of the message author"
    )
    content: Optional[str] = Field(default=None, description="Text of the message")
    tool_calls: Optional[list[ToolCall]] = Field(
        default=None, description="Tool invocations requested by the assistant"
    )
    tool_call_id: Optional[str] = Field(
        default=None, description="Invocation this tool message answers"
    )

    @model_validator(mode="after")
    def check_tool_fields(self):
        if self.role == "tool" and not self.tool_call_id:
            raise ValueError("tool messages require tool_call_id")
        if self.role != "tool" and self.tool_call_id is not None:
            raise ValueError("tool_call_id is only allowed on tool messages")
        if self.role != "assistant" and self.tool_calls is not None:
            raise ValueError("tool_calls is only allowed on assistant messages")
        return self

    def to_provider(self) -> dict:
        """Render in provider wire format, omitting unset fields."""
        message = self.model_dump(exclude_none=True)
        message.setdefault("content", None)
        return message


class ChatRequest(BaseModel):
    """Request body for /api/chat."""

    messages: list[ChatMessage] = Field(
        ..., description="List of messages in the conversation", min_length=1
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "messages": [
                    {"role": "user", "content": "Check sentiment: I love this product!"}
                ],
            }
        }
    }


class ToolListResponse(BaseModel):
    """Response body for /api/tools."""

    tools: list[dict]


class HealthResponse(BaseModel):
    """Response body for /health endpoint."""

    status: Literal["healthy", "unhealthy"]
    version: str
    model: str


class ErrorResponse(BaseModel):
    """Error response returned instead of a completion."""

    error: Any
    details: Optional[Any] = None
