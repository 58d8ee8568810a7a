"""
Chat endpoints.

``POST /api/chat`` runs one conversation turn through the orchestration
loop and answers with the provider's completion envelope, so a client
reads the display text from ``choices[0].message.content``.
"""

import logging
import uuid

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..schemas import ChatRequest, ErrorResponse, ToolListResponse
from ...llm_call import LLMClient, ProviderError
from ...orchestration import OrchestrationLoop, build_tool_definitions
from ...tracing import TracingContext, get_tracing_client

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/api/tools",
    response_model=ToolListResponse,
    summary="List tools",
    description="List the tools the model may call, in function-calling format.",
)
def list_tools() -> ToolListResponse:
    return ToolListResponse(tools=build_tool_definitions())


@router.post(
    "/api/chat",
    responses={
        500: {"model": ErrorResponse, "description": "Internal server error"},
        502: {"model": ErrorResponse, "description": "Model provider error"},
    },
    summary="Chat",
    description=(
        "Send the conversation to the model. Tool calls requested by the model "
        "are executed locally and fed back until it produces a final answer."
    ),
)
def chat(request: ChatRequest) -> JSONResponse:
    """Process one conversation turn."""
    execution_id = f"exec-{uuid.uuid4().hex[:8]}"
    messages = [message.to_provider() for message in request.messages]
    logger.info(f"[{execution_id}] Processing chat request with {len(messages)} messages")
    logger.debug(f"[{execution_id}] Messages: {messages}")

    tracing_context = TracingContext(execution_id=execution_id)
    tracing_context.start_trace(name="chat", input=messages)

    llm_client = LLMClient()
    try:
        loop = OrchestrationLoop(
            llm_client=llm_client,
            execution_id=execution_id,
            tracing_context=tracing_context,
        )
        result = loop.run(messages)
    except ProviderError as e:
        logger.error(f"[{execution_id}] Model provider error: {e}")
        tracing_context.end_trace(output=str(e), status="error")
        _flush_tracing()
        return JSONResponse(status_code=e.status_code, content={"error": e.error})
    except Exception as e:
        logger.exception(f"[{execution_id}] Chat request failed: {e}")
        tracing_context.end_trace(output=str(e), status="error")
        _flush_tracing()
        return JSONResponse(status_code=500, content={"error": "Failed to process request"})
    finally:
        llm_client.close()

    tracing_context.end_trace(
        output=result.answer,
        status="success",
        metadata={"steps": len(result.steps), "tools_used": result.tools_used},
    )
    _flush_tracing()
    logger.debug(f"[{execution_id}] Final answer: {result.answer[:200]}")
    return JSONResponse(content=result.response)


def _flush_tracing() -> None:
    """Flush tracing client if available."""
    client = get_tracing_client()
    if client:
        client.flush()
