"""
Tool definitions for the orchestration loop.

Converts ToolRegistry entries into OpenAI-style function-calling tool
definitions, the ``tools`` parameter of a chat-completions request.
"""

import logging
from typing import Optional

from ..tools.registry import ToolDefinition, ToolRegistry

logger = logging.getLogger(__name__)


def to_function_schema(tool_def: ToolDefinition) -> dict:
    """Render one registry entry in OpenAI function-calling format."""
    properties = {
        param_name: {"type": "string", "description": param_desc}
        for param_name, param_desc in tool_def.parameters.items()
    }
    return {
        "type": "function",
        "function": {
            "name": tool_def.name,
            "description": tool_def.description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": list(tool_def.required),
            },
        },
    }


def build_tool_definitions(exclude_tools: Optional[set[str]] = None) -> list[dict]:
    """
    Build OpenAI function-calling tool definitions from the registry.

    Args:
        exclude_tools: Set of tool names to leave out.

    Returns:
        List of OpenAI-format tool definitions, in registration order.
    """
    exclude = exclude_tools or set()
    tools: list[dict] = []

    for tool_def in ToolRegistry.describe():
        if tool_def.name in exclude:
            logger.debug("Excluding tool '%s'", tool_def.name)
            continue
        tools.append(to_function_schema(tool_def))

    return tools
