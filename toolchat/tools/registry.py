"""
Tool Registry - Single source of truth for tool definitions.

Provides a central registry for all tools with their metadata and
handlers, and executes a tool by name on behalf of the model. Execution
never raises: every failure comes back as an ``{"error", "details"}``
payload the model can read.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolDefinition:
    """Metadata for a tool - defined once, used everywhere."""

    name: str
    description: str
    parameters: dict[str, str]  # param_name -> description
    required: tuple[str, ...]
    handler: Callable[[dict], Any]


def tool_error(error: str, details: str) -> dict:
    """Build the error payload returned in place of a tool result."""
    return {"error": error, "details": details}


def is_tool_error(result: Any) -> bool:
    """Check whether a tool result is an error payload."""
    return isinstance(result, dict) and "error" in result


class ToolRegistry:
    """Central registry for all tools."""

    _tools: dict[str, ToolDefinition] = {}

    @classmethod
    def register(
        cls,
        name: str,
        description: str,
        parameters: dict[str, str],
        handler: Callable[[dict], Any],
        required: Optional[list[str]] = None,
    ) -> None:
        """Register a tool with its metadata.

        ``required`` defaults to every declared parameter.
        """
        cls._tools[name] = ToolDefinition(
            name=name,
            description=description,
            parameters=dict(parameters),
            required=tuple(parameters if required is None else required),
            handler=handler,
        )

    @classmethod
    def get(cls, name: str) -> Optional[ToolDefinition]:
        """Get a tool by name."""
        return cls._tools.get(name)

    @classmethod
    def all_tools(cls) -> dict[str, ToolDefinition]:
        """Get a copy of all registered tools."""
        return cls._tools.copy()

    @classmethod
    def describe(cls) -> list[ToolDefinition]:
        """Get all tool definitions in registration order."""
        return list(cls._tools.values())

    @classmethod
    def execute(cls, name: str, arguments: dict) -> Any:
        """
        Execute a tool by name.

        Args:
            name: Tool name as requested by the model
            arguments: Decoded tool arguments

        Returns:
            The tool's result, or an error payload for an unknown tool,
            a missing required argument, or a failing handler.
        """
        tool = cls._tools.get(name)
        if tool is None:
            logger.warning(f"Unknown tool: {name}")
            return tool_error(
                f"Unknown tool: {name}",
                f"Available tools: {', '.join(cls._tools) or 'none'}",
            )

        for param in tool.required:
            value = arguments.get(param)
            if value is None or value == "":
                logger.warning(f"Tool '{name}' called without '{param}'")
                return tool_error(
                    f"Missing required argument: {param}",
                    f"Tool '{name}' requires: {', '.join(tool.required)}",
                )

        try:
            return tool.handler(arguments)
        except Exception as e:
            logger.error(f"Error executing tool {name}: {e}")
            return tool_error(f"Failed to execute tool {name}", str(e))

    @classmethod
    def clear(cls) -> None:
        """Clear all registered tools (mainly for testing)."""
        cls._tools.clear()
