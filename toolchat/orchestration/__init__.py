"""
Tool-calling orchestration.

Runs the model/tool round-trips of one conversation turn over the
provider's function-calling API.
"""

from .tool_defs import build_tool_definitions, to_function_schema
from .loop import (
    OrchestrationLoop,
    OrchestrationStep,
    OrchestrationResult,
    SYSTEM_PROMPT,
)

__all__ = [
    "build_tool_definitions",
    "to_function_schema",
    "OrchestrationLoop",
    "OrchestrationStep",
    "OrchestrationResult",
    "SYSTEM_PROMPT",
]
