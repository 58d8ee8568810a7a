"""
toolchat - tool-calling chat backend

This package provides:
- LLM client for an OpenAI-compatible chat-completions provider
- Tool implementations (sentiment, word count, date/time, Hacker News)
- Tool-calling orchestration loop
- FastAPI chat endpoint and an interactive CLI
"""

from .orchestration import OrchestrationLoop, OrchestrationResult
from .llm_call import LLMClient, ProviderError

__all__ = [
    "OrchestrationLoop",
    "OrchestrationResult",
    "LLMClient",
    "ProviderError",
]

__version__ = "0.1.0"
