"""
Configuration management for toolchat.

Loads all configuration from environment variables with sensible defaults
for local development.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass
class ProviderConfig:
    """Configuration for the hosted chat-completions provider."""
    api_key: str = os.getenv("OPENROUTER_API_KEY", "")
    base_url: str = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
    model: str = os.getenv("MODEL_NAME", "anthropic/claude-3.5-sonnet")
    max_tokens: int = int(os.getenv("MAX_TOKENS", "1024"))
    timeout: float = float(os.getenv("MODEL_TIMEOUT", "60"))
    # Sent as HTTP-Referer, OpenRouter uses it for app attribution
    site_url: str = os.getenv("SITE_URL") or os.getenv("VERCEL_URL") or "http://localhost:3000"
    app_title: str = os.getenv("APP_TITLE", "Claude Tools Demo")


@dataclass
class OrchestratorConfig:
    """Configuration for the tool-calling loop."""
    max_tool_rounds: int = int(os.getenv("MAX_TOOL_ROUNDS", "5"))
    system_prompt_enabled: bool = os.getenv("SYSTEM_PROMPT_ENABLED", "true").lower() == "true"


@dataclass
class ToolConfig:
    """Configuration for tool endpoints."""
    hn_search_url: str = os.getenv("HN_SEARCH_URL", "https://hn.algolia.com/api/v1/search")
    hn_story_count: int = int(os.getenv("HN_STORY_COUNT", "3"))
    hn_timeout: float = float(os.getenv("HN_TIMEOUT", "10"))


@dataclass
class ServerConfig:
    """Configuration for the FastAPI server."""
    host: str = os.getenv("SERVER_HOST", "0.0.0.0")
    port: int = int(os.getenv("SERVER_PORT", "8000"))
    reload: bool = os.getenv("SERVER_RELOAD", "false").lower() == "true"


@dataclass
class LangfuseConfig:
    """Configuration for Langfuse observability.

    Tracing auto-enables when both public_key and secret_key are provided.
    """
    public_key: str = os.getenv("LANGFUSE_PUBLIC_KEY", "")
    secret_key: str = os.getenv("LANGFUSE_SECRET_KEY", "")
    host: str = os.getenv("LANGFUSE_HOST", "")
    debug: bool = os.getenv("LANGFUSE_DEBUG", "false").lower() == "true"

    @property
    def enabled(self) -> bool:
        """Auto-enable when both keys are configured."""
        return bool(self.public_key and self.secret_key)


@dataclass
class Config:
    """Main configuration container."""
    provider: ProviderConfig
    orchestrator: OrchestratorConfig
    tools: ToolConfig
    server: ServerConfig
    langfuse: LangfuseConfig
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def get_config() -> Config:
    """Get the application configuration."""
    return Config(
        provider=ProviderConfig(),
        orchestrator=OrchestratorConfig(),
        tools=ToolConfig(),
        server=ServerConfig(),
        langfuse=LangfuseConfig(),
    )


# Global config instance
config = get_config()
