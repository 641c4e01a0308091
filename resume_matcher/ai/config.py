"""Configuration for the AI gateway.

Settings are read from environment variables prefixed with AI_.

Example: AI_PROVIDER=anthropic AI_ANTHROPIC_API_KEY=sk-ant-...
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from resume_matcher.documents.models import MAX_DESCRIPTION_LENGTH


class AIProvider(str, Enum):
    """Supported LLM providers."""

    OPENROUTER = "openrouter"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"


class AIConfig(BaseSettings):
    """Configuration for the AI gateway."""

    model_config = SettingsConfigDict(
        env_prefix="AI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    provider: AIProvider = Field(
        default=AIProvider.OPENROUTER,
        description="LLM provider (openrouter, openai, anthropic, ollama)",
    )
    model: str | None = Field(
        default=None,
        description="Model name override; each provider has its own default",
    )

    # Credentials
    openrouter_api_key: str | None = Field(default=None, description="OpenRouter API key")
    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    anthropic_api_key: str | None = Field(default=None, description="Anthropic API key")
    ollama_base_url: str = Field(
        default="http://localhost:11434",
        description="Base URL of the Ollama server",
    )

    # Call behavior
    max_retries: Annotated[int, Field(ge=0)] = Field(
        default=1,
        description="Maximum retry attempts for LLM calls",
    )
    timeout: Annotated[float, Field(gt=0)] = Field(
        default=120.0,
        description="Timeout in seconds for LLM calls",
    )
    analyze_max_tokens: Annotated[int, Field(gt=0)] = Field(
        default=2000,
        description="Token limit for job description analysis",
    )
    tailor_max_tokens: Annotated[int, Field(gt=0)] = Field(
        default=4000,
        description="Token limit for resume tailoring",
    )
    max_description_length: Annotated[int, Field(gt=0)] = Field(
        default=MAX_DESCRIPTION_LENGTH,
        description="Longest job description accepted for analysis",
    )

    @field_validator("provider", mode="before")
    @classmethod
    def validate_provider(cls, v: str | AIProvider) -> AIProvider:
        """Convert string provider to AIProvider enum."""
        if isinstance(v, AIProvider):
            return v
        if isinstance(v, str):
            value = v.lower().strip()
            try:
                return AIProvider(value)
            except ValueError:
                valid = ", ".join(p.value for p in AIProvider)
                raise ValueError(f"Invalid AI provider: {v}. Must be one of {valid}") from None
        raise ValueError(f"Invalid AI provider type: {type(v)}")

    @field_validator("ollama_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return str(v).strip().rstrip("/")

    def api_key_for(self, provider: AIProvider) -> str | None:
        """Return the configured API key for a provider (None for Ollama)."""
        keys = {
            AIProvider.OPENROUTER: self.openrouter_api_key,
            AIProvider.OPENAI: self.openai_api_key,
            AIProvider.ANTHROPIC: self.anthropic_api_key,
        }
        return keys.get(provider) or None


# Singleton instance
_ai_config: AIConfig | None = None


def get_ai_config() -> AIConfig:
    """Get the AI configuration singleton."""
    global _ai_config
    if _ai_config is None:
        _ai_config = AIConfig()
    return _ai_config


def reset_ai_config() -> None:
    """Reset the configuration singleton (useful for testing)."""
    global _ai_config
    _ai_config = None
