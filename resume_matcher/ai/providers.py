"""Provider backends for the AI gateway.

Each backend knows how to name its model for LiteLLM, which credentials it
needs, and how to probe its API for a connection test. The gateway only
talks to the ``ProviderBackend`` interface.
"""

from __future__ import annotations

from typing import Any, ClassVar

import httpx

from resume_matcher.ai.config import AIConfig, AIProvider
from resume_matcher.ai.models import ConnectionTestResult


class ProviderBackend:
    """Base class for provider backends."""

    provider: ClassVar[AIProvider]
    default_model: ClassVar[str]
    requires_api_key: ClassVar[bool] = True

    def __init__(self, config: AIConfig) -> None:
        self.config = config

    @property
    def api_key(self) -> str | None:
        return self.config.api_key_for(self.provider)

    @property
    def model(self) -> str:
        return self.config.model or self.default_model

    def missing_credentials(self) -> str | None:
        """Return an error message when the backend cannot be called."""
        if self.requires_api_key and not self.api_key:
            return f"API key not configured for {self.provider.value}"
        return None

    def litellm_model(self) -> str:
        """Model name with the LiteLLM provider prefix."""
        if self.model.startswith(f"{self.provider.value}/"):
            return self.model
        return f"{self.provider.value}/{self.model}"

    def completion_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``litellm.acompletion`` besides messages."""
        kwargs: dict[str, Any] = {"model": self.litellm_model()}
        if self.api_key:
            kwargs["api_key"] = self.api_key
        return kwargs

    async def check_connection(self, client: httpx.AsyncClient) -> ConnectionTestResult:
        raise NotImplementedError

    async def _probe(
        self,
        client: httpx.AsyncClient,
        url: str,
        headers: dict[str, str],
        list_key: str,
    ) -> ConnectionTestResult:
        """GET a model listing and report how many models it returned."""
        try:
            response = await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            return ConnectionTestResult(success=False, message=str(e) or "Connection failed")

        if response.status_code == 401:
            return ConnectionTestResult(success=False, message="Invalid API key")
        if response.status_code >= 400:
            return ConnectionTestResult(
                success=False, message=f"API error: {response.status_code}"
            )

        try:
            models = response.json().get(list_key) or []
        except ValueError:
            models = []
        return ConnectionTestResult(
            success=True,
            message="Connected successfully",
            model_info=f"{len(models)} models available",
        )


class OpenRouterBackend(ProviderBackend):
    provider = AIProvider.OPENROUTER
    # OpenRouter ids are vendor/model, so LiteLLM sees openrouter/vendor/model
    default_model = "anthropic/claude-3.5-haiku"

    async def check_connection(self, client: httpx.AsyncClient) -> ConnectionTestResult:
        if not self.api_key:
            return ConnectionTestResult(success=False, message="API key is required")
        return await self._probe(
            client,
            "https://openrouter.ai/api/v1/models",
            {"Authorization": f"Bearer {self.api_key}"},
            "data",
        )


class OpenAIBackend(ProviderBackend):
    provider = AIProvider.OPENAI
    default_model = "gpt-4o-mini"

    def litellm_model(self) -> str:
        # Standard OpenAI API needs no prefix
        return self.model

    async def check_connection(self, client: httpx.AsyncClient) -> ConnectionTestResult:
        if not self.api_key:
            return ConnectionTestResult(success=False, message="API key is required")
        return await self._probe(
            client,
            "https://api.openai.com/v1/models",
            {"Authorization": f"Bearer {self.api_key}"},
            "data",
        )


class AnthropicBackend(ProviderBackend):
    provider = AIProvider.ANTHROPIC
    default_model = "claude-3-haiku-20240307"

    async def check_connection(self, client: httpx.AsyncClient) -> ConnectionTestResult:
        if not self.api_key:
            return ConnectionTestResult(success=False, message="API key is required")
        return await self._probe(
            client,
            "https://api.anthropic.com/v1/models",
            {"x-api-key": self.api_key, "anthropic-version": "2023-06-01"},
            "data",
        )


class OllamaBackend(ProviderBackend):
    provider = AIProvider.OLLAMA
    default_model = "llama3.2"
    requires_api_key = False

    def completion_kwargs(self) -> dict[str, Any]:
        return {"model": self.litellm_model(), "base_url": self.config.ollama_base_url}

    async def check_connection(self, client: httpx.AsyncClient) -> ConnectionTestResult:
        try:
            response = await client.get(f"{self.config.ollama_base_url}/api/tags")
        except httpx.ConnectError:
            return ConnectionTestResult(
                success=False, message="Cannot connect to Ollama. Is it running?"
            )
        except httpx.HTTPError as e:
            return ConnectionTestResult(success=False, message=str(e) or "Connection failed")

        if response.status_code >= 400:
            return ConnectionTestResult(
                success=False, message=f"Ollama not responding: {response.status_code}"
            )
        try:
            models = response.json().get("models") or []
        except ValueError:
            models = []
        return ConnectionTestResult(
            success=True,
            message="Connected successfully",
            model_info=f"{len(models)} models available" if models else "No models installed",
        )


BACKENDS: dict[AIProvider, type[ProviderBackend]] = {
    AIProvider.OPENROUTER: OpenRouterBackend,
    AIProvider.OPENAI: OpenAIBackend,
    AIProvider.ANTHROPIC: AnthropicBackend,
    AIProvider.OLLAMA: OllamaBackend,
}


def get_backend(config: AIConfig) -> ProviderBackend:
    """Instantiate the backend for the configured provider."""
    return BACKENDS[config.provider](config)
