"""Tests for provider backends."""

from __future__ import annotations

import httpx
import pytest

from resume_matcher.ai.config import AIConfig, AIProvider
from resume_matcher.ai.providers import (
    AnthropicBackend,
    OllamaBackend,
    OpenAIBackend,
    OpenRouterBackend,
    get_backend,
)


def config(**overrides) -> AIConfig:
    values = {
        "openrouter_api_key": None,
        "openai_api_key": None,
        "anthropic_api_key": None,
        "model": None,
        "ollama_base_url": "http://localhost:11434",
    }
    values.update(overrides)
    return AIConfig(_env_file=None, **values)


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestBackendSelection:
    @pytest.mark.parametrize(
        ("provider", "backend_type"),
        [
            (AIProvider.OPENROUTER, OpenRouterBackend),
            (AIProvider.OPENAI, OpenAIBackend),
            (AIProvider.ANTHROPIC, AnthropicBackend),
            (AIProvider.OLLAMA, OllamaBackend),
        ],
    )
    def test_get_backend(self, provider, backend_type):
        assert isinstance(get_backend(config(provider=provider)), backend_type)


class TestModelNames:
    def test_openrouter_prefixes_vendor_model(self):
        backend = OpenRouterBackend(config())
        assert backend.litellm_model() == "openrouter/anthropic/claude-3.5-haiku"

    def test_openai_has_no_prefix(self):
        assert OpenAIBackend(config()).litellm_model() == "gpt-4o-mini"

    def test_anthropic_prefix(self):
        backend = AnthropicBackend(config(model="claude-3-opus"))
        assert backend.litellm_model() == "anthropic/claude-3-opus"

    def test_existing_prefix_is_kept(self):
        backend = AnthropicBackend(config(model="anthropic/claude-3-opus"))
        assert backend.litellm_model() == "anthropic/claude-3-opus"

    def test_ollama_kwargs_carry_base_url(self):
        kwargs = OllamaBackend(config(ollama_base_url="http://gpu:11434")).completion_kwargs()
        assert kwargs == {"model": "ollama/llama3.2", "base_url": "http://gpu:11434"}

    def test_key_is_passed_when_configured(self):
        kwargs = OpenAIBackend(config(openai_api_key="sk-test")).completion_kwargs()
        assert kwargs == {"model": "gpt-4o-mini", "api_key": "sk-test"}


class TestCredentials:
    def test_missing_key(self):
        assert OpenRouterBackend(config()).missing_credentials() == (
            "API key not configured for openrouter"
        )

    def test_key_present(self):
        assert AnthropicBackend(config(anthropic_api_key="k")).missing_credentials() is None

    def test_ollama_needs_no_key(self):
        assert OllamaBackend(config()).missing_credentials() is None


class TestCheckConnection:
    async def test_requires_key(self):
        async with mock_client(lambda request: httpx.Response(200)) as client:
            result = await OpenAIBackend(config()).check_connection(client)

        assert not result.success
        assert result.message == "API key is required"

    async def test_success_counts_models(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url == "https://openrouter.ai/api/v1/models"
            assert request.headers["Authorization"] == "Bearer or-key"
            return httpx.Response(200, json={"data": [{"id": "a"}, {"id": "b"}]})

        async with mock_client(handler) as client:
            result = await OpenRouterBackend(config(openrouter_api_key="or-key")).check_connection(
                client
            )

        assert result.success
        assert result.message == "Connected successfully"
        assert result.model_info == "2 models available"

    async def test_anthropic_headers(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["x-api-key"] == "ant-key"
            assert request.headers["anthropic-version"] == "2023-06-01"
            return httpx.Response(200, json={"data": []})

        async with mock_client(handler) as client:
            result = await AnthropicBackend(config(anthropic_api_key="ant-key")).check_connection(
                client
            )

        assert result.success

    async def test_invalid_key(self):
        async with mock_client(lambda request: httpx.Response(401)) as client:
            result = await OpenAIBackend(config(openai_api_key="bad")).check_connection(client)

        assert not result.success
        assert result.message == "Invalid API key"

    async def test_api_error(self):
        async with mock_client(lambda request: httpx.Response(503)) as client:
            result = await OpenAIBackend(config(openai_api_key="k")).check_connection(client)

        assert result.message == "API error: 503"

    async def test_ollama_lists_models(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url == "http://localhost:11434/api/tags"
            return httpx.Response(200, json={"models": [{"name": "llama3.2"}]})

        async with mock_client(handler) as client:
            result = await OllamaBackend(config()).check_connection(client)

        assert result.success
        assert result.model_info == "1 models available"

    async def test_ollama_without_models(self):
        async with mock_client(lambda request: httpx.Response(200, json={"models": []})) as client:
            result = await OllamaBackend(config()).check_connection(client)

        assert result.success
        assert result.model_info == "No models installed"

    async def test_ollama_not_running(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with mock_client(handler) as client:
            result = await OllamaBackend(config()).check_connection(client)

        assert not result.success
        assert result.message == "Cannot connect to Ollama. Is it running?"
