"""Unit tests for the LLM client.

Covers JSON extraction, error handling and retry logic, with LiteLLM
mocked out.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from litellm import Timeout

from resume_matcher.ai.config import AIConfig, AIProvider
from resume_matcher.ai.llm import LLMClient, LLMError


def make_response(content):
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


@pytest.fixture
def config() -> AIConfig:
    return AIConfig(
        _env_file=None,
        provider=AIProvider.ANTHROPIC,
        anthropic_api_key="sk-ant-test",
        model=None,
        max_retries=2,
        timeout=30,
    )


class TestGenerateJson:
    async def test_returns_parsed_object(self, config):
        with patch("resume_matcher.ai.llm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = make_response('{"matchScore": 80}')

            result = await LLMClient(config).generate_json("prompt", system_prompt="system")

        assert result == {"matchScore": 80}
        kwargs = mock_completion.call_args.kwargs
        assert kwargs["model"] == "anthropic/claude-3-haiku-20240307"
        assert kwargs["api_key"] == "sk-ant-test"
        assert kwargs["timeout"] == 30
        assert kwargs["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "prompt"},
        ]
        assert "max_tokens" not in kwargs

    async def test_passes_max_tokens(self, config):
        with patch("resume_matcher.ai.llm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = make_response("{}")

            await LLMClient(config).generate_json("prompt", max_tokens=2000)

        assert mock_completion.call_args.kwargs["max_tokens"] == 2000
        assert len(mock_completion.call_args.kwargs["messages"]) == 1

    @pytest.mark.parametrize(
        "content",
        [
            '```json\n{"a": 1}\n```',
            '```\n{"a": 1}\n```',
            'Here is the analysis:\n{"a": 1}\nLet me know if you need more.',
            '  {"a": 1}  ',
        ],
    )
    async def test_extracts_json_from_wrapped_reply(self, config, content):
        with patch("resume_matcher.ai.llm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = make_response(content)

            assert await LLMClient(config).generate_json("prompt") == {"a": 1}

    @pytest.mark.parametrize("content", [None, "", "   "])
    async def test_empty_reply(self, config, content):
        with patch("resume_matcher.ai.llm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = make_response(content)

            with pytest.raises(LLMError, match="Empty response from AI"):
                await LLMClient(config).generate_json("prompt")

    async def test_unparseable_reply(self, config):
        with patch("resume_matcher.ai.llm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = make_response("I cannot help with that.")

            with pytest.raises(LLMError, match="Failed to parse"):
                await LLMClient(config).generate_json("prompt")

    async def test_non_object_reply(self, config):
        with patch("resume_matcher.ai.llm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = make_response("[1, 2, 3]")

            with pytest.raises(LLMError, match="not a JSON object"):
                await LLMClient(config).generate_json("prompt")


class TestRetries:
    async def test_retries_then_succeeds(self, config):
        with (
            patch("resume_matcher.ai.llm.acompletion", new_callable=AsyncMock) as mock_completion,
            patch("resume_matcher.ai.llm.asyncio.sleep", new_callable=AsyncMock) as mock_sleep,
        ):
            mock_completion.side_effect = [
                RuntimeError("connection reset"),
                RuntimeError("connection reset"),
                make_response('{"ok": true}'),
            ]

            result = await LLMClient(config).generate_json("prompt")

        assert result == {"ok": True}
        assert mock_completion.await_count == 3
        assert [c.args[0] for c in mock_sleep.await_args_list] == [2, 4]

    async def test_rate_limit_waits_longer(self, config):
        with (
            patch("resume_matcher.ai.llm.acompletion", new_callable=AsyncMock) as mock_completion,
            patch("resume_matcher.ai.llm.asyncio.sleep", new_callable=AsyncMock) as mock_sleep,
        ):
            mock_completion.side_effect = [
                RuntimeError("429 rate_limit_exceeded"),
                make_response("{}"),
            ]

            await LLMClient(config).generate_json("prompt")

        mock_sleep.assert_awaited_once_with(8)

    async def test_gives_up_after_max_retries(self, config):
        with (
            patch("resume_matcher.ai.llm.acompletion", new_callable=AsyncMock) as mock_completion,
            patch("resume_matcher.ai.llm.asyncio.sleep", new_callable=AsyncMock),
        ):
            mock_completion.side_effect = RuntimeError("boom")

            with pytest.raises(LLMError, match="after retries") as exc_info:
                await LLMClient(config).generate_json("prompt")

        assert mock_completion.await_count == 3
        assert isinstance(exc_info.value.original_error, RuntimeError)

    async def test_timeout_is_not_retried(self, config):
        with (
            patch("resume_matcher.ai.llm.acompletion", new_callable=AsyncMock) as mock_completion,
            patch("resume_matcher.ai.llm.asyncio.sleep", new_callable=AsyncMock) as mock_sleep,
        ):
            mock_completion.side_effect = Timeout(
                message="timed out", model="claude", llm_provider="anthropic"
            )

            with pytest.raises(LLMError, match="timed out"):
                await LLMClient(config).generate_json("prompt")

        assert mock_completion.await_count == 1
        mock_sleep.assert_not_awaited()
