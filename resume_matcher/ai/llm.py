"""LLM client for the AI gateway.

Sends chat completions through LiteLLM to whichever provider backend is
configured, with retry logic, and extracts the JSON object from the reply.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any

from litellm import Timeout, acompletion

from resume_matcher.ai.config import AIConfig, get_ai_config
from resume_matcher.ai.providers import ProviderBackend, get_backend

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


class LLMError(Exception):
    """Exception raised when LLM operations fail."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class LLMClient:
    """Chat-completion client returning parsed JSON objects."""

    def __init__(
        self,
        config: AIConfig | None = None,
        backend: ProviderBackend | None = None,
    ):
        """Initialize the LLM client.

        Args:
            config: Optional AIConfig. Uses global config if not provided.
            backend: Optional provider backend. Derived from config if not provided.
        """
        self.config = config or get_ai_config()
        self.backend = backend or get_backend(self.config)

    async def generate_json(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
    ) -> dict[str, Any]:
        """Generate a JSON object.

        Args:
            prompt: The user prompt to send to the LLM.
            system_prompt: Optional system prompt for context.
            max_tokens: Optional completion token limit.

        Returns:
            The JSON object from the reply.

        Raises:
            LLMError: If the call fails, the reply is empty, or it holds no
                JSON object.
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        content = await self._complete_with_retries(messages, max_tokens)
        if not content or not content.strip():
            raise LLMError("Empty response from AI")

        text = self._extract_json_from_response(content)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise LLMError(f"Failed to parse LLM response as JSON: {e}", e) from e
        if not isinstance(data, dict):
            raise LLMError("LLM response is not a JSON object")
        return data

    async def _complete_with_retries(
        self,
        messages: list[dict],
        max_tokens: int | None,
    ) -> str | None:
        last_error: Exception | None = None
        for attempt in range(self.config.max_retries + 1):
            try:
                response = await self._call_completion(messages, max_tokens)
                return response.choices[0].message.content

            except Timeout as e:
                raise LLMError(
                    f"LLM request timed out (timeout={self.config.timeout}s). "
                    "Increase `AI_TIMEOUT` or use a faster model.",
                    e,
                ) from e

            except Exception as e:
                last_error = e
                if attempt < self.config.max_retries:
                    is_rate_limit = "rate_limit" in str(e).lower() or "429" in str(e)
                    base_wait = 8 if is_rate_limit else 2
                    wait_time = base_wait * (attempt + 1)
                    logger.warning(
                        f"LLM call failed (attempt {attempt + 1}), retrying in {wait_time}s: {e}"
                    )
                    await asyncio.sleep(wait_time)
                else:
                    raise LLMError(f"LLM call failed after retries: {e}", e) from e

        raise LLMError(f"LLM call failed: {last_error}", last_error)

    async def _call_completion(self, messages: list[dict], max_tokens: int | None):
        """Make the actual LLM API call."""
        kwargs = {
            **self.backend.completion_kwargs(),
            "messages": messages,
            "timeout": self.config.timeout,
        }
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        return await acompletion(**kwargs)

    def _extract_json_from_response(self, content: str) -> str:
        """Extract the JSON object from a reply.

        Handles markdown code fences and prose before or after the object.
        """
        content = content.strip()

        match = _FENCED_BLOCK.search(content)
        if match:
            content = match.group(1).strip()

        start = content.find("{")
        end = content.rfind("}")
        if start != -1 and end > start:
            return content[start : end + 1]
        return content
